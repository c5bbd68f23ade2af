from .catalog_service import CatalogService, Category, SearchHit, Service, score_service

__all__ = ["CatalogService", "Category", "SearchHit", "Service", "score_service"]
