from fastapi import APIRouter, Request, HTTPException
from dashboard_lib.services.resolver import resolve_service
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get('/v1/services')
async def api_services(request: Request):
    catalog = resolve_service(request, 'catalog_service')
    query = request.query_params.get('q')
    category = request.query_params.get('category')

    if query is not None:
        hits = catalog.search(query)
        if category:
            hits = [h for h in hits if h.service.id in {s.id for s in catalog.services_in_category(category)}]
        logger.debug("Search %r matched %d services", query, len(hits))
        return {
            'query': query,
            'results': [h.to_dict() for h in hits],
            'categories': [c.id for c in catalog.visible_categories(query)],
        }

    if category:
        return [s.to_dict() for s in catalog.services_in_category(category)]
    return [s.to_dict() for s in catalog.list_services()]


@router.get('/v1/services/{service_id}')
async def api_service(request: Request, service_id: str):
    catalog = resolve_service(request, 'catalog_service')
    service = catalog.get_service_by_id(service_id)
    if service is None:
        raise HTTPException(status_code=404, detail={'error': 'not_found', 'message': f'Unknown service {service_id}'})
    return service.to_dict()


@router.get('/v1/categories')
async def api_categories(request: Request):
    catalog = resolve_service(request, 'catalog_service')
    return [c.to_dict() for c in catalog.list_categories()]
