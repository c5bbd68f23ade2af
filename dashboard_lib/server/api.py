from fastapi import APIRouter, HTTPException, Request
from dashboard_lib.config.health import get_health
from dashboard_lib.services.resolver import resolve_optional_service, resolve_service

router = APIRouter()


@router.get('/health')
async def api_health(request: Request):
    cfg = resolve_service(request, 'dashboard_config')
    return get_health(app_name=cfg.app_name, version=cfg.version)


@router.get('/v1/config')
async def api_client_config(request: Request):
    # Settings the browser needs to configure its own storage layer.
    cfg = resolve_service(request, 'dashboard_config')
    return {
        'app': {'name': cfg.app_name, 'version': cfg.version},
        'storage': cfg.store.to_dict(),
        'favorites': {
            'max_favorites': cfg.favorites.max_favorites,
            'default_favorites': list(cfg.favorites.default_favorites),
        },
        'themes': {'default': cfg.default_theme},
    }


@router.get('/v1/storage')
async def api_storage_status(request: Request):
    store = resolve_service(request, 'store')
    return {
        'size': store.storage_size(),
        'limit': store.config.storage_limit,
        'keys': sorted(store.backend.list_keys()),
    }


@router.get('/v1/notifications')
async def api_notifications(request: Request):
    center = resolve_optional_service(request, 'notification_center')
    if center is None:
        return []
    return [n.to_dict() for n in center.active()]


@router.delete('/v1/notifications/{notification_id}')
async def api_dismiss_notification(notification_id: int, request: Request):
    center = resolve_service(request, 'notification_center')
    if not center.dismiss(notification_id):
        raise HTTPException(status_code=404, detail={'error': 'not_found', 'message': f'No notification {notification_id}'})
    return {'ok': True}
