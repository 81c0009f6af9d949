from fastapi import APIRouter, Depends

from app.infrastructure.notifications import NotificationConnectionManager
from app.interfaces.api.dependencies import get_connection_manager

router = APIRouter(tags=["health"])


@router.get("/health")
def health(
    manager: NotificationConnectionManager = Depends(get_connection_manager),
) -> dict[str, object]:
    return {"status": "ok", "connections": manager.connection_count()}
