"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.events import DomainEventBus
from app.domain.entities import User
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import NotificationConnectionManager
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import decode_access_token
from app.utils import is_valid_identifier

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _unauthorized(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    if not is_valid_identifier(subject):
        raise _unauthorized()

    user = UserRepository(db).get(subject)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_task_manager(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user is a supervisor or an administrator."""

    if not current_user.can_manage_tasks():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Access denied",
        )
    return current_user


def get_event_bus(request: Request) -> DomainEventBus:
    return request.app.state.event_bus


def get_connection_manager(request: Request) -> NotificationConnectionManager:
    return request.app.state.notification_manager


def _resolve_channel_user_id(token: str) -> str:
    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    except HTTPException as exc:
        raise ValueError(exc.detail) from exc
    finally:
        session.close()

    if not user.is_active:
        raise ValueError("Inactive user")
    return user.id


async def verify_channel_token(token: str) -> str:
    """Token verifier for realtime channels; raises ``ValueError`` when rejected."""

    return await run_in_threadpool(_resolve_channel_user_id, token)
