"""Use case for creating users."""

from sqlalchemy.orm import Session

from app.domain.entities import USER_ROLES, User
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import get_password_hash


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str,
) -> User:
    """Create a new user ensuring unique email addresses."""

    normalized_role = role.strip().lower()
    if normalized_role not in USER_ROLES:
        raise ValueError(f"Role must be one of: {', '.join(USER_ROLES)}")
    if not name.strip():
        raise ValueError("Name is required")
    if "@" not in email:
        raise ValueError("A valid email address is required")
    if not password:
        raise ValueError("Password is required")

    repository = UserRepository(session)
    if repository.get_by_email(email):
        raise ValueError("User already exists")

    user = User(
        id=None,
        name=name.strip(),
        email=email,
        password=get_password_hash(password),
        role=normalized_role,
        is_active=True,
    )
    return repository.create(user)
