"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import USER_ROLES, User
from app.infrastructure.models import UserModel
from app.utils import ensure_app_timezone, is_valid_identifier, new_identifier


class UserRepository:
    """Provide lookups and creation for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        if not is_valid_identifier(user_id):
            return None
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, user_ids: Iterable[str]) -> dict[str, User]:
        ids = [user_id for user_id in set(user_ids) if is_valid_identifier(user_id)]
        if not ids:
            return {}
        models = self.session.query(UserModel).filter(UserModel.id.in_(ids)).all()
        return {model.id: self._to_entity(model) for model in models}

    def create(self, user: User) -> User:
        if user.role not in USER_ROLES:
            raise ValueError(f"Unknown role: {user.role}")
        if self.get_by_email(user.email) is not None:
            raise ValueError("User already exists")

        model = UserModel(
            id=user.id or new_identifier(),
            name=user.name,
            email=user.email.strip().lower(),
            password=user.password,
            role=user.role,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            is_active=bool(model.is_active),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
