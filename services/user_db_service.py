"""
DB-backed user service using async SQLAlchemy.

- insert_user  -> INSERT, returns the generated id
- update_user  -> UPDATE all four fields WHERE id = ?
- delete_user  -> DELETE WHERE id = ?
- get_user     -> SELECT WHERE id = ?
- list_users   -> SELECT ... ORDER BY id DESC
- email_exists -> SELECT COUNT(*) WHERE email = ? [AND id != ?]

Statements are built with SQLAlchemy Core so every value is a bound
parameter. Errors propagate to the caller (the route handler owns the
transaction and the classification), except in email_exists which converts
them into UniquenessCheckUnavailable.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import UniquenessCheckUnavailable
from models.db_models import User
from models.user import UserForm
import logging

logger = logging.getLogger(__name__)


class UserDBService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """
        True when another row already uses this email.

        exclude_id skips the record being edited so it does not conflict with itself.
        If the lookup fails we cannot tell, so refuse instead of letting the write through.
        """
        stmt = select(func.count()).select_from(User).where(User.email == email)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("email_exists lookup failed for %s: %s", email, e)
            raise UniquenessCheckUnavailable(str(e)) from e
        return result.scalar_one() > 0

    async def insert_user(self, form: UserForm) -> int:
        stmt = insert(User).values(**form.to_columns())
        result = await self.session.execute(stmt)
        return result.inserted_primary_key[0]

    async def update_user(self, user_id: int, form: UserForm) -> int:
        """Replace all fields of one row; returns the number of rows matched."""
        stmt = update(User).where(User.id == user_id).values(**form.to_columns())
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_user(self, user_id: int) -> int:
        result = await self.session.execute(delete(User).where(User.id == user_id))
        return result.rowcount

    async def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        return self._to_dict(user) if user else None

    async def list_users(self) -> List[Dict[str, Any]]:
        result = await self.session.execute(select(User).order_by(User.id.desc()))
        return [self._to_dict(u) for u in result.scalars().all()]

    @staticmethod
    def _to_dict(user: User) -> Dict[str, Any]:
        """Convert ORM User to a plain dict (the shape the page template reads)."""
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "birthdate": user.birthdate,
        }
