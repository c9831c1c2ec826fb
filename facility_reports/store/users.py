"""
User Store

The "users" collection, keyed by the identity provider's principal id.
"""

from typing import Any, Dict, List, Optional

from ..errors import NotFoundError
from ..models.report import Role, User
from .base import store_operation
from .documents import DocumentNotFound, DocumentStore

USERS_COLLECTION = "users"


class UserStore:

    def __init__(self, documents: DocumentStore):
        self.documents = documents

    @staticmethod
    def _to_user(doc: Dict[str, Any]) -> User:
        return User.model_validate(doc)

    @store_operation
    async def find(self, user_id: str) -> Optional[User]:
        """Return the user record, or None when it was never created."""
        doc = await self.documents.get(USERS_COLLECTION, user_id)
        if doc is None:
            return None
        return self._to_user(doc)

    async def get(self, user_id: str) -> User:
        user = await self.find(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @store_operation
    async def create(self, user: User) -> User:
        await self.documents.set(USERS_COLLECTION, user.id, user.to_document())
        return user

    @store_operation
    async def update(self, user_id: str, fields: Dict[str, Any]) -> User:
        try:
            doc = await self.documents.update(USERS_COLLECTION, user_id, fields)
        except DocumentNotFound:
            raise NotFoundError("User", user_id)
        return self._to_user(doc)

    @store_operation
    async def list_all(self) -> List[User]:
        """All users, newest first."""
        docs = await self.documents.query(
            USERS_COLLECTION, order_by="createdAt", descending=True
        )
        return [self._to_user(doc) for doc in docs]

    @store_operation
    async def list_by_role(self, role: Role) -> List[User]:
        docs = await self.documents.query(
            USERS_COLLECTION, where=[("role", role.value)]
        )
        return [self._to_user(doc) for doc in docs]
