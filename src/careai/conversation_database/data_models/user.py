"""
User data model and storage interface.

Users are a read-only reference for the conversation engine: turns carry a
user id, but the engine never creates or mutates user records.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class User(BaseModel):
    """A registered user."""

    id: str
    name: str
    email: str
    create_timestamp: int
    last_login_timestamp: int | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class UserDatabase(ABC):
    """Abstract repository for 'User' records."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> User | None:
        pass
