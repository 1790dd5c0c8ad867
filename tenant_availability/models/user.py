from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class UserBase(SQLModel):
    tenant_id: str = Field(index=True)
    email: str = Field(unique=True, index=True)
    full_name: str | None = None
    role: str = "agent"


class User(UserBase, table=True):
    __tablename__ = "users"
    id: str = Field(default_factory=_new_id, primary_key=True)
    # Agent working windows: {"monday": {"enabled": true, "slots": [{"start": "09:00", "end": "13:00"}]}, ...}
    availability: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON, nullable=True))


class UserPublic(SQLModel):
    id: str
    tenant_id: str
    email: str
    full_name: str | None = None
    role: str
