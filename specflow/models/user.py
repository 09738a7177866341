from datetime import datetime, timezone
from typing import Literal, Optional
from beanie import Document, Indexed
from pydantic import Field


UserRole = Literal["user", "admin", "super_admin"]
USER_ROLES = ("user", "admin", "super_admin")


class User(Document):
    email: Indexed(str, unique=True)
    name: Optional[str] = None
    role: UserRole = "user"
    email_verified: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "users"

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "super_admin")

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"
