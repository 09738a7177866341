from datetime import datetime, timezone
from beanie import Document, Indexed
from pydantic import Field


class Setting(Document):
    """Administrative key/value setting."""
    key: Indexed(str, unique=True)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "settings"
