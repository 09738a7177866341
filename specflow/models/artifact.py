from datetime import datetime, timezone
from beanie import Document, Indexed
from pydantic import Field
import pymongo


class Artifact(Document):
    """
    One version of a generated document.

    Written once; regenerating an artifact inserts the next version.
    """
    project_id: Indexed(str)
    phase: str
    name: str
    content: str
    version: int = 1
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "artifacts"
        indexes = [
            pymongo.IndexModel(
                [
                    ("project_id", pymongo.ASCENDING),
                    ("phase", pymongo.ASCENDING),
                    ("name", pymongo.ASCENDING),
                    ("version", pymongo.DESCENDING),
                ],
                unique=True,
            ),
        ]

    @property
    def key(self) -> str:
        return f"{self.phase}/{self.name}"
