from __future__ import annotations
from datetime import datetime, timezone
import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def gen_id() -> str:
    return str(uuid.uuid4())


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Persisted models: snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",  # tolerates stale keys in persisted JSON
    )

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
