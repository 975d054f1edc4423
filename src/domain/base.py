from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (storage columns are naive UTC)."""
    return datetime.now(UTC).replace(tzinfo=None)


class CamelModel(BaseModel):
    """Wire model serialized in camelCase, accepting snake_case on input"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
