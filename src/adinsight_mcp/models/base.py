"""Base model with common configuration."""

from datetime import datetime, timezone

from pydantic import BaseModel as PydanticBaseModel
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Get current UTC datetime (Python 3.12 compatible)."""
    return datetime.now(timezone.utc)


class BaseADIModel(PydanticBaseModel):
    """Base model for all AdInsight models.

    Fields are snake_case in Python and camelCase on the wire
    (``cost_per_result`` ↔ ``costPerResult``), so dashboards written against
    the camelCase record shape keep working.
    """

    model_config = {
        # Use enum values instead of names
        "use_enum_values": True,
        # Accept both snake_case names and camelCase aliases
        "populate_by_name": True,
        "alias_generator": to_camel,
    }

    def to_wire(self) -> dict:
        """Dump to a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
