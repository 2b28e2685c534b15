"""Base schema utilities."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def _as_str(value):
    return value if value is None or isinstance(value, str) else str(value)


# Row identifiers arrive as UUID objects from the ORM and as strings from REST
Identifier = Annotated[str, BeforeValidator(_as_str)]


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class ViewSchema(BaseModel):
    """Immutable derived record, serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )
