"""Base DTO classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DTO(BaseModel):
    """Base class for application DTOs."""

    model_config = ConfigDict(frozen=True)


class CamelDTO(DTO):
    """DTO exchanged with external systems using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
