"""Shared pydantic base for models that cross the HTTP boundary."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises with camelCase keys; accepts camelCase or field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
