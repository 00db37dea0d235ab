"""
Shared pydantic configuration for design IR types.

Design documents are written with camelCase keys (``refreshRate``,
``dataSource``); the Python side uses snake_case. Both spellings are
accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DesignModel(BaseModel):
    """Frozen base model with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
