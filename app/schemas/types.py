"""
Shared Pydantic types for schema validation.

IdStr: Accepts both str and uuid.UUID objects, coercing UUID to str.
The mock store hands out uuid4() identifiers, but the API and the rule
engine only ever treat ids as opaque strings.

CamelModel: Base model whose JSON shape uses the camelCase keys the
dashboard frontend expects (totalSpent, lastPurchaseDate, ...) while
Python code keeps snake_case attribute names.
"""

from typing import Annotated
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Coerces uuid.UUID objects to str for JSON serialization
IdStr = Annotated[str, BeforeValidator(lambda v: str(v) if not isinstance(v, str) else v)]


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
