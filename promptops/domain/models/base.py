"""Base schema classes with camelCase alias generation.

Python code stays snake_case; JSON going in and out is camelCase.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request payloads. Accepts and outputs camelCase."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "protected_namespaces": (),
    }


class CamelORMModel(BaseModel):
    """Base for responses. Reads from SQLAlchemy rows, outputs camelCase."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "protected_namespaces": (),
    }
