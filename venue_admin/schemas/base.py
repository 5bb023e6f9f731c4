"""
Base Pydantic schemas
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema for responses built from ORM objects"""
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
    )


class RequestSchema(BaseModel):
    """Request bodies accept both camelCase and snake_case keys"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
