from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Request/response base: camelCase on the wire, snake_case accepted too."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
