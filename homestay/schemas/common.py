from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for request bodies sent by the mobile and web clients.

    Fields are declared in snake_case and accepted in camelCase
    (``checkIn``) as well as snake_case (``check_in``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
