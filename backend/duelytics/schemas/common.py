from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # desktop client speaks camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OkOut(BaseModel):
    success: bool = True
    message: str
