from pydantic import BaseModel, ConfigDict


class CamelModel(BaseModel):
    """Wire model whose fields are camelCase on the wire and snake_case in code."""

    model_config = ConfigDict(populate_by_name=True)
