"""Base schema shared by every API payload: camelCase on the wire, snake_case in Python."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def as_event(self) -> dict:
        """JSON-ready payload as the relay and REST clients see it."""
        return self.model_dump(mode="json", by_alias=True)


class AgentSummary(CamelModel):
    id: str
    name: str
    emoji: str


class TaskSummary(CamelModel):
    id: str
    type: str
    stage: str
