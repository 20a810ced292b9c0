"""trigger_context.v1 – raw trigger event as handed over by the workflow runner."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class TriggerInputs(BaseModel):
    """User-supplied action inputs. Empty string means "not configured"."""

    trigger_phrase: str = ""
    assignee_trigger: str = ""
    custom_instructions: str = ""
    allowed_tools: str = ""
    disallowed_tools: str = ""
    direct_prompt: str = ""


class RawTriggerContextV1(BaseModel):
    schema_version: str = Field(default="trigger_context.v1", frozen=True)
    run_id: str = ""
    event_name: str
    event_action: Optional[str] = None
    repository: str = Field(min_length=1, description="owner/name")
    actor: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
    entity_number: int
    is_pr: bool
    inputs: TriggerInputs = Field(default_factory=TriggerInputs)

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        parts = self.repository.split("/", 1)
        return parts[1] if len(parts) == 2 else self.repository
