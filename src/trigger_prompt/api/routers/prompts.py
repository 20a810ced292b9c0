"""
Prompt endpoint.

POST /v1/prompts → parse a webhook payload, validate it into a prepared
                   context and render the prompt plus tool strings.
Nothing is written or exported; the caller persists the result.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, ValidationError

from trigger_prompt.assembler import generate_prompt
from trigger_prompt.classifier import get_event_type_and_context
from trigger_prompt.contracts import FetchedContextV1, PreparedContextV1, TriggerInputs
from trigger_prompt.errors import PromptContextError
from trigger_prompt.github_context import parse_github_context
from trigger_prompt.normalizer import prepare_context
from trigger_prompt.settings import load_settings
from trigger_prompt.tools import build_allowed_tools_string, build_disallowed_tools_string

router = APIRouter(prefix="/v1/prompts", tags=["prompts"])


class CreatePromptRequest(BaseModel):
    event_name: str
    event_action: Optional[str] = None
    repository: str = ""
    run_id: str = ""
    actor: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
    inputs: TriggerInputs = Field(default_factory=TriggerInputs)
    claude_comment_id: str = Field(min_length=1)
    default_branch: Optional[str] = None
    claude_branch: Optional[str] = None
    fetched: FetchedContextV1 = Field(default_factory=FetchedContextV1)


class CreatePromptResponse(BaseModel):
    prompt: str
    allowed_tools: str
    disallowed_tools: str
    event_type: str
    trigger_context: str
    prepared_context: PreparedContextV1


@router.post("", response_model=CreatePromptResponse)
def create_prompt(req: CreatePromptRequest):
    settings = load_settings()

    try:
        context = parse_github_context(
            req.event_name,
            req.payload,
            req.inputs,
            repository=req.repository,
            run_id=req.run_id,
            actor=req.actor,
            event_action=req.event_action,
        )
        prepared = prepare_context(
            context, req.claude_comment_id, req.default_branch, req.claude_branch
        )
    except (PromptContextError, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    event_info = get_event_type_and_context(prepared)
    prompt = generate_prompt(
        prepared, req.fetched, event_info=event_info, server_url=settings.github_server_url
    )

    return CreatePromptResponse(
        prompt=prompt,
        allowed_tools=build_allowed_tools_string(prepared.event_data, prepared.allowed_tools),
        disallowed_tools=build_disallowed_tools_string(prepared.disallowed_tools),
        event_type=event_info.event_type,
        trigger_context=event_info.trigger_context,
        prepared_context=prepared,
    )
