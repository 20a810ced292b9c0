"""
Build a trigger_context.v1 record from a raw GitHub webhook payload.

The four ``is_*_event`` predicates are the payload capabilities the
normalizer dispatches on when it extracts the triggering comment.
"""
from __future__ import annotations

import json
import os
from typing import Any, Optional

from trigger_prompt.contracts import RawTriggerContextV1, TriggerInputs
from trigger_prompt.errors import UnsupportedEventError

ENTITY_EVENTS = {"issues", "issue_comment"}
PULL_REQUEST_EVENTS = {
    "pull_request",
    "pull_request_review",
    "pull_request_review_comment",
}
SUPPORTED_EVENTS = ENTITY_EVENTS | PULL_REQUEST_EVENTS

_INPUT_ENV = {
    "trigger_phrase": "TRIGGER_PHRASE",
    "assignee_trigger": "ASSIGNEE_TRIGGER",
    "custom_instructions": "CUSTOM_INSTRUCTIONS",
    "allowed_tools": "ALLOWED_TOOLS",
    "disallowed_tools": "DISALLOWED_TOOLS",
    "direct_prompt": "DIRECT_PROMPT",
}


def is_issues_event(context: RawTriggerContextV1) -> bool:
    return context.event_name == "issues"


def is_issue_comment_event(context: RawTriggerContextV1) -> bool:
    return context.event_name == "issue_comment"


def is_pull_request_review_event(context: RawTriggerContextV1) -> bool:
    return context.event_name == "pull_request_review"


def is_pull_request_review_comment_event(context: RawTriggerContextV1) -> bool:
    return context.event_name == "pull_request_review_comment"


def parse_github_context(
    event_name: str,
    payload: dict[str, Any],
    inputs: Optional[TriggerInputs] = None,
    *,
    repository: str = "",
    run_id: str = "",
    actor: str = "",
    event_action: Optional[str] = None,
) -> RawTriggerContextV1:
    """Produce trigger_context.v1 from a webhook payload.

    An explicit *event_action* wins over the payload's `action` key.
    """
    if event_name not in SUPPORTED_EVENTS:
        raise UnsupportedEventError(
            f"Unsupported event type: {event_name}", event_name=event_name
        )

    if event_name in ENTITY_EVENTS:
        issue = payload.get("issue") or {}
        entity_number = issue.get("number")
        is_pr = event_name == "issue_comment" and bool(issue.get("pull_request"))
    else:
        entity_number = (payload.get("pull_request") or {}).get("number")
        is_pr = True

    repo_full = repository or (payload.get("repository") or {}).get("full_name", "")

    return RawTriggerContextV1(
        run_id=run_id,
        event_name=event_name,
        event_action=event_action or payload.get("action") or None,
        repository=repo_full,
        actor=actor or (payload.get("sender") or {}).get("login", ""),
        payload=payload,
        entity_number=entity_number,
        is_pr=is_pr,
        inputs=inputs or TriggerInputs(),
    )


def load_inputs_from_env() -> TriggerInputs:
    return TriggerInputs(
        **{field: os.getenv(var, "") for field, var in _INPUT_ENV.items()}
    )


def parse_github_context_from_env() -> RawTriggerContextV1:
    """Read the GitHub Actions runner environment (event file + inputs)."""
    event_path = os.environ["GITHUB_EVENT_PATH"]
    with open(event_path, encoding="utf-8") as f:
        payload = json.load(f)

    return parse_github_context(
        os.environ["GITHUB_EVENT_NAME"],
        payload,
        load_inputs_from_env(),
        repository=os.getenv("GITHUB_REPOSITORY", ""),
        run_id=os.getenv("GITHUB_RUN_ID", ""),
        actor=os.getenv("GITHUB_ACTOR", ""),
    )
