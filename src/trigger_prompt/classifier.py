"""Map a prepared context to its event-type tag and trigger description."""
from __future__ import annotations

from dataclasses import dataclass

from trigger_prompt.contracts import PreparedContextV1
from trigger_prompt.errors import UnsupportedEventError

REVIEW_COMMENT = "REVIEW_COMMENT"
PR_REVIEW = "PR_REVIEW"
GENERAL_COMMENT = "GENERAL_COMMENT"
ISSUE_CREATED = "ISSUE_CREATED"
ISSUE_ASSIGNED = "ISSUE_ASSIGNED"
PULL_REQUEST = "PULL_REQUEST"


@dataclass(frozen=True)
class EventTypeAndContext:
    event_type: str
    trigger_context: str


def get_event_type_and_context(context: PreparedContextV1) -> EventTypeAndContext:
    event_data = context.event_data
    phrase = context.trigger_phrase
    event_name = getattr(event_data, "event_name", None)

    if event_name == "pull_request_review_comment":
        return EventTypeAndContext(REVIEW_COMMENT, f"PR review comment with '{phrase}'")

    if event_name == "pull_request_review":
        return EventTypeAndContext(PR_REVIEW, f"PR review with '{phrase}'")

    if event_name == "issue_comment":
        return EventTypeAndContext(GENERAL_COMMENT, f"issue comment with '{phrase}'")

    if event_name == "issues":
        if event_data.event_action == "opened":
            return EventTypeAndContext(ISSUE_CREATED, f"new issue with '{phrase}' in body")
        return EventTypeAndContext(
            ISSUE_ASSIGNED, f"issue assigned to '{event_data.assignee_trigger}'"
        )

    if event_name == "pull_request":
        action = event_data.event_action
        return EventTypeAndContext(
            PULL_REQUEST, f"pull request {action}" if action else "pull request event"
        )

    # Only reachable when a context bypassed validation.
    raise UnsupportedEventError("Unexpected event type", event_name=event_name)
