"""
Context normalizer.

Validates a raw trigger context and reshapes it into prepared_context.v1:
the shared fields plus exactly one event-data variant. Every branch checks
the fields its variant requires and raises ``ContextValidationError`` naming
the missing field; nothing is ever defaulted.
"""
from __future__ import annotations

from typing import Optional

from trigger_prompt.contracts import (
    EventData,
    IssueAssignedEvent,
    IssueCommentIssueEvent,
    IssueCommentPREvent,
    IssueOpenedEvent,
    PreparedContextV1,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    RawTriggerContextV1,
)
from trigger_prompt.errors import ContextValidationError, UnsupportedEventError
from trigger_prompt.github_context import (
    is_issue_comment_event,
    is_issues_event,
    is_pull_request_review_comment_event,
    is_pull_request_review_event,
)

DEFAULT_TRIGGER_PHRASE = "@claude"


def _require(value, field: str, event_name: str, message: str) -> None:
    if not value:
        raise ContextValidationError(message, field=field, event_name=event_name)


def _present(**fields: Optional[str]) -> dict[str, str]:
    """Keep only the truthy values; absent and empty both map to absence."""
    return {k: v for k, v in fields.items() if v}


def _extract_trigger(
    context: RawTriggerContextV1,
) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """Return (trigger_username, comment_id, comment_body) for the payload."""
    payload = context.payload

    if is_issue_comment_event(context) or is_pull_request_review_comment_event(context):
        comment = payload.get("comment") or {}
        comment_id = comment.get("id")
        return (
            (comment.get("user") or {}).get("login"),
            str(comment_id) if comment_id is not None else None,
            comment.get("body"),
        )

    if is_pull_request_review_event(context):
        # Reviews are not addressed by comment id, and may carry no body.
        review = payload.get("review")
        if review is None:
            return None, None, None
        return (
            (review.get("user") or {}).get("login"),
            None,
            review.get("body") or "",
        )

    if is_issues_event(context):
        issue = payload.get("issue") or {}
        return (issue.get("user") or {}).get("login"), None, None

    return None, None, None


def prepare_context(
    context: RawTriggerContextV1,
    claude_comment_id: str,
    default_branch: Optional[str] = None,
    claude_branch: Optional[str] = None,
) -> PreparedContextV1:
    """Validate *context* and build the prepared context for one invocation.

    Parameters
    ----------
    context : RawTriggerContextV1
        Parsed trigger event and action inputs.
    claude_comment_id : str
        Id of the tracking comment the agent will keep updating.
    default_branch, claude_branch : str, optional
        Repository default branch and the working branch prepared for this
        run, when one was created.

    Raises
    ------
    ContextValidationError
        A field required by the selected event variant is missing.
    UnsupportedEventError
        The event name, or the ``issues`` action, is not handled.
    """
    event_name = context.event_name
    event_action = context.event_action
    inputs = context.inputs
    is_pr = context.is_pr

    pr_number = str(context.entity_number) if is_pr else None
    issue_number = str(context.entity_number) if not is_pr else None

    trigger_username, comment_id, comment_body = _extract_trigger(context)

    common = {
        "repository": context.repository,
        "claude_comment_id": claude_comment_id,
        "trigger_phrase": inputs.trigger_phrase or DEFAULT_TRIGGER_PHRASE,
        **_present(
            trigger_username=trigger_username,
            custom_instructions=inputs.custom_instructions,
            allowed_tools=inputs.allowed_tools,
            disallowed_tools=inputs.disallowed_tools,
            direct_prompt=inputs.direct_prompt,
            claude_branch=claude_branch,
        ),
    }
    branches = _present(claude_branch=claude_branch, default_branch=default_branch)

    event_data: EventData

    if event_name == "pull_request_review_comment":
        _require(pr_number, "PR_NUMBER", event_name,
                 "PR_NUMBER is required for pull_request_review_comment event")
        _require(is_pr, "IS_PR", event_name,
                 "IS_PR must be true for pull_request_review_comment event")
        _require(comment_body, "COMMENT_BODY", event_name,
                 "COMMENT_BODY is required for pull_request_review_comment event")
        event_data = PullRequestReviewCommentEvent(
            pr_number=pr_number,
            comment_body=comment_body,
            **_present(comment_id=comment_id),
            **branches,
        )

    elif event_name == "pull_request_review":
        _require(pr_number, "PR_NUMBER", event_name,
                 "PR_NUMBER is required for pull_request_review event")
        _require(is_pr, "IS_PR", event_name,
                 "IS_PR must be true for pull_request_review event")
        if comment_body is None:
            raise ContextValidationError(
                "COMMENT_BODY is required for pull_request_review event",
                field="COMMENT_BODY",
                event_name=event_name,
            )
        event_data = PullRequestReviewEvent(
            pr_number=pr_number,
            comment_body=comment_body,
            **branches,
        )

    elif event_name == "issue_comment":
        _require(comment_id, "COMMENT_ID", event_name,
                 "COMMENT_ID is required for issue_comment event")
        _require(comment_body, "COMMENT_BODY", event_name,
                 "COMMENT_BODY is required for issue_comment event")
        if is_pr:
            _require(pr_number, "PR_NUMBER", event_name,
                     "PR_NUMBER is required for issue_comment event for PRs")
            event_data = IssueCommentPREvent(
                comment_id=comment_id,
                pr_number=pr_number,
                comment_body=comment_body,
                **branches,
            )
        else:
            _require(claude_branch, "CLAUDE_BRANCH", event_name,
                     "CLAUDE_BRANCH is required for issue_comment event")
            _require(default_branch, "DEFAULT_BRANCH", event_name,
                     "DEFAULT_BRANCH is required for issue_comment event")
            _require(issue_number, "ISSUE_NUMBER", event_name,
                     "ISSUE_NUMBER is required for issue_comment event for issues")
            event_data = IssueCommentIssueEvent(
                comment_id=comment_id,
                issue_number=issue_number,
                comment_body=comment_body,
                claude_branch=claude_branch,
                default_branch=default_branch,
            )

    elif event_name == "issues":
        _require(event_action, "GITHUB_EVENT_ACTION", event_name,
                 "GITHUB_EVENT_ACTION is required for issues event")
        _require(issue_number, "ISSUE_NUMBER", event_name,
                 "ISSUE_NUMBER is required for issues event")
        if is_pr:
            raise ContextValidationError(
                "IS_PR must be false for issues event",
                field="IS_PR",
                event_name=event_name,
            )
        _require(default_branch, "DEFAULT_BRANCH", event_name,
                 "DEFAULT_BRANCH is required for issues event")
        _require(claude_branch, "CLAUDE_BRANCH", event_name,
                 "CLAUDE_BRANCH is required for issues event")

        if event_action == "assigned":
            _require(inputs.assignee_trigger, "ASSIGNEE_TRIGGER", event_name,
                     "ASSIGNEE_TRIGGER is required for issue assigned event")
            event_data = IssueAssignedEvent(
                issue_number=issue_number,
                default_branch=default_branch,
                claude_branch=claude_branch,
                assignee_trigger=inputs.assignee_trigger,
            )
        elif event_action == "opened":
            event_data = IssueOpenedEvent(
                issue_number=issue_number,
                default_branch=default_branch,
                claude_branch=claude_branch,
            )
        else:
            raise UnsupportedEventError(
                f"Unsupported issue action: {event_action}", event_name=event_name
            )

    elif event_name == "pull_request":
        _require(pr_number, "PR_NUMBER", event_name,
                 "PR_NUMBER is required for pull_request event")
        _require(is_pr, "IS_PR", event_name,
                 "IS_PR must be true for pull_request event")
        event_data = PullRequestEvent(
            pr_number=pr_number,
            **_present(event_action=event_action),
            **branches,
        )

    else:
        raise UnsupportedEventError(
            f"Unsupported event type: {event_name}", event_name=event_name
        )

    return PreparedContextV1(**common, event_data=event_data)
