"""prepared_context.v1 – validated command record for one trigger event.

Each event variant is its own model. Required fields carry no default, so a
partially populated variant cannot be constructed; optional fields default to
``None`` and ``None`` always means "absent" (never an empty string).
"""
from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

NonEmptyStr = Annotated[str, Field(min_length=1)]


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class PullRequestReviewCommentEvent(_EventBase):
    event_name: Literal["pull_request_review_comment"] = "pull_request_review_comment"
    is_pr: Literal[True] = True
    pr_number: NonEmptyStr
    comment_body: NonEmptyStr
    comment_id: Optional[str] = None
    claude_branch: Optional[str] = None
    default_branch: Optional[str] = None


class PullRequestReviewEvent(_EventBase):
    event_name: Literal["pull_request_review"] = "pull_request_review"
    is_pr: Literal[True] = True
    pr_number: NonEmptyStr
    # A review may be submitted without a body; "" is still a present value.
    comment_body: str
    claude_branch: Optional[str] = None
    default_branch: Optional[str] = None


class IssueCommentPREvent(_EventBase):
    event_name: Literal["issue_comment"] = "issue_comment"
    is_pr: Literal[True] = True
    comment_id: NonEmptyStr
    pr_number: NonEmptyStr
    comment_body: NonEmptyStr
    claude_branch: Optional[str] = None
    default_branch: Optional[str] = None


class IssueCommentIssueEvent(_EventBase):
    event_name: Literal["issue_comment"] = "issue_comment"
    is_pr: Literal[False] = False
    comment_id: NonEmptyStr
    issue_number: NonEmptyStr
    comment_body: NonEmptyStr
    claude_branch: NonEmptyStr
    default_branch: NonEmptyStr


class IssueAssignedEvent(_EventBase):
    event_name: Literal["issues"] = "issues"
    event_action: Literal["assigned"] = "assigned"
    is_pr: Literal[False] = False
    issue_number: NonEmptyStr
    default_branch: NonEmptyStr
    claude_branch: NonEmptyStr
    assignee_trigger: NonEmptyStr


class IssueOpenedEvent(_EventBase):
    event_name: Literal["issues"] = "issues"
    event_action: Literal["opened"] = "opened"
    is_pr: Literal[False] = False
    issue_number: NonEmptyStr
    default_branch: NonEmptyStr
    claude_branch: NonEmptyStr


class PullRequestEvent(_EventBase):
    event_name: Literal["pull_request"] = "pull_request"
    event_action: Optional[str] = None
    is_pr: Literal[True] = True
    pr_number: NonEmptyStr
    claude_branch: Optional[str] = None
    default_branch: Optional[str] = None


EventData = Union[
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    IssueCommentPREvent,
    IssueCommentIssueEvent,
    IssueAssignedEvent,
    IssueOpenedEvent,
    PullRequestEvent,
]

# Event kinds whose command carries the text of the triggering comment or review.
COMMENT_EVENT_NAMES = frozenset(
    {"issue_comment", "pull_request_review_comment", "pull_request_review"}
)


class CommonFieldsV1(BaseModel):
    model_config = ConfigDict(frozen=True)

    repository: NonEmptyStr
    claude_comment_id: NonEmptyStr
    trigger_phrase: str = "@claude"
    trigger_username: Optional[str] = None
    custom_instructions: Optional[str] = None
    allowed_tools: Optional[str] = None
    disallowed_tools: Optional[str] = None
    direct_prompt: Optional[str] = None
    claude_branch: Optional[str] = None


class PreparedContextV1(CommonFieldsV1):
    schema_version: str = Field(default="prepared_context.v1", frozen=True)
    event_data: EventData

    @property
    def common_fields(self) -> CommonFieldsV1:
        return CommonFieldsV1(
            **self.model_dump(include=set(CommonFieldsV1.model_fields))
        )
