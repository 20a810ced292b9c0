from .trigger_context_v1 import RawTriggerContextV1, TriggerInputs
from .prepared_context_v1 import (
    COMMENT_EVENT_NAMES,
    CommonFieldsV1,
    EventData,
    IssueAssignedEvent,
    IssueCommentIssueEvent,
    IssueCommentPREvent,
    IssueOpenedEvent,
    PreparedContextV1,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
)
from .fetched_context_v1 import (
    Author,
    ChangedFile,
    ChangedFileWithSHA,
    Comment,
    FetchedContextV1,
    IssueData,
    PullRequestData,
    Review,
    ReviewComment,
)

__all__ = [
    "RawTriggerContextV1",
    "TriggerInputs",
    "COMMENT_EVENT_NAMES",
    "CommonFieldsV1",
    "EventData",
    "IssueAssignedEvent",
    "IssueCommentIssueEvent",
    "IssueCommentPREvent",
    "IssueOpenedEvent",
    "PreparedContextV1",
    "PullRequestEvent",
    "PullRequestReviewCommentEvent",
    "PullRequestReviewEvent",
    "Author",
    "ChangedFile",
    "ChangedFileWithSHA",
    "Comment",
    "FetchedContextV1",
    "IssueData",
    "PullRequestData",
    "Review",
    "ReviewComment",
]
