"""Allowed / disallowed tool strings handed to the agent invocation."""
from __future__ import annotations

from typing import Optional

from trigger_prompt.contracts import EventData

BASE_ALLOWED_TOOLS = (
    "Edit",
    "Glob",
    "Grep",
    "LS",
    "Read",
    "Write",
    "mcp__github_file_ops__commit_files",
    "mcp__github_file_ops__delete_files",
)
DISALLOWED_TOOLS = ("WebSearch", "WebFetch")

UPDATE_PR_COMMENT_TOOL = "mcp__github__update_pull_request_comment"
UPDATE_ISSUE_COMMENT_TOOL = "mcp__github__update_issue_comment"


def comment_tool_for(event_name: str) -> str:
    """Inline review comments are edited through the PR comment API, all else
    through the issue comment API."""
    if event_name == "pull_request_review_comment":
        return UPDATE_PR_COMMENT_TOOL
    return UPDATE_ISSUE_COMMENT_TOOL


def build_allowed_tools_string(
    event_data: EventData, custom_allowed_tools: Optional[str] = None
) -> str:
    tools = [*BASE_ALLOWED_TOOLS, comment_tool_for(event_data.event_name)]
    allowed = ",".join(tools)
    # Caller extras are passed through verbatim.
    if custom_allowed_tools:
        allowed = f"{allowed},{custom_allowed_tools}"
    return allowed


def build_disallowed_tools_string(custom_disallowed_tools: Optional[str] = None) -> str:
    disallowed = ",".join(DISALLOWED_TOOLS)
    if custom_disallowed_tools:
        disallowed = f"{disallowed},{custom_disallowed_tools}"
    return disallowed
