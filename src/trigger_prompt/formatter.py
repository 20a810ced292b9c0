"""
Text formatting for fetched issue / PR data.

Each helper renders one section body of the prompt. Image URLs that were
downloaded by the fetcher are rewritten to their local paths so the agent
can open them with the Read tool.
"""
from __future__ import annotations

import re
from typing import Optional

from trigger_prompt.contracts import (
    ChangedFileWithSHA,
    Comment,
    FetchedContextV1,
    Review,
)

_HTML_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")


def strip_html_comments(text: str) -> str:
    return _HTML_COMMENT_RE.sub("", text)


def _replace_image_urls(text: str, image_url_map: Optional[dict[str, str]]) -> str:
    for original_url, local_path in (image_url_map or {}).items():
        text = text.replace(original_url, local_path)
    return text


def format_context(fetched: FetchedContextV1, is_pr: bool) -> str:
    if is_pr:
        pr = fetched.pull_request
        if pr is None:
            return ""
        return (
            f"PR Title: {pr.title}\n"
            f"PR Author: {pr.author.login}\n"
            f"PR Branch: {pr.head_ref_name} -> {pr.base_ref_name}\n"
            f"PR State: {pr.state}\n"
            f"PR Additions: {pr.additions}\n"
            f"PR Deletions: {pr.deletions}\n"
            f"Total Commits: {pr.total_commits}\n"
            f"Changed Files: {len(pr.files)} files"
        )

    issue = fetched.issue
    if issue is None:
        return ""
    return (
        f"Issue Title: {issue.title}\n"
        f"Issue Author: {issue.author.login}\n"
        f"Issue State: {issue.state}"
    )


def format_body(body: str, image_url_map: Optional[dict[str, str]] = None) -> str:
    return _replace_image_urls(body, image_url_map)


def format_comments(
    comments: list[Comment], image_url_map: Optional[dict[str, str]] = None
) -> str:
    return "\n\n".join(
        f"[{c.author.login} at {c.created_at}]: {_replace_image_urls(c.body, image_url_map)}"
        for c in comments
    )


def format_review_comments(
    reviews: list[Review], image_url_map: Optional[dict[str, str]] = None
) -> str:
    """Render each review header, its body, then its inline comments indented."""
    blocks = []
    for review in reviews:
        out = f"[Review by {review.author.login} at {review.submitted_at}]: {review.state}"
        if review.body and review.body.strip():
            out += f"\n{_replace_image_urls(review.body, image_url_map)}"
        if review.comments:
            out += "\n" + "\n".join(
                f"  [Comment on {c.path}:{c.line or '?'}]: "
                f"{_replace_image_urls(c.body, image_url_map)}"
                for c in review.comments
            )
        blocks.append(out)
    return "\n\n".join(blocks)


def format_changed_files_with_sha(files: list[ChangedFileWithSHA]) -> str:
    return "\n".join(
        f"- {f.path} ({f.change_type}) +{f.additions}/-{f.deletions} SHA: {f.sha}"
        for f in files
    )
