"""fetched_context.v1 – issue / PR data retrieved by the context fetcher."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class Author(BaseModel):
    login: str = ""


class Comment(BaseModel):
    id: str = ""
    database_id: Optional[int] = None
    body: str = ""
    author: Author = Field(default_factory=Author)
    created_at: str = ""


class ReviewComment(BaseModel):
    id: str = ""
    database_id: Optional[int] = None
    body: str = ""
    author: Author = Field(default_factory=Author)
    path: str = ""
    line: Optional[int] = None
    created_at: str = ""


class Review(BaseModel):
    id: str = ""
    database_id: Optional[int] = None
    author: Author = Field(default_factory=Author)
    body: str = ""
    state: str = ""
    submitted_at: str = ""
    comments: list[ReviewComment] = Field(default_factory=list)


class ChangedFile(BaseModel):
    path: str
    additions: int = 0
    deletions: int = 0
    change_type: str = "MODIFIED"  # ADDED | MODIFIED | DELETED | RENAMED ...


class ChangedFileWithSHA(ChangedFile):
    sha: str = ""


class PullRequestData(BaseModel):
    title: str = ""
    body: str = ""
    author: Author = Field(default_factory=Author)
    base_ref_name: str = ""
    head_ref_name: str = ""
    head_ref_oid: str = ""
    created_at: str = ""
    additions: int = 0
    deletions: int = 0
    state: str = ""
    total_commits: int = 0
    files: list[ChangedFile] = Field(default_factory=list)


class IssueData(BaseModel):
    title: str = ""
    body: str = ""
    author: Author = Field(default_factory=Author)
    created_at: str = ""
    state: str = ""


class FetchedContextV1(BaseModel):
    schema_version: str = Field(default="fetched_context.v1", frozen=True)
    pull_request: Optional[PullRequestData] = None
    issue: Optional[IssueData] = None
    comments: list[Comment] = Field(default_factory=list)
    review_data: list[Review] = Field(default_factory=list)
    changed_files_with_sha: list[ChangedFileWithSHA] = Field(default_factory=list)
    # original image URL -> locally downloaded path
    image_url_map: dict[str, str] = Field(default_factory=dict)

    def context_body(self, is_pr: bool) -> str:
        data = self.pull_request if is_pr else self.issue
        return data.body if data is not None else ""
