"""Tests for fetched-data formatting helpers."""
from trigger_prompt.contracts import (
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
from trigger_prompt.formatter import (
    format_body,
    format_changed_files_with_sha,
    format_comments,
    format_context,
    format_review_comments,
    strip_html_comments,
)

IMAGE_URL = "https://github.com/user-attachments/assets/abc123"
IMAGE_MAP = {IMAGE_URL: "/tmp/github-images/image-1.png"}


class TestStripHtmlComments:
    def test_removes_single_and_multiline(self):
        text = "keep <!-- hidden --> this<!--\nmulti\nline\n--> too"
        assert strip_html_comments(text) == "keep  this too"

    def test_non_greedy(self):
        assert strip_html_comments("<!-- a -->x<!-- b -->") == "x"

    def test_plain_text_untouched(self):
        assert strip_html_comments("@claude fix it") == "@claude fix it"


class TestFormatContext:
    def test_pull_request(self):
        fetched = FetchedContextV1(
            pull_request=PullRequestData(
                title="Fix login",
                author=Author(login="alice"),
                head_ref_name="fix-login",
                base_ref_name="main",
                state="OPEN",
                additions=10,
                deletions=2,
                total_commits=3,
                files=[ChangedFile(path="a.py"), ChangedFile(path="b.py")],
            )
        )

        assert format_context(fetched, True) == (
            "PR Title: Fix login\n"
            "PR Author: alice\n"
            "PR Branch: fix-login -> main\n"
            "PR State: OPEN\n"
            "PR Additions: 10\n"
            "PR Deletions: 2\n"
            "Total Commits: 3\n"
            "Changed Files: 2 files"
        )

    def test_issue(self):
        fetched = FetchedContextV1(
            issue=IssueData(title="Crash", author=Author(login="bob"), state="OPEN")
        )

        assert format_context(fetched, False) == (
            "Issue Title: Crash\nIssue Author: bob\nIssue State: OPEN"
        )

    def test_missing_data(self):
        assert format_context(FetchedContextV1(), True) == ""
        assert format_context(FetchedContextV1(), False) == ""


class TestFormatComments:
    def test_comments_with_images(self):
        comments = [
            Comment(body="first", author=Author(login="a"), created_at="2024-01-01T00:00:00Z"),
            Comment(body=f"see ![img]({IMAGE_URL})", author=Author(login="b"), created_at="2024-01-02T00:00:00Z"),
        ]

        out = format_comments(comments, IMAGE_MAP)

        assert out == (
            "[a at 2024-01-01T00:00:00Z]: first\n\n"
            "[b at 2024-01-02T00:00:00Z]: see ![img](/tmp/github-images/image-1.png)"
        )

    def test_no_comments(self):
        assert format_comments([]) == ""

    def test_body_image_replacement(self):
        assert format_body(f"![x]({IMAGE_URL})", IMAGE_MAP) == "![x](/tmp/github-images/image-1.png)"
        assert format_body("plain", {}) == "plain"


class TestFormatReviewComments:
    def test_review_with_inline_comments(self):
        reviews = [
            Review(
                author=Author(login="rev"),
                submitted_at="2024-01-03T00:00:00Z",
                state="CHANGES_REQUESTED",
                body="Please fix",
                comments=[
                    ReviewComment(path="src/app.py", line=42, body="typo here"),
                    ReviewComment(path="src/util.py", line=None, body="outdated"),
                ],
            )
        ]

        assert format_review_comments(reviews) == (
            "[Review by rev at 2024-01-03T00:00:00Z]: CHANGES_REQUESTED\n"
            "Please fix\n"
            "  [Comment on src/app.py:42]: typo here\n"
            "  [Comment on src/util.py:?]: outdated"
        )

    def test_blank_review_body_skipped(self):
        reviews = [Review(author=Author(login="rev"), submitted_at="t", state="APPROVED", body="   ")]

        assert format_review_comments(reviews) == "[Review by rev at t]: APPROVED"

    def test_no_reviews(self):
        assert format_review_comments([]) == ""


def test_changed_files_with_sha():
    files = [
        ChangedFileWithSHA(path="src/app.py", change_type="MODIFIED", additions=3, deletions=1, sha="abc"),
        ChangedFileWithSHA(path="README.md", change_type="ADDED", additions=10, deletions=0, sha="def"),
    ]

    assert format_changed_files_with_sha(files) == (
        "- src/app.py (MODIFIED) +3/-1 SHA: abc\n"
        "- README.md (ADDED) +10/-0 SHA: def"
    )
