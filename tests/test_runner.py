"""Tests for the create-prompt runner: file output, exported variables, archival."""
import json
import os
from unittest.mock import MagicMock, patch

import pytest

from trigger_prompt.contracts import FetchedContextV1, IssueData, RawTriggerContextV1, TriggerInputs
from trigger_prompt.errors import ContextValidationError
from trigger_prompt.normalizer import prepare_context
from trigger_prompt.runner import create_prompt, export_variable, main
from trigger_prompt.settings import Settings
from trigger_prompt.stores.s3_store import PromptArchiveStore, archive_key

REVIEW_COMMENT_CONTEXT = RawTriggerContextV1(
    run_id="555",
    event_name="pull_request_review_comment",
    event_action="created",
    repository="owner/repo",
    payload={"comment": {"id": 901, "body": "@claude rename this", "user": {"login": "carol"}}},
    entity_number=7,
    is_pr=True,
    inputs=TriggerInputs(allowed_tools="Bash(npm test)", disallowed_tools="Edit"),
)

ISSUE_OPENED_CONTEXT = RawTriggerContextV1(
    run_id="556",
    event_name="issues",
    event_action="opened",
    repository="owner/repo",
    payload={"issue": {"number": 3, "user": {"login": "dave"}}},
    entity_number=3,
    is_pr=False,
)


@pytest.fixture
def settings(tmp_path):
    github_env = tmp_path / "github_env"
    github_env.touch()
    return Settings(prompt_dir=str(tmp_path / "prompts"), github_env=str(github_env))


@pytest.fixture(autouse=True)
def _clean_tool_env(monkeypatch):
    # export_variable writes os.environ directly; register both names so they are restored
    for name in ("ALLOWED_TOOLS", "DISALLOWED_TOOLS"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestCreatePrompt:
    def test_writes_prompt_and_exports_tools(self, settings, monkeypatch, capsys):
        result = create_prompt("999", "main", None, FetchedContextV1(), REVIEW_COMMENT_CONTEXT, settings)

        with open(result.prompt_path, encoding="utf-8") as f:
            assert f.read() == result.prompt
        assert result.prompt_path.endswith("prompts/claude-prompt.txt")
        assert result.allowed_tools.endswith(
            "mcp__github__update_pull_request_comment,Bash(npm test)"
        )
        assert result.disallowed_tools == "WebSearch,WebFetch,Edit"

        assert os.environ["ALLOWED_TOOLS"] == result.allowed_tools
        assert os.environ["DISALLOWED_TOOLS"] == result.disallowed_tools

        env_text = open(settings.github_env, encoding="utf-8").read()
        assert "ALLOWED_TOOLS<<ghadelimiter_" in env_text
        assert f"\n{result.disallowed_tools}\n" in env_text

        out = capsys.readouterr().out
        assert "===== FINAL PROMPT =====" in out
        msgs = [json.loads(line)["msg"] for line in out.splitlines() if line.startswith('{"msg"')]
        assert msgs == ["prompt_prepared", "prompt_generated", "prompt_written", "tools_exported"]

    def test_validation_error_propagates(self, settings):
        with pytest.raises(ContextValidationError, match="DEFAULT_BRANCH is required for issues event"):
            create_prompt("999", None, "claude/issue-3", FetchedContextV1(), ISSUE_OPENED_CONTEXT, settings)

    def test_archives_when_bucket_configured(self, settings):
        settings = settings.model_copy(update={"prompt_archive_bucket": "prompt-archive"})
        fake_s3 = MagicMock()

        with patch("trigger_prompt.stores.s3_store.boto3.client", return_value=fake_s3):
            result = create_prompt(
                "999", "main", "claude/issue-3",
                FetchedContextV1(issue=IssueData(title="t", body="b")),
                ISSUE_OPENED_CONTEXT, settings,
            )

        fake_s3.put_object.assert_called_once()
        kwargs = fake_s3.put_object.call_args[1]
        assert kwargs["Bucket"] == "prompt-archive"
        assert kwargs["Key"] == "prompts/owner_repo/556.json"
        stored = json.loads(kwargs["Body"])
        assert stored["prompt"] == result.prompt
        assert stored["prepared_context"]["event_data"]["event_action"] == "opened"


class TestExportVariable:
    def test_without_github_env(self, monkeypatch):
        export_variable("ALLOWED_TOOLS", "Read")

        assert os.environ["ALLOWED_TOOLS"] == "Read"

    def test_multiline_value_written_with_delimiter(self, tmp_path):
        env_file = tmp_path / "env"

        export_variable("DISALLOWED_TOOLS", "a\nb", str(env_file))

        lines = env_file.read_text().splitlines()
        assert lines[0].startswith("DISALLOWED_TOOLS<<")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:] == ["a", "b", delimiter]


class TestArchiveStore:
    def test_put_prompt_builds_key_and_record(self):
        prepared = prepare_context(ISSUE_OPENED_CONTEXT, "999", "main", "claude/issue-3")
        fake_s3 = MagicMock()

        with patch("trigger_prompt.stores.s3_store.boto3.client", return_value=fake_s3):
            store = PromptArchiveStore(region="us-east-1", bucket="b")
            res = store.put_prompt(
                prepared, "héllo", run_id="12", allowed_tools="Read", disallowed_tools="WebSearch"
            )

        kwargs = fake_s3.put_object.call_args[1]
        assert res.bucket == "b"
        assert res.key == kwargs["Key"] == "prompts/owner_repo/12.json"
        assert len(res.sha256) == 64
        assert kwargs["Metadata"] == {"sha256": res.sha256}
        assert res.byte_size == len(kwargs["Body"])
        record = json.loads(kwargs["Body"])
        assert record["run_id"] == "12"
        assert record["event_name"] == "issues"
        assert record["prompt"] == "héllo"
        assert record["allowed_tools"] == "Read"
        assert record["disallowed_tools"] == "WebSearch"

    def test_archive_key(self):
        assert archive_key("owner/repo", "12") == "prompts/owner_repo/12.json"
        assert archive_key("owner/repo", "") == "prompts/owner_repo/local.json"


class TestMain:
    def _env(self, monkeypatch, tmp_path, payload, event_name, **extra):
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps(payload))
        fetched_file = tmp_path / "fetched.json"
        fetched_file.write_text(json.dumps({"issue": {"title": "t", "body": "b"}}))
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_file))
        monkeypatch.setenv("GITHUB_EVENT_NAME", event_name)
        monkeypatch.setenv("GITHUB_REPOSITORY", "owner/repo")
        monkeypatch.setenv("GITHUB_RUN_ID", "1")
        monkeypatch.setenv("FETCHED_CONTEXT_PATH", str(fetched_file))
        monkeypatch.setenv("CLAUDE_COMMENT_ID", "999")
        monkeypatch.setenv("PROMPT_DIR", str(tmp_path / "prompts"))
        monkeypatch.delenv("GITHUB_ENV", raising=False)
        monkeypatch.delenv("PROMPT_ARCHIVE_BUCKET", raising=False)
        for k, v in extra.items():
            monkeypatch.setenv(k, v)

    def test_success(self, monkeypatch, tmp_path):
        payload = {"action": "opened", "issue": {"number": 3, "user": {"login": "dave"}}}
        self._env(monkeypatch, tmp_path, payload, "issues",
                  DEFAULT_BRANCH="main", CLAUDE_BRANCH="claude/issue-3")

        main()

        prompt = (tmp_path / "prompts" / "claude-prompt.txt").read_text()
        assert "<event_type>ISSUE_CREATED</event_type>" in prompt

    def test_failure_exits_1(self, monkeypatch, tmp_path, capsys):
        payload = {"action": "closed", "issue": {"number": 3, "user": {"login": "dave"}}}
        self._env(monkeypatch, tmp_path, payload, "issues",
                  DEFAULT_BRANCH="main", CLAUDE_BRANCH="claude/issue-3")

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "::error::Create prompt failed with error: Unsupported issue action: closed" in out
        assert '"msg": "create_prompt_failed"' in out
