"""
create-prompt entry point for the workflow step.

Prepares the trigger context, renders the prompt, writes it to the prompt
file and exports the tool strings for the agent step that follows.
"""
import json
import os
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from trigger_prompt.assembler import generate_prompt
from trigger_prompt.classifier import get_event_type_and_context
from trigger_prompt.contracts import FetchedContextV1, PreparedContextV1, RawTriggerContextV1
from trigger_prompt.github_context import parse_github_context_from_env
from trigger_prompt.normalizer import prepare_context
from trigger_prompt.settings import Settings, load_settings
from trigger_prompt.stores.s3_store import PromptArchiveStore
from trigger_prompt.tools import build_allowed_tools_string, build_disallowed_tools_string


@dataclass
class PromptResult:
    prepared: PreparedContextV1
    prompt: str
    prompt_path: str
    allowed_tools: str
    disallowed_tools: str


def _log(msg: str, **extra):
    entry = {"msg": msg}
    entry.update(extra)
    print(json.dumps(entry, default=str))


def export_variable(name: str, value: str, github_env: str = "") -> None:
    """Set *name* for this process and, on a runner, for later workflow steps."""
    os.environ[name] = value
    if not github_env:
        return
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(github_env, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def create_prompt(
    claude_comment_id: str,
    default_branch: Optional[str],
    claude_branch: Optional[str],
    fetched: FetchedContextV1,
    context: RawTriggerContextV1,
    settings: Optional[Settings] = None,
) -> PromptResult:
    settings = settings or load_settings()

    prepared = prepare_context(context, str(claude_comment_id), default_branch, claude_branch)
    event_info = get_event_type_and_context(prepared)
    _log(
        "prompt_prepared",
        run_id=context.run_id,
        event_name=prepared.event_data.event_name,
        event_type=event_info.event_type,
        repository=prepared.repository,
    )

    prompt = generate_prompt(
        prepared, fetched, event_info=event_info, server_url=settings.github_server_url
    )
    print("===== FINAL PROMPT =====")
    print(prompt)
    print("=======================")
    _log("prompt_generated", run_id=context.run_id, chars=len(prompt))

    prompt_dir = Path(settings.prompt_dir)
    prompt_dir.mkdir(parents=True, exist_ok=True)
    prompt_path = prompt_dir / settings.prompt_file_name
    prompt_path.write_text(prompt, encoding="utf-8")
    _log("prompt_written", path=str(prompt_path))

    allowed = build_allowed_tools_string(prepared.event_data, prepared.allowed_tools)
    disallowed = build_disallowed_tools_string(prepared.disallowed_tools)
    export_variable("ALLOWED_TOOLS", allowed, settings.github_env)
    export_variable("DISALLOWED_TOOLS", disallowed, settings.github_env)
    _log("tools_exported", allowed_tools=allowed, disallowed_tools=disallowed)

    if settings.prompt_archive_bucket:
        store = PromptArchiveStore(
            region=settings.aws_region, bucket=settings.prompt_archive_bucket
        )
        res = store.put_prompt(
            prepared,
            prompt,
            run_id=context.run_id,
            allowed_tools=allowed,
            disallowed_tools=disallowed,
        )
        _log("prompt_archived", bucket=res.bucket, key=res.key, sha256=res.sha256)

    return PromptResult(
        prepared=prepared,
        prompt=prompt,
        prompt_path=str(prompt_path),
        allowed_tools=allowed,
        disallowed_tools=disallowed,
    )


def _load_fetched(path: str) -> FetchedContextV1:
    with open(path, encoding="utf-8") as f:
        return FetchedContextV1.model_validate(json.load(f))


def main() -> None:
    try:
        context = parse_github_context_from_env()
        fetched = _load_fetched(os.environ["FETCHED_CONTEXT_PATH"])
        create_prompt(
            os.environ["CLAUDE_COMMENT_ID"],
            os.getenv("DEFAULT_BRANCH") or None,
            os.getenv("CLAUDE_BRANCH") or None,
            fetched,
            context,
        )
    except Exception as e:
        _log("create_prompt_failed", error=str(e)[:500])
        print(f"::error::Create prompt failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
