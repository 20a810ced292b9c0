from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass

import boto3

from trigger_prompt.contracts import PreparedContextV1


@dataclass(frozen=True)
class ArchivedPrompt:
    bucket: str
    key: str
    sha256: str
    byte_size: int


def archive_key(repository: str, run_id: str) -> str:
    return f"prompts/{repository.replace('/', '_')}/{run_id or 'local'}.json"


class PromptArchiveStore:
    """Keeps a JSON record of each rendered prompt and its tool strings in S3.

    One object per workflow run, keyed by repository and run id. Re-running
    the same run overwrites the previous record.
    """

    def __init__(self, *, region: str, bucket: str):
        self._client = boto3.client("s3", region_name=region)
        self._bucket = bucket

    def put_prompt(
        self,
        prepared: PreparedContextV1,
        prompt: str,
        *,
        run_id: str,
        allowed_tools: str,
        disallowed_tools: str,
    ) -> ArchivedPrompt:
        record = {
            "run_id": run_id,
            "repository": prepared.repository,
            "event_name": prepared.event_data.event_name,
            "prepared_context": prepared.model_dump(mode="json"),
            "prompt": prompt,
            "allowed_tools": allowed_tools,
            "disallowed_tools": disallowed_tools,
        }
        body = json.dumps(record, ensure_ascii=False).encode("utf-8")
        digest = hashlib.sha256(body).hexdigest()
        key = archive_key(prepared.repository, run_id)

        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            ContentType="application/json",
            Metadata={"sha256": digest},
        )

        return ArchivedPrompt(
            bucket=self._bucket,
            key=key,
            sha256=digest,
            byte_size=len(body),
        )
