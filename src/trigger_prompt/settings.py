import os

from pydantic import BaseModel

DEFAULT_GITHUB_SERVER_URL = "https://github.com"


class Settings(BaseModel):
    github_server_url: str = DEFAULT_GITHUB_SERVER_URL
    prompt_dir: str = "/tmp/claude-prompts"
    prompt_file_name: str = "claude-prompt.txt"

    # Set by the Actions runner; exported variables are appended to this file
    github_env: str = ""

    # Optional prompt archival
    aws_region: str = "us-east-1"
    prompt_archive_bucket: str = ""


def load_settings() -> Settings:
    return Settings(
        github_server_url=os.getenv("GITHUB_SERVER_URL", DEFAULT_GITHUB_SERVER_URL),
        prompt_dir=os.getenv("PROMPT_DIR", "/tmp/claude-prompts"),
        github_env=os.getenv("GITHUB_ENV", ""),
        aws_region=os.getenv("AWS_REGION", "us-east-1"),
        prompt_archive_bucket=os.getenv("PROMPT_ARCHIVE_BUCKET", ""),
    )
