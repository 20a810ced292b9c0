from dotenv import load_dotenv

# Picks up a .env from the working directory when running locally
load_dotenv()

from fastapi import FastAPI

from trigger_prompt import __version__
from trigger_prompt.settings import load_settings
from trigger_prompt.api.routers import prompts

app = FastAPI(title="Trigger Prompt", version=__version__)

settings = load_settings()

app.include_router(prompts.router)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": __version__,
        "github_server_url": settings.github_server_url,
        "prompt_archive_bucket": settings.prompt_archive_bucket or "(not configured)",
    }
