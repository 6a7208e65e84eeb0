"""FastAPI backend — prompt submission, job polling and thinking-mode toggle."""

import logging
import sys
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatforge import __version__
from chatforge.config import get_settings
from chatforge.jobs.service import JobService, get_job_service

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

settings = get_settings()

app = FastAPI(
    title="Code Generation API",
    description="Submit a prompt, poll for the generated HTML document.",
    version=__version__,
)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
cors_origins = settings.cors_origin_list
logger.info("CORS configured for origins: %s", cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(
    "Target chat app: %s (auth token %s, headless=%s)",
    settings.chatforge_target_url,
    "configured" if settings.auth_credential else "NOT SET — anonymous sessions",
    settings.chatforge_headless,
)


# ---------------------------------------------------------------------------
# Health & root
# ---------------------------------------------------------------------------
class HealthResponse(BaseModel):
    status: str
    data_dir: str


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok", data_dir=str(settings.data_dir))


@app.get("/")
async def root(service: JobService = Depends(get_job_service)):
    """API root: endpoint index and current thinking mode."""
    return {
        "message": "Code Generation API",
        "endpoints": {
            "/prompt": "Submit a prompt (GET with ?prompt=your-prompt-here)",
            "/response": "Get generated code (GET with ?id=request-id)",
            "/thinking": "Toggle thinking mode (GET with ?mode=on or ?mode=off)",
        },
        "currentThinkingMode": service.thinking_mode.value,
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
from backend.routes import generation, thinking  # noqa: E402

app.include_router(generation.router, tags=["generation"])
app.include_router(thinking.router, tags=["thinking"])
