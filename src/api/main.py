"""
FastAPI application entry point.

Backend for the storybook creation wizard: the acting user's drafts and
characters, plus the built-in story templates.

Optional API key authentication via API_AUTH_ENABLED / API_KEY.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI

from src import __version__
from src.infra.logging_config import setup_logging
from src.infra.settings import WizardSettings
from .routers import drafts, characters, templates
from ._storage_state import init_persistence, shutdown_persistence
from .dependencies.auth import verify_api_key, API_AUTH_ENABLED

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown of resources:
    - Logging (console + daily rotating file)
    - SQLite persistence for characters and drafts
    """
    settings = WizardSettings.from_env()
    logger = setup_logging(settings.log_level, settings.log_dir)
    init_persistence(settings.db_path)
    logger.info(f"[API] Storybook Wizard API {__version__} started")

    yield

    shutdown_persistence()
    logger.info("[API] Storybook Wizard API stopped")

# Tag metadata for Swagger UI
tags_metadata = [
    {
        "name": "drafts",
        "description": "Resumable wizard drafts - scoped to the acting user (X-User-Id)",
    },
    {
        "name": "characters",
        "description": "Character directory - characters available to the wizard",
    },
    {
        "name": "templates",
        "description": "Built-in story templates for the story customisation step",
    },
]

app = FastAPI(
    title="Storybook Wizard API",
    lifespan=lifespan,
    description="""
## Storybook Wizard API

Persistence backend for the three-step storybook creation wizard.

### Authentication
When `API_AUTH_ENABLED=true`, all endpoints except `/health` require an
`X-API-Key` header matching the `API_KEY` environment variable.
Draft and character endpoints act on behalf of the user in the `X-User-Id` header.

### Features
- **Drafts**: Save, list, resume and delete wizard drafts
- **Characters**: List, create and update the user's characters
- **Templates**: Browse story presets

### Usage
```bash
# Start server
uvicorn src.api.main:app --host 127.0.0.1 --port 8000

# List drafts
curl http://localhost:8000/drafts -H "X-User-Id: 42"
```
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

# Health check - NO authentication (operational endpoint)
@app.get("/health")
async def health_check():
    """Health check endpoint. Not authenticated."""
    return {"status": "ok", "version": __version__}


# Include routers WITH authentication dependency (when enabled)
auth_dependency = [Depends(verify_api_key)] if API_AUTH_ENABLED else []

app.include_router(
    drafts.router, prefix="/drafts", tags=["drafts"], dependencies=auth_dependency
)
app.include_router(
    characters.router, prefix="/characters", tags=["characters"], dependencies=auth_dependency
)
app.include_router(
    templates.router, prefix="/templates", tags=["templates"], dependencies=auth_dependency
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
