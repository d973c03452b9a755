"""
MoodShift REST API Server

Run the server with:
    python api.py

Or with uvicorn directly:
    uvicorn api:app --reload --host 0.0.0.0 --port 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodshift import __version__
from moodshift.api.routes import router
from moodshift.api.dependencies import get_app_state


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build services on startup and stop the recompute pool on shutdown."""
    state = get_app_state()
    state.logger.info("MoodShift API is ready", docs="http://localhost:8000/docs")
    yield
    state.shutdown()


# Create FastAPI app
app = FastAPI(
    title="MoodShift",
    description="""
**Mood-vector movie and TV recommendations**

MoodShift keeps a ten-dimension mood profile per user, computed from their
rated watch history, and ranks titles against it.

## Features

- **Match mode**: titles that fit the current mood
- **Shift mode**: titles chosen by shift rules to move the mood somewhere better
- **Vibes**: temporary mood templates blended over the historical mood
- **Compatibility**: compare two users' moods

## Quick Start

1. Check API health: `GET /health`
2. Log a rating: `POST /interactions` with header `X-User-Id`
3. Get recommendations: `GET /recommendations?mode=match`
4. Try a vibe: `POST /vibe` with `{"template": "cozy"}`

## Mood Dimensions

adrenaline, melancholy, joy, tension, intellect, romance, wonder,
nostalgia, darkness, inspiration; each an integer from 0 to 100.
    """,
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api/v1")

# Also mount at root for convenience
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
