"""
MoodTune REST API Server

Run the server with:
    python api.py

Or with uvicorn directly:
    uvicorn api:app --reload --host 0.0.0.0 --port 8000
"""
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodtune.api.routes import router
from moodtune.api.handlers import register_exception_handlers
from moodtune.api.dependencies import get_app_state

logger = logging.getLogger("moodtune.api")


app = FastAPI(
    title="MoodTune",
    description="""
**Mood-based playlist generation API**

MoodTune detects a listener's mood from a webcam snapshot, free text or a
voice clip and turns it into song recommendations and ready-to-play playlists.

## Features

- **Mood detection**: image, text and audio detectors normalized onto one mood vocabulary
- **Recommendations**: songs tagged with the mood or its genres, optionally re-ranked by embedding similarity to the mood journal
- **Playlists**: local songs first, then the wider catalog, shuffled
- **Voice commands**: keyword parsing of playback commands

## Quick Start

1. Check API health: `GET /health`
2. Detect a mood: `POST /mood/text` with `{"text": "..."}`
3. Get recommendations: `GET /recommendations?mood=happy`
4. Generate a playlist: `POST /playlists/generate` with `{"mood_label": "happy"}`

## Moods

happy, sad, energetic, calm, anxious, excited, melancholic, focused,
neutral, angry, disgust, fear, surprise, relaxed
    """,
    version="1.0.0",
    license_info={
        "name": "MIT",
    }
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# versioned routes, plus the same routes at root
app.include_router(router, prefix="/api/v1")
app.include_router(router)


@app.on_event("startup")
async def startup_event():
    """Initialize the application on startup."""
    logger.info("Starting MoodTune API")
    state = get_app_state()
    if not state.config.inference.is_configured:
        logger.warning("No inference token configured; detectors run in mock mode")
    logger.info(f"MoodTune API ready with {state.songs.count()} songs in the catalog")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
