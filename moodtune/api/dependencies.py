"""
FastAPI dependency injection for MoodTune.
"""
import os
from functools import lru_cache
from typing import Optional

from fastapi import Header

from ..config.settings import ConfigManager, AppConfig, DEFAULT_CONFIG_PATH
from ..utils.logging import StructuredLogger, get_logger
from ..inference.factory import AdapterSet, build_adapters
from ..persistence.repository import (
    SongRepository,
    PlaylistRepository,
    MoodDetectionRepository,
    JournalRepository,
    InMemoryPlaylistRepository,
    InMemoryMoodDetectionRepository,
    InMemoryJournalRepository,
)
from ..persistence.song_catalog import JsonSongRepository
from ..playlist.selector import PlaylistGenerator
from ..recommendation.engine import RecommendationEngine
from ..recommendation.ranking import build_ranker
from ..voice.parser import VoiceCommandParser

ANONYMOUS_USER = "anonymous"


class AppState:
    """Everything a request needs, built once per process and passed explicitly."""

    def __init__(self, config: AppConfig, logger: StructuredLogger, adapters: AdapterSet,
                 songs: SongRepository, playlists: PlaylistRepository,
                 detections: MoodDetectionRepository, journal: JournalRepository,
                 engine: RecommendationEngine, generator: PlaylistGenerator,
                 voice_parser: Optional[VoiceCommandParser] = None):
        self.config = config
        self.logger = logger
        self.adapters = adapters
        self.songs = songs
        self.playlists = playlists
        self.detections = detections
        self.journal = journal
        self.engine = engine
        self.generator = generator
        self.voice_parser = voice_parser or VoiceCommandParser()

    @classmethod
    def from_config(cls, config: AppConfig, songs: Optional[SongRepository] = None,
                    adapters: Optional[AdapterSet] = None) -> "AppState":
        """Wire repositories, adapters, ranker, engine and generator from `config`."""
        logger = get_logger("moodtune.api", level=config.logging.level, fmt=config.logging.format)
        songs = songs if songs is not None else JsonSongRepository(config.storage.catalog_path)
        adapters = adapters or build_adapters(config.inference)
        ranker = build_ranker(config.inference, adapters.embedding,
                              history_window=config.recommendation.rank_history_window)
        playlists = InMemoryPlaylistRepository(songs)
        engine = RecommendationEngine(
            songs,
            ranker,
            default_limit=config.recommendation.default_limit,
            max_limit=config.recommendation.max_limit,
            history_window=config.recommendation.history_window,
        )
        generator = PlaylistGenerator(
            songs,
            playlists,
            stream_url_template=config.playlist.stream_url_template,
            default_name=config.playlist.default_name,
            default_limit=config.playlist.default_limit,
            max_items=config.playlist.max_items,
            prefer_local=config.playlist.prefer_local,
        )
        state = cls(
            config=config,
            logger=logger,
            adapters=adapters,
            songs=songs,
            playlists=playlists,
            detections=InMemoryMoodDetectionRepository(),
            journal=InMemoryJournalRepository(),
            engine=engine,
            generator=generator,
        )
        logger.log_config(config.to_dict())
        logger.info("MoodTune API initialized", adapters=adapters.modes(),
                    ranker=type(ranker).__name__)
        return state


@lru_cache()
def get_app_state() -> AppState:
    """Get or create the process-wide application state."""
    config_path = os.getenv("MOODTUNE_CONFIG", DEFAULT_CONFIG_PATH)
    config = ConfigManager().load(config_path)
    return AppState.from_config(config)


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity; token verification happens upstream of this service."""
    return (x_user_id or "").strip() or ANONYMOUS_USER
