import argparse
import json
import sys
import os
from typing import Optional
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
import numpy as np
from moodtune.config.settings import ConfigManager, AppConfig, DEFAULT_CONFIG_PATH
from moodtune.utils.logging import StructuredLogger
from moodtune.inference.factory import AdapterSet, build_adapters
from moodtune.mood.labels import MoodLabel
from moodtune.persistence.repository import InMemoryPlaylistRepository
from moodtune.persistence.schemas import SongRecord, ValidationResult
from moodtune.persistence.song_catalog import JsonSongRepository
from moodtune.playlist.selector import PlaylistGenerator
from moodtune.recommendation.engine import RecommendationEngine
from moodtune.recommendation.ranking import build_ranker
from moodtune.voice.parser import VoiceCommandParser, analyze_voice
class MoodTuneApp:
    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_manager = ConfigManager()
        self.config: Optional[AppConfig] = None
        self.logger: Optional[StructuredLogger] = None
        self.config_path = config_path
        self.adapters: Optional[AdapterSet] = None
        self.songs: Optional[JsonSongRepository] = None
    def initialize(self) -> None:
        try:
            self.config = self.config_manager.load(self.config_path)
            self.logger = StructuredLogger(
                "moodtune.main",
                level=self.config.logging.level,
                fmt=self.config.logging.format
            )
            self.logger.log_config(self.config.to_dict())
            self.adapters = build_adapters(self.config.inference)
            self.songs = JsonSongRepository(self.config.storage.catalog_path)
            self.logger.info("MoodTune initialized successfully", adapters=self.adapters.modes())
        except Exception as e:
            print(f"Failed to initialize MoodTune: {e}")
            sys.exit(1)
    def recommend(self, mood: str, limit: Optional[int] = None) -> None:
        with self.logger.operation_context("MoodTuneApp", "recommend", mood=mood) as log:
            ranker = build_ranker(self.config.inference, self.adapters.embedding,
                                  history_window=self.config.recommendation.rank_history_window)
            engine = RecommendationEngine(
                self.songs,
                ranker,
                default_limit=self.config.recommendation.default_limit,
                max_limit=self.config.recommendation.max_limit,
                history_window=self.config.recommendation.history_window,
            )
            response = engine.recommend_songs(MoodLabel.parse(mood), limit=limit)
            log.metric("recommendations_returned", len(response.songs))
            self._display_recommendations(response)
    def generate_playlist(self, mood: str, name: Optional[str] = None, limit: Optional[int] = None,
                          prefer_local: Optional[bool] = None, seed: Optional[int] = None) -> None:
        with self.logger.operation_context("MoodTuneApp", "generate_playlist", mood=mood) as log:
            generator = PlaylistGenerator(
                self.songs,
                InMemoryPlaylistRepository(self.songs),
                rng=np.random.default_rng(seed),
                stream_url_template=self.config.playlist.stream_url_template,
                default_name=self.config.playlist.default_name,
                default_limit=self.config.playlist.default_limit,
                max_items=self.config.playlist.max_items,
                prefer_local=self.config.playlist.prefer_local,
            )
            playlist = generator.generate(
                MoodLabel.parse(mood),
                name=name,
                limit=limit,
                prefer_local=prefer_local,
            )
            log.metric("playlist_items", len(playlist.items))
            self._display_playlist(playlist)
    def detect_text(self, text: str, intensity: Optional[float] = None) -> None:
        with self.logger.operation_context("MoodTuneApp", "detect_text", text_length=len(text)):
            result = self.adapters.text.analyze_text(text, intensity)
            print(f"\nMood: {result.mood_label}")
            print(f"Intensity: {result.intensity:.1f}")
            if result.confidence is not None:
                print(f"Confidence: {result.confidence:.3f}")
    def voice(self, text: str) -> None:
        with self.logger.operation_context("MoodTuneApp", "voice"):
            analysis = analyze_voice(text, self.adapters.text, VoiceCommandParser())
            command = analysis.command
            print(f"\nAction: {command.action.value if command.action else 'none'}")
            if command.parameters:
                for key, value in command.parameters.items():
                    print(f"  {key}: {value}")
            print(f"Mood: {analysis.mood.mood_label} (intensity {analysis.mood.intensity:.1f})")
    def validate_catalog(self) -> ValidationResult:
        with self.logger.operation_context("MoodTuneApp", "validate_catalog", path=self.songs.storage_path) as log:
            result = self.songs.validate_catalog()
            log.info("Catalog validated", is_valid=result.is_valid,
                     errors=len(result.errors), warnings=len(result.warnings))
            print(f"\nCatalog: {self.songs.storage_path}")
            for key, value in (result.metadata or {}).items():
                print(f"  {key}: {value}")
            for error in result.errors:
                print(f"ERROR: {error}")
            for warning in result.warnings:
                print(f"WARNING: {warning}")
            print("Catalog is valid" if result.is_valid else "Catalog has errors")
            return result
    def import_catalog(self, source_path: str) -> None:
        with self.logger.operation_context("MoodTuneApp", "import_catalog", source=source_path) as log:
            with open(source_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("Import file must contain a JSON list of songs")
            songs = [SongRecord.from_dict(entry) for entry in data]
            self.songs.create_catalog(songs)
            log.metric("songs_imported", len(songs))
            print(f"Imported {len(songs)} songs into {self.songs.storage_path}")
    def _display_recommendations(self, response) -> None:
        print("\n" + "="*60)
        print(f"MOODTUNE RECOMMENDATIONS: {response.mood_label.display_name}")
        print("="*60)
        if not response.songs:
            print("No songs in the catalog match this mood.")
            return
        print(f"\nGenres: {', '.join(sorted(response.genres))}")
        print(f"Ranked by similarity: {'yes' if response.ranked else 'no'}")
        print(f"Processing time: {response.processing_time_ms:.1f}ms\n")
        for i, song in enumerate(response.songs, 1):
            print(f"{i:2d}. {song.title}")
            print(f"     Artist: {song.artist or 'Unknown'} | Album: {song.album or 'Unknown'}")
            if response.scores is not None:
                print(f"     Similarity: {response.scores[i - 1]:.3f}")
            print()
    def _display_playlist(self, playlist) -> None:
        print("\n" + "="*60)
        print(playlist.name)
        print(playlist.description)
        print("="*60)
        if not playlist.items:
            print("The catalog is empty; no songs were added.")
            return
        if not playlist.is_complete:
            print(f"Only {len(playlist.items)} of {playlist.requested_limit} songs were available.")
        for i, item in enumerate(playlist.items, 1):
            source = "local" if item.is_local else "remote"
            print(f"{i:2d}. {item.title} - {item.artist or 'Unknown'} [{source}]")
            print(f"     {item.audio_url}")
def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MoodTune - mood-based playlist generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    recommend_parser = subparsers.add_parser("recommend", help="Recommend songs for a mood")
    recommend_parser.add_argument(
        "--mood",
        required=True,
        help="Canonical mood label (e.g. happy, sad, calm)"
    )
    recommend_parser.add_argument(
        "--limit",
        type=int,
        help="Number of songs to return"
    )
    generate_parser = subparsers.add_parser("generate", help="Generate a playlist for a mood")
    generate_parser.add_argument(
        "--mood",
        required=True,
        help="Canonical mood label"
    )
    generate_parser.add_argument(
        "--name",
        help="Base playlist name"
    )
    generate_parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of songs"
    )
    generate_parser.add_argument(
        "--no-prefer-local",
        action="store_true",
        help="Do not favour songs from the local library"
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the shuffle"
    )
    detect_parser = subparsers.add_parser("detect-text", help="Detect the mood of a piece of text")
    detect_parser.add_argument("text", help="Text to analyze")
    detect_parser.add_argument(
        "--intensity",
        type=float,
        help="Intensity to report instead of the derived one (0-10)"
    )
    subparsers.add_parser("validate-catalog", help="Check the song catalog for errors and likely duplicates")
    import_parser = subparsers.add_parser("import-catalog", help="Replace the song catalog with songs from a JSON list")
    import_parser.add_argument("source", help="JSON file holding a list of songs")
    voice_parser = subparsers.add_parser("voice", help="Parse a voice command transcript")
    voice_parser.add_argument("text", help="Transcript to parse")
    return parser
def main():
    parser = create_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)
    app = MoodTuneApp(args.config)
    app.initialize()
    try:
        if args.command == "recommend":
            app.recommend(args.mood, limit=args.limit)
        elif args.command == "generate":
            app.generate_playlist(
                args.mood,
                name=args.name,
                limit=args.limit,
                prefer_local=False if args.no_prefer_local else None,
                seed=args.seed
            )
        elif args.command == "detect-text":
            app.detect_text(args.text, args.intensity)
        elif args.command == "voice":
            app.voice(args.text)
        elif args.command == "validate-catalog":
            if not app.validate_catalog().is_valid:
                sys.exit(1)
        elif args.command == "import-catalog":
            app.import_catalog(args.source)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
if __name__ == "__main__":
    main()
