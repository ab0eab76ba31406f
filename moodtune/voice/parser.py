"""
Voice command parsing.

Plain keyword matching, not language understanding: the lower-cased text
is tested against an ordered list of patterns and the first match wins.
Order matters ("stop playing" must hit pause before the bare "stop" rule).
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Pattern, Tuple

from ..inference.adapters import TextMoodAdapter
from ..mood.schemas import MoodDetectionResult
from ..utils.errors import InvalidInputError


class VoiceAction(str, Enum):
    PAUSE = "pause"
    RESUME = "resume"
    NEXT = "next"
    PREVIOUS = "previous"
    STOP = "stop"
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    PLAY = "play"


@dataclass(frozen=True)
class VoiceCommand:
    action: Optional[VoiceAction] = None
    parameters: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'action': self.action.value if self.action else None}
        if self.parameters is not None:
            result['parameters'] = dict(self.parameters)
        return result


def _words(*synonyms: str) -> Pattern:
    return re.compile(r"(^|\s)(" + "|".join(re.escape(s) for s in synonyms) + r")(\s|$)")


COMMAND_RULES: List[Tuple[Pattern, VoiceAction]] = [
    (_words("pause", "hold", "wait", "stop playing"), VoiceAction.PAUSE),
    (_words("resume", "continue"), VoiceAction.RESUME),
    # bare "play"; "play <something>" is a search
    (re.compile(r"(^|\s)play$"), VoiceAction.RESUME),
    (_words("next", "skip"), VoiceAction.NEXT),
    (_words("previous", "back", "prev"), VoiceAction.PREVIOUS),
    (_words("stop"), VoiceAction.STOP),
    (re.compile(r"volume up|turn it up|louder"), VoiceAction.VOLUME_UP),
    (re.compile(r"volume down|turn it down|softer|quieter"), VoiceAction.VOLUME_DOWN),
]

PLAY_QUERY = re.compile(r"(^|\s)play\s+(.+)$")


class VoiceCommandParser:
    """Turns a transcript into a playback action."""

    def __init__(self, rules: Optional[List[Tuple[Pattern, VoiceAction]]] = None):
        self.rules = list(COMMAND_RULES if rules is None else rules)

    @staticmethod
    def clean(text: Optional[str]) -> str:
        return str(text or '').strip().lower().rstrip('.!?').strip()

    def parse(self, text: Optional[str]) -> VoiceCommand:
        t = self.clean(text)
        if not t:
            return VoiceCommand()

        for pattern, action in self.rules:
            if pattern.search(t):
                return VoiceCommand(action=action)

        match = PLAY_QUERY.search(t)
        if match:
            return VoiceCommand(action=VoiceAction.PLAY, parameters={'query': match.group(2).strip()})

        return VoiceCommand()


@dataclass(frozen=True)
class VoiceAnalysis:
    command: VoiceCommand
    mood: MoodDetectionResult


def analyze_voice(text: str, text_adapter: TextMoodAdapter,
                  parser: Optional[VoiceCommandParser] = None) -> VoiceAnalysis:
    """Parse the command in `text` and detect the speaker's mood from the same text."""
    if not text or not text.strip():
        raise InvalidInputError("text required")
    parser = parser or VoiceCommandParser()
    return VoiceAnalysis(command=parser.parse(text), mood=text_adapter.analyze_text(text))
