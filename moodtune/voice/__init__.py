"""
Voice module for MoodTune.
"""

from .parser import VoiceAction, VoiceCommand, VoiceCommandParser, VoiceAnalysis, analyze_voice

__all__ = ['VoiceAction', 'VoiceCommand', 'VoiceCommandParser', 'VoiceAnalysis', 'analyze_voice']
