"""
Audio module - Microphone capture and PCM/WAV utilities.
"""

from .capture import AudioCapture, select_file
from .processor import AudioProcessor

__all__ = ["AudioCapture", "AudioProcessor", "select_file"]
