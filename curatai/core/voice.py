"""Optional voice input for the search bar.

Speech recognition is feature-detected: without the ``speech_recognition``
package the capability reports itself unsupported once and stays disabled.
"""

import io
import logging
from typing import Callable, Optional

from .exceptions import CapabilityUnavailableError
from .notifications import Notifier

try:
    import speech_recognition as sr
except ImportError:
    sr = None  # Voice input not available

logger = logging.getLogger(__name__)

Transcriber = Callable[[bytes], str]

UNSUPPORTED_MESSAGE = "Voice recognition is not supported in this environment"
FAILED_MESSAGE = "Voice recognition failed. Please try again."


def _google_transcriber(audio_bytes: bytes) -> str:
    """Transcribe one WAV utterance with the speech_recognition package."""
    recognizer = sr.Recognizer()
    with sr.AudioFile(io.BytesIO(audio_bytes)) as source:
        audio = recognizer.record(source)
    return recognizer.recognize_google(audio)


class VoiceInput:
    """Turns one recorded utterance into search-bar text."""

    def __init__(self, notifier: Notifier, transcriber: Optional[Transcriber] = None, auto_submit: bool = True):
        self.notifier = notifier
        self.auto_submit = auto_submit
        if transcriber is None and sr is not None:
            transcriber = _google_transcriber
        self._transcriber = transcriber
        self._reported_unsupported = False

    @property
    def is_supported(self) -> bool:
        return self._transcriber is not None

    def check_supported(self) -> bool:
        """Report the missing capability once; later calls stay silent."""
        if self.is_supported:
            return True
        if not self._reported_unsupported:
            self.notifier.error(UNSUPPORTED_MESSAGE)
            self._reported_unsupported = True
            logger.info("Voice input disabled: speech_recognition not installed")
        return False

    def require(self) -> None:
        """Raise instead of notifying; for callers without a notification surface."""
        if not self.is_supported:
            raise CapabilityUnavailableError(UNSUPPORTED_MESSAGE)

    def transcribe(self, audio_bytes: bytes) -> Optional[str]:
        """Text of the utterance, or None when unsupported or unrecognized."""
        if not self.check_supported():
            return None
        if not audio_bytes:
            return None
        try:
            text = self._transcriber(audio_bytes)
        except Exception as e:
            # Recognizers raise their own error types (network, unknown value, bad audio)
            logger.error(f"Speech recognition error: {e}")
            self.notifier.error(FAILED_MESSAGE)
            return None
        text = (text or "").strip()
        if not text:
            self.notifier.error(FAILED_MESSAGE)
            return None
        return text
