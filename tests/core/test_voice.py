"""Tests for optional voice input."""

from unittest.mock import patch

import pytest

from curatai.core import voice as voice_module
from curatai.core.exceptions import CapabilityUnavailableError
from curatai.core.voice import FAILED_MESSAGE, UNSUPPORTED_MESSAGE, VoiceInput


class TestUnsupported:
    """Tests for environments without speech_recognition."""

    @pytest.fixture
    def voice(self, notifier):
        with patch.object(voice_module, "sr", None):
            yield VoiceInput(notifier)

    def test_reported_once(self, voice, notifier):
        assert not voice.is_supported
        assert not voice.check_supported()
        assert not voice.check_supported()
        assert voice.transcribe(b"RIFF") is None

        assert notifier.messages == [UNSUPPORTED_MESSAGE]

    def test_require_raises(self, voice):
        with pytest.raises(CapabilityUnavailableError):
            voice.require()


class TestTranscribe:
    """Tests with an injected transcriber."""

    def test_text_is_trimmed(self, notifier):
        voice = VoiceInput(notifier, transcriber=lambda audio: "  kids at the beach ")

        assert voice.transcribe(b"RIFF....") == "kids at the beach"
        assert notifier.messages == []

    def test_recognizer_error(self, notifier):
        def broken(audio):
            raise RuntimeError("network down")

        voice = VoiceInput(notifier, transcriber=broken)

        assert voice.transcribe(b"RIFF....") is None
        assert notifier.messages == [FAILED_MESSAGE]

    def test_empty_result(self, notifier):
        voice = VoiceInput(notifier, transcriber=lambda audio: "")

        assert voice.transcribe(b"RIFF....") is None
        assert notifier.messages == [FAILED_MESSAGE]

    def test_empty_audio_skipped(self, notifier):
        calls = []
        voice = VoiceInput(notifier, transcriber=calls.append)

        assert voice.transcribe(b"") is None
        assert calls == []
