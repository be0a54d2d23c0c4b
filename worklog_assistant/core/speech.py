"""
Speech-to-text functionality using OpenAI Whisper.

This module wraps the Whisper transcription API and the external `arecord`
tool used to capture a short voice clip from the default microphone.
"""

import logging
import re
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

import openai

from .config import Config, get_client
from .types import Transcript

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".wav", ".webm"}

# Whisper rejects uploads above 25MB
MAX_AUDIO_BYTES = 25 * 1024 * 1024

# Recordings at or below this size contain no usable speech
MIN_RECORDING_BYTES = 1000

MIN_MEANINGFUL_CHARS = 5


class SpeechError(Exception):
    """Raised when speech recording or transcription fails."""

    pass


def has_meaningful_content(text: str) -> bool:
    """
    Check whether a transcript contains enough words to act on.

    Whisper returns stray punctuation ("...", ".") for silent or very quiet clips.

    Args:
        text: Transcribed text

    Returns:
        True if at least a few word characters remain after removing punctuation
    """
    cleaned = re.sub(r"[^\w\s]", "", text or "").strip()
    return len(cleaned) >= MIN_MEANINGFUL_CHARS


def record_audio(output_dir: str, max_seconds: int = 20) -> Path:
    """
    Record a mono 16kHz WAV clip with arecord.

    Recording stops after max_seconds or when the user presses Ctrl+C; a clip
    interrupted early is still returned if it holds enough audio.

    Args:
        output_dir: Directory for the recording (created if missing)
        max_seconds: Maximum clip length

    Returns:
        Path to the recorded WAV file

    Raises:
        SpeechError: If arecord is unavailable or nothing was captured
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    audio_path = directory / f"worklog_voice_input_{datetime.now():%Y%m%d_%H%M%S}.wav"

    command = ["arecord", "-d", str(max_seconds), "-f", "cd", "-r", "16000", "-c", "1", str(audio_path)]
    try:
        subprocess.run(command, stderr=subprocess.DEVNULL, check=False)
    except FileNotFoundError:
        raise SpeechError("arecord not found. Install alsa-utils to record voice input.")
    except KeyboardInterrupt:
        logger.info("Recording stopped by user")

    if not audio_path.exists() or audio_path.stat().st_size <= MIN_RECORDING_BYTES:
        raise SpeechError(
            "No audio detected or recording too short. "
            "If you're using headphones with microphone, try switching to your device's built-in microphone instead."
        )
    return audio_path


class SpeechProcessor:
    """
    Handles speech-to-text conversion using OpenAI Whisper.
    """

    def __init__(self, config: Config, client: Optional[openai.OpenAI] = None):
        self.client = client if client is not None else get_client(config)
        self.model = config.asr_model
        self.language = config.asr_language

    def transcribe_audio(self, path: str) -> Transcript:
        """
        Transcribe an audio file to text using Whisper.

        Args:
            path: Path to the audio file

        Returns:
            Transcript object with text and language hint

        Raises:
            SpeechError: If the file is unusable or transcription fails
            FileNotFoundError: If audio file doesn't exist
        """
        audio_path = Path(path)

        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if not audio_path.is_file():
            raise SpeechError(f"Path is not a file: {path}")

        if not self.validate_audio_format(path):
            raise SpeechError(f"Unsupported audio format: {audio_path.suffix}. Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}")

        file_size = audio_path.stat().st_size
        if file_size > MAX_AUDIO_BYTES:
            raise SpeechError(f"Audio file too large: {file_size / 1024 / 1024:.1f}MB (max: 25MB)")

        try:
            with open(audio_path, "rb") as audio_file:
                response = self.client.audio.transcriptions.create(model=self.model, file=audio_file, language=self.language)
        except openai.OpenAIError as e:
            raise SpeechError(f"Failed to transcribe audio: {e}")

        return Transcript(text=response.text.strip(), lang_hint=self.language)

    def validate_audio_format(self, path: str) -> bool:
        """
        Validate if the audio file format is supported.

        Args:
            path: Path to the audio file

        Returns:
            True if format is supported, False otherwise
        """
        return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS
