"""
Configuration management for the Work Log Assistant.

This module handles environment variables, API credentials, and model settings
using python-dotenv for explicit .env loading. No implicit loading occurs at import time;
the CLI loads the environment once and builds a single Config that is passed to components.
"""

import logging
import os
from typing import Any, Callable, List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from openai import OpenAI

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = ("OPENAI_API_KEY", "JIRA_API_TOKEN", "JIRA_USERNAME", "JIRA_BASE_URL")

DEFAULT_TEMPERATURE = 0.1


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


def load_env(env_path: Optional[str] = None, override: bool = False) -> Optional[str]:
    """
    Load environment variables from a .env file.

    Args:
        env_path: Explicit path to an env file. When omitted, the nearest .env
            found upwards from the current working directory is used.
        override: Whether values from the file replace existing variables

    Returns:
        The path that was loaded, or None if no file was found
    """
    path = env_path or find_dotenv(usecwd=True)
    if not path or not os.path.isfile(path):
        return None
    load_dotenv(dotenv_path=path, override=override)
    return path


class Config:
    """
    Configuration settings for the Work Log Assistant.

    Takes a snapshot of the environment at construction time so that a single
    instance can be handed to every component that needs credentials.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._env = dict(os.environ if environ is None else environ)

    def _get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._env.get(name)
        if value is None or not value.strip():
            return default
        return value.strip()

    def _require(self, name: str) -> str:
        value = self._get(name)
        if value is None:
            raise ConfigError(f"{name} not found in environment. Please set it in your environment or .env file.")
        return value

    def _number(self, name: str, default: str, cast: Callable[[str], Any]) -> Any:
        raw = self._get(name, default)
        try:
            return cast(raw)
        except ValueError:
            raise ConfigError(f"Invalid {name} value: {raw!r}. Expected a number.")

    def missing_vars(self) -> List[str]:
        """Return the names of required variables that are not set."""
        return [name for name in REQUIRED_ENV_VARS if self._get(name) is None]

    def validate(self) -> None:
        """
        Validate that all required configuration is present.

        Raises:
            ConfigError: Listing every missing variable, or naming a malformed numeric setting
        """
        missing = self.missing_vars()
        if missing:
            raise ConfigError(f"Missing environment variables: {', '.join(missing)}. Please create a .env file with these variables.")

        for name in ("openai_timeout", "max_retries", "jira_timeout", "max_recording_seconds"):
            getattr(self, name)

    @property
    def openai_api_key(self) -> str:
        """Get OpenAI API key from environment."""
        return self._require("OPENAI_API_KEY")

    @property
    def jira_base_url(self) -> str:
        """Get the tracker base URL without a trailing slash."""
        return self._require("JIRA_BASE_URL").rstrip("/")

    @property
    def jira_username(self) -> str:
        return self._require("JIRA_USERNAME")

    @property
    def jira_api_token(self) -> str:
        return self._require("JIRA_API_TOKEN")

    @property
    def llm_model(self) -> str:
        """Get the extraction model name (default: gpt-4-turbo)."""
        return self._get("LLM_MODEL", "gpt-4-turbo")

    @property
    def model_temperature(self) -> float:
        """Get extraction temperature (default: 0.1, kept low for consistent JSON)."""
        raw = self._get("MODEL_TEMPERATURE")
        if raw is None:
            return DEFAULT_TEMPERATURE
        try:
            temp = float(raw)
        except ValueError:
            logger.warning(f"Invalid MODEL_TEMPERATURE format: {raw!r}. Using {DEFAULT_TEMPERATURE} as default.")
            return DEFAULT_TEMPERATURE
        if not (0.0 <= temp <= 2.0):
            logger.warning(f"Invalid MODEL_TEMPERATURE value: {temp}. Using {DEFAULT_TEMPERATURE} as default.")
            return DEFAULT_TEMPERATURE
        return temp

    @property
    def is_reasoning_model(self) -> bool:
        """Check if the configured model is a reasoning model (default: False)."""
        return self._get("IS_REASONING_MODEL", "false").lower() in ("true", "1", "yes", "on")

    @property
    def asr_model(self) -> str:
        """Get the model name for ASR (default: whisper-1)."""
        return self._get("ASR_MODEL", "whisper-1")

    @property
    def asr_language(self) -> str:
        return self._get("ASR_LANGUAGE", "en")

    @property
    def openai_timeout(self) -> int:
        """Get OpenAI API timeout in seconds (default: 60)."""
        return self._number("OPENAI_TIMEOUT", "60", int)

    @property
    def max_retries(self) -> int:
        """Get maximum number of retries for OpenAI calls (default: 3)."""
        return self._number("MAX_RETRIES", "3", int)

    @property
    def jira_timeout(self) -> float:
        """Get tracker request timeout in seconds (default: 30)."""
        return self._number("JIRA_TIMEOUT", "30", float)

    @property
    def max_recording_seconds(self) -> int:
        return self._number("MAX_RECORDING_SECONDS", "20", int)

    @property
    def recordings_dir(self) -> str:
        return self._get("RECORDINGS_DIR", "audio_recordings")


def get_client(config: Config) -> OpenAI:
    """
    Get configured OpenAI client with timeout and retry settings.

    Args:
        config: Loaded configuration

    Returns:
        OpenAI client instance

    Raises:
        ConfigError: If the API key is missing or the client cannot be created
    """
    api_key = config.openai_api_key
    try:
        return OpenAI(
            api_key=api_key,
            timeout=config.openai_timeout,
            max_retries=config.max_retries,
        )
    except Exception as e:
        raise ConfigError(f"Failed to create OpenAI client: {e}")
