"""
Debug logging module for extraction request/response analysis.

This module writes JSON traces of extraction requests, raw model responses and
normalization failures. Logs are stored in a dedicated subfolder of the working
directory and are only written when WA_DEBUG=1.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


class DebugLogger:
    """
    Handles detailed debug logging for the extraction pipeline.

    Logs are stored in {base_dir}/.worklog_assistant/debug/session_<ts>/ with
    one JSON file per event.
    """

    def __init__(self, base_dir: str = ".", enabled: Optional[bool] = None):
        """
        Initialize debug logger.

        Args:
            base_dir: Directory under which the debug folder is created
            enabled: Override debug enable flag, uses WA_DEBUG env var if None
        """
        self.base_dir = base_dir
        self.enabled = enabled if enabled is not None else is_debug_enabled()
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

        if self.enabled:
            self._setup_log_directory()

    def _setup_log_directory(self) -> None:
        """Create debug log directory structure."""
        self.log_dir = Path(self.base_dir) / ".worklog_assistant" / "debug"
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.session_dir = self.log_dir / f"session_{self.session_id}"
        self.session_dir.mkdir(exist_ok=True)

    def _write(self, step: str, payload: Dict[str, Any]) -> None:
        timestamp = datetime.now().isoformat()
        log_data = {"timestamp": timestamp, "session_id": self.session_id, "step": step, **payload}

        filename = f"{step}_{timestamp.replace(':', '-').replace('.', '_')}.json"
        with open(self.session_dir / filename, "w", encoding="utf-8") as f:
            json.dump(log_data, f, indent=2, ensure_ascii=False, default=str)

    def log_extraction_request(self, system_prompt: str, user_text: str, model: str) -> None:
        """
        Log the prompt and user text sent to the extraction model.

        Args:
            system_prompt: Full system prompt
            user_text: Raw user input
            model: Model identifier used for the request
        """
        if not self.enabled:
            return
        self._write("extraction_request", {"type": "request", "model": model, "system_prompt": system_prompt, "user_text": user_text})

    def log_extraction_response(self, response_content: str, user_text: str) -> None:
        """
        Log the raw text returned by the extraction model.

        Args:
            response_content: Raw response content
            user_text: Original user input for comparison
        """
        if not self.enabled:
            return
        self._write(
            "extraction_response",
            {
                "type": "response",
                "response_content": response_content,
                "user_text": user_text,
                "response_length": len(response_content),
            },
        )

    def log_parse_error(self, error: Exception, raw_text: str) -> None:
        """Log a response that could not be parsed as the extraction payload."""
        if not self.enabled:
            return
        self._write(
            "parse_error",
            {"type": "parse_error", "error": str(error), "error_type": type(error).__name__, "raw_text": raw_text},
        )

    def log_validation_error(self, error: Exception, raw_data: Any, context: str = "entry") -> None:
        """
        Log detailed information about a rejected entry.

        Args:
            error: The exception that occurred
            raw_data: The raw item that failed validation
            context: Context description for the error
        """
        if not self.enabled:
            return
        self._write(
            f"{context}_validation_error",
            {
                "type": "validation_error",
                "error": str(error),
                "error_type": type(error).__name__,
                "raw_data": raw_data,
                "validation_errors": error.errors() if hasattr(error, "errors") else [],
            },
        )


# Global debug logger instance
_debug_logger: Optional[DebugLogger] = None


def get_debug_logger(base_dir: str = ".") -> DebugLogger:
    """
    Get or create global debug logger instance.

    Args:
        base_dir: Directory under which debug traces are written

    Returns:
        DebugLogger instance
    """
    global _debug_logger
    if _debug_logger is None or _debug_logger.base_dir != base_dir or _debug_logger.enabled != is_debug_enabled():
        _debug_logger = DebugLogger(base_dir)
    return _debug_logger


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled via the WA_DEBUG environment variable."""
    return os.getenv("WA_DEBUG", "0") == "1"
