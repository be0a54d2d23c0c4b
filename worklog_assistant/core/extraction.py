"""
Extraction client for the Work Log Assistant.

Sends the extraction prompt and the user's text to the chat completion endpoint
and returns the generated JSON text. HTTP error statuses are reported and turned
into an empty JSON object; transport failures are left to the caller.
"""

import logging
from typing import Any, Dict, Optional

import openai

from .config import Config, get_client
from .debug_log import get_debug_logger
from .timing import timer

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "{}"


class ExtractionClient:
    """
    Thin wrapper around the OpenAI chat completions API tuned for JSON extraction.
    """

    def __init__(self, config: Config, client: Optional[openai.OpenAI] = None):
        """
        Initialize the extraction client.

        Args:
            config: Loaded configuration
            client: Preconfigured OpenAI client; built from config when omitted
        """
        self.config = config
        self.client = client if client is not None else get_client(config)
        self.debug_logger = get_debug_logger()

    def _request_params(self, prompt: str, user_text: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": self.config.llm_model,
            "messages": [{"role": "system", "content": prompt}, {"role": "user", "content": user_text}],
            "response_format": {"type": "json_object"},
        }
        # Reasoning models reject a custom temperature
        if not self.config.is_reasoning_model:
            params["temperature"] = self.config.model_temperature
        return params

    @timer
    def extract_raw(self, prompt: str, user_text: str) -> str:
        """
        Ask the model to extract work log entries from the user's text.

        Args:
            prompt: System prompt built for the current date
            user_text: Typed or transcribed user input

        Returns:
            The model's JSON text, or "{}" if the endpoint returned an error status

        Raises:
            openai.APIConnectionError: On network-level failures
        """
        self.debug_logger.log_extraction_request(prompt, user_text, self.config.llm_model)

        try:
            response = self.client.chat.completions.create(**self._request_params(prompt, user_text))
        except openai.APIStatusError as e:
            logger.error(f"Error calling OpenAI API: {e.status_code} - {e.response.text}")
            return EMPTY_RESPONSE

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("Extraction model returned an empty response")
            return EMPTY_RESPONSE

        self.debug_logger.log_extraction_response(content, user_text)
        return content
