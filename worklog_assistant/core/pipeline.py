"""
End-to-end processing of one user turn.

This module sequences the extraction pipeline: anchor dates and prompt,
model extraction, normalization, then one submission per entry. Every cycle
ends in a ProcessingReport that is either empty (no tickets identified) or
carries one outcome per entry, in input order.
"""

import logging
from datetime import date
from typing import Callable, Optional

import openai

from .config import Config
from .dates import resolve_anchors
from .extraction import ExtractionClient
from .normalize import normalize
from .progress import reporter
from .prompt import build_system_prompt
from .submit import WorkLogSubmitter
from .types import ProcessingReport

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Raised when the extraction endpoint cannot be reached at all."""

    pass


class WorkLogPipeline:
    """
    Orchestrates text -> extraction -> normalization -> submission -> report.

    Submissions run strictly one at a time so that the report order matches the
    order the model listed the entries in.
    """

    def __init__(self, extractor: ExtractionClient, submitter: WorkLogSubmitter, clock: Optional[Callable[[], date]] = None):
        """
        Initialize the pipeline.

        Args:
            extractor: Client for the extraction model
            submitter: Client for the tracker's worklog endpoint
            clock: Returns the current date; date.today when omitted
        """
        self.extractor = extractor
        self.submitter = submitter
        self.clock = clock or date.today

    @classmethod
    def from_config(cls, config: Config) -> "WorkLogPipeline":
        return cls(ExtractionClient(config), WorkLogSubmitter(config))

    def process(self, user_text: str) -> ProcessingReport:
        """
        Extract work log entries from text and submit each one.

        Args:
            user_text: Typed or transcribed description of the work

        Returns:
            ProcessingReport with the normalized entries and their outcomes

        Raises:
            ExtractionError: If the extraction endpoint is unreachable
        """
        today = self.clock()

        reporter.step("Extracting work log entries…")
        prompt = build_system_prompt(resolve_anchors(today))
        try:
            raw_text = self.extractor.extract_raw(prompt, user_text)
        except openai.APIError as e:
            raise ExtractionError(f"Failed to reach the extraction model: {e}") from e

        reporter.step("Normalizing extracted entries…")
        entries = normalize(raw_text, today=today)
        if not entries:
            reporter.complete_step()
            logger.info("No tickets identified in input")
            return ProcessingReport()

        reporter.step(f"Logging work for {len(entries)} ticket(s)…")
        outcomes = self.submitter.submit_all(entries)
        reporter.complete_step()

        return ProcessingReport(entries=entries, outcomes=outcomes)

    def close(self) -> None:
        self.submitter.close()

    def __enter__(self) -> "WorkLogPipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
