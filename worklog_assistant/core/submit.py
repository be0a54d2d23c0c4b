"""
Work log submission to the issue tracker.

Each entry is posted to the tracker's worklog endpoint with HTTP Basic
authentication. Every failure, whether an error status or a transport problem,
is returned as a SubmissionOutcome so one bad entry never stops the rest of the batch.
"""

import logging
import re
from datetime import date, datetime, time, tzinfo
from typing import Iterable, List, Optional

import httpx

from .config import Config
from .progress import reporter
from .timing import timer
from .types import SubmissionOutcome, WorkLogEntry

logger = logging.getLogger(__name__)

# Jira issue key (PROJ-123, MY_PROJ2-7) or numeric issue id
TICKET_KEY_PATTERN = re.compile(r"^(?:[A-Za-z][A-Za-z0-9_]*-\d+|\d+)$")


def is_recognized_ticket_id(ticket_id: str) -> bool:
    """Check whether a ticket id has a shape the tracker can address."""
    return bool(TICKET_KEY_PATTERN.match(ticket_id))


def format_started(work_date: date, tz: Optional[tzinfo] = None) -> str:
    """
    Convert a calendar date to the tracker's "started" timestamp.

    The worklog API needs a full timestamp with millisecond precision and a
    UTC offset, e.g. 2025-04-23T00:00:00.000+0200.

    Args:
        work_date: Day the work was done
        tz: Timezone for midnight; the local timezone when omitted

    Returns:
        Timestamp string at midnight of work_date
    """
    midnight = datetime.combine(work_date, time.min)
    started = midnight.replace(tzinfo=tz) if tz is not None else midnight.astimezone()
    return f"{started:%Y-%m-%dT%H:%M:%S}.{started.microsecond // 1000:03d}{started:%z}"


class WorkLogSubmitter:
    """
    Posts work log entries to the tracker's REST API.
    """

    def __init__(self, config: Config, tz: Optional[tzinfo] = None, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the submitter.

        Args:
            config: Loaded configuration with tracker URL and credentials
            tz: Timezone used for the "started" timestamp; local when omitted
            transport: Custom httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = config.jira_base_url
        self.tz = tz
        self.client = httpx.Client(
            auth=(config.jira_username, config.jira_api_token),
            timeout=config.jira_timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def worklog_url(self, ticket_id: str) -> str:
        return f"{self.base_url}/rest/api/2/issue/{ticket_id}/worklog"

    @timer
    def submit(self, entry: WorkLogEntry) -> SubmissionOutcome:
        """
        Record one entry against the tracker.

        Args:
            entry: Normalized work log entry

        Returns:
            SubmissionOutcome; never raises for remote failures
        """
        if not is_recognized_ticket_id(entry.ticket_id):
            logger.info(f"Not submitting work log for unrecognized ticket id {entry.ticket_id!r}")
            return SubmissionOutcome.failed(entry.ticket_id, f"Unrecognized ticket format: '{entry.ticket_id}'")

        body = {
            "timeSpent": entry.time_spent,
            "comment": entry.comment,
            "started": format_started(entry.work_date, self.tz),
        }

        try:
            response = self.client.post(self.worklog_url(entry.ticket_id), json=body)
        except httpx.HTTPError as e:
            logger.info(f"Connection error while logging work to {entry.ticket_id}: {e}")
            return SubmissionOutcome.failed(entry.ticket_id, f"Connection error: {e}")

        if response.is_success:
            return SubmissionOutcome.ok(entry.ticket_id)

        logger.info(f"Tracker rejected work log for {entry.ticket_id}: {response.status_code} - {response.text}")
        return SubmissionOutcome.failed(entry.ticket_id, f"API error: {response.status_code} - {response.text}")

    def submit_all(self, entries: Iterable[WorkLogEntry]) -> List[SubmissionOutcome]:
        """
        Submit entries one at a time, returning outcomes in input order.

        A failed entry never stops the rest of the batch.
        """
        batch = list(entries)
        outcomes: List[SubmissionOutcome] = []
        for index, entry in enumerate(batch, 1):
            reporter.sub_step(f"Logging {entry.time_spent} to {entry.ticket_id} on {entry.work_date.isoformat()}…", index, len(batch))
            outcome = self.submit(entry)
            if outcome.success:
                reporter.complete_sub_step(f"Logged {entry.time_spent} to {entry.ticket_id}")
            outcomes.append(outcome)
        return outcomes

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "WorkLogSubmitter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
