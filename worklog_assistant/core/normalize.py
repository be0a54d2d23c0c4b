"""
Response normalization for the Work Log Assistant.

The extraction model is a probabilistic text generator: its JSON can be malformed
and its ticket keys inconsistently formatted. This module is the boundary between
that output and the strict tracker API. It parses the payload, repairs ticket keys,
fills in default dates and validates each entry on its own.
"""

import json
import logging
import re
from datetime import date
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from .debug_log import get_debug_logger
from .types import ExtractionPayload, WorkLogEntry

logger = logging.getLogger(__name__)

# Letters immediately (or space-) followed by digits, e.g. "PROJ123" or "proj 123"
UNSEPARATED_TICKET_PATTERN = re.compile(r"^([A-Za-z]+)\s*(\d+)$")


def repair_ticket_id(ticket_id: Any) -> Any:
    """
    Insert the missing hyphen in a ticket key such as "ABC123".

    This is a best-effort heuristic, not a validator. Keys that already contain
    a hyphen, and keys that do not look like letters followed by digits, are
    returned unchanged; the tracker decides whether they exist.

    Args:
        ticket_id: Raw ticket value from the model

    Returns:
        The repaired key, or the input unchanged
    """
    if not isinstance(ticket_id, str):
        return ticket_id

    candidate = ticket_id.strip()
    if "-" in candidate:
        return candidate

    match = UNSEPARATED_TICKET_PATTERN.match(candidate)
    if match:
        return f"{match.group(1)}-{match.group(2)}"
    return candidate


def normalize_entries(items: Iterable[Any], today: Optional[date] = None) -> List[WorkLogEntry]:
    """
    Repair and validate raw entry items, preserving order.

    Items that cannot become a WorkLogEntry (missing ticket or time, an
    unparseable date, not an object at all) are logged and skipped.

    Args:
        items: Raw entry objects from the extraction payload
        today: Default work date; the local date is used when omitted

    Returns:
        List of valid entries
    """
    default_date = (today or date.today()).isoformat()
    debug_logger = get_debug_logger()
    entries: List[WorkLogEntry] = []

    for index, item in enumerate(items):
        if isinstance(item, WorkLogEntry):
            item = item.model_dump(mode="json")
        if not isinstance(item, dict):
            logger.warning(f"Skipping entry {index}: expected an object, got {type(item).__name__}")
            continue

        data = dict(item)
        data["ticket_id"] = repair_ticket_id(data.get("ticket_id"))
        if not data.get("work_date"):
            data["work_date"] = default_date

        try:
            entries.append(WorkLogEntry.model_validate(data))
        except ValidationError as e:
            fields = ", ".join(".".join(str(loc) for loc in error["loc"]) for error in e.errors())
            logger.warning(f"Skipping entry {index} with invalid fields ({fields}): {item}")
            debug_logger.log_validation_error(e, item)

    return entries


def normalize(raw_text: str, today: Optional[date] = None) -> List[WorkLogEntry]:
    """
    Turn the extraction model's raw text into normalized work log entries.

    Never raises for bad model output: unparseable text yields an empty list.

    Args:
        raw_text: JSON text returned by the extraction model
        today: Default work date for entries without one

    Returns:
        Normalized entries in the order the model listed them
    """
    debug_logger = get_debug_logger()

    try:
        data = json.loads(raw_text)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        payload = ExtractionPayload.model_validate(data)
    except (ValueError, TypeError, RecursionError, ValidationError) as e:
        # JSONDecodeError is a ValueError; pathologically nested input exhausts the decoder's stack
        logger.error(f"Error parsing OpenAI response: {e}")
        logger.error(f"Response was: {raw_text}")
        debug_logger.log_parse_error(e, str(raw_text))
        return []

    entries = normalize_entries(payload.entries, today=today)
    logger.debug(f"Parsed entries: {[entry.model_dump(mode='json') for entry in entries]}")
    return entries
