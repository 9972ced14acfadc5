"""Parse PurpleAir JSON payloads, repairing one known malformed shape.

The legacy ``data.json`` endpoint occasionally returns a document whose
``data`` array has a duplicated or missing closing bracket when it holds zero
or one row. `parse_with_repair` fixes exactly that shape, once, and gives up
if the repaired text still does not parse.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

_logger = logging.getLogger(__name__)

# "data":[]],  -> "data":[],
_DUPLICATED_CLOSE = re.compile(r'("data"\s*:\s*\[\s*\])\s*\]\s*,')
# "data":[[1.0,2.0],"count"  -> "data":[[1.0,2.0]],"count"
_MISSING_CLOSE = re.compile(r'("data"\s*:\s*\[\s*\[[^\[\]]*\])\s*,\s*"count"')


def repair_payload(text: str) -> str:
    """Apply the two targeted substitutions for the malformed ``data`` array."""
    text = _DUPLICATED_CLOSE.sub(r"\1,", text)
    return _MISSING_CLOSE.sub(r'\1],"count"', text)


def parse_with_repair(raw_text: str, logger: logging.Logger | logging.LoggerAdapter | None = None) -> Any:
    """Parse JSON text, allowing a single repair pass on failure.

    Raises:
        json.JSONDecodeError: If the text still fails to parse after repair
    """
    log = logger or _logger
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as exc:
        log.warning("Invalid JSON payload (%s); attempting repair", exc)

    repaired = repair_payload(raw_text)
    log.info("Retrying parse after repair (%d -> %d chars)", len(raw_text), len(repaired))
    try:
        return json.loads(repaired)
    except json.JSONDecodeError:
        log.error("Payload still invalid after repair: %.200s", raw_text)
        raise
