"""
GPS Log Format

JSON Lines: one JSON object per fix, newline terminated.

Every line parses on its own, so a log cut off by a crash loses at most
its last, partially written line.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List

from gps.models.log_entry import GpsLogEntry

logger = logging.getLogger(__name__)


def format_entry(entry: GpsLogEntry) -> str:
    """
    Format one entry as a single JSON line (with trailing newline).

    Example:
        journal.write(format_entry(entry))
    """
    return json.dumps(entry.to_dict(), separators=(",", ":")) + "\n"


def serialize_gps_log(entries: Iterable[GpsLogEntry]) -> str:
    """
    Serialize a GPS log to JSON Lines.

    An empty log serializes to an empty string, which is a valid
    zero-record JSON Lines document.

    Example:
        payload = serialize_gps_log(session_log)
    """
    return "".join(format_entry(entry) for entry in entries)


def parse_gps_log(text: str, strict: bool = False) -> List[GpsLogEntry]:
    """
    Parse a JSON Lines GPS log.

    Args:
        text: Serialized log
        strict: If True, raise on the first bad line. If False, skip bad
                lines with a warning (crash recovery).

    Returns:
        Entries in file order

    Raises:
        ValueError: In strict mode, if a line cannot be parsed
    """
    entries = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            entries.append(GpsLogEntry.from_dict(data))
        except (ValueError, KeyError, TypeError) as e:
            if strict:
                raise ValueError(f"Bad GPS log line {line_number}: {e}") from e
            logger.warning(f"Skipping unreadable GPS log line {line_number}: {e}")
    return entries


def read_gps_journal(path: Path) -> List[GpsLogEntry]:
    """
    Recover entries from a journal file left behind by a crashed session.

    Example:
        entries = read_gps_journal(Path("journal/abc123.gps.jsonl"))
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return parse_gps_log(text, strict=False)
