"""Utility functions for bubble sensor log parsing."""

import logging
import os
import re
from datetime import datetime
from typing import Iterator, Optional

# Zone literals found in timestamp tokens. They are matched verbatim and carry
# no timezone conversion.
CST = 'CST'
CDT = 'CDT'

# The controller samples the bubble sensor every 50ms
READING_INTERVAL_MS = 50

ANSI_ESCAPE_RE = re.compile(r'\x1b\[[0-9;]*m')
PRESSURE_RE = re.compile(r'(\d+\.\d+)psi')

_TIMESTAMP_RE_CACHE = {}

TIMESTAMP_FORMATS = [
    '%Y-%m-%d %H:%M:%S.%f',  # 2024-02-07 14:58:37.120
    '%Y-%m-%d %H:%M:%S',     # 2024-02-07 14:58:37
    '%Y-%m-%d %H %M %S.%f',  # 2024-02-07 14 58 37.120
    '%Y-%m-%d %H %M %S',     # 2024-02-07 14 58 37
    '%Y-%m-%d %H:%M',        # 2024-02-07 14:58
    '%m/%d/%Y %H:%M:%S',     # 02/07/2024 14:58:37
    '%Y/%m/%d %H:%M:%S',     # 2024/02/07 14:58:37
    '%Y-%m-%dT%H:%M:%S',     # ISO format
]


def sanitize_line(line: str) -> str:
    """Strip ANSI color sequences and surrounding whitespace from a log line."""
    return ANSI_ESCAPE_RE.sub('', line).strip()


def iter_clean_lines(raw_content: str) -> Iterator[str]:
    """Yield every line of a log file, sanitized."""
    for line in raw_content.split('\n'):
        yield sanitize_line(line)


def _timestamp_pattern(zone: str) -> re.Pattern:
    pattern = _TIMESTAMP_RE_CACHE.get(zone)
    if pattern is None:
        pattern = re.compile(r'\(([^()]*?)_' + re.escape(zone) + r'\)')
        _TIMESTAMP_RE_CACHE[zone] = pattern
    return pattern


def extract_timestamp(line: str, zone: str = CST) -> Optional[str]:
    """Return the timestamp literal of a ``(<literal>_<ZONE>)`` token.

    The literal is returned as it appears in the log, underscores included.
    Returns None when the line carries no token for ``zone``.
    """
    match = _timestamp_pattern(zone).search(line)
    if match:
        return match.group(1)
    return None


def parse_timestamp(literal: Optional[str]) -> Optional[datetime]:
    """Convert a timestamp literal to a naive datetime.

    Underscores become spaces before the known formats are tried. The result
    is only meant for differences within one file, the zone is ignored.
    """
    if not literal:
        return None

    text = literal.replace('_', ' ').strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def elapsed_ms(start: Optional[str], end: Optional[str]) -> Optional[int]:
    """Milliseconds between two timestamp literals, None if either is unparseable."""
    start_dt = parse_timestamp(start)
    end_dt = parse_timestamp(end)
    if start_dt is None or end_dt is None:
        return None
    return int(round((end_dt - start_dt).total_seconds() * 1000))


def parse_pressure(line: str) -> Optional[float]:
    """Return the ``<digits>.<digits>psi`` value of a line, if any."""
    match = PRESSURE_RE.search(line)
    if match:
        return float(match.group(1))
    return None


def format_pressure(value: float) -> str:
    return f'{value:.3f}'


def is_log_file_path(file_path: str) -> bool:
    """Check if a file path looks like a controller log file."""
    return file_path.lower().endswith(('.log', '.txt'))


def logger_for_input(file_name: str) -> logging.Logger:
    """Return the logger used while parsing a specific input file."""
    return logging.getLogger('bubble-log-parser.' + os.path.basename(str(file_name)))
