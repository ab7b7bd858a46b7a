"""Milestone event extraction."""

from typing import List, Optional

from .models import LogEvent
from .utils import CST, elapsed_ms, extract_timestamp, iter_clean_lines, parse_timestamp

# Order matters: when a line carries several phrases the first listed wins
EVENT_PHRASES = (
    'clear line to CH start',
    'clear line to CH end',
    'Triggered!',
    'TIME TO VENT',
    'Starting venting',
    'Venting complete',
    'Waiting to trigger with sample',
    'Running test',
    'Test complete',
)


def match_event_phrase(line: str) -> Optional[str]:
    for phrase in EVENT_PHRASES:
        if phrase in line:
            return phrase
    return None


def extract_events(raw_content: str, zone: str = CST) -> List[LogEvent]:
    """Return the milestone events of a file, timed from its first timestamp.

    The first line with a parseable timestamp is the reference instant; it
    can itself produce an event at time 0. Lines before it produce nothing.
    """
    events = []
    reference = None

    for line in iter_clean_lines(raw_content):
        timestamp = extract_timestamp(line, zone)
        if timestamp is None:
            continue

        if reference is None:
            if parse_timestamp(timestamp) is None:
                continue
            reference = timestamp

        phrase = match_event_phrase(line)
        if phrase is None:
            continue

        offset = elapsed_ms(reference, timestamp)
        if offset is None:
            continue
        events.append(LogEvent(time_ms=offset, event=phrase, timestamp=timestamp))

    return events
