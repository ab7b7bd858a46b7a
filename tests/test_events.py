"""Tests for milestone event extraction."""

import pytest

from bubble_log_parser.events import EVENT_PHRASES, extract_events, match_event_phrase


def test_event_vocabulary():
    assert len(EVENT_PHRASES) == 9


def test_events_offset_from_first_timestamp():
    log = "\n".join([
        'Booting without a clock',
        'Test complete',
        'I (2024-02-07_14:58:30_CST) Controller ready',
        'Running test (2024-02-07_14:58:31_CST)',
        'Triggered! (2024-02-07_14:58:43_CST)',
        'Venting complete',
        'Test complete (2024-02-07_14:59:00_CST)',
    ])

    events = extract_events(log)

    assert [(e.event, e.time_ms) for e in events] == [
        ('Running test', 1000),
        ('Triggered!', 13000),
        ('Test complete', 30000),
    ]
    assert events[1].timestamp == '2024-02-07_14:58:43'


def test_reference_line_can_be_an_event():
    events = extract_events('Waiting to trigger with sample (2024-02-07_14:58:37_CST)')
    assert [(e.event, e.time_ms) for e in events] == [('Waiting to trigger with sample', 0)]


def test_first_phrase_in_list_order_wins():
    line = 'Starting venting after Triggered! (2024-02-07_14:58:43_CST)'
    assert match_event_phrase(line) == 'Triggered!'


def test_colored_line_matches_plain_line():
    colored = 'I (2024-02-07_14:58:30_CST) start\n\x1b[31mTriggered!\x1b[0m (2024-02-07_14:58:43_CST)'
    plain = 'I (2024-02-07_14:58:30_CST) start\nTriggered! (2024-02-07_14:58:43_CST)'
    assert extract_events(colored) == extract_events(plain)
    assert len(extract_events(plain)) == 1


if __name__ == '__main__':
    pytest.main([__file__])
