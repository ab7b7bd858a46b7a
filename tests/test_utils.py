"""Tests for line sanitizing and timestamp handling."""

from datetime import datetime

import pytest

from bubble_log_parser.utils import (CDT, elapsed_ms, extract_timestamp, parse_pressure,
                                     parse_timestamp, sanitize_line)


def test_sanitize_line_strips_ansi():
    line = '\x1b[31mTriggered!\x1b[0m (2024-02-07_14:58:43_CST)  '
    assert sanitize_line(line) == 'Triggered! (2024-02-07_14:58:43_CST)'


def test_sanitize_line_is_idempotent():
    line = '\x1b[1;32m  Bubble sensor 1.250psi \x1b[0m'
    once = sanitize_line(line)
    assert sanitize_line(once) == once
    assert once == 'Bubble sensor 1.250psi'


def test_extract_timestamp_zones():
    line = 'I (2024-02-07_14:58:37_CST) Waiting to trigger with sample'
    assert extract_timestamp(line) == '2024-02-07_14:58:37'
    assert extract_timestamp(line, CDT) is None
    assert extract_timestamp('no timestamp here') is None


def test_extract_timestamp_skips_other_parentheses():
    line = 'W (boot) Sensor (ok) ready (2024-02-07_14:58:37_CST)'
    assert extract_timestamp(line) == '2024-02-07_14:58:37'


def test_parse_timestamp():
    assert parse_timestamp('2024-02-07_14:58:37') == datetime(2024, 2, 7, 14, 58, 37)
    assert parse_timestamp('2024-02-07_14:58:37.250') == datetime(2024, 2, 7, 14, 58, 37, 250000)
    assert parse_timestamp('not a date') is None
    assert parse_timestamp(None) is None


def test_elapsed_ms():
    assert elapsed_ms('2024-02-07_14:58:37', '2024-02-07_14:58:43') == 6000
    assert elapsed_ms('2024-02-07_14:58:37', 'garbage') is None


def test_parse_pressure():
    assert parse_pressure('reading 1.720psi') == 1.72
    assert parse_pressure('reading 1psi') is None
    assert parse_pressure('reading .5psi') is None


if __name__ == '__main__':
    pytest.main([__file__])
