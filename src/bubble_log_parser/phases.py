"""
Phase extraction for bubble sensor logs.

A phase is the stretch of log between a start marker and an end marker
during which the controller prints pressure samples. Each phase type is
scanned by a ``PhaseScanner``, an explicit IDLE -> MEASURING -> DONE state
machine that walks the sanitized lines once.

Samples are 50ms apart, so the Nth pressure line inside a window gets
``time_ms = (N - 1) * 50``. A window only becomes a ``PhaseRecord`` when its
start marker, its end marker and at least one reading were all seen.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .models import PhaseRecord, PressureReading, WellPressureRecord
from .utils import (CDT, CST, READING_INTERVAL_MS, extract_timestamp,
                    iter_clean_lines, parse_pressure)

logger = logging.getLogger(__name__)


class PhaseState(Enum):
    IDLE = 'idle'
    MEASURING = 'measuring'
    DONE = 'done'


@dataclass(frozen=True)
class PhaseMarkers:
    """Marker substrings and zone literal that delimit one phase type.

    ``repeat`` keeps scanning after a completed window; the last complete
    window of the file is the one returned.
    """
    name: str
    start: str
    end: Tuple[str, ...]
    zone: str = CDT
    repeat: bool = False


SAMPLE_PUSH = PhaseMarkers(
    name='sample_push',
    start='Bubble Sensor First: Start',
    end=('Bubble Sensor First: Stop',),
    zone=CDT,
)

CLEANING_CYCLE = PhaseMarkers(
    name='cleaning_cycle',
    start='Bubble Sensor Second: Start',
    end=('Bubble Sensor Second: Stop',),
    zone=CDT,
    repeat=True,
)

PRIMARY_TRIGGER_CYCLE = PhaseMarkers(
    name='primary_trigger_cycle',
    start='Waiting to trigger with sample',
    end=('Triggered!', 'TIME TO VENT'),
    zone=CST,
)


class PhaseScanner:
    """Single-pass state machine collecting the readings of one phase type."""

    def __init__(self, markers: PhaseMarkers):
        self.markers = markers
        self.state = PhaseState.IDLE
        self.record: Optional[PhaseRecord] = None
        self._start_time: Optional[str] = None
        self._end_time: Optional[str] = None
        self._pressures: List[float] = []
        self._timestamps: List[Optional[str]] = []

    def _reset_window(self):
        self._start_time = None
        self._end_time = None
        self._pressures = []
        self._timestamps = []

    def _on_idle(self, line: str):
        if self.markers.start in line:
            self._start_time = extract_timestamp(line, self.markers.zone)
            self.state = PhaseState.MEASURING

    def _on_measuring(self, line: str):
        if any(marker in line for marker in self.markers.end):
            self._end_time = extract_timestamp(line, self.markers.zone)
            self.state = PhaseState.DONE
            return

        pressure = parse_pressure(line)
        if pressure is not None:
            self._pressures.append(pressure)
            self._timestamps.append(extract_timestamp(line, self.markers.zone))

    def _on_done(self):
        """Finalize the current window, then either stop or look for another."""
        if self._start_time and self._end_time and self._pressures:
            self.record = PhaseRecord(
                start_time=self._start_time,
                end_time=self._end_time,
                pressure_readings=[
                    PressureReading(time_ms=i * READING_INTERVAL_MS, pressure_psi=p)
                    for i, p in enumerate(self._pressures)
                ],
                timestamps=list(self._timestamps),
            )
        else:
            logger.debug('Discarding incomplete %s window starting at %s',
                         self.markers.name, self._start_time)

        self._reset_window()
        if self.markers.repeat:
            self.state = PhaseState.IDLE

    def feed(self, line: str) -> bool:
        """Advance on one sanitized line. Returns False once scanning is over."""
        if self.state is PhaseState.IDLE:
            self._on_idle(line)
        elif self.state is PhaseState.MEASURING:
            self._on_measuring(line)

        if self.state is PhaseState.DONE:
            self._on_done()
            return self.state is not PhaseState.DONE
        return True

    def scan(self, lines: Iterable[str]) -> Optional[PhaseRecord]:
        for line in lines:
            if not self.feed(line):
                break
        return self.record


def extract_phase(raw_content: str, markers: PhaseMarkers) -> Optional[PhaseRecord]:
    return PhaseScanner(markers).scan(iter_clean_lines(raw_content))


def extract_sample_push(raw_content: str) -> Optional[PhaseRecord]:
    return extract_phase(raw_content, SAMPLE_PUSH)


def extract_cleaning_cycle(raw_content: str) -> Optional[PhaseRecord]:
    """Cleaning cycle readings; with several cycles in one file the last complete one wins."""
    return extract_phase(raw_content, CLEANING_CYCLE)


def extract_primary_trigger_cycle(raw_content: str) -> Optional[PhaseRecord]:
    """Readings between 'Waiting to trigger with sample' and the trigger/vent line."""
    return extract_phase(raw_content, PRIMARY_TRIGGER_CYCLE)


# ---------------------------------------------------------------------------
# Well pressure
# ---------------------------------------------------------------------------

WELL_PRESSURE_MARKER = 'Well Pressure'
WELL_PRESSURE_RE = re.compile(r'Well Pressure\b[\s:\-]*(.*)$')
_TIMESTAMP_TOKEN_RE = re.compile(r'\([^()]*_(?:CST|CDT)\)')
WELL_PRESSURE_OK_RE = re.compile(r'OK\b')


def _well_pressure_status(line: str) -> Optional[str]:
    match = WELL_PRESSURE_RE.search(line)
    if not match:
        return None
    text = _TIMESTAMP_TOKEN_RE.sub('', match.group(1))
    text = re.sub(r'\d+\.\d+psi', '', text).strip(' :-,')
    if WELL_PRESSURE_OK_RE.match(text):
        return 'OK'
    return text or 'UNKNOWN'


def extract_well_pressure(raw_content: str, zone: str = CDT) -> Optional[WellPressureRecord]:
    """Find the first well pressure status and the pressure reported with it.

    The pressure is taken from the status line itself or, failing that, from
    the next line carrying a psi value.
    """
    status = None
    timestamp = None

    for line in iter_clean_lines(raw_content):
        if status is None:
            if WELL_PRESSURE_MARKER not in line:
                continue
            status = _well_pressure_status(line)
            if status is None:
                continue
            timestamp = extract_timestamp(line, zone)

        pressure = parse_pressure(line)
        if pressure is not None:
            return WellPressureRecord(
                status=status,
                pressure=pressure,
                timestamp=timestamp or extract_timestamp(line, zone),
            )

    return None


# ---------------------------------------------------------------------------
# Whole-file readings
# ---------------------------------------------------------------------------

def get_pressure_readings(raw_content: str, rebase: bool = True) -> List[PressureReading]:
    """Every psi sample in the file on a 50ms timeline.

    With ``rebase`` the first reading above 0 psi is time 0 and the idle
    readings before it are dropped; otherwise the first sample is time 0.
    """
    pressures = [p for p in (parse_pressure(line) for line in iter_clean_lines(raw_content))
                 if p is not None]

    if rebase:
        first_positive = next((i for i, p in enumerate(pressures) if p > 0), None)
        if first_positive is None:
            return []
        pressures = pressures[first_positive:]

    return [PressureReading(time_ms=i * READING_INTERVAL_MS, pressure_psi=p)
            for i, p in enumerate(pressures)]
