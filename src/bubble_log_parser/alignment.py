"""
Overlay of several files' pressure series on one 50ms timeline.

Rows run from 0 to the largest reading time of any series. A file's key is
only present on rows where that file has a reading, so a missing value means
"no data" and never zero pressure.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .models import AnalysisResult, LogEvent, PressureReading
from .phases import get_pressure_readings
from .utils import READING_INTERVAL_MS

# Events are attached to a row when strictly closer than this
EVENT_TOLERANCE_MS = 25

EVENT_KEY_SUFFIX = '_event'

OVERLAY_PHASES = ('sample_push', 'cleaning_cycle', 'primary_cycle')


def event_key(file_key: str) -> str:
    return file_key + EVENT_KEY_SUFFIX


def align_series(series: Mapping[str, Sequence[PressureReading]],
                 events: Optional[Mapping[str, Sequence[LogEvent]]] = None) -> List[dict]:
    """
    Merge reading series onto one timeline.

    Args:
        series: file key -> readings (50ms step, any length)
        events: file key -> events to label rows with

    Returns:
        One dict per time point ``{"time": t, <file>: psi, "<file>_event": label}``
    """
    series = {key: readings for key, readings in series.items() if readings}
    if not series:
        return []

    max_time = max(reading.time_ms for readings in series.values() for reading in readings)
    by_time = {key: {r.time_ms: r.pressure_psi for r in readings}
               for key, readings in series.items()}
    events = events or {}

    rows = []
    for time in range(0, max_time + 1, READING_INTERVAL_MS):
        row = {"time": time}
        for key, pressures in by_time.items():
            if time in pressures:
                row[key] = pressures[time]

            label = None
            for event in events.get(key, ()):
                if abs(event.time_ms - time) < EVENT_TOLERANCE_MS:
                    label = event.event
            if label is not None:
                row[event_key(key)] = label
        rows.append(row)

    return rows


def _select(selected_files: Iterable[str],
            results: Sequence[AnalysisResult]) -> List[AnalysisResult]:
    by_name = {result.file_name: result for result in results}
    return [by_name[name] for name in selected_files if name in by_name]


def prepare_overlay(selected_files: Iterable[str],
                    results: Sequence[AnalysisResult]) -> List[dict]:
    """Overlay of the whole-file readings, labelled with each file's events."""
    selected = _select(selected_files, results)
    series = {r.file_name: get_pressure_readings(r.raw_content) for r in selected}
    events = {r.file_name: r.events for r in selected}
    return align_series(series, events)


def prepare_phase_overlay(selected_files: Iterable[str],
                          results: Sequence[AnalysisResult],
                          phase: str = 'sample_push') -> List[dict]:
    """Overlay of one phase's readings; files without that phase are left out."""
    if phase not in OVERLAY_PHASES:
        raise ValueError(f"Unknown phase '{phase}', expected one of {', '.join(OVERLAY_PHASES)}")

    series: Dict[str, List[PressureReading]] = {}
    for result in _select(selected_files, results):
        record = getattr(result, phase)
        if record is not None:
            series[result.file_name] = record.pressure_readings
    return align_series(series)


def overlay_frame(rows: Sequence[dict]) -> pd.DataFrame:
    """Overlay rows as a DataFrame indexed by time; gaps are NaN."""
    if not rows:
        return pd.DataFrame(columns=['time']).set_index('time')
    return pd.DataFrame(list(rows)).set_index('time').sort_index()
