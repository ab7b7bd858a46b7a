"""Bubble Sensor Log Parser.

Extracts pressure time series, operational phases, settings, battery
telemetry and error markers from bubble sensor controller logs.
"""

__version__ = "1.0.0"

from .aggregator import AdditionalAnalysis, analyze_additional_logs
from .alignment import align_series, overlay_frame, prepare_overlay, prepare_phase_overlay
from .core import LogFile, analyze_log, analyze_logs
from .events import extract_events
from .models import (AnalysisResult, BatteryStatEntry, LogEvent, LogSummary, PhaseRecord,
                     PressureReading, ProgramStart, UnitAggregate, WellPressureRecord)
from .phases import (extract_cleaning_cycle, extract_primary_trigger_cycle, extract_sample_push,
                     extract_well_pressure, get_pressure_readings)
from .utils import extract_timestamp, parse_timestamp, sanitize_line

__all__ = [
    "AdditionalAnalysis",
    "AnalysisResult",
    "BatteryStatEntry",
    "LogEvent",
    "LogFile",
    "LogSummary",
    "PhaseRecord",
    "PressureReading",
    "ProgramStart",
    "UnitAggregate",
    "WellPressureRecord",
    "align_series",
    "analyze_additional_logs",
    "analyze_log",
    "analyze_logs",
    "extract_cleaning_cycle",
    "extract_events",
    "extract_primary_trigger_cycle",
    "extract_sample_push",
    "extract_timestamp",
    "extract_well_pressure",
    "get_pressure_readings",
    "overlay_frame",
    "parse_timestamp",
    "prepare_overlay",
    "prepare_phase_overlay",
    "sanitize_line",
]
