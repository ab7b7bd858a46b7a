"""
Data models shared by the extractors, the aggregator and the alignment code.

Every record exposes ``to_dict()`` with stable field names so that
presentation and export collaborators can consume plain data.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .utils import READING_INTERVAL_MS, format_pressure


# ---------------------------------------------------------------------------
# Per-file records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PressureReading:
    """One pressure sample on the synthesized 50ms timeline."""
    time_ms: int
    pressure_psi: float

    def to_dict(self) -> dict:
        return {"time_ms": self.time_ms, "pressure_psi": self.pressure_psi}


@dataclass
class PhaseRecord:
    """A completed start/end window with the readings captured inside it."""
    start_time: str                         # timestamp literal of the start marker
    end_time: str                           # timestamp literal of the end marker
    pressure_readings: List[PressureReading]
    timestamps: List[Optional[str]]         # one per reading, None if the line had none

    @property
    def reading_count(self) -> int:
        return len(self.pressure_readings)

    @property
    def duration_ms(self) -> int:
        return self.reading_count * READING_INTERVAL_MS

    @property
    def pressures(self) -> List[float]:
        return [r.pressure_psi for r in self.pressure_readings]

    @property
    def max_pressure(self) -> float:
        return max(self.pressures)

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "pressure_readings": [r.to_dict() for r in self.pressure_readings],
            "timestamps": list(self.timestamps),
            "reading_count": self.reading_count,
            "duration_ms": self.duration_ms,
            "max_pressure": format_pressure(self.max_pressure),
        }


@dataclass
class WellPressureRecord:
    """Outcome of the well pressure check."""
    status: str
    pressure: float
    timestamp: Optional[str]

    @property
    def is_ok(self) -> bool:
        return self.status == 'OK'

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "pressure": self.pressure,
            "timestamp": self.timestamp,
        }


@dataclass
class LogEvent:
    """A milestone phrase and its offset from the first timestamp of the file."""
    time_ms: int
    event: str
    timestamp: str

    def to_dict(self) -> dict:
        return {"time_ms": self.time_ms, "event": self.event, "timestamp": self.timestamp}


@dataclass(frozen=True)
class AnalysisResult:
    """Everything extracted from one log file."""
    file_name: str
    wait_time: str = ''
    trigger_time: str = ''
    pressure_readings: int = 0
    duration_ms: int = 0
    max_pressure: str = format_pressure(0.0)
    raw_content: str = ''
    unit_number: str = 'Unknown'
    settings: Dict[str, str] = field(default_factory=dict)
    battery_info: Dict[str, str] = field(default_factory=dict)
    temperatures: List[str] = field(default_factory=list)
    system_events: List[str] = field(default_factory=list)
    events: List[LogEvent] = field(default_factory=list)
    primary_cycle: Optional[PhaseRecord] = None
    sample_push: Optional[PhaseRecord] = None
    cleaning_cycle: Optional[PhaseRecord] = None
    well_pressure: Optional[WellPressureRecord] = None

    def to_dict(self, include_raw: bool = True) -> dict:
        data = {
            "file_name": self.file_name,
            "wait_time": self.wait_time,
            "trigger_time": self.trigger_time,
            "pressure_readings": self.pressure_readings,
            "duration_ms": self.duration_ms,
            "max_pressure": self.max_pressure,
            "unit_number": self.unit_number,
            "settings": dict(self.settings),
            "battery_info": dict(self.battery_info),
            "temperatures": list(self.temperatures),
            "system_events": list(self.system_events),
            "events": [e.to_dict() for e in self.events],
            "primary_cycle": self.primary_cycle.to_dict() if self.primary_cycle else None,
            "sample_push": self.sample_push.to_dict() if self.sample_push else None,
            "cleaning_cycle": self.cleaning_cycle.to_dict() if self.cleaning_cycle else None,
            "well_pressure": self.well_pressure.to_dict() if self.well_pressure else None,
        }
        if include_raw:
            data["raw_content"] = self.raw_content
        return data

    def to_summary(self) -> dict:
        """Text-renderable summary forwarded to the question answering service."""
        summary = self.to_dict()
        summary.update({
            "settings_summary": '\n'.join(f'{k}: {v}' for k, v in self.settings.items()),
            "battery_summary": '\n'.join(f'{k}: {v}' for k, v in self.battery_info.items()),
            "temperature_readings": ', '.join(self.temperatures),
            "system_events": '\n'.join(self.system_events),
            "complete_log": self.raw_content,
        })
        return summary


# ---------------------------------------------------------------------------
# Batch (additional analysis) records
# ---------------------------------------------------------------------------

@dataclass
class BatteryStatEntry:
    """ManagerSystem telemetry lines sharing one timestamp."""
    timestamp: str
    unit_number: str = 'Unknown'
    file_name: str = ''
    fields: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "timestamp": self.timestamp,
            "unit_number": self.unit_number,
            "file_name": self.file_name,
        }
        for name, value in self.fields.items():
            data.setdefault(name, value)
        return data


@dataclass
class ProgramStart:
    file_name: str
    unit_number: str
    program_start: str

    def to_dict(self) -> dict:
        return {
            "file_name": self.file_name,
            "unit_number": self.unit_number,
            "program_start": self.program_start,
        }


@dataclass
class LogSummary:
    file_name: str
    unit_number: str
    important_lines: List[str]
    error_count: int
    rlxxx_lines: List[str]

    def to_dict(self) -> dict:
        return {
            "file_name": self.file_name,
            "unit_number": self.unit_number,
            "important_lines": list(self.important_lines),
            "error_count": self.error_count,
            "rlxxx_lines": list(self.rlxxx_lines),
        }


# Error rate thresholds in percent
ERROR_RATE_WARNING = 1.0
ERROR_RATE_CRITICAL = 5.0


def error_rate(error_count: int, cycle_count: int) -> float:
    """Errors per program start, in percent with one decimal."""
    if cycle_count <= 0:
        return 0.0
    return round(error_count / cycle_count * 100.0, 1)


def error_status(rate: float) -> str:
    if rate > ERROR_RATE_CRITICAL:
        return 'Critical'
    if rate > ERROR_RATE_WARNING:
        return 'Warning'
    return 'Good'


@dataclass
class UnitAggregate:
    """Cycle and error totals for one unit number across a batch."""
    unit_number: str
    cycle_count: int = 0
    error_count: int = 0

    @property
    def error_rate(self) -> float:
        return error_rate(self.error_count, self.cycle_count)

    @property
    def status(self) -> str:
        return error_status(self.error_rate)

    def to_dict(self) -> dict:
        return {
            "unit_number": self.unit_number,
            "cycle_count": self.cycle_count,
            "error_count": self.error_count,
            "error_rate": self.error_rate,
            "status": self.status,
        }
