"""
Metadata extractors: settings, battery values, temperatures, manager events,
unit number and the error/RL line collector used by the batch analysis.

Every extractor is total. A line that does not match simply contributes
nothing.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import BatteryStatEntry
from .utils import iter_clean_lines

UNKNOWN_UNIT = 'Unknown'

SETTING_RE = re.compile(r'Setting "([^"]+)" (?:value is|changed from .* to) (.+?)\s*$')
BATTERY_INFO_RE = re.compile(r'\b(battery\w+) = (\S+)')
TEMPERATURE_RE = re.compile(r'(\d+\.\d+)C')
UNIT_NUMBER_RE = re.compile(r'Setting "unitNumber" value is (\d+)')
IMPORTANT_LINE_RE = re.compile(r'ERROR|Battery|RL\s*\d{3}|SI32', re.IGNORECASE)
RLXXX_RE = re.compile(r'RL\d{3}')
BATTERY_STAT_RE = re.compile(r'I \((.*?)\) ManagerSystem: (\w+) = ([\d.]+)([A-Za-z%]*)')

SYSTEM_EVENT_MARKER = 'Manager'
ERROR_CODE_MARKER = 'RECEIVED ERROR CODE'
PROGRAM_START_MARKER = 'Started program'


def extract_settings(raw_content: str) -> Dict[str, str]:
    """Map each setting name to the last value the log reports for it."""
    settings = {}
    for line in iter_clean_lines(raw_content):
        match = SETTING_RE.search(line)
        if match:
            settings[match.group(1)] = match.group(2)
    return settings


def extract_battery_info(raw_content: str) -> Dict[str, str]:
    battery_info = {}
    for line in iter_clean_lines(raw_content):
        for name, value in BATTERY_INFO_RE.findall(line):
            battery_info[name] = value
    return battery_info


def extract_temperatures(raw_content: str) -> List[str]:
    temperatures = []
    for line in iter_clean_lines(raw_content):
        match = TEMPERATURE_RE.search(line)
        if match:
            temperatures.append(match.group(1))
    return temperatures


def extract_system_events(raw_content: str) -> List[str]:
    return [line for line in iter_clean_lines(raw_content) if SYSTEM_EVENT_MARKER in line]


def extract_unit_number(raw_content: str) -> str:
    """Unit id from the first unitNumber setting line, or 'Unknown'."""
    for line in iter_clean_lines(raw_content):
        match = UNIT_NUMBER_RE.search(line)
        if match:
            return match.group(1)
    return UNKNOWN_UNIT


@dataclass
class ImportantInfo:
    important_lines: List[str] = field(default_factory=list)
    error_count: int = 0
    battery_stats: List[BatteryStatEntry] = field(default_factory=list)
    program_starts: List[str] = field(default_factory=list)
    rlxxx_lines: List[str] = field(default_factory=list)


def extract_important_info(raw_content: str, file_name: str = '',
                           unit_number: str = UNKNOWN_UNIT) -> ImportantInfo:
    """Collect error/RL lines, error codes, program starts and battery telemetry.

    Consecutive ManagerSystem telemetry lines with the same timestamp are
    merged into one ``BatteryStatEntry``; a new timestamp starts a new entry
    and the last entry is flushed at end of file.
    """
    info = ImportantInfo()
    battery_entry: Optional[BatteryStatEntry] = None

    for line in iter_clean_lines(raw_content):
        if IMPORTANT_LINE_RE.search(line):
            info.important_lines.append(line)

        if ERROR_CODE_MARKER in line.upper():
            info.error_count += 1

        match = BATTERY_STAT_RE.search(line)
        if match:
            timestamp, parameter, value = match.group(1), match.group(2), match.group(3)
            if battery_entry is None or battery_entry.timestamp != timestamp:
                if battery_entry is not None:
                    info.battery_stats.append(battery_entry)
                battery_entry = BatteryStatEntry(timestamp=timestamp,
                                                 unit_number=unit_number,
                                                 file_name=file_name)
            battery_entry.fields[parameter] = value

        if PROGRAM_START_MARKER in line:
            info.program_starts.append(line)

        if RLXXX_RE.search(line):
            info.rlxxx_lines.append(line)

    if battery_entry is not None:
        info.battery_stats.append(battery_entry)

    return info
