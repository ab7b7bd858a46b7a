"""
Batch ("additional") analysis across several log files.

Each file contributes its unit number, error/RL lines, battery telemetry and
program starts. Per-unit cycle and error counts are summed across the batch;
list fields keep the input order of the files.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .core import LogSource, read_source
from .metadata import extract_important_info, extract_unit_number
from .models import BatteryStatEntry, LogSummary, ProgramStart, UnitAggregate

logger = logging.getLogger(__name__)


@dataclass
class AdditionalAnalysis:
    unit_numbers: List[str] = field(default_factory=list)
    unit_aggregates: Dict[str, UnitAggregate] = field(default_factory=dict)
    battery_stats: List[BatteryStatEntry] = field(default_factory=list)
    program_starts: List[ProgramStart] = field(default_factory=list)
    log_summaries: List[LogSummary] = field(default_factory=list)

    @property
    def unit_cycles(self) -> Dict[str, int]:
        return {unit: agg.cycle_count for unit, agg in self.unit_aggregates.items()}

    @property
    def unit_errors(self) -> Dict[str, int]:
        return {unit: agg.error_count for unit, agg in self.unit_aggregates.items()}

    def add_file(self, file_name: str, raw_content: str):
        """Fold one file into the batch totals."""
        unit_number = extract_unit_number(raw_content)
        info = extract_important_info(raw_content, file_name=file_name, unit_number=unit_number)

        if unit_number not in self.unit_aggregates:
            self.unit_numbers.append(unit_number)
            self.unit_aggregates[unit_number] = UnitAggregate(unit_number=unit_number)

        aggregate = self.unit_aggregates[unit_number]
        aggregate.cycle_count += len(info.program_starts)
        aggregate.error_count += info.error_count

        self.log_summaries.append(LogSummary(
            file_name=file_name,
            unit_number=unit_number,
            important_lines=info.important_lines,
            error_count=info.error_count,
            rlxxx_lines=info.rlxxx_lines,
        ))
        self.battery_stats.extend(info.battery_stats)
        self.program_starts.extend(
            ProgramStart(file_name=file_name, unit_number=unit_number, program_start=line)
            for line in info.program_starts
        )

        logger.debug('%s: unit %s, %d program starts, %d errors, %d battery entries',
                     file_name, unit_number, len(info.program_starts), info.error_count,
                     len(info.battery_stats))

    def error_summary(self) -> List[dict]:
        """Per-unit rows sorted by unit number."""
        return [self.unit_aggregates[unit].to_dict() for unit in sorted(self.unit_aggregates)]

    def battery_stats_frame(self) -> pd.DataFrame:
        """Battery telemetry as a table, one column per telemetry parameter."""
        return pd.DataFrame([entry.to_dict() for entry in self.battery_stats])

    def to_dict(self) -> dict:
        return {
            "unit_numbers": list(self.unit_numbers),
            "unit_cycles": self.unit_cycles,
            "unit_errors": self.unit_errors,
            "unit_summary": self.error_summary(),
            "battery_stats": [entry.to_dict() for entry in self.battery_stats],
            "program_starts": [start.to_dict() for start in self.program_starts],
            "log_summaries": [summary.to_dict() for summary in self.log_summaries],
        }


def analyze_additional_logs(sources: Iterable[LogSource],
                            logger: Optional[logging.Logger] = None) -> AdditionalAnalysis:
    """
    Run the batch analysis over (file_name, raw_content) pairs or LogFile objects.
    """
    if not logger:
        logger = logging.getLogger('bubble-log-parser')

    analysis = AdditionalAnalysis()
    for source in sources:
        try:
            file_name, raw_content = read_source(source)
        except OSError as e:
            logger.error('Failed to read %s: %s', getattr(source, 'file_path', source), e)
            continue
        analysis.add_file(file_name, raw_content)

    logger.info('Additional analysis: %d files, %d units, %d battery entries',
                len(analysis.log_summaries), len(analysis.unit_numbers),
                len(analysis.battery_stats))
    return analysis
