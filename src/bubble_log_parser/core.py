"""
Core parsing logic for bubble sensor controller logs.

``analyze_log`` runs every extractor over one file's text and assembles an
``AnalysisResult``. ``analyze_logs`` does the same for a batch of files.
"""

import logging
import os
from typing import Iterable, List, Optional, Tuple, Union

from .events import extract_events
from .metadata import (extract_battery_info, extract_settings, extract_system_events,
                       extract_temperatures, extract_unit_number)
from .models import AnalysisResult
from .phases import (extract_cleaning_cycle, extract_primary_trigger_cycle,
                     extract_sample_push, extract_well_pressure)
from .utils import format_pressure, logger_for_input


class LogFile:
    """A controller log file and its text content."""

    def __init__(self, file_path: str, encoding: str = 'utf-8'):
        self.file_path = file_path
        self.encoding = encoding
        self._contents = None

    @property
    def file_name(self) -> str:
        return os.path.basename(self.file_path)

    @property
    def contents(self) -> str:
        """Get the file contents as text; undecodable bytes are replaced."""
        if self._contents is None:
            with open(self.file_path, 'r', encoding=self.encoding, errors='replace') as f:
                self._contents = f.read()
        return self._contents

    def as_pair(self) -> Tuple[str, str]:
        return self.file_name, self.contents


LogSource = Union[LogFile, Tuple[str, str]]


def read_source(source: LogSource) -> Tuple[str, str]:
    if isinstance(source, LogFile):
        return source.as_pair()
    file_name, raw_content = source
    return file_name, raw_content


def analyze_log(file_name: str, raw_content: str,
                logger: Optional[logging.Logger] = None) -> AnalysisResult:
    """
    Parse the text of one log file.

    Args:
        file_name: Name the result is keyed by
        raw_content: Complete file text, ANSI color codes allowed
        logger: Logger instance (defaults to a per-file logger)

    Returns:
        AnalysisResult with every field at its empty default when nothing matched
    """
    if not logger:
        logger = logger_for_input(file_name)

    logger.debug('Analyzing %s (%d characters)', file_name, len(raw_content))

    primary = extract_primary_trigger_cycle(raw_content)
    cycle_fields = {}
    if primary is not None:
        cycle_fields = {
            'wait_time': primary.start_time,
            'trigger_time': primary.end_time,
            'pressure_readings': primary.reading_count,
            'duration_ms': primary.duration_ms,
            'max_pressure': format_pressure(primary.max_pressure),
        }
    else:
        logger.info('No trigger cycle found in %s', file_name)

    result = AnalysisResult(
        file_name=file_name,
        raw_content=raw_content,
        unit_number=extract_unit_number(raw_content),
        settings=extract_settings(raw_content),
        battery_info=extract_battery_info(raw_content),
        temperatures=extract_temperatures(raw_content),
        system_events=extract_system_events(raw_content),
        events=extract_events(raw_content),
        primary_cycle=primary,
        sample_push=extract_sample_push(raw_content),
        cleaning_cycle=extract_cleaning_cycle(raw_content),
        well_pressure=extract_well_pressure(raw_content),
        **cycle_fields,
    )

    logger.debug('%s: %d readings, max %s psi, %d events, sample push %s, cleaning cycle %s',
                 file_name, result.pressure_readings, result.max_pressure, len(result.events),
                 'found' if result.sample_push else 'absent',
                 'found' if result.cleaning_cycle else 'absent')
    return result


def analyze_logs(sources: Iterable[LogSource],
                 logger: Optional[logging.Logger] = None) -> List[AnalysisResult]:
    """
    Parse several log files independently.

    Args:
        sources: LogFile objects or (file_name, raw_content) pairs
        logger: Logger instance

    Files that cannot be read are logged and skipped; the other results are
    unaffected.
    """
    if not logger:
        logger = logging.getLogger('bubble-log-parser')

    sources = list(sources)
    logger.info('Multi-file analysis: %d files', len(sources))

    results = []
    for i, source in enumerate(sources):
        try:
            file_name, raw_content = read_source(source)
        except OSError as e:
            logger.error('Failed to read %s: %s', getattr(source, 'file_path', source), e)
            continue

        logger.info('[%d/%d] Processing %s', i + 1, len(sources), file_name)
        results.append(analyze_log(file_name, raw_content))

    if len(results) < len(sources):
        logger.warning('Analyzed %d out of %d files', len(results), len(sources))

    return results
