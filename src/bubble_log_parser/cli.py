"""Command line interface for Bubble Log Parser."""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

import pandas as pd

from . import __version__
from .aggregator import analyze_additional_logs
from .alignment import overlay_frame, prepare_overlay
from .comparison import compare_units
from .core import LogFile, analyze_logs
from .unit_labels import JsonFileUnitLabelStore, UnitLabelStoreError
from .utils import is_log_file_path


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Parse bubble sensor controller logs"
    )

    parser.add_argument(
        'input_files',
        nargs='+',
        help="Input log file(s) (.log)"
    )

    parser.add_argument(
        '-o', '--output',
        help="Output file (default: standard output)"
    )

    parser.add_argument(
        '-f', '--format',
        choices=['json', 'csv'],
        default='json',
        help="Output format (default: json)"
    )

    parser.add_argument(
        '--additional',
        action='store_true',
        help="Include the batch analysis (unit cycles, error rates, battery statistics)"
    )

    parser.add_argument(
        '--overlay',
        action='store_true',
        help="Emit the time-aligned pressure overlay of all input files instead of per-file summaries"
    )

    parser.add_argument(
        '--labels',
        help="JSON file with user-assigned unit labels; adds a unit comparison to json output"
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=1,
        help="Increase verbosity level (-v, -vv for levels 2, 3)"
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help="Quiet mode (verbosity level 0)"
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'bubble-log-parser {__version__}'
    )

    return parser


def validate_input_files(file_paths: list) -> None:
    """Validate that all input files exist and are readable."""
    for file_path in file_paths:
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Input file not found: {file_path}")

        if not os.path.isfile(file_path):
            raise ValueError(f"Input path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"Cannot read input file: {file_path}")


def setup_logging(verbosity_level: int) -> logging.Logger:
    """Setup logging configuration based on verbosity level.

    Args:
        verbosity_level: 0=quiet, 1=normal, 2 and above=debug
    """
    level_map = {
        0: logging.ERROR,    # Quiet - only errors
        1: logging.INFO,     # Normal - info and above
        2: logging.DEBUG,    # Verbose - debug and above
    }

    level = level_map.get(min(verbosity_level, 2), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(name)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )
    return logging.getLogger('bubble-log-parser')


def summary_frame(results) -> pd.DataFrame:
    """One row per file, the columns of the results table."""
    return pd.DataFrame([
        {
            'file_name': r.file_name,
            'unit_number': r.unit_number,
            'wait_time': r.wait_time,
            'trigger_time': r.trigger_time,
            'pressure_readings': r.pressure_readings,
            'duration_ms': r.duration_ms,
            'max_pressure': r.max_pressure,
            'sample_push_readings': r.sample_push.reading_count if r.sample_push else 0,
            'cleaning_cycle_readings': r.cleaning_cycle.reading_count if r.cleaning_cycle else 0,
            'well_pressure_status': r.well_pressure.status if r.well_pressure else '',
        }
        for r in results
    ])


def render_output(args, results, logger: logging.Logger) -> str:
    if args.overlay:
        rows = prepare_overlay([r.file_name for r in results], results)
        if args.format == 'csv':
            return overlay_frame(rows).to_csv()
        return json.dumps(rows, indent=2)

    if args.format == 'csv':
        return summary_frame(results).to_csv(index=False)

    output = {'results': [r.to_dict(include_raw=False) for r in results]}

    if args.additional:
        analysis = analyze_additional_logs((r.file_name, r.raw_content) for r in results)
        output['additional_analysis'] = analysis.to_dict()

    if args.labels:
        labels = JsonFileUnitLabelStore(args.labels).as_mapping()
        logger.info('Loaded %d unit labels from %s', len(labels), args.labels)
        output['unit_comparison'] = compare_units(results, labels)

    return json.dumps(output, indent=2, default=str)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = None
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        verbosity_level = 0 if args.quiet else args.verbose
        logger = setup_logging(verbosity_level)

        validate_input_files(args.input_files)
        for file_path in args.input_files:
            if not is_log_file_path(file_path):
                logger.warning('File may not be a controller log: %s', file_path)

        results = analyze_logs([LogFile(path) for path in args.input_files], logger=logger)
        text = render_output(args, results, logger)

        if args.output:
            output_dir = os.path.dirname(args.output)
            if output_dir and not os.path.exists(output_dir):
                os.makedirs(output_dir, exist_ok=True)
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(text)
            logger.info('Output written to %s', args.output)
        else:
            sys.stdout.write(text)
            if not text.endswith('\n'):
                sys.stdout.write('\n')

        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except PermissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 13
    except UnitLabelStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args is not None and args.verbose > 1:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
