"""Comparison of cycle metrics between user-labelled units."""

from typing import Dict, List, Mapping, Sequence

import pandas as pd

from .models import AnalysisResult

METRICS = {
    'max_pressure': 'Max Pressure (psi)',
    'duration_ms': 'Duration (ms)',
    'pressure_readings': 'Pressure Readings',
}


def cycle_frame(results: Sequence[AnalysisResult], unit_labels: Mapping[str, str]) -> pd.DataFrame:
    """One row per labelled file, numbered per unit in input order.

    Files without a unit label are left out.
    """
    rows = []
    for result in results:
        unit = unit_labels.get(result.file_name)
        if not unit:
            continue
        rows.append({
            'unit': unit,
            'file_name': result.file_name,
            'max_pressure': float(result.max_pressure or 0),
            'duration_ms': result.duration_ms,
            'pressure_readings': result.pressure_readings,
        })

    frame = pd.DataFrame(rows, columns=['unit', 'file_name', 'max_pressure',
                                        'duration_ms', 'pressure_readings'])
    frame.insert(1, 'cycle', frame.groupby('unit').cumcount() + 1)
    return frame


def unit_averages(frame: pd.DataFrame) -> List[dict]:
    if frame.empty:
        return []
    grouped = frame.groupby('unit', sort=False)
    averages = grouped[list(METRICS)].mean()
    counts = grouped.size()
    return [
        {
            'unit': unit,
            'avg_max_pressure': round(float(row['max_pressure']), 3),
            'avg_duration': round(float(row['duration_ms']), 1),
            'avg_readings': round(float(row['pressure_readings']), 1),
            'cycle_count': int(counts[unit]),
        }
        for unit, row in averages.iterrows()
    ]


def unit_statistics(frame: pd.DataFrame) -> Dict[str, dict]:
    """Min, max, mean and population standard deviation per unit and metric."""
    stats = {}
    for unit, group in frame.groupby('unit', sort=False):
        unit_stats = {'cycle_count': len(group)}
        for metric in METRICS:
            values = group[metric].astype(float)
            digits = 3 if metric == 'max_pressure' else 1
            unit_stats[metric] = {
                'min': round(float(values.min()), digits),
                'max': round(float(values.max()), digits),
                'avg': round(float(values.mean()), digits),
                'std_dev': round(float(values.std(ddof=0)), digits),
            }
        stats[unit] = unit_stats
    return stats


def compare_units(results: Sequence[AnalysisResult], unit_labels: Mapping[str, str]) -> dict:
    """Averages, per-cycle rows and statistics for every labelled unit."""
    frame = cycle_frame(results, unit_labels)
    return {
        'unit_averages': unit_averages(frame),
        'cycle_comparison': frame.to_dict(orient='records'),
        'statistics': unit_statistics(frame),
    }
