"""Tests for the per-file analysis."""

import dataclasses
import os
import tempfile

import pytest

from bubble_log_parser import AnalysisResult, LogFile, analyze_log, analyze_logs

SAMPLE_LOG = "\n".join([
    'I (2024-02-07_14:58:30_CST) ManagerSettings: Setting "unitNumber" value is 7',
    'I (2024-02-07_14:58:31_CST) ManagerSettings: Setting "pushSpeed" value is 10',
    'I (2024-02-07_14:58:32_CST) ManagerSettings: Setting "pushSpeed" changed from 10 to 12',
    'I (2024-02-07_14:58:33_CST) ManagerSystem: batteryPercent = 87%',
    'I (2024-02-07_14:58:33_CST) ManagerSystem: batteryVoltage = 3.7V',
    'I (2024-02-07_14:58:34_CST) Sensor: Temperature 24.5C',
    '\x1b[32mWaiting to trigger with sample\x1b[0m (2024-02-07_14:58:37_CST)',
    'Bubble sensor 0.000psi (2024-02-07_14:58:38_CST)',
    'Bubble sensor 1.250psi (2024-02-07_14:58:39_CST)',
    'Bubble sensor 1.720psi (2024-02-07_14:58:40_CST)',
    '\x1b[31mTriggered!\x1b[0m (2024-02-07_14:58:43_CST)',
    'Starting venting (2024-02-07_14:58:44_CST)',
])


def test_analyze_log_trigger_cycle():
    """Test the primary trigger cycle summary fields."""
    result = analyze_log('run1.log', SAMPLE_LOG)

    assert isinstance(result, AnalysisResult)
    assert result.file_name == 'run1.log'
    assert result.wait_time == '2024-02-07_14:58:37'
    assert result.trigger_time == '2024-02-07_14:58:43'
    assert result.pressure_readings == 3
    assert result.duration_ms == 150
    assert result.max_pressure == '1.720'
    assert [r.time_ms for r in result.primary_cycle.pressure_readings] == [0, 50, 100]


def test_analyze_log_metadata():
    """Test settings, battery values, temperatures and manager lines."""
    result = analyze_log('run1.log', SAMPLE_LOG)

    assert result.unit_number == '7'
    assert result.settings == {'unitNumber': '7', 'pushSpeed': '12'}
    assert result.battery_info == {'batteryPercent': '87%', 'batteryVoltage': '3.7V'}
    assert result.temperatures == ['24.5']
    assert len(result.system_events) == 5
    assert [e.event for e in result.events] == [
        'Waiting to trigger with sample', 'Triggered!', 'Starting venting']
    assert [e.time_ms for e in result.events] == [7000, 13000, 14000]


def test_analyze_log_empty_file():
    """A file with no matches yields the empty defaults, not an exception."""
    result = analyze_log('empty.log', '')

    assert result.wait_time == ''
    assert result.trigger_time == ''
    assert result.pressure_readings == 0
    assert result.duration_ms == 0
    assert result.max_pressure == '0.000'
    assert result.unit_number == 'Unknown'
    assert result.settings == {}
    assert result.events == []
    assert result.sample_push is None
    assert result.cleaning_cycle is None
    assert result.well_pressure is None


def test_result_is_frozen():
    result = analyze_log('run1.log', SAMPLE_LOG)

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.max_pressure = '9.999'


def test_result_summary_fields():
    """Test the text summary forwarded to the question answering service."""
    summary = analyze_log('run1.log', SAMPLE_LOG).to_summary()

    assert summary['settings_summary'] == 'unitNumber: 7\npushSpeed: 12'
    assert summary['battery_summary'] == 'batteryPercent: 87%\nbatteryVoltage: 3.7V'
    assert summary['temperature_readings'] == '24.5'
    assert summary['complete_log'] == SAMPLE_LOG
    assert 'ManagerSystem: batteryPercent = 87%' in summary['system_events']


def test_to_dict_without_raw_content():
    data = analyze_log('run1.log', SAMPLE_LOG).to_dict(include_raw=False)
    assert 'raw_content' not in data
    assert data['primary_cycle']['reading_count'] == 3
    assert data['sample_push'] is None


def test_analyze_logs_from_files():
    """Test batch analysis of files on disk, skipping unreadable ones."""
    with tempfile.NamedTemporaryFile('w', suffix='.log', delete=False) as temp_input:
        temp_input.write(SAMPLE_LOG)
        temp_input_path = temp_input.name

    try:
        results = analyze_logs([
            LogFile(temp_input_path),
            LogFile(temp_input_path + '.missing'),
            ('inline.log', SAMPLE_LOG),
        ])
        assert [r.file_name for r in results] == [os.path.basename(temp_input_path), 'inline.log']
        assert results[0].pressure_readings == results[1].pressure_readings == 3
    finally:
        os.unlink(temp_input_path)


if __name__ == '__main__':
    pytest.main([__file__])
