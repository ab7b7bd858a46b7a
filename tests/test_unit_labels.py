"""Tests for the unit label stores."""

import json
import os
import tempfile

import pytest

from bubble_log_parser.unit_labels import (InMemoryUnitLabelStore, JsonFileUnitLabelStore,
                                           UnitLabelStoreError)


def test_in_memory_store():
    store = InMemoryUnitLabelStore()
    assert store.get('a.log') is None

    store.set('a.log', 'Unit 1')
    store.set('a.log', 'Unit 2')
    store.set('b.log', '')

    assert store.get('a.log') == 'Unit 2'
    assert store.get('b.log') is None
    assert store.list_all() == [{'fileName': 'a.log', 'unit': 'Unit 2'},
                                {'fileName': 'b.log', 'unit': ''}]
    assert store.as_mapping() == {'a.log': 'Unit 2'}


def test_json_store_persists():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, 'labels.json')

        store = JsonFileUnitLabelStore(path)
        assert store.list_all() == []
        store.set('a.log', '7')

        reloaded = JsonFileUnitLabelStore(path)
        assert reloaded.get('a.log') == '7'
        with open(path) as f:
            assert json.load(f) == [{'fileName': 'a.log', 'unit': '7'}]


def test_json_store_corrupt_file():
    with tempfile.NamedTemporaryFile('w', suffix='.json', delete=False) as temp_file:
        temp_file.write('{not json')
        path = temp_file.name

    try:
        with pytest.raises(UnitLabelStoreError):
            JsonFileUnitLabelStore(path)
    finally:
        os.unlink(path)


if __name__ == '__main__':
    pytest.main([__file__])
