"""
User-assigned unit labels, keyed by file name.

The parsing engine never reads these; labels only group results for display
and comparison. Storage is behind a small interface so callers can inject
whichever backend they use.
"""

import json
import os
from typing import Dict, List, Optional, Protocol


class UnitLabelStoreError(Exception):
    """Raised when a label store cannot be loaded"""
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load unit labels from '{path}': {reason}")


class UnitLabelStore(Protocol):
    def get(self, file_name: str) -> Optional[str]: ...

    def set(self, file_name: str, label: str) -> None: ...

    def list_all(self) -> List[dict]: ...


class InMemoryUnitLabelStore:
    def __init__(self, labels: Optional[Dict[str, str]] = None):
        self._labels = dict(labels or {})

    def get(self, file_name: str) -> Optional[str]:
        return self._labels.get(file_name) or None

    def set(self, file_name: str, label: str) -> None:
        self._labels[file_name] = label

    def list_all(self) -> List[dict]:
        return [{'fileName': name, 'unit': unit} for name, unit in self._labels.items()]

    def as_mapping(self) -> Dict[str, str]:
        return {item['fileName']: item['unit'] for item in self.list_all() if item['unit']}


class JsonFileUnitLabelStore(InMemoryUnitLabelStore):
    """Labels persisted as a JSON list of ``{"fileName": ..., "unit": ...}`` records."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(self._load())

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                records = json.load(f)
            return {record['fileName']: record['unit'] for record in records}
        except (ValueError, KeyError, TypeError) as e:
            raise UnitLabelStoreError(self.path, e) from e

    def set(self, file_name: str, label: str) -> None:
        super().set(file_name, label)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self.list_all(), f, indent=2)
