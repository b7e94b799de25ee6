import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

DATA_FILE = Path(__file__).parent / "test_data.json"


class TestDataLoader:
    """Read-only access to the shared request payloads in test_data.json"""

    __test__ = False  # not a test class

    _data: Optional[Dict[str, Any]] = None

    @classmethod
    def load(cls) -> Dict[str, Any]:
        if cls._data is None:
            with open(DATA_FILE) as f:
                cls._data = json.load(f)
        return cls._data

    @classmethod
    def get(cls, key: str) -> Any:
        data = cls.load()
        if key not in data:
            raise KeyError(f"No test data named {key!r} in {DATA_FILE.name}")
        return data[key]

    @classmethod
    def get_copy(cls, key: str) -> Any:
        """Deep copy, so a test can mutate the payload freely"""
        return copy.deepcopy(cls.get(key))
