import copy
import json
from pathlib import Path
from typing import Any, Dict

DATA_FILE = Path(__file__).parent / "test_data.json"


class TestDataLoader:
    """Canned backend users, form inputs and response bodies"""

    _data: Dict[str, Any] = None

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
            raise KeyError(f"No fixture named {key!r} in {DATA_FILE.name}")
        return data[key]

    @classmethod
    def get_copy(cls, key: str) -> Any:
        return copy.deepcopy(cls.get(key))

    @classmethod
    def response(cls, key: str) -> Dict[str, Any]:
        """Backend body wrapping the named fixture as `data.user`"""
        return {"success": True, "data": {"user": cls.get_copy(key)}}
