# ceph_osd_exporter/ceph/response.py - Decoded admin socket responses
"""
Read-only view over a decoded admin socket response.

Responses are open-ended JSON objects. Only the fields a caller asks for
are checked; everything else is carried along untouched.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator

from .errors import SchemaError


class AdminSocketResponse(Mapping):
    """
    JSON object returned by an admin socket command.

    Behaves like a read-only dict. The typed accessors raise SchemaError
    instead of returning a value of the wrong shape.
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"AdminSocketResponse({self._data!r})"

    def _require(self, key: str) -> Any:
        if key not in self._data:
            raise SchemaError(f"missing field '{key}'", response=self._data)
        return self._data[key]

    def get_float(self, key: str) -> float:
        """
        Get a numeric field as a float.

        JSON integers are accepted since the wire format does not tell
        0 and 0.0 apart. Booleans are rejected.

        Args:
            key: Field name

        Returns:
            Field value as float
        """
        value = self._require(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaError(
                f"field '{key}' is {type(value).__name__}, expected number",
                response=self._data,
            )
        return float(value)

    def get_string(self, key: str) -> str:
        """Get a string field."""
        value = self._require(key)
        if not isinstance(value, str):
            raise SchemaError(
                f"field '{key}' is {type(value).__name__}, expected string",
                response=self._data,
            )
        return value

    def get_mapping(self, key: str) -> "AdminSocketResponse":
        """Get a nested object field as another response view."""
        value = self._require(key)
        if not isinstance(value, dict):
            raise SchemaError(
                f"field '{key}' is {type(value).__name__}, expected object",
                response=self._data,
            )
        return AdminSocketResponse(value)

    def to_dict(self) -> Dict[str, Any]:
        """Get the raw decoded object."""
        return dict(self._data)
