"""
Base domain model with camelCase JSON output.

Scan results leave the engine as JSON documents consumed by the tool layer,
which expects camelCase keys (``antipatternType``, ``severitySource``...).
All result models inherit from BaseDomainModel.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict


def to_camel_case(snake_str: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        >>> to_camel_case("line_number")
        'lineNumber'
        >>> to_camel_case("code_before")
        'codeBefore'
    """
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _serialize(value: Any) -> Any:
    if isinstance(value, BaseDomainModel):
        return value.to_json()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


@dataclass
class BaseDomainModel:
    """
    Base class for result models.

    - to_json() serializes to camelCase keys
    - Enum members are serialized by value
    - Nested models, lists and dicts are serialized recursively
    """

    def to_json(self) -> Dict[str, Any]:
        """
        Serialize to JSON-compatible dict with camelCase keys.

        Returns:
            Dictionary with camelCase keys and Enum values unwrapped
        """
        result: Dict[str, Any] = {}

        for field in fields(self):
            json_key = to_camel_case(field.name)
            result[json_key] = _serialize(getattr(self, field.name))

        return result

    def __str__(self) -> str:
        """String representation for logging."""
        field_strs = [f"{field.name}={getattr(self, field.name)!r}" for field in fields(self)]
        return f"{self.__class__.__name__}({', '.join(field_strs)})"
