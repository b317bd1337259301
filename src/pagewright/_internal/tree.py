"""Generic tree values and recursive merge.

Deployment descriptors and inline overrides are arbitrary nested documents
(whatever the hosting platform accepts), so they are modelled as plain
mappings/lists/scalars rather than a fixed schema.
"""

from collections.abc import Mapping
from typing import Any, TypeAlias

TreeValue: TypeAlias = str | int | float | bool | list[Any] | dict[str, Any]


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` and return a new mapping.

    Mappings present on both sides are merged recursively. Any other value
    in ``override`` replaces the one in ``base`` (lists included). Keys only
    present in ``base`` are preserved. Neither input is mutated.

        >>> deep_merge({"a": {"y": 2}, "b": 3}, {"a": {"x": 1}})
        {'a': {'y': 2, 'x': 1}, 'b': 3}
    """
    merged: dict[str, Any] = {key: _copy(value) for key, value in base.items()}
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy(value)
    return merged


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_copy(item) for item in value]
    return value
