"""Keyed scratch storage that animation drivers use to keep state between frames."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Type, TypeVar, overload

from .errors import DataKeyError, DataTypeError

T = TypeVar("T")


class Data:
    """Mapping from string keys to values of arbitrary type.

    ``get`` can check the stored value's type. A missing key raises
    :class:`DataKeyError`, while a value of the wrong type at an existing key
    raises :class:`DataTypeError`.

    >>> data = Data()
    >>> data.set("speed", 1.5)
    >>> data.get("speed", float)
    1.5
    """

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def _lookup(self, key: str) -> Any:
        try:
            return self._data[key]
        except KeyError:
            raise DataKeyError(f"No data associated with the key `{key}`.") from None

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, expected_type: Type[T]) -> T: ...

    def get(self, key: str, expected_type: Optional[type] = None) -> Any:
        value = self._lookup(key)
        if expected_type is not None and not isinstance(value, expected_type):
            raise DataTypeError(
                f"Data associated with the key `{key}` exists, but it is not of type "
                f"{expected_type.__name__}."
            )
        return value

    def set(self, key: str, value: Any) -> None:
        if not isinstance(key, str) or not key:
            raise DataKeyError(f"Invalid data key {key!r}; keys must be non-empty strings.")
        self._data[key] = value

    def store(self, key: str, value: T) -> T:
        """Set ``key`` and hand the stored value back for further use."""

        self.set(key, value)
        return value

    def empty_at(self, key: str) -> bool:
        return key not in self._data

    def remove(self, key: str) -> Any:
        value = self._lookup(key)
        del self._data[key]
        return value

    def keys(self) -> Iterator[str]:
        return iter(sorted(self._data))

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Data({sorted(self._data)})"


__all__ = ["Data"]
