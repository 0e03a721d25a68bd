"""
Value model: the closed set of shapes a store can hold.

Every stored value is one of six frozen variants: String, Number, Boolean,
Null, Array and Object. Variants compare structurally and never equal a
different variant, so Boolean(True) != Number(1) even though True == 1 in
Python. Because values are immutable, handing one out of a store never
exposes store internals to mutation.
"""
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple, Union

# Compact form used for nested values and CSV cells
_COMPACT = {'separators': (',', ':'), 'sort_keys': True, 'allow_nan': False}


def reject_constant(name: str):
    """parse_constant hook for json.loads: NaN and Infinity are not JSON."""
    raise ValueError(f'Invalid JSON constant {name}')


class Value:
    """Base class for all storable values."""

    __slots__ = ()

    def to_python(self) -> Any:
        """Return a plain JSON-compatible Python object."""
        raise NotImplementedError

    def render(self) -> str:
        """Return the text placed in a CSV cell for this value."""
        raise NotImplementedError

    def to_json(self) -> str:
        """Encode as compact JSON text. Raises ValueError for NaN/inf numbers."""
        return json.dumps(self.to_python(), **_COMPACT)

    @staticmethod
    def from_json(text: Union[str, bytes]) -> 'Value':
        """Decode JSON text into a Value. Raises ValueError on invalid JSON."""
        try:
            return Value.from_python(json.loads(text, parse_constant=reject_constant))
        except RecursionError as e:
            raise ValueError('JSON text is nested too deeply') from e

    @staticmethod
    def from_python(obj: Any) -> 'Value':
        """Build a Value from str, int, float, bool, None, list/tuple or dict."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return Null()
        # bool is a subclass of int, so it must be checked first
        if isinstance(obj, bool):
            return Boolean(obj)
        if isinstance(obj, (int, float)):
            return Number(obj)
        if isinstance(obj, str):
            return String(obj)
        if isinstance(obj, (list, tuple)):
            return Array(Value.from_python(item) for item in obj)
        if isinstance(obj, dict):
            for key in obj:
                if not isinstance(key, str):
                    raise TypeError(f'Object keys must be strings, got {type(key).__name__}')
            return Object({key: Value.from_python(item) for key, item in obj.items()})
        raise TypeError(f'Cannot store value of type {type(obj).__name__}')


@dataclass(frozen=True)
class String(Value):
    text: str

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError(f'String holds str, got {type(self.text).__name__}')

    def to_python(self) -> str:
        return self.text

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class Number(Value):
    """Integer or floating point number."""

    number: Union[int, float]

    def __post_init__(self):
        if isinstance(self.number, bool):
            object.__setattr__(self, 'number', int(self.number))
        elif not isinstance(self.number, (int, float)):
            raise TypeError(f'Number holds int or float, got {type(self.number).__name__}')

    def to_python(self) -> Union[int, float]:
        return self.number

    def render(self) -> str:
        return json.dumps(self.number, allow_nan=False)


@dataclass(frozen=True)
class Boolean(Value):
    flag: bool

    def __post_init__(self):
        if not isinstance(self.flag, bool):
            raise TypeError(f'Boolean holds bool, got {type(self.flag).__name__}')

    def to_python(self) -> bool:
        return self.flag

    def render(self) -> str:
        return 'true' if self.flag else 'false'


@dataclass(frozen=True)
class Null(Value):

    def to_python(self) -> None:
        return None

    def render(self) -> str:
        return 'null'


@dataclass(frozen=True)
class Array(Value):
    """Ordered sequence of values. Equality is order sensitive."""

    items: Tuple[Value, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]

    def render(self) -> str:
        return self.to_json()


@dataclass(frozen=True, eq=False)
class Object(Value):
    """String-keyed mapping of values. Equality ignores insertion order."""

    fields: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self):
        # Copy so later changes to the caller's dict cannot leak in
        object.__setattr__(self, 'fields', MappingProxyType(dict(self.fields)))

    def __eq__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented
        return dict(self.fields) == dict(other.fields)

    def __hash__(self):
        return hash(frozenset(self.fields.items()))

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, key: str) -> Value:
        return self.fields[key]

    def to_python(self) -> dict:
        return {key: item.to_python() for key, item in self.fields.items()}

    def render(self) -> str:
        return self.to_json()


def as_value(obj: Union[Value, Any]) -> Value:
    """Coerce a plain Python object to a Value; Values pass through."""
    return Value.from_python(obj)
