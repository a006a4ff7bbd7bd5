"""
Data structures for representing decoded Bencode values.

Every decoded term is an instance of one of the four ``BencodeType``
subclasses below. Instances are immutable: the payload is exposed through a
read-only ``value`` property and containers hold tuples / read-only mappings.
"""
from types import MappingProxyType

__all__ = [
    "INT64_MIN",
    "INT64_MAX",
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "to_python",
]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("_value",)

    @property
    def value(self):
        return self._value

    def __setattr__(self, name, val):
        if hasattr(self, "_value"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, val)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"

    def to_python(self):
        """Unwraps this value (recursively) into plain bytes/int/list/dict."""
        return to_python(self)


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ()

    def __init__(self, value: int):
        # bool is an int subclass but never a bencode integer
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError("BencodeInt must fit in a signed 64-bit integer.")
        self._value = value

    def __hash__(self):
        return hash((BencodeInt, self._value))

    def __int__(self):
        return self._value


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self._value = bytes(value)

    def __hash__(self):
        return hash((BencodeString, self._value))

    def __len__(self):
        return len(self._value)

    def __bytes__(self):
        return self._value


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        for item in value:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode values.")
        self._value = tuple(value)

    __hash__ = None

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __getitem__(self, index):
        return self._value[index]


class BencodeDict(BencodeType):
    """Represents a Bencoded dictionary."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, (dict, MappingProxyType)):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k, v in value.items():
            if not isinstance(k, bytes):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode values.")
        self._value = MappingProxyType(dict(value))

    __hash__ = None

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        # compare the underlying mappings; ordering is irrelevant
        return dict(self._value) == dict(other._value)

    def __repr__(self):
        return f"BencodeDict({dict(self._value)!r})"

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __contains__(self, key):
        return key in self._value

    def __getitem__(self, key):
        return self._value[key]

    def get(self, key, default=None):
        return self._value.get(key, default)

    def keys(self):
        return self._value.keys()

    def items(self):
        return self._value.items()


def to_python(obj):
    """
    Converts a Bencode value tree into plain Python objects:
    bytes, int, list and dict (with bytes keys).
    """
    if isinstance(obj, (BencodeString, BencodeInt)):
        return obj.value

    if isinstance(obj, BencodeList):
        return [to_python(x) for x in obj.value]

    if isinstance(obj, BencodeDict):
        return {k: to_python(v) for k, v in obj.value.items()}

    raise TypeError(f"Cannot convert object of type {type(obj)}")
