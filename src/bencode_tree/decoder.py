"""
Bencode decoder: turns a raw byte buffer into a tree of Bencode values.
"""
import logging
from typing import Optional, Tuple

from .errors import (
    BencodeDecodeError,
    DepthLimitExceeded,
    InputTooLarge,
    InvalidKeyOrder,
    KeyMustBeByteString,
    MalformedNumber,
    NegativeLength,
    TrailingData,
    UnexpectedEof,
    UnexpectedToken,
    UnrecognizedPrefix,
)
from .structure import (
    INT64_MAX,
    INT64_MIN,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeType,
)

logger = logging.getLogger(__name__)

DIGITS = b"0123456789"
# len(str(2 ** 63)); longer digit runs cannot fit in 64 bits
MAX_DIGITS = 19


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into Bencode value objects.

    Each grammar rule is a ``parse_*`` method that consumes a prefix of the
    buffer starting at the cursor ``i`` and advances it. On failure the
    cursor is left at the offset reported by the raised error.
    """
    def __init__(self, data: bytes, *, strict: bool = False,
                 max_depth: Optional[int] = None, max_size: Optional[int] = None):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("The data to decode must be bytes.")
        self.data = memoryview(data).cast("B")
        self.i = 0  # cursor index
        self.depth = 0
        self.strict = strict
        self.max_depth = max_depth
        self.max_size = max_size

    def decode(self) -> Tuple[BencodeType, bytes]:
        """
        Main decode entry point. Decodes the first value in the buffer and
        returns it together with the bytes that were not consumed.
        """
        logger.debug(f"Decoding {len(self.data)} bytes (strict={self.strict}, "
                     f"max_depth={self.max_depth}, max_size={self.max_size})")

        self.depth = 0
        try:
            if self.max_size is not None and len(self.data) > self.max_size:
                raise InputTooLarge(
                    f"Input is {len(self.data)} bytes, limit is {self.max_size}", self.max_size)
            try:
                result = self.parse_value()
            except RecursionError as exc:
                raise DepthLimitExceeded(
                    "Nesting exceeds the interpreter recursion limit", self.i) from exc
        except BencodeDecodeError as exc:
            logger.debug(f"Decoding failed: {exc}")
            raise

        rest = self.remainder()
        logger.debug(f"Decoded {type(result).__name__}, consumed {self.i} bytes, {len(rest)} left")
        return result, rest

    def remainder(self) -> bytes:
        """Returns a copy of the bytes after the cursor."""
        return bytes(self.data[self.i:])

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _at_end(self) -> bool:
        return self.i >= len(self.data)

    def _peek(self) -> bytes:
        if self._at_end():
            raise UnexpectedEof("Unexpected end of input", self.i)
        return bytes(self.data[self.i:self.i+1])

    def _consume(self, n=1) -> bytes:
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        chunk = bytes(self.data[self.i:self.i+n])
        self.i += n
        return chunk

    def _expect(self, token: bytes):
        ch = self._peek()
        if ch != token:
            raise UnexpectedToken(f"Expected {token!r}, got {ch!r}", self.i)
        self._consume(1)

    def _fail(self, exc_type, message: str, offset: int) -> BencodeDecodeError:
        """Rewinds the cursor to offset and builds the error to raise."""
        self.i = offset
        return exc_type(message, offset)

    def _enter(self, offset: int):
        if self.max_depth is not None and self.depth >= self.max_depth:
            raise self._fail(DepthLimitExceeded, f"Nesting deeper than {self.max_depth}", offset)
        self.depth += 1

    @staticmethod
    def _has_leading_zero(number: bytes) -> bool:
        digits = number.lstrip(b"-")
        return len(digits) > 1 and digits.startswith(b"0")

    # --------------------------
    # Parsing functions
    # --------------------------

    def parse_value(self) -> BencodeType:
        """Dispatches on the first byte without consuming it."""
        ch = self._peek()

        if ch == b'i':
            return self.parse_integer()

        if ch == b'l':
            return self.parse_list()

        if ch == b'd':
            return self.parse_dict()

        if ch.isdigit():  # Bencode strings start with length, which is a digit
            return self.parse_byte_string()

        raise UnrecognizedPrefix(f"Invalid token {ch!r}", self.i)

    def parse_number(self) -> int:
        """Parses an optionally signed run of ASCII digits."""
        start = self.i
        if self._peek() == b'-':
            self._consume(1)

        digits_start = self.i
        while not self._at_end() and self.data[self.i] in DIGITS:
            self.i += 1

        if self.i == digits_start:
            if self._at_end():
                raise UnexpectedEof("Expected digits, input ended", self.i)
            raise MalformedNumber(f"Expected digits, got {self._peek()!r}", self.i)

        significant = bytes(self.data[digits_start:self.i]).lstrip(b'0') or b'0'
        if len(significant) > MAX_DIGITS:
            raise self._fail(MalformedNumber, "Number does not fit in 64 bits", start)

        num = int(significant)
        if digits_start != start:
            num = -num
        if not INT64_MIN <= num <= INT64_MAX:
            raise self._fail(MalformedNumber, "Number does not fit in 64 bits", start)
        return num

    def parse_integer(self) -> BencodeInt:
        """Parses an integer from the Bencoded data."""
        self._expect(b'i')

        start = self.i
        num = self.parse_number()
        text = bytes(self.data[start:self.i])

        if num == 0 and text.startswith(b'-'):
            raise self._fail(MalformedNumber, "Negative zero is not a valid integer", start)

        if self.strict and self._has_leading_zero(text):
            raise self._fail(MalformedNumber, f"Integer {text!r} has leading zeros", start)

        self._expect(b'e')
        return BencodeInt(num)

    def parse_byte_string(self) -> BencodeString:
        """Parses a byte string from the Bencoded data."""
        start = self.i
        length = self.parse_number()

        # checked on the sign byte so that "-0" is rejected as well
        text = bytes(self.data[start:self.i])
        if text.startswith(b'-'):
            raise self._fail(NegativeLength, f"Negative string length {text!r}", start)

        if self.strict and self._has_leading_zero(text):
            raise self._fail(MalformedNumber, "String length has leading zeros", start)

        self._expect(b':')

        available = len(self.data) - self.i
        if length > available:
            raise self._fail(
                UnexpectedEof, f"String needs {length} bytes, only {available} left", len(self.data))

        return BencodeString(self._consume(length))

    def parse_list(self) -> BencodeList:
        """Parses a list from the Bencoded data."""
        start = self.i
        self._expect(b'l')
        self._enter(start)
        items = []

        try:
            while self._peek() != b'e':
                items.append(self.parse_value())
        finally:
            self.depth -= 1

        self._consume(1)  # skip 'e'
        return BencodeList(items)

    def parse_dict(self) -> BencodeDict:
        """Parses a dictionary from the Bencoded data."""
        start = self.i
        self._expect(b'd')
        self._enter(start)
        obj = {}
        last_key = None

        try:
            while self._peek() != b'e':
                # keys MUST be strings
                key_start = self.i
                ch = self._peek()
                if not ch.isdigit():
                    raise KeyMustBeByteString(
                        f"Dictionary key must be a byte string, got {ch!r}", self.i)

                key = self.parse_byte_string().value
                if self.strict and last_key is not None and key <= last_key:
                    raise self._fail(
                        InvalidKeyOrder, f"Key {key!r} is not sorted after {last_key!r}", key_start)
                last_key = key

                # duplicate keys: the last occurrence wins
                obj[key] = self.parse_value()
        finally:
            self.depth -= 1

        self._consume(1)  # skip 'e'
        return BencodeDict(obj)


def decode(data: bytes, *, strict: bool = False, max_depth: Optional[int] = None,
           max_size: Optional[int] = None) -> Tuple[BencodeType, bytes]:
    """
    Convenience function to decode Bencoded data.
    Returns the first value and the unconsumed remainder.
    """
    decoder = BencodeDecoder(data, strict=strict, max_depth=max_depth, max_size=max_size)
    return decoder.decode()


def loads(data: bytes, *, strict: bool = False, max_depth: Optional[int] = None,
          max_size: Optional[int] = None) -> BencodeType:
    """
    Decodes a buffer holding exactly one Bencoded value.
    Raises TrailingData if anything follows it.
    """
    decoder = BencodeDecoder(data, strict=strict, max_depth=max_depth, max_size=max_size)
    result, rest = decoder.decode()
    if rest:
        raise TrailingData(f"{len(rest)} bytes left after the value", decoder.i)
    return result
