"""
Exceptions raised while decoding Bencoded data.

All of them derive from ``BencodeDecodeError`` and carry the byte offset at
which the problem was detected.
"""


class BencodeDecodeError(ValueError):
    """Custom exception for Bencode decoding errors."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (at offset {offset})")
        self.message = message
        self.offset = offset


class UnrecognizedPrefix(BencodeDecodeError):
    """The leading byte does not start any bencode value."""


class MalformedNumber(BencodeDecodeError):
    """A number has no digits, overflows 64 bits or is not canonical."""


class NegativeLength(BencodeDecodeError):
    """A byte string declares a negative length."""


class UnexpectedToken(BencodeDecodeError):
    """An expected literal byte (i, l, d, e, :) is not at the cursor."""


class UnexpectedEof(BencodeDecodeError):
    """The input ended before the current value was complete."""


class KeyMustBeByteString(BencodeDecodeError):
    """A dictionary key is not a byte string."""


class InvalidKeyOrder(BencodeDecodeError):
    """Strict mode: dictionary keys are duplicated or not sorted."""


class DepthLimitExceeded(BencodeDecodeError):
    """Lists/dicts are nested deeper than the configured limit."""


class InputTooLarge(BencodeDecodeError):
    """The input buffer is larger than the configured limit."""


class TrailingData(BencodeDecodeError):
    """Bytes remain after the single expected value."""
