import logging

import pytest

from bencode_tree import (BencodeDecodeError, DepthLimitExceeded, InputTooLarge, InvalidKeyOrder,
                          KeyMustBeByteString, MalformedNumber, NegativeLength, TrailingData,
                          UnexpectedEof, UnexpectedToken, UnrecognizedPrefix, decode, loads)
from bencode_tree.decoder import BencodeDecoder


@pytest.mark.parametrize(
    "encoded,error,offset",
    [
        (b"", UnexpectedEof, 0),
        (b"4:sp", UnexpectedEof, 4),
        (b"i12", UnexpectedEof, 3),
        (b"i", UnexpectedEof, 1),
        (b"i-", UnexpectedEof, 2),
        (b"4", UnexpectedEof, 1),
        (b"l", UnexpectedEof, 1),
        (b"li1e", UnexpectedEof, 4),
        (b"d", UnexpectedEof, 1),
        (b"d5:count", UnexpectedEof, 8),
        (b"x", UnrecognizedPrefix, 0),
        (b"-3:abc", UnrecognizedPrefix, 0),
        (b"e", UnrecognizedPrefix, 0),
        (b"lxe", UnrecognizedPrefix, 1),
        (b"ie", MalformedNumber, 1),
        (b"i-e", MalformedNumber, 2),
        (b"i-0e", MalformedNumber, 1),
        (b"i-000e", MalformedNumber, 1),
        (b"i9223372036854775808e", MalformedNumber, 1),
        (b"i-9223372036854775809e", MalformedNumber, 1),
        (b"i123456789012345678901234567890e", MalformedNumber, 1),
        (b"i12x", UnexpectedToken, 3),
        (b"i1.5e", UnexpectedToken, 2),
        (b"4-spam", UnexpectedToken, 1),
        (b"di1ei2ee", KeyMustBeByteString, 1),
        (b"dli1ee1:ae", KeyMustBeByteString, 1),
        (b"d1:ai1e-1:bi2ee", KeyMustBeByteString, 7),
    ],
)
def test_decode_failures(encoded, error, offset):
    with pytest.raises(error) as exc_info:
        decode(encoded)
    assert exc_info.value.offset == offset
    assert f"offset {offset}" in str(exc_info.value)


def test_errors_share_a_base():
    for exc_type in (UnrecognizedPrefix, MalformedNumber, NegativeLength, UnexpectedToken,
                     UnexpectedEof, KeyMustBeByteString, InvalidKeyOrder, DepthLimitExceeded,
                     InputTooLarge, TrailingData):
        assert issubclass(exc_type, BencodeDecodeError)
    assert issubclass(BencodeDecodeError, ValueError)


@pytest.mark.parametrize("encoded", [b"-3:abc", b"-0:", b"-00:"])
def test_negative_length(encoded):
    decoder = BencodeDecoder(encoded)
    with pytest.raises(NegativeLength) as exc_info:
        decoder.parse_byte_string()
    assert exc_info.value.offset == 0
    assert decoder.i == 0


def test_rule_rejects_wrong_leading_byte():
    with pytest.raises(UnexpectedToken):
        BencodeDecoder(b"4:spam").parse_integer()
    with pytest.raises(UnexpectedToken):
        BencodeDecoder(b"de").parse_list()
    with pytest.raises(UnexpectedToken):
        BencodeDecoder(b"le").parse_dict()


def test_cursor_left_at_failure_offset():
    decoder = BencodeDecoder(b"li1ei-0ee")
    with pytest.raises(MalformedNumber) as exc_info:
        decoder.decode()
    assert decoder.i == exc_info.value.offset == 5


def test_str_input_rejected():
    with pytest.raises(TypeError):
        decode("i42e")


def test_loads_rejects_trailing_data():
    with pytest.raises(TrailingData) as exc_info:
        loads(b"i1ei2e")
    assert exc_info.value.offset == 3


# --- strict mode ---

@pytest.mark.parametrize(
    "encoded,error,offset",
    [
        (b"i03e", MalformedNumber, 1),
        (b"i-03e", MalformedNumber, 1),
        (b"04:spam", MalformedNumber, 0),
        (b"d1:b1:x1:a1:ye", InvalidKeyOrder, 7),
        (b"d1:ai1e1:ai2ee", InvalidKeyOrder, 7),
    ],
)
def test_strict_failures(encoded, error, offset):
    with pytest.raises(error) as exc_info:
        decode(encoded, strict=True)
    assert exc_info.value.offset == offset


def test_strict_accepts_canonical_input():
    obj = loads(b"d0:0:1:ai0e2:bbi-10e1:clee", strict=True)
    assert obj.to_python() == {b"": b"", b"a": 0, b"bb": -10, b"c": []}


# --- hardening limits ---

def test_max_depth():
    assert loads(b"llee", max_depth=2).to_python() == [[]]
    with pytest.raises(DepthLimitExceeded) as exc_info:
        loads(b"llee", max_depth=1)
    assert exc_info.value.offset == 1


def test_max_depth_counts_dicts():
    with pytest.raises(DepthLimitExceeded):
        loads(b"d1:ad1:bleee", max_depth=2)


def test_max_depth_zero_allows_scalars():
    assert loads(b"i1e", max_depth=0).value == 1


def test_recursion_limit_becomes_decode_error():
    depth = 100000
    with pytest.raises(DepthLimitExceeded):
        decode(b"l" * depth + b"e" * depth)


def test_depth_restored_after_nested_failure():
    decoder = BencodeDecoder(b"lxe", max_depth=1)
    with pytest.raises(UnrecognizedPrefix):
        decoder.parse_list()
    assert decoder.depth == 0

    decoder = BencodeDecoder(b"llee", max_depth=1)
    with pytest.raises(DepthLimitExceeded):
        decoder.parse_list()
    assert decoder.depth == 0


def test_decode_resets_depth():
    decoder = BencodeDecoder(b"le", max_depth=1)
    decoder.depth = 5
    assert decoder.decode()[0].to_python() == []


@pytest.mark.parametrize(
    "encoded,options",
    [
        (b"4:spam", {"max_size": 1}),
        (b"l" * 100000 + b"e" * 100000, {}),
        (b"llee", {"max_depth": 1}),
        (b"i12", {}),
    ],
)
def test_decode_logs_failures(caplog, encoded, options):
    with caplog.at_level(logging.DEBUG, logger="bencode_tree.decoder"):
        with pytest.raises(BencodeDecodeError):
            decode(encoded, **options)
    assert caplog.text.count("Decoding failed") == 1


def test_max_size():
    assert loads(b"4:spam", max_size=6).value == b"spam"
    with pytest.raises(InputTooLarge) as exc_info:
        loads(b"4:spam", max_size=5)
    assert exc_info.value.offset == 5
