"""
Bencode package for decoding BitTorrent data into typed value trees.
"""
from .decoder import BencodeDecoder, decode, loads
from .errors import (BencodeDecodeError, DepthLimitExceeded, InputTooLarge, InvalidKeyOrder,
                     KeyMustBeByteString, MalformedNumber, NegativeLength, TrailingData,
                     UnexpectedEof, UnexpectedToken, UnrecognizedPrefix)
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, to_python

__all__ = [
    'decode',
    'loads',
    'to_python',
    'BencodeDecoder',
    'BencodeType',
    'BencodeInt',
    'BencodeString',
    'BencodeList',
    'BencodeDict',
    'BencodeDecodeError',
    'UnrecognizedPrefix',
    'MalformedNumber',
    'NegativeLength',
    'UnexpectedToken',
    'UnexpectedEof',
    'KeyMustBeByteString',
    'InvalidKeyOrder',
    'DepthLimitExceeded',
    'InputTooLarge',
    'TrailingData',
]
