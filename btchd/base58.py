#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Base58 and Base58Check codecs.

The Base58 alphabet has no 0 (zero), O (capital o), I (capital i)
and l (lower case L), nor any punctuation: a printed string is
unambiguous and a double-click selects it whole.

Base58Check appends hash256(payload)[:4] before encoding.
Decoding reports, in this order: invalid characters, a missing or
mismatched checksum, an unexpected payload size.
"""

from typing import Optional, Tuple

from btchd.alias import Octets, String
from btchd.exceptions import BTChdValueError
from btchd.hashes import hash256
from btchd.utils import bytes_from_octets

_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {char: i for i, char in enumerate(_ALPHABET)}
_ZERO = _ALPHABET[:1]


class Base58CharError(BTChdValueError):
    pass


class Base58ChecksumError(BTChdValueError):
    pass


def _b58encode(v: bytes) -> bytes:
    "Return the plain Base58 encoding, leading zero bytes becoming '1's."

    payload = v.lstrip(b"\x00")
    digits = []
    i = int.from_bytes(payload, byteorder="big", signed=False)
    while i:
        i, digit = divmod(i, 58)
        digits.append(_ALPHABET[digit])
    return _ZERO * (len(v) - len(payload)) + bytes(reversed(digits))


def _b58decode(v: bytes) -> bytes:
    "Return the plain Base58 decoding, leading '1's becoming zero bytes."

    i = 0
    for char in v:
        if char not in _INDEX:
            raise Base58CharError("Base58 string contains invalid characters")
        i = i * 58 + _INDEX[char]
    n_zeros = len(v) - len(v.lstrip(_ZERO))
    return b"\x00" * n_zeros + i.to_bytes((i.bit_length() + 7) // 8, byteorder="big")


def b58encode(v: Octets, in_size: Optional[int] = None) -> bytes:
    "Return the Base58Check encoding of the payload."

    v = bytes_from_octets(v, in_size)
    return _b58encode(v + hash256(v)[:4])


def split_checksum(v: String) -> Tuple[bytes, bytes]:
    """Return the (payload, checksum) pair of a Base58Check string.

    The checksum is not verified.
    """

    if isinstance(v, str):
        try:
            # spaces are not trimmed: they are invalid characters
            v = v.encode("ascii")
        except UnicodeEncodeError as e:
            raise Base58CharError("Base58 string is not ascii") from e

    decoded = _b58decode(v)
    if len(decoded) < 4:
        err_msg = "not enough bytes for checksum, "
        err_msg += f"invalid base58 decoded size: {len(decoded)}"
        raise Base58ChecksumError(err_msg)
    return decoded[:-4], decoded[-4:]


def b58decode(v: String, out_size: Optional[int] = None) -> bytes:
    "Return the payload of a Base58Check string, checking its size if required."

    payload, checksum = split_checksum(v)
    expected = hash256(payload)[:4]
    if checksum != expected:
        err_msg = f"invalid checksum: 0x{checksum.hex()} instead of 0x{expected.hex()}"
        raise Base58ChecksumError(err_msg)

    if out_size is not None and len(payload) != out_size:
        err_msg = "valid checksum, invalid decoded size: "
        err_msg += f"{len(payload)} bytes instead of {out_size}"
        raise BTChdValueError(err_msg)
    return payload
