#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""CompactSize unsigned integers and length-prefixed byte strings.

Values below 0xFD take a single byte; larger ones are a marker byte
followed by the little endian value:

* 0xFD: two bytes
* 0xFE: four bytes
* 0xFF: eight bytes

Transactions use them for input/output counts and script lengths.
"""

from btchd.alias import BinaryData, Octets
from btchd.exceptions import BTChdValueError
from btchd.utils import (
    bytes_from_octets,
    bytesio_from_binarydata,
    hex_string,
    read_exact,
)

_MARKERS = ((0xFFFF, 0xFD, 2), (0xFFFFFFFF, 0xFE, 4), (0xFFFFFFFFFFFFFFFF, 0xFF, 8))
_SIZES = {marker: size for _, marker, size in _MARKERS}


def serialize(i: int) -> bytes:
    "Return the CompactSize encoding of a non-negative integer."

    if i < 0:
        raise BTChdValueError(f"negative integer: {i}")
    if i < 0xFD:
        return bytes([i])
    for max_value, marker, size in _MARKERS:
        if i <= max_value:
            return bytes([marker]) + i.to_bytes(size, byteorder="little", signed=False)
    err_msg = f"integer too big for CompactSize encoding: '{hex_string(i)}'"
    raise BTChdValueError(err_msg)


def parse(data: BinaryData) -> int:
    "Return the CompactSize integer read from the stream."

    stream = bytesio_from_binarydata(data)
    first = read_exact(stream, 1, "CompactSize")[0]
    size = _SIZES.get(first)
    if size is None:
        return first
    value = read_exact(stream, size, "CompactSize")
    return int.from_bytes(value, byteorder="little", signed=False)


def serialize_bytes(octets: Octets) -> bytes:
    "Return the CompactSize length prefix followed by the octets."

    octets = bytes_from_octets(octets)
    return serialize(len(octets)) + octets


def parse_bytes(data: BinaryData) -> bytes:
    "Return the length-prefixed octets read from the stream."

    stream = bytesio_from_binarydata(data)
    return read_exact(stream, parse(stream), "length-prefixed data")
