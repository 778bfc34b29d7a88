#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Assorted conversion utilities."

from io import BytesIO
from typing import Iterable, Optional, Union

from btchd.alias import BinaryData, Octets
from btchd.exceptions import BTChdValueError

NoneOneOrMoreInt = Optional[Union[int, Iterable[int]]]


def bytes_from_octets(octets: Octets, out_size: NoneOneOrMoreInt = None) -> bytes:
    """Return bytes from bytes or from a hex-string.

    If out_size is given (a size or a collection of sizes)
    the result length is checked against it.
    """

    if isinstance(octets, str):
        octets = bytes.fromhex(octets)

    if out_size is None:
        return octets
    sizes = (out_size,) if isinstance(out_size, int) else tuple(out_size)
    if len(octets) not in sizes:
        err_msg = f"invalid size: {len(octets)} bytes instead of {out_size}"
        raise BTChdValueError(err_msg)
    return octets


def bytesio_from_binarydata(stream: BinaryData) -> BytesIO:
    "Wrap Octets in a BytesIO stream, leave a stream untouched."

    if isinstance(stream, BytesIO):
        return stream
    return BytesIO(bytes_from_octets(stream))


def read_exact(stream: BytesIO, size: int, what: str) -> bytes:
    "Read exactly size bytes from the stream."

    data = stream.read(size)
    if len(data) != size:
        raise BTChdValueError(f"not enough binary data for {what}")
    return data


def hex_string(i: Union[int, bytes]) -> str:
    """Return the upper case hex rendering of a non-negative int or bytes.

    Digits are grouped by eight (four bytes) starting from the least
    significant end, e.g. '01 02030405'.
    """

    if isinstance(i, bytes):
        i = int.from_bytes(i, byteorder="big", signed=False)
    if i < 0:
        raise BTChdValueError(f"negative integer: {i}")

    digits = f"{i:X}"
    if len(digits) % 2:
        digits = "0" + digits
    head = len(digits) % 8
    groups = [digits[:head]] if head else []
    groups += [digits[j : j + 8] for j in range(head, len(digits), 8)]
    return " ".join(groups)


def int32_from_bytes(data: bytes) -> int:
    "Return the signed (two's complement) big endian int of four bytes."
    return int.from_bytes(data, byteorder="big", signed=True)


def bytes_from_int32(i: int) -> bytes:
    "Return four big endian bytes from a signed or unsigned 32-bit int."
    if not -0x80000000 <= i <= 0xFFFFFFFF:
        raise BTChdValueError(f"not a 32-bit integer: {i}")
    return (i & 0xFFFFFFFF).to_bytes(4, byteorder="big", signed=False)
