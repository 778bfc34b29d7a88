#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""SEC 1 v.2 encoding of curve points (section 2.3.3 and 2.3.4).

A compressed point is the parity prefix (0x02 even y, 0x03 odd y)
followed by x; an uncompressed point is 0x04 followed by x and y.
"""

from btchd.alias import Octets, Point
from btchd.ecc.curve import Curve, secp256k1
from btchd.exceptions import BTChdValueError
from btchd.utils import bytes_from_octets, hex_string


def bytes_from_point(Q: Point, ec: Curve = secp256k1, compressed: bool = True) -> bytes:
    "Return the SEC encoding of a curve point."

    ec.require_on_curve(Q)
    if Q[1] == 0:
        raise BTChdValueError("no bytes representation for infinity point")

    x, y = (c.to_bytes(ec.p_size, byteorder="big", signed=False) for c in Q)
    if compressed:
        return bytes([2 + (Q[1] & 1)]) + x
    return b"\x04" + x + y


def _check_size(pub_key: bytes, size: int, kind: str) -> None:
    if len(pub_key) != size:
        err_msg = f"invalid size for {kind} point: {len(pub_key)} instead of {size}"
        raise BTChdValueError(err_msg)


def point_from_octets(pub_key: Octets, ec: Curve = secp256k1) -> Point:
    "Return the curve point of a compressed or uncompressed SEC encoding."

    pub_key = bytes_from_octets(pub_key, (ec.p_size + 1, 2 * ec.p_size + 1))
    prefix = pub_key[0]
    x = int.from_bytes(pub_key[1 : ec.p_size + 1], byteorder="big", signed=False)

    if prefix in (0x02, 0x03):
        _check_size(pub_key, ec.p_size + 1, "compressed")
        try:
            y = ec.y_even(x)
        except BTChdValueError as e:
            raise BTChdValueError(f"invalid x-coordinate: '{hex_string(x)}'") from e
        return (x, y) if prefix == 0x02 else (x, ec.p - y)

    if prefix == 0x04:
        _check_size(pub_key, 2 * ec.p_size + 1, "uncompressed")
        y = int.from_bytes(pub_key[ec.p_size + 1 :], byteorder="big", signed=False)
        # y == 0 would be read as the point at infinity
        if y == 0 or not ec.is_on_curve((x, y)):
            raise BTChdValueError(f"point not on curve: {(x, y)}")
        return x, y

    raise BTChdValueError(f"not a point: {pub_key!r}")
