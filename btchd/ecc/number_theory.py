#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Modular arithmetic over prime fields."""

from btchd.exceptions import BTChdValueError
from btchd.utils import hex_string


def _short_repr(i: int) -> str:
    return hex_string(i) if i > 0xFFFFFFFF else str(i)


def mod_inv(a: int, m: int) -> int:
    "Return the inverse of a modulo m."

    try:
        return pow(a, -1, m)
    except ValueError as e:
        err_msg = f"No inverse for {_short_repr(a % m)} mod {_short_repr(m)}"
        raise BTChdValueError(err_msg) from e


def mod_sqrt(a: int, p: int) -> int:
    """Return a square root of a modulo the prime p.

    Only primes with p = 3 (mod 4) are supported, where the root is
    a^((p+1)/4). The other root is p minus the returned one.
    """

    if p % 4 != 3:
        raise BTChdValueError(f"unsupported prime, not 3 mod 4: {p}")

    a %= p
    root = pow(a, (p + 1) // 4, p)
    if root * root % p != a:
        raise BTChdValueError(f"no root for {_short_repr(a)}")
    return root
