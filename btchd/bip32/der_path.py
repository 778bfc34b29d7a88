#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 derivation path.

A BIP32 derivation path can be represented as:

- "m/0'/1/2'" string, where the leading "m" is mandatory
  and the "'" suffix marks a hardened index
- a single integer index, optionally flagged as hardened

In both cases it is parsed to a list of 32-bit integer indexes,
hardened indexes having the HARDENED bit set.
"""

import re
from typing import List, Optional, Sequence, Union

from btchd.exceptions import HDErrorKind, HDKeyError

HARDENED = 0x80000000
MAX_INDEX = 0xFFFFFFFF

DerPath = Union[str, int]

# an index below 2^31 has at most ten digits
_DER_PATH_RE = re.compile(r"m(/[0-9]{1,10}'?)*")


def _indexes_from_der_path_str(der_path: str) -> Optional[List[int]]:

    if not _DER_PATH_RE.fullmatch(der_path):
        return None

    indexes: List[int] = []
    for step in der_path.split("/")[1:]:
        hardened = step.endswith("'")
        index = int(step[:-1] if hardened else step)
        if index >= HARDENED:
            return None
        indexes.append(index + HARDENED if hardened else index)

    # depth is a single byte
    return indexes if len(indexes) < 256 else None


def parse_path(der_path: DerPath, hardened: bool = False) -> Optional[List[int]]:
    """Return the list of indexes of a derivation path, None if invalid.

    A string must be a complete "m/..." path;
    the hardened flag only applies to a single integer index.
    No partial result is ever returned.
    """

    if isinstance(der_path, str):
        return _indexes_from_der_path_str(der_path)

    # bool is a subclass of int
    if isinstance(der_path, int) and not isinstance(der_path, bool):
        if not 0 <= der_path <= MAX_INDEX:
            return None
        return [der_path | HARDENED if hardened else der_path]

    return None


def is_valid_path(der_path: DerPath, hardened: bool = False) -> bool:
    return parse_path(der_path, hardened) is not None


def indexes_from_der_path(der_path: DerPath, hardened: bool = False) -> List[int]:
    """Return the list of indexes of a derivation path.

    Differently from parse_path, it raises HDKeyError:
    INVALID_DERIVATION_ARGUMENT if the argument is neither a string
    nor an integer, INVALID_PATH if it does not parse.
    """

    if not isinstance(der_path, (str, int)) or isinstance(der_path, bool):
        err_msg = f"not a derivation path or index: {der_path!r}"
        raise HDKeyError(HDErrorKind.INVALID_DERIVATION_ARGUMENT, err_msg)

    indexes = parse_path(der_path, hardened)
    if indexes is None:
        raise HDKeyError(HDErrorKind.INVALID_PATH, f"{der_path!r}")
    return indexes


def str_from_index_int(i: int) -> str:
    if not 0 <= i <= MAX_INDEX:
        raise HDKeyError(HDErrorKind.INVALID_PATH, f"invalid index: {i}")
    if i < HARDENED:
        return str(i)
    return str(i - HARDENED) + "'"


def str_from_der_path(indexes: Sequence[int]) -> str:
    """Return the "m/0'/1" string of a sequence of indexes."""
    return "/".join(["m"] + [str_from_index_int(i) for i in indexes])
