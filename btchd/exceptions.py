#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

BTChdValueError, BTChdTypeError, and BTChdRuntimeError are only meant
to discriminate between Exceptions being raised by btchd from those
raised by other codebase: users are usually better off just dealing
with the regular ValueError, TypeError, and RuntimeError
from which the btchd versions are derived.

HD key failures are all reported as HDKeyError, whose kind attribute
tells them apart (e.g. an invalid checksum from a wrong network)
and whose reason attribute refines the INVALID_ENTROPY_ARGUMENT kind.
"""

from enum import Enum
from typing import Optional


class BTChdValueError(ValueError):
    pass


class BTChdTypeError(TypeError):
    pass


class BTChdRuntimeError(RuntimeError):
    pass


class HDErrorKind(Enum):
    UNRECOGNIZED_ARGUMENT = "unrecognized argument"
    INVALID_DERIVATION_ARGUMENT = "invalid derivation argument"
    INVALID_ENTROPY_ARGUMENT = "invalid entropy argument"
    INVALID_PATH = "invalid path"
    INVALID_LENGTH = "invalid length"
    INVALID_B58_CHAR = "invalid base58 character"
    INVALID_CHECKSUM = "invalid checksum"
    INVALID_NETWORK_ARGUMENT = "invalid network argument"
    INVALID_NETWORK = "invalid network"
    WRONG_NETWORK = "wrong network"
    INVALID_KEY = "invalid key"


class EntropyReason(Enum):
    NOT_ENOUGH = "not enough entropy"
    TOO_MUCH = "too much entropy"


class HDKeyError(BTChdValueError):
    """Error raised while building, decoding, or deriving an HD key."""

    def __init__(
        self, kind: HDErrorKind, msg: str, reason: Optional[EntropyReason] = None
    ) -> None:
        self.kind = kind
        self.reason = reason
        prefix = reason.value if reason else kind.value
        super().__init__(f"{prefix}: {msg}")
