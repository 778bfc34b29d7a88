#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Module btchd.bip32."""

from btchd.bip32.ckd import derive, rootxprv_from_seed, xpub_from_xprv
from btchd.bip32.der_path import (
    HARDENED,
    indexes_from_der_path,
    is_valid_path,
    parse_path,
    str_from_der_path,
)
from btchd.bip32.hd_keys import HDPrivateKey, HDPublicKey
from btchd.bip32.key_data import BIP32KeyData

__all__ = [
    "BIP32KeyData",
    "HARDENED",
    "HDPrivateKey",
    "HDPublicKey",
    "derive",
    "indexes_from_der_path",
    "is_valid_path",
    "parse_path",
    "rootxprv_from_seed",
    "str_from_der_path",
    "xpub_from_xprv",
]
