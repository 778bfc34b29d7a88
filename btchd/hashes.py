#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash functions of the extended key and transaction codecs.

hash160 identifies keys (fingerprints), hash256 checksums Base58Check
payloads and identifies transactions, HMAC-SHA512 drives key derivation.
"""

import hashlib
import hmac

from btchd.alias import Octets
from btchd.utils import bytes_from_octets

# OpenSSL 3 keeps ripemd160 in its legacy provider, which hashlib
# does not load by default (https://bugs.python.org/issue47101)
try:
    hashlib.new("ripemd160")
except ValueError:  # pragma: no cover
    import ctypes

    _libssl = ctypes.CDLL("libssl.so")
    for _provider in (b"legacy", b"default"):
        _libssl.OSSL_PROVIDER_load(None, _provider)


def sha256(octets: Octets) -> bytes:
    return hashlib.sha256(bytes_from_octets(octets)).digest()


def ripemd160(octets: Octets) -> bytes:
    return hashlib.new("ripemd160", bytes_from_octets(octets)).digest()


def hash160(octets: Octets) -> bytes:
    "Return RIPEMD160(SHA256(octets))."
    return ripemd160(sha256(octets))


def hash256(octets: Octets) -> bytes:
    "Return SHA256(SHA256(octets))."
    return sha256(sha256(octets))


def hmac_sha512(key: bytes, msg: bytes) -> bytes:
    return hmac.new(key, msg, hashlib.sha512).digest()
