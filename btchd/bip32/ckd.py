#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 master key generation and Child Key Derivation (CKD).

A deterministic wallet is a hash-chain of private/public key pairs that
derives from a single root, which is the only element requiring backup.
Moreover, there are schemes where public keys can be calculated without
accessing private keys.

Here, the HD wallet is implemented according to BIP32 bitcoin standard
https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki.

If a derivation step results in an invalid key (I_L not less than n,
zero private key, or infinity point) BIP32 prescribes to proceed
with the next index: this is done at most MAX_CKD_RETRIES times,
without crossing the hardened boundary.
"""

import logging
from typing import Tuple, Union

from btchd.alias import Octets, Point
from btchd.bip32.der_path import HARDENED, MAX_INDEX, DerPath, indexes_from_der_path
from btchd.bip32.key_data import BIP32KeyData
from btchd.ecc.curve import mult, secp256k1
from btchd.ecc.sec_point import bytes_from_point, point_from_octets
from btchd.exceptions import (
    BTChdRuntimeError,
    EntropyReason,
    HDErrorKind,
    HDKeyError,
)
from btchd.hashes import hash160, hmac_sha512
from btchd.network import Network, get_network

logger = logging.getLogger(__name__)

ec = secp256k1

MIN_ENTROPY_SIZE = 16
MAX_ENTROPY_SIZE = 64
MAX_CKD_RETRIES = 8

_MASTER_KEY = b"Bitcoin seed"


def _seed_from_entropy(seed: Octets) -> bytes:

    if isinstance(seed, str):
        try:
            seed = bytes.fromhex(seed)
        except ValueError as e:
            err_msg = f"not a hex-string: {seed!r}"
            raise HDKeyError(HDErrorKind.INVALID_ENTROPY_ARGUMENT, err_msg) from e
    if not isinstance(seed, (bytes, bytearray)):
        err_msg = f"not bytes or hex-string: {type(seed).__name__}"
        raise HDKeyError(HDErrorKind.INVALID_ENTROPY_ARGUMENT, err_msg)

    if len(seed) < MIN_ENTROPY_SIZE:
        err_msg = f"{len(seed)} bytes instead of at least {MIN_ENTROPY_SIZE}"
        raise HDKeyError(
            HDErrorKind.INVALID_ENTROPY_ARGUMENT, err_msg, EntropyReason.NOT_ENOUGH
        )
    if len(seed) > MAX_ENTROPY_SIZE:
        err_msg = f"{len(seed)} bytes instead of at most {MAX_ENTROPY_SIZE}"
        raise HDKeyError(
            HDErrorKind.INVALID_ENTROPY_ARGUMENT, err_msg, EntropyReason.TOO_MUCH
        )
    return bytes(seed)


def rootxprv_from_seed(
    seed: Octets, network: Union[str, Network, None] = None
) -> BIP32KeyData:
    """Return BIP32 root master extended private key from seed.

    The seed can be bytes or hex-string, between 16 and 64 bytes.
    """

    seed = _seed_from_entropy(seed)
    version = get_network(network).bip32_prv

    hmac_ = hmac_sha512(_MASTER_KEY, seed)
    q = int.from_bytes(hmac_[:32], byteorder="big", signed=False)
    if not 0 < q < ec.n:
        # probability lower than 1 in 2^127
        raise HDKeyError(HDErrorKind.INVALID_KEY, "invalid master key from seed")

    logger.debug("master key generated from %d bytes of entropy", len(seed))
    return BIP32KeyData(
        version=version,
        depth=0,
        parent_fingerprint=b"\x00" * 4,
        index=0,
        chain_code=hmac_[32:],
        key=b"\x00" + hmac_[:32],
    )


def pub_key_point(xkey: BIP32KeyData) -> Point:
    "Return the public key point of a private or public extended key."

    if xkey.is_private:
        return mult(int.from_bytes(xkey.key[1:], byteorder="big", signed=False))
    return point_from_octets(xkey.key, ec)


def fingerprint(xkey: BIP32KeyData) -> bytes:
    "Return the first four bytes of the hash160 of the compressed public key."
    return hash160(bytes_from_point(pub_key_point(xkey)))[:4]


def xpub_from_xprv(xprv: BIP32KeyData) -> BIP32KeyData:
    """Neutered Derivation (ND).

    Derivation of the extended public key corresponding to an extended
    private key ("neutered" as it removes the ability to sign transactions).
    """

    if not xprv.is_private:
        raise HDKeyError(HDErrorKind.INVALID_KEY, "not a private key")

    network = xprv.network
    if network is None:
        err_msg = f"unknown extended key version: 0x{xprv.version.hex()}"
        raise HDKeyError(HDErrorKind.INVALID_NETWORK, err_msg)

    return BIP32KeyData(
        version=network.bip32_pub,
        depth=xprv.depth,
        parent_fingerprint=xprv.parent_fingerprint,
        index=xprv.index,
        chain_code=xprv.chain_code,
        key=bytes_from_point(pub_key_point(xprv)),
    )


def _next_index(index: int) -> int:

    if index + 1 > MAX_INDEX or index + 1 == HARDENED:
        err_msg = f"no valid child key up to index boundary: {hex(index)}"
        raise BTChdRuntimeError(err_msg)
    return index + 1


def _ckd_prv(
    parent: BIP32KeyData, parent_pub_key: bytes, index: int
) -> Tuple[bytes, bytes, int]:
    "Return (key, chain code, index) of the private child."

    q = int.from_bytes(parent.key[1:], byteorder="big", signed=False)
    for _ in range(MAX_CKD_RETRIES):
        if index >= HARDENED:
            msg = parent.key
        else:
            msg = parent_pub_key
        h = hmac_sha512(parent.chain_code, msg + index.to_bytes(4, byteorder="big"))
        offset = int.from_bytes(h[:32], byteorder="big", signed=False)
        child_q = (q + offset) % ec.n
        if offset < ec.n and child_q != 0:
            key = b"\x00" + child_q.to_bytes(32, byteorder="big", signed=False)
            return key, h[32:], index
        logger.warning("invalid child key at index %s, skipping it", hex(index))
        index = _next_index(index)

    raise BTChdRuntimeError(f"no valid child key after {MAX_CKD_RETRIES} attempts")


def _ckd_pub(parent: BIP32KeyData, index: int) -> Tuple[bytes, bytes, int]:
    "Return (key, chain code, index) of the public child."

    if index >= HARDENED:
        err_msg = "hardened derivation from public key: "
        err_msg += f"{index - HARDENED}'"
        raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)

    Q = point_from_octets(parent.key, ec)
    for _ in range(MAX_CKD_RETRIES):
        h = hmac_sha512(parent.chain_code, parent.key + index.to_bytes(4, "big"))
        offset = int.from_bytes(h[:32], byteorder="big", signed=False)
        if offset < ec.n:
            child_Q = ec.add(mult(offset), Q)
            if child_Q[1] != 0:  # not the infinity point
                return bytes_from_point(child_Q), h[32:], index
        logger.warning("invalid child key at index %s, skipping it", hex(index))
        index = _next_index(index)

    raise BTChdRuntimeError(f"no valid child key after {MAX_CKD_RETRIES} attempts")


def ckd(parent: BIP32KeyData, index: int) -> BIP32KeyData:
    """Return the child of a private or public extended key.

    Private parents have private children (CKDpriv),
    public parents have public children (CKDpub).
    The child index might differ from the requested one
    if the requested one results in an invalid key.
    """

    if not 0 <= index <= MAX_INDEX:
        raise HDKeyError(HDErrorKind.INVALID_PATH, f"invalid index: {index}")
    if parent.depth == 255:
        raise HDKeyError(HDErrorKind.INVALID_KEY, "depth greater than 255")

    parent_pub_key = bytes_from_point(pub_key_point(parent))
    if parent.is_private:
        key, chain_code, index = _ckd_prv(parent, parent_pub_key, index)
    else:
        key, chain_code, index = _ckd_pub(parent, index)

    return BIP32KeyData(
        version=parent.version,
        depth=parent.depth + 1,
        parent_fingerprint=hash160(parent_pub_key)[:4],
        index=index,
        chain_code=chain_code,
        key=key,
    )


def derive(
    xkey: BIP32KeyData, der_path: DerPath, hardened: bool = False
) -> BIP32KeyData:
    """Derive an extended key along a path.

    The path is a "m/0'/1" string or a single index
    (optionally hardened); "m" returns the input key itself.
    """

    indexes = indexes_from_der_path(der_path, hardened)
    for index in indexes:
        xkey = ckd(xkey, index)
    if indexes:
        logger.debug("derived %d levels down to depth %d", len(indexes), xkey.depth)
    return xkey
