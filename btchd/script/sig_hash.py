#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Legacy transaction hashes to be signed and their hash types.

The signature hash commits to a modified copy of the transaction,
where the hash type selects the inputs and outputs being committed.

https://en.bitcoin.it/wiki/OP_CHECKSIG
https://raghavsood.com/blog/2018/06/10/bitcoin-signature-types-sighash
"""

import logging
from copy import deepcopy

from btchd.alias import Octets
from btchd.exceptions import BTChdValueError
from btchd.hashes import hash256
from btchd.script.script import remove_code_separators
from btchd.tx import Tx, TxOut
from btchd.tx.tx_out import MAX_VALUE

logger = logging.getLogger(__name__)

DEFAULT = 0
ALL = 1
NONE = 2
SINGLE = 3
ANYONECANPAY = 0b10000000

SIG_HASH_TYPES = [
    DEFAULT,
    ALL,
    NONE,
    SINGLE,
    ANYONECANPAY | ALL,
    ANYONECANPAY | NONE,
    ANYONECANPAY | SINGLE,
]

# returned, instead of a hash, for SIGHASH_SINGLE without matching output;
# it is the uint256 one, i.e. 0x01 followed by 31 zero bytes
SINGLE_BUG_HASH = (1).to_bytes(32, byteorder="little", signed=False)


def assert_valid_hash_type(hash_type: int) -> None:
    if hash_type not in SIG_HASH_TYPES:
        raise BTChdValueError(f"invalid sig_hash type: {hex(hash_type)}")


def _normalized_hash_type(hash_type: int) -> int:
    "Return the unsigned 32-bit value of a (possibly negative) hash type."
    if not -0x80000000 <= hash_type <= 0xFFFFFFFF:
        raise BTChdValueError(f"hash type is not a 32-bit integer: {hash_type}")
    return hash_type & 0xFFFFFFFF


def _legacy_tx(script_: Octets, tx: Tx, vin_i: int, hash_type: int) -> Tx:
    "Return the modified copy of tx committed to by the legacy sig_hash."

    new_tx = deepcopy(tx)
    for tx_in in new_tx.vin:
        tx_in.script_sig = b""
    new_tx.vin[vin_i].script_sig = remove_code_separators(script_)

    if hash_type & 0x1F == NONE:
        new_tx.vout = []
        for i, tx_in in enumerate(new_tx.vin):
            if i != vin_i:
                tx_in.sequence = 0

    if hash_type & 0x1F == SINGLE:
        new_tx.vout = new_tx.vout[: vin_i + 1]
        new_tx.vout[:-1] = [TxOut(MAX_VALUE, b"") for _ in new_tx.vout[:-1]]
        for i, tx_in in enumerate(new_tx.vin):
            if i != vin_i:
                tx_in.sequence = 0

    if hash_type & ANYONECANPAY:
        new_tx.vin = [new_tx.vin[vin_i]]

    return new_tx


def legacy_preimage(script_: Octets, tx: Tx, vin_i: int, hash_type: int) -> bytes:
    """Return the serialized preimage hashed by the legacy sig_hash.

    It is not defined for SIGHASH_SINGLE without matching output.
    """

    hash_type = _normalized_hash_type(hash_type)
    if not 0 <= vin_i < len(tx.vin):
        raise BTChdValueError(f"invalid input index: {vin_i}")
    if hash_type & 0x1F == SINGLE and vin_i >= len(tx.vout):
        raise BTChdValueError(f"no output for SIGHASH_SINGLE input: {vin_i}")

    new_tx = _legacy_tx(script_, tx, vin_i, hash_type)
    preimage = new_tx.unchecked_serialize()
    preimage += hash_type.to_bytes(4, byteorder="little", signed=False)
    return preimage


def legacy(script_: Octets, tx: Tx, vin_i: int, hash_type: int) -> bytes:
    """Return the legacy sig_hash of the vin_i input of tx.

    script_ is the script code (usually the previous output scriptPubKey);
    its OP_CODESEPARATOR opcodes are removed.
    The tx is not modified.

    The hash is returned in internal byte order,
    i.e. reversed with respect to the usual hex display.
    """

    hash_type = _normalized_hash_type(hash_type)
    if not 0 <= vin_i < len(tx.vin):
        raise BTChdValueError(f"invalid input index: {vin_i}")

    # sig_hash single bug
    if hash_type & 0x1F == SINGLE and vin_i >= len(tx.vout):
        logger.debug("SIGHASH_SINGLE without matching output: input %d", vin_i)
        return SINGLE_BUG_HASH

    return hash256(legacy_preimage(script_, tx, vin_i, hash_type))
