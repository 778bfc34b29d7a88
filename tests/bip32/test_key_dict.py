#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `btchd.bip32.key_dict` module."

from typing import Any, Dict

import pytest

from btchd.bip32.key_data import BIP32KeyData
from btchd.bip32.key_dict import (
    XPrvDict,
    XPubDict,
    dict_from_key_data,
    key_data_from_dict,
)
from btchd.exceptions import HDErrorKind, HDKeyError

XPRV = "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"
XPUB = "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
CHAIN_CODE = "873dff81c02f525623fd1fe5167eac3a55a049de3d314bb42ee227ffed37d508"

XPRV_DICT: Dict[str, Any] = {
    "network": "mainnet",
    "depth": 0,
    "fingerPrint": 876747070,
    "parentFingerPrint": 0,
    "childIndex": 0,
    "chainCode": CHAIN_CODE,
    "privateKey": "e8f32e723decf4051aefac8e2c93c9c5b214313817cdb01a1494b917c8436b35",
    "checksum": -411132559,
    "xprivkey": XPRV,
}

XPUB_DICT: Dict[str, Any] = {
    "network": "mainnet",
    "depth": 0,
    "fingerPrint": 876747070,
    "parentFingerPrint": 0,
    "childIndex": 0,
    "chainCode": CHAIN_CODE,
    "publicKey": "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2",
    "checksum": -1421395167,
    "xpubkey": XPUB,
}


def _kind(dict_: Dict[str, Any], private: bool = True) -> HDErrorKind:
    with pytest.raises(HDKeyError) as excinfo:
        key_data_from_dict(dict_, private)
    return excinfo.value.kind


def test_dict_from_key_data() -> None:

    xprv_dict = dict_from_key_data(BIP32KeyData.b58decode(XPRV))
    assert isinstance(xprv_dict, XPrvDict)
    assert xprv_dict.to_dict() == XPRV_DICT
    # no bytes in the plain object
    assert not any(isinstance(v, bytes) for v in xprv_dict.to_dict().values())

    xpub_dict = dict_from_key_data(BIP32KeyData.b58decode(XPUB))
    assert isinstance(xpub_dict, XPubDict)
    assert xpub_dict.to_dict() == XPUB_DICT

    # m/0'
    xprv = "xprv9uHRZZhk6KAJC1avXpDAp4MDc3sQKNxDiPvvkX8Br5ngLNv1TxvUxt4cV1rGL5hj6KCesnDYUhd7oWgT11eZG7XnxHrnYeSvkzY7d2bhkJ7"
    dict_ = dict_from_key_data(BIP32KeyData.b58decode(xprv)).to_dict()
    assert dict_["depth"] == 1
    assert dict_["fingerPrint"] == 1545328200
    assert dict_["parentFingerPrint"] == 876747070
    assert dict_["childIndex"] == 0x80000000
    assert dict_["checksum"] == 175721964


def test_key_data_from_dict() -> None:

    assert key_data_from_dict(XPRV_DICT).b58encode() == XPRV
    assert key_data_from_dict(XPUB_DICT, private=False).b58encode() == XPUB
    assert key_data_from_dict(XPrvDict.from_dict(XPRV_DICT)).b58encode() == XPRV

    # informational fields are optional
    dict_ = {k: v for k, v in XPRV_DICT.items() if k not in ("fingerPrint", "xprivkey")}
    assert key_data_from_dict(dict_).b58encode() == XPRV
    del dict_["checksum"]
    assert key_data_from_dict(dict_).b58encode() == XPRV

    # and ignored
    dict_ = dict(XPRV_DICT, fingerPrint=1, xprivkey="invalid")
    assert key_data_from_dict(dict_).b58encode() == XPRV

    # network alias, hex-string checksum
    dict_ = dict(XPRV_DICT, network="livenet", checksum="e77e9d71")
    assert key_data_from_dict(dict_).b58encode() == XPRV

    # checksum as unsigned integer
    dict_ = dict(XPRV_DICT, checksum=0xE77E9D71)
    assert key_data_from_dict(dict_).b58encode() == XPRV

    # parent fingerprint as hex-string
    dict_ = dict(XPRV_DICT, depth=1, parentFingerPrint="3442193e")
    xkey = key_data_from_dict(dict(dict_, checksum=None))
    assert xkey.parent_fingerprint.hex() == "3442193e"


def test_invalid_dict() -> None:

    for key in ("network", "depth", "parentFingerPrint", "childIndex", "chainCode"):
        dict_ = {k: v for k, v in XPRV_DICT.items() if k != key}
        with pytest.raises(HDKeyError, match=f"missing extended key fields: {key}"):
            key_data_from_dict(dict_)

    # private key where a public one is expected
    assert _kind(XPRV_DICT, private=False) == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind(XPUB_DICT) == HDErrorKind.UNRECOGNIZED_ARGUMENT

    assert _kind(dict(XPRV_DICT, depth=True)) == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind(dict(XPRV_DICT, chainCode="zz")) == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind(dict(XPRV_DICT, network="bogusnet")) == (
        HDErrorKind.INVALID_NETWORK_ARGUMENT
    )

    assert _kind(dict(XPRV_DICT, privateKey="00" * 31)) == HDErrorKind.INVALID_LENGTH
    assert _kind(dict(XPRV_DICT, chainCode="00" * 31)) == HDErrorKind.INVALID_LENGTH
    assert _kind(dict(XPUB_DICT, publicKey="02" * 32), False) == (
        HDErrorKind.INVALID_LENGTH
    )

    # field sizes are checked before anything else
    dict_ = dict(XPRV_DICT, chainCode="00", network="bogusnet")
    assert _kind(dict_) == HDErrorKind.INVALID_LENGTH
    assert _kind(dict(XPRV_DICT, chainCode="00", depth=300)) == (
        HDErrorKind.INVALID_LENGTH
    )
    dict_ = dict(XPRV_DICT, privateKey="00", checksum=0)
    assert _kind(dict_) == HDErrorKind.INVALID_LENGTH
    dict_ = dict(XPUB_DICT, publicKey="02", network="bogusnet")
    assert _kind(dict_, private=False) == HDErrorKind.INVALID_LENGTH
    # then the fields the checksum is computed from
    dict_ = dict(XPRV_DICT, depth=300, checksum=0)
    assert _kind(dict_) == HDErrorKind.INVALID_KEY

    assert _kind(dict(XPRV_DICT, depth=256)) == HDErrorKind.INVALID_KEY
    assert _kind(dict(XPRV_DICT, childIndex=-1)) == HDErrorKind.INVALID_KEY
    assert _kind(dict(XPRV_DICT, parentFingerPrint=2**32)) == HDErrorKind.INVALID_KEY

    # valid checksum required only if provided
    with pytest.raises(HDKeyError, match="invalid checksum: ") as excinfo:
        key_data_from_dict(dict(XPRV_DICT, checksum=0))
    assert excinfo.value.kind == HDErrorKind.INVALID_CHECKSUM
    assert _kind(dict(XPRV_DICT, checksum=2**32)) == HDErrorKind.INVALID_CHECKSUM

    # semantically inconsistent fields
    dict_ = dict(XPRV_DICT, depth=1, checksum=None)
    with pytest.raises(HDKeyError, match="zero parent fingerprint with non-zero depth"):
        key_data_from_dict(dict_)
    dict_ = dict(XPRV_DICT, privateKey="00" * 32, checksum=None)
    assert _kind(dict_) == HDErrorKind.INVALID_KEY
    dict_ = dict(XPUB_DICT, publicKey="04" + "00" * 32, checksum=None)
    assert _kind(dict_, private=False) == HDErrorKind.INVALID_KEY
