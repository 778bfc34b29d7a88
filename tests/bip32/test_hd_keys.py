#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `btchd.bip32.hd_keys` module."

import json
from typing import Any, Dict

import pytest

from btchd.bip32 import HARDENED, HDPrivateKey, HDPublicKey
from btchd.exceptions import BTChdTypeError, EntropyReason, HDErrorKind, HDKeyError
from btchd.network import NETWORKS

XPRV = "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"
XPUB = "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
TPRV = "tprv8ZgxMBicQKsPdEeU2KiGFnUgRGriMnQxrwrg6FWCBg4jeiidHRyCCdA357kfkZiGaXEapWZsGDKikeeEbvgXo3UmEdbEKNdQH9VXESmGuUK"
TPUB = "tpubD6NzVbkrYhZ4WhgFuyNrfC8nzJNeX7bsSFTTNmYVbws8VCyPupnnP7muFHWyYjm9vcRLBF42xkMKQKPALCrKJMKJxzY88WFhTSDErKzn8R6"
LIVENET_XPRV = "xprv9s21ZrQH143K3e39bnn1vyS7YFa1EAJAFGDoeHaSBsgBxgAkTEXeSx7xLvhNQNJxJwhzziWcK3znUFKRPRwWBPkKZ8ijUBa5YYpYPQmeBDX"

PLAIN_OBJECT: Dict[str, Any] = {
    "network": "livenet",
    "depth": 0,
    "fingerPrint": 876747070,
    "parentFingerPrint": 0,
    "childIndex": 0,
    "chainCode": "873dff81c02f525623fd1fe5167eac3a55a049de3d314bb42ee227ffed37d508",
    "privateKey": "e8f32e723decf4051aefac8e2c93c9c5b214313817cdb01a1494b917c8436b35",
    "checksum": -411132559,
    "xprivkey": XPRV,
}


def _kind(arg: Any, network: Any = None) -> HDErrorKind:
    with pytest.raises(HDKeyError) as excinfo:
        HDPrivateKey(arg, network)
    return excinfo.value.kind


def test_random_key() -> None:

    key = HDPrivateKey()
    assert key.xprivkey.startswith("xprv")
    assert key.network == NETWORKS["mainnet"]
    assert key.depth == 0
    assert key != HDPrivateKey()

    key = HDPrivateKey("testnet")
    assert key.xprivkey.startswith("tprv")
    assert key.network.name == "testnet"

    key = HDPrivateKey(network="testnet")
    assert key.network.name == "testnet"


def test_properties() -> None:

    key = HDPrivateKey(XPRV)
    assert key.network == NETWORKS["mainnet"]
    assert key.depth == 0
    assert key.parent_fingerprint == b"\x00" * 4
    assert key.child_index == 0
    assert key.chain_code.hex() == PLAIN_OBJECT["chainCode"]
    assert key.private_key.hex() == PLAIN_OBJECT["privateKey"]
    assert key.public_key.hex() == (
        "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
    )
    assert key.fingerprint.hex() == "3442193e"
    assert key.checksum.hex() == "e77e9d71"
    assert key.xprivkey == XPRV
    assert key.xpubkey == XPUB
    assert str(key) == XPRV
    assert repr(key) == "<HDPrivateKey: " + XPRV + ">"
    assert key.HARDENED == HARDENED

    assert HDPrivateKey(TPRV).xpubkey == TPUB
    assert HDPrivateKey(TPRV).network == NETWORKS["testnet"]
    assert HDPrivateKey(LIVENET_XPRV).network.name == "mainnet"


def test_read_only() -> None:

    key = HDPrivateKey(XPRV)
    with pytest.raises(BTChdTypeError, match="HDPrivateKey is immutable"):
        key.depth = 1  # type: ignore
    with pytest.raises(BTChdTypeError, match="HDPrivateKey is immutable"):
        key.xprivkey = "a"  # type: ignore
    with pytest.raises(BTChdTypeError, match="HDPrivateKey is immutable"):
        key.new_attribute = "a"  # type: ignore
    with pytest.raises(BTChdTypeError, match="HDPrivateKey is immutable"):
        del key._xkey
    assert key.xprivkey == XPRV

    pub_key = HDPublicKey(XPUB)
    with pytest.raises(BTChdTypeError, match="HDPublicKey is immutable"):
        pub_key.depth = 1  # type: ignore


def test_public_key_in_subclasses() -> None:

    key = HDPrivateKey(XPRV)
    pub_key = HDPublicKey(XPUB)
    assert key.public_key == pub_key.public_key
    assert key.fingerprint == pub_key.fingerprint
    assert key.fingerprint.hex() == "3442193e"

    # the common base has no public key of its own
    base = HDPrivateKey.__mro__[1]
    assert base.__abstractmethods__ == frozenset({"public_key"})
    with pytest.raises(TypeError):
        base(XPRV)


def test_hd_public_key_cache() -> None:

    key = HDPrivateKey(XPRV)
    assert "hd_public_key" not in vars(key)
    assert key.xpubkey == key.xpubkey
    assert "hd_public_key" in vars(key)
    assert key.hd_public_key is key.hd_public_key
    assert isinstance(key.hd_public_key, HDPublicKey)
    assert str(key.hd_public_key) == XPUB


def test_constructors() -> None:

    key = HDPrivateKey(XPRV)
    assert HDPrivateKey(key) == key
    assert HDPrivateKey(key) is not key
    assert HDPrivateKey(key.to_buffer()) == key
    assert HDPrivateKey(key.to_dict()) == key
    assert HDPrivateKey(key.to_json()) == key
    assert HDPrivateKey(PLAIN_OBJECT) == key
    assert HDPrivateKey(json.dumps(PLAIN_OBJECT)) == key
    assert HDPrivateKey(XPRV, "livenet") == key

    assert HDPrivateKey.from_string(XPRV) == key
    assert HDPrivateKey.from_buffer(key.to_buffer()) == key
    assert HDPrivateKey.from_dict(key.to_dict()) == key
    assert HDPrivateKey.from_json(key.to_json()) == key
    assert HDPrivateKey.from_seed("000102030405060708090a0b0c0d0e0f") == key
    # round trip
    buffer = HDPrivateKey.from_buffer(key.to_buffer()).to_buffer()
    assert HDPrivateKey(buffer).xprivkey == XPRV

    assert len({key, HDPrivateKey(XPRV)}) == 1


def test_plain_object() -> None:

    key = HDPrivateKey(XPRV)
    dict_ = key.to_dict()
    assert dict_ == dict(PLAIN_OBJECT, network="mainnet")
    assert not any(isinstance(v, bytes) for v in dict_.values())
    assert json.loads(key.to_json()) == dict_

    pub_dict = HDPublicKey(XPUB).to_dict()
    assert pub_dict["xpubkey"] == XPUB
    assert pub_dict["publicKey"] == key.public_key.hex()


def test_from_seed() -> None:

    key = HDPrivateKey.from_seed("01234567890abcdef01234567890abcdef")
    assert key.xprivkey == (
        "xprv9s21ZrQH143K4bM7eryVZdJJjAhvFkugJrFTbFtjgbyVfTk1zRjMWEqmEukM1DY8h3vkVD8UniKXPvVhhc2YZ1qY4JNrahXe6Pefz5e4oWw"
    )
    key = HDPrivateKey.from_seed(bytes(range(16)), "testnet")
    assert key.network.name == "testnet"

    with pytest.raises(HDKeyError) as excinfo:
        HDPrivateKey.from_seed(1)  # type: ignore
    assert excinfo.value.kind == HDErrorKind.INVALID_ENTROPY_ARGUMENT

    with pytest.raises(HDKeyError, match="not enough entropy: ") as excinfo:
        HDPrivateKey.from_seed("01")
    assert excinfo.value.reason == EntropyReason.NOT_ENOUGH

    with pytest.raises(HDKeyError, match="too much entropy: ") as excinfo:
        HDPrivateKey.from_seed("00" * 65)
    assert excinfo.value.reason == EntropyReason.TOO_MUCH


def test_invalid_arguments() -> None:

    assert _kind(1) == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind([XPRV]) == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind(HDPublicKey(XPUB)) == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind("{not json") == HDErrorKind.UNRECOGNIZED_ARGUMENT
    assert _kind("bogus-net") == HDErrorKind.INVALID_B58_CHAR
    assert _kind(XPRV + "1") == HDErrorKind.INVALID_CHECKSUM
    assert _kind(XPUB) == HDErrorKind.INVALID_NETWORK
    assert _kind(TPRV, "mainnet") == HDErrorKind.WRONG_NETWORK
    assert _kind(XPRV, "bogusnet") == HDErrorKind.INVALID_NETWORK_ARGUMENT
    assert _kind(HDPrivateKey(XPRV).to_buffer()[:-1]) == HDErrorKind.INVALID_LENGTH

    # the checksum of the plain object is checked
    assert _kind(dict(PLAIN_OBJECT, checksum=0)) == HDErrorKind.INVALID_CHECKSUM
    assert HDPrivateKey(dict(PLAIN_OBJECT, checksum=None)).xprivkey == XPRV


def test_serialized_error() -> None:

    assert HDPrivateKey.get_serialized_error(XPRV) is None
    assert HDPrivateKey.get_serialized_error(XPRV, "livenet") is None
    assert HDPrivateKey.is_valid_serialized(XPRV)
    assert not HDPrivateKey.is_valid_serialized(XPUB)
    assert HDPublicKey.is_valid_serialized(XPUB)

    error = HDPrivateKey.get_serialized_error(1)
    assert error is not None
    assert error.kind == HDErrorKind.UNRECOGNIZED_ARGUMENT

    error = HDPrivateKey.get_serialized_error(b"\x00" * 77)
    assert error is not None
    assert error.kind == HDErrorKind.INVALID_LENGTH

    error = HDPrivateKey.get_serialized_error(XPRV, "bogusnet")
    assert error is not None
    assert error.kind == HDErrorKind.INVALID_NETWORK_ARGUMENT

    error = HDPrivateKey.get_serialized_error(XPRV, "testnet")
    assert error is not None
    assert error.kind == HDErrorKind.WRONG_NETWORK


def test_derive() -> None:

    key = HDPrivateKey(XPRV)
    assert key.derive("m") is key

    derived_by_string = key.derive("m/0'/1/2'")
    derived_by_number = key.derive(0, True).derive(1).derive(2, True)
    assert derived_by_string == derived_by_number
    assert key.derive(HARDENED + 1) == key.derive(1, True)
    assert isinstance(derived_by_string, HDPrivateKey)
    assert derived_by_string.depth == 3

    child = key.derive("m/0'")
    assert child.parent_fingerprint == key.fingerprint
    assert child.child_index == HARDENED

    # public derivation
    pub_key = HDPublicKey(key)
    assert pub_key.xpubkey == XPUB
    pub_child = pub_key.derive("m/0/1")
    assert isinstance(pub_child, HDPublicKey)
    assert pub_child == key.derive("m/0/1").hd_public_key
    assert pub_child == HDPublicKey(key.derive("m/0/1"))

    with pytest.raises(HDKeyError, match="invalid derivation argument: "):
        key.derive([])  # type: ignore
    with pytest.raises(HDKeyError, match="invalid path: "):
        key.derive("s")
    with pytest.raises(HDKeyError, match="invalid path: "):
        key.derive("m/" + "1" * 5000)
    with pytest.raises(HDKeyError, match="hardened derivation from public key"):
        pub_key.derive(0, True)


def test_is_valid_path() -> None:

    for der_path in ("m/0'/1/2'", "m", 123, HARDENED + 123):
        assert HDPrivateKey.is_valid_path(der_path)
        assert HDPrivateKey.is_valid_path(der_path, True)

    for der_path in ("m/-1/12", "bad path", "K", "m/", "m/12asd", "m/1/2//3"):
        assert not HDPrivateKey.is_valid_path(der_path)
        assert not HDPublicKey.is_valid_path(der_path)


def test_hd_public_key() -> None:

    pub_key = HDPublicKey(XPUB)
    assert pub_key.xpubkey == XPUB
    assert pub_key.public_key.hex() == (
        "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
    )
    assert pub_key.fingerprint.hex() == "3442193e"
    assert repr(pub_key) == "<HDPublicKey: " + XPUB + ">"
    assert HDPublicKey(TPUB).network.name == "testnet"

    assert HDPublicKey(pub_key) == pub_key
    assert HDPublicKey(pub_key.to_buffer()) == pub_key
    assert HDPublicKey(pub_key.to_json()) == pub_key
    assert HDPublicKey.from_dict(pub_key.to_dict()) == pub_key
    assert HDPublicKey.from_string(XPUB, "mainnet") == pub_key

    # not comparable with private keys
    assert pub_key != HDPrivateKey(XPRV)

    with pytest.raises(HDKeyError, match="not an extended public key version"):
        HDPublicKey(XPRV)
    with pytest.raises(HDKeyError, match="unrecognized argument: "):
        HDPublicKey()
