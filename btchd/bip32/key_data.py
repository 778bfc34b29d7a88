#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 extended key binary and Base58Check serialization.

A BIP32 extended key is 78 bytes:

- [  : 4] version
- [ 4: 5] depth in the derivation path
- [ 5: 9] parent fingerprint
- [ 9:13] index
- [13:45] chain code
- [45:78] compressed pub_key or [0x00][prv_key]

Its Base58Check encoding appends the first four bytes of the hash256
of these 78 bytes as checksum.

All failures are reported as HDKeyError, with a kind allowing to tell
structural problems (INVALID_LENGTH), unknown version (INVALID_NETWORK),
and inconsistent fields (INVALID_KEY) apart.
"""

from dataclasses import dataclass
from typing import Optional, Type, Union

from btchd import base58
from btchd.alias import BinaryData, Octets, String
from btchd.bip32.der_path import HARDENED
from btchd.ecc.curve import secp256k1
from btchd.exceptions import BTChdValueError, HDErrorKind, HDKeyError
from btchd.hashes import hash256
from btchd.network import Network, get_network, network_from_version
from btchd.utils import bytes_from_octets, bytesio_from_binarydata

ec = secp256k1

_KEY_SIZE = [
    ("version", 4),
    ("parent_fingerprint", 4),
    ("chain_code", 32),
    ("key", 33),
]
SERIALIZED_SIZE = 78


@dataclass
class BIP32KeyData:
    version: bytes
    depth: int
    parent_fingerprint: bytes
    # index is an int, not bytes, to avoid any byteorder ambiguity
    index: int
    chain_code: bytes
    key: bytes

    @property
    def is_private(self) -> bool:
        return self.key[0] == 0

    @property
    def is_hardened(self) -> bool:
        return self.index >= HARDENED

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    @property
    def network(self) -> Optional[Network]:
        return network_from_version(self.version)

    @property
    def checksum(self) -> bytes:
        "Return the Base58Check checksum of the serialized key."
        return hash256(self.serialize(check_validity=False))[:4]

    def __init__(
        self,
        version: Octets,
        depth: int,
        parent_fingerprint: Octets,
        index: int,
        chain_code: Octets,
        key: Octets,
        check_validity: bool = True,
    ) -> None:

        self.version = bytes_from_octets(version)
        self.depth = depth
        self.parent_fingerprint = bytes_from_octets(parent_fingerprint)
        self.index = index
        self.chain_code = bytes_from_octets(chain_code)
        self.key = bytes_from_octets(key)

        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:

        for name, size in _KEY_SIZE:
            value = getattr(self, name)
            if len(value) != size:
                err_msg = f"invalid {name.replace('_', ' ')} length: "
                err_msg += f"{len(value)} bytes instead of {size}"
                raise HDKeyError(HDErrorKind.INVALID_LENGTH, err_msg)

        if not 0 <= self.index <= 0xFFFFFFFF:
            raise HDKeyError(HDErrorKind.INVALID_KEY, f"invalid index: {self.index}")

        if not 0 <= self.depth <= 255:
            raise HDKeyError(HDErrorKind.INVALID_KEY, f"invalid depth: {self.depth}")

        zero_fingerprint = self.parent_fingerprint == b"\x00" * 4
        if self.depth == 0:
            if not zero_fingerprint:
                err_msg = "zero depth with non-zero parent fingerprint: "
                err_msg += f"0x{self.parent_fingerprint.hex()}"
                raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)
            if self.index != 0:
                err_msg = f"zero depth with non-zero index: {self.index}"
                raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)
        elif zero_fingerprint:
            err_msg = f"zero parent fingerprint with non-zero depth: {self.depth}"
            raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)

        network = self.network
        if network is None:
            err_msg = f"unknown extended key version: 0x{self.version.hex()}"
            raise HDKeyError(HDErrorKind.INVALID_NETWORK, err_msg)

        if self.version == network.bip32_prv:
            if self.key[0] != 0:
                err_msg = f"invalid private key prefix: 0x{self.key[:1].hex()}"
                raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)
            q = int.from_bytes(self.key[1:], byteorder="big", signed=False)
            if not 0 < q < ec.n:
                err_msg = f"invalid private key not in 1..n-1: {hex(q)}"
                raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)
        else:
            if self.key[0] not in (2, 3):
                err_msg = "invalid public key prefix not in (0x02, 0x03): "
                err_msg += f"0x{self.key[:1].hex()}"
                raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)
            try:
                ec.y(int.from_bytes(self.key[1:], byteorder="big", signed=False))
            except BTChdValueError as e:
                err_msg = f"invalid public key: 0x{self.key.hex()}"
                raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg) from e

    def serialize(self, check_validity: bool = True) -> bytes:

        if check_validity:
            self.assert_valid()

        return b"".join(
            [
                self.version,
                self.depth.to_bytes(1, byteorder="big", signed=False),
                self.parent_fingerprint,
                self.index.to_bytes(4, byteorder="big", signed=False),
                self.chain_code,
                self.key,
            ]
        )

    def b58encode(self, check_validity: bool = True) -> str:
        data_binary = self.serialize(check_validity)
        return base58.b58encode(data_binary).decode("ascii")

    @classmethod
    def parse(
        cls: Type["BIP32KeyData"], xkey_bin: BinaryData, check_validity: bool = True
    ) -> "BIP32KeyData":
        "Return a BIP32KeyData by parsing 78 bytes from binary data."

        xkey_bin = bytesio_from_binarydata(xkey_bin).read()

        if len(xkey_bin) != SERIALIZED_SIZE:
            err_msg = "invalid decoded length: "
            err_msg += f"{len(xkey_bin)} bytes"
            err_msg += f" instead of {SERIALIZED_SIZE}"
            raise HDKeyError(HDErrorKind.INVALID_LENGTH, err_msg)

        return cls(
            version=xkey_bin[0:4],
            depth=xkey_bin[4],
            parent_fingerprint=xkey_bin[5:9],
            index=int.from_bytes(xkey_bin[9:13], byteorder="big", signed=False),
            chain_code=xkey_bin[13:45],
            key=xkey_bin[45:78],
            check_validity=check_validity,
        )

    @classmethod
    def b58decode(
        cls: Type["BIP32KeyData"], xkey: String, check_validity: bool = True
    ) -> "BIP32KeyData":

        if isinstance(xkey, str):
            xkey = xkey.strip()

        try:
            xkey_bin = base58.b58decode(xkey)
        except base58.Base58CharError as e:
            raise HDKeyError(HDErrorKind.INVALID_B58_CHAR, str(e)) from e
        except base58.Base58ChecksumError as e:
            raise HDKeyError(HDErrorKind.INVALID_CHECKSUM, str(e)) from e
        return cls.parse(xkey_bin, check_validity)


def _assert_expected_network(
    xkey: BIP32KeyData, network: Optional[Network], private: bool
) -> None:
    "Raise if the version is not the one expected for the network."

    xkey_network = xkey.network
    if xkey_network is None:
        err_msg = f"unknown extended key version: 0x{xkey.version.hex()}"
        raise HDKeyError(HDErrorKind.INVALID_NETWORK, err_msg)

    expected_version = xkey_network.bip32_prv if private else xkey_network.bip32_pub
    if xkey.version != expected_version:
        err_msg = f"not an extended {'private' if private else 'public'} key "
        err_msg += f"version: 0x{xkey.version.hex()}"
        raise HDKeyError(HDErrorKind.INVALID_NETWORK, err_msg)

    if network is not None and xkey_network != network:
        err_msg = f"{xkey_network.name} key instead of {network.name}"
        raise HDKeyError(HDErrorKind.WRONG_NETWORK, err_msg)


def decode(
    data: Union[str, bytes],
    network: Union[str, Network, None] = None,
    private: bool = True,
) -> BIP32KeyData:
    """Return the BIP32KeyData of a Base58Check string or 78 bytes.

    Checks follow a fixed order: Base58 characters and checksum
    (for strings), length, network (version bytes), and finally the
    semantic consistency of the fields.
    If network is None any known network is accepted.
    """

    if isinstance(data, str):
        xkey = BIP32KeyData.b58decode(data, check_validity=False)
    elif isinstance(data, (bytes, bytearray)):
        xkey = BIP32KeyData.parse(bytes(data), check_validity=False)
    else:
        err_msg = f"not a string or bytes: {type(data).__name__}"
        raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, err_msg)

    expected = None if network is None else get_network(network)
    _assert_expected_network(xkey, expected, private)
    xkey.assert_valid()
    return xkey


def serialized_error(
    data: Union[str, bytes],
    network: Union[str, Network, None] = None,
    private: bool = True,
) -> Optional[HDKeyError]:
    "Return the first HDKeyError found decoding data, None if valid."

    try:
        decode(data, network, private)
    except HDKeyError as e:
        return e
    return None
