#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 extended key plain object (dict) and JSON representation.

The plain object has camelCase keys:

- network: "mainnet" or "testnet" (aliases are accepted on input)
- depth, childIndex: integers
- fingerPrint, parentFingerPrint, checksum: signed 32-bit integers
  (hex-strings are also accepted on input)
- chainCode, privateKey or publicKey: hex-strings
- xprivkey or xpubkey: the Base58Check string

fingerPrint and xprivkey/xpubkey are informational only:
they are recomputed and ignored on input.
If provided, checksum must match the serialized key.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from dataclasses_json import DataClassJsonMixin, config

from btchd.bip32.ckd import fingerprint
from btchd.bip32.key_data import BIP32KeyData
from btchd.exceptions import BTChdValueError, HDErrorKind, HDKeyError
from btchd.network import DEFAULT_NETWORK, get_network
from btchd.utils import bytes_from_int32, int32_from_bytes


def _int32_decoder(value: Union[int, str]) -> int:
    if isinstance(value, str):
        data = bytes.fromhex(value)
        if len(data) != 4:
            raise BTChdValueError(f"not a 4-byte hex-string: {value}")
        return int32_from_bytes(data)
    return value


def _hex_config(field_name: str) -> Any:
    return config(field_name=field_name, encoder=bytes.hex, decoder=bytes.fromhex)


def _int32_config(field_name: str) -> Any:
    return config(field_name=field_name, decoder=_int32_decoder)


@dataclass
class XPrvDict(DataClassJsonMixin):
    network: str = DEFAULT_NETWORK
    depth: int = 0
    finger_print: Optional[int] = field(
        default=None, metadata=_int32_config("fingerPrint")
    )
    parent_finger_print: int = field(
        default=0, metadata=_int32_config("parentFingerPrint")
    )
    child_index: int = field(default=0, metadata=config(field_name="childIndex"))
    chain_code: bytes = field(default=b"", metadata=_hex_config("chainCode"))
    private_key: bytes = field(default=b"", metadata=_hex_config("privateKey"))
    checksum: Optional[int] = field(default=None, metadata=_int32_config("checksum"))
    xprivkey: Optional[str] = None


@dataclass
class XPubDict(DataClassJsonMixin):
    network: str = DEFAULT_NETWORK
    depth: int = 0
    finger_print: Optional[int] = field(
        default=None, metadata=_int32_config("fingerPrint")
    )
    parent_finger_print: int = field(
        default=0, metadata=_int32_config("parentFingerPrint")
    )
    child_index: int = field(default=0, metadata=config(field_name="childIndex"))
    chain_code: bytes = field(default=b"", metadata=_hex_config("chainCode"))
    public_key: bytes = field(default=b"", metadata=_hex_config("publicKey"))
    checksum: Optional[int] = field(default=None, metadata=_int32_config("checksum"))
    xpubkey: Optional[str] = None


XKeyDict = Union[XPrvDict, XPubDict]

_REQUIRED_KEYS = ["network", "depth", "parentFingerPrint", "childIndex", "chainCode"]


def dict_from_key_data(xkey: BIP32KeyData) -> XKeyDict:
    "Return the XPrvDict or XPubDict of a valid extended key."

    xkey.assert_valid()
    network = xkey.network
    # already checked by assert_valid
    assert network is not None  # nosec

    args = {
        "network": network.name,
        "depth": xkey.depth,
        "finger_print": int32_from_bytes(fingerprint(xkey)),
        "parent_finger_print": int32_from_bytes(xkey.parent_fingerprint),
        "child_index": xkey.index,
        "chain_code": xkey.chain_code,
        "checksum": int32_from_bytes(xkey.checksum),
    }
    if xkey.is_private:
        return XPrvDict(private_key=xkey.key[1:], xprivkey=xkey.b58encode(), **args)
    return XPubDict(public_key=xkey.key, xpubkey=xkey.b58encode(), **args)


def _xkey_dict(dict_: Mapping[str, Any], private: bool) -> XKeyDict:

    key_name = "privateKey" if private else "publicKey"
    missing = [k for k in _REQUIRED_KEYS + [key_name] if k not in dict_]
    if missing:
        err_msg = f"missing extended key fields: {', '.join(missing)}"
        raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, err_msg)

    cls = XPrvDict if private else XPubDict
    try:
        return cls.from_dict(dict_)
    except (TypeError, ValueError) as e:
        err_msg = f"invalid extended key fields: {e}"
        raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, err_msg) from e


def key_data_from_dict(
    dict_: Union[Mapping[str, Any], XKeyDict], private: bool = True
) -> BIP32KeyData:
    """Return the BIP32KeyData of a plain object.

    Checks follow a fixed order: field sizes, then the network and the
    integer ranges the checksum is computed from, then the checksum
    (if provided), and finally the semantic consistency of the fields.
    """

    if isinstance(dict_, (XPrvDict, XPubDict)):
        xdict = dict_
    else:
        xdict = _xkey_dict(dict_, private)

    for name in ("depth", "child_index", "parent_finger_print"):
        value = getattr(xdict, name)
        if not isinstance(value, int) or isinstance(value, bool):
            err_msg = f"{name} is not an integer: {value!r}"
            raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, err_msg)

    if isinstance(xdict, XPrvDict):
        if len(xdict.private_key) != 32:
            err_msg = f"invalid private key length: {len(xdict.private_key)} bytes"
            raise HDKeyError(HDErrorKind.INVALID_LENGTH, err_msg)
        key = b"\x00" + xdict.private_key
    else:
        key = xdict.public_key
    if len(xdict.chain_code) != 32 or len(key) != 33:
        err_msg = f"invalid chain code or key length: {len(xdict.chain_code)}, "
        err_msg += f"{len(key)} bytes instead of 32, 33"
        raise HDKeyError(HDErrorKind.INVALID_LENGTH, err_msg)

    # the checksum commits to the version bytes and to the integer fields
    network = get_network(xdict.network)
    version = network.bip32_prv if isinstance(xdict, XPrvDict) else network.bip32_pub
    try:
        parent_fingerprint = bytes_from_int32(xdict.parent_finger_print)
    except BTChdValueError as e:
        raise HDKeyError(HDErrorKind.INVALID_KEY, str(e)) from e
    if not 0 <= xdict.depth <= 255:
        raise HDKeyError(HDErrorKind.INVALID_KEY, f"invalid depth: {xdict.depth}")
    if not 0 <= xdict.child_index <= 0xFFFFFFFF:
        err_msg = f"invalid index: {xdict.child_index}"
        raise HDKeyError(HDErrorKind.INVALID_KEY, err_msg)

    xkey = BIP32KeyData(
        version=version,
        depth=xdict.depth,
        parent_fingerprint=parent_fingerprint,
        index=xdict.child_index,
        chain_code=xdict.chain_code,
        key=key,
        check_validity=False,
    )

    if xdict.checksum is not None:
        checksum = int32_from_bytes(xkey.checksum)
        try:
            valid = bytes_from_int32(xdict.checksum) == xkey.checksum
        except BTChdValueError:
            valid = False
        if not valid:
            err_msg = f"invalid checksum: {xdict.checksum} instead of {checksum}"
            raise HDKeyError(HDErrorKind.INVALID_CHECKSUM, err_msg)

    xkey.assert_valid()
    return xkey
