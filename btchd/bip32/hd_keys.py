#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Immutable BIP32 extended key objects.

HDPrivateKey and HDPublicKey can be built from:

- nothing or a network name (HDPrivateKey only): a new random master key
- a Base58Check "xprv..."/"xpub..." string
- the 78 bytes serialization
- a plain object (dict) or its JSON string
- another key of the same class (copy),
  or an HDPrivateKey to be neutered (HDPublicKey only)

Keys are read-only: any attribute assignment raises BTChdTypeError.
The public counterpart of an HDPrivateKey is computed once,
when first needed, and then cached.
"""

import json
import logging
import secrets
from abc import ABC, abstractmethod
from copy import copy
from functools import cached_property
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from btchd.bip32 import ckd, key_data, key_dict
from btchd.bip32.der_path import HARDENED, DerPath, is_valid_path
from btchd.bip32.key_data import BIP32KeyData
from btchd.exceptions import BTChdTypeError, HDErrorKind, HDKeyError
from btchd.hashes import hash160
from btchd.network import Network, get_network

logger = logging.getLogger(__name__)

_HDKey = TypeVar("_HDKey", bound="_HDKeyBase")

NetworkArg = Union[str, Network, None]


def _is_network_name(arg: str) -> bool:
    try:
        get_network(arg)
    except HDKeyError:
        return False
    return True


class _HDKeyBase(ABC):
    "Read-only wrapper of a valid BIP32KeyData."

    _PRIVATE = True

    HARDENED = HARDENED
    is_valid_path = staticmethod(is_valid_path)

    _xkey: BIP32KeyData

    def __init__(self, arg: Any = None, network: NetworkArg = None) -> None:

        if isinstance(arg, type(self)):
            xkey = copy(arg._xkey)
        else:
            xkey = self._key_data_from_arg(arg, network)
        object.__setattr__(self, "_xkey", xkey)

    @classmethod
    def _key_data_from_arg(cls, arg: Any, network: NetworkArg) -> BIP32KeyData:

        if isinstance(arg, str):
            if arg.lstrip().startswith("{"):
                return cls._key_data_from_json(arg)
            return key_data.decode(arg, network, cls._PRIVATE)
        if isinstance(arg, (bytes, bytearray)):
            return key_data.decode(bytes(arg), network, cls._PRIVATE)
        if isinstance(arg, Mapping):
            return key_dict.key_data_from_dict(arg, cls._PRIVATE)

        err_msg = f"invalid {cls.__name__} argument: {type(arg).__name__}"
        raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, err_msg)

    @classmethod
    def _key_data_from_json(cls, json_str: str) -> BIP32KeyData:

        try:
            dict_ = json.loads(json_str)
        except ValueError as e:
            raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, str(e)) from e
        if not isinstance(dict_, Mapping):
            err_msg = f"not a JSON object: {json_str}"
            raise HDKeyError(HDErrorKind.UNRECOGNIZED_ARGUMENT, err_msg)
        return key_dict.key_data_from_dict(dict_, cls._PRIVATE)

    @classmethod
    def _from_key_data(cls: Type[_HDKey], xkey: BIP32KeyData) -> _HDKey:
        key = cls.__new__(cls)
        object.__setattr__(key, "_xkey", xkey)
        return key

    def __setattr__(self, name: str, value: Any) -> None:
        raise BTChdTypeError(f"{type(self).__name__} is immutable: cannot set {name}")

    def __delattr__(self, name: str) -> None:
        raise BTChdTypeError(f"{type(self).__name__} is immutable: cannot del {name}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __str__(self) -> str:
        return self._xkey.b58encode(check_validity=False)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self}>"

    @property
    def network(self) -> Network:
        network = self._xkey.network
        # the version has been validated at construction
        assert network is not None  # nosec
        return network

    @property
    def depth(self) -> int:
        return self._xkey.depth

    @property
    def parent_fingerprint(self) -> bytes:
        return self._xkey.parent_fingerprint

    @property
    def child_index(self) -> int:
        return self._xkey.index

    @property
    def chain_code(self) -> bytes:
        return self._xkey.chain_code

    @property
    def checksum(self) -> bytes:
        return self._xkey.checksum

    @property
    @abstractmethod
    def public_key(self) -> bytes:
        "Return the 33 bytes compressed public key."

    @property
    def fingerprint(self) -> bytes:
        return hash160(self.public_key)[:4]

    def derive(self: _HDKey, der_path: DerPath, hardened: bool = False) -> _HDKey:
        """Return the key derived along der_path.

        der_path is a "m/0'/1" string or a single index, optionally hardened:
        derive(0, True) is the same as derive(0x80000000).
        The key itself is returned for the "m" path.
        """

        xkey = ckd.derive(self._xkey, der_path, hardened)
        if xkey is self._xkey:
            return self
        return type(self)._from_key_data(xkey)

    def to_buffer(self) -> bytes:
        "Return the 78 bytes serialization."
        return self._xkey.serialize(check_validity=False)

    def to_dict(self) -> Dict[str, Any]:
        return key_dict.dict_from_key_data(self._xkey).to_dict()

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_string(
        cls: Type[_HDKey], xkey: str, network: NetworkArg = None
    ) -> _HDKey:
        return cls._from_key_data(key_data.decode(xkey, network, cls._PRIVATE))

    @classmethod
    def from_buffer(
        cls: Type[_HDKey], buffer: bytes, network: NetworkArg = None
    ) -> _HDKey:
        return cls._from_key_data(key_data.decode(buffer, network, cls._PRIVATE))

    @classmethod
    def from_dict(cls: Type[_HDKey], dict_: Mapping[str, Any]) -> _HDKey:
        return cls._from_key_data(key_dict.key_data_from_dict(dict_, cls._PRIVATE))

    @classmethod
    def from_json(cls: Type[_HDKey], json_str: str) -> _HDKey:
        return cls._from_key_data(cls._key_data_from_json(json_str))

    @classmethod
    def get_serialized_error(
        cls, data: Any, network: NetworkArg = None
    ) -> Optional[HDKeyError]:
        """Return the error found decoding the serialized key, None if valid.

        data is a Base58Check string or 78 bytes;
        if network is provided, the key must belong to it.
        """
        return key_data.serialized_error(data, network, cls._PRIVATE)

    @classmethod
    def is_valid_serialized(cls, data: Any, network: NetworkArg = None) -> bool:
        return cls.get_serialized_error(data, network) is None


class HDPrivateKey(_HDKeyBase):
    """BIP32 extended private key."""

    _PRIVATE = True

    def __init__(self, arg: Any = None, network: NetworkArg = None) -> None:

        if arg is None:
            arg, network = get_network(network).name, None
        if isinstance(arg, str) and _is_network_name(arg):
            logger.debug("generating a new random %s master key", arg)
            xkey = ckd.rootxprv_from_seed(secrets.token_bytes(64), arg)
            object.__setattr__(self, "_xkey", xkey)
        else:
            super().__init__(arg, network)

    @classmethod
    def from_seed(
        cls, seed: Union[bytes, str], network: NetworkArg = None
    ) -> "HDPrivateKey":
        """Return the master key of a 16 to 64 bytes seed.

        The seed can be bytes or hex-string.
        """
        return cls._from_key_data(ckd.rootxprv_from_seed(seed, network))

    @property
    def private_key(self) -> bytes:
        "Return the 32 bytes private key."
        return self._xkey.key[1:]

    @cached_property
    def hd_public_key(self) -> "HDPublicKey":
        return HDPublicKey._from_key_data(ckd.xpub_from_xprv(self._xkey))

    @property
    def public_key(self) -> bytes:
        "Return the 33 bytes compressed public key."
        return self.hd_public_key.public_key

    @property
    def xprivkey(self) -> str:
        return str(self)

    @property
    def xpubkey(self) -> str:
        return self.hd_public_key.xpubkey


class HDPublicKey(_HDKeyBase):
    """BIP32 extended public key.

    Only normal (non-hardened) derivation is possible.
    """

    _PRIVATE = False

    def __init__(self, arg: Any = None, network: NetworkArg = None) -> None:

        if isinstance(arg, HDPrivateKey):
            xkey = copy(arg.hd_public_key._xkey)
            object.__setattr__(self, "_xkey", xkey)
        else:
            super().__init__(arg, network)

    @property
    def public_key(self) -> bytes:
        "Return the 33 bytes compressed public key."
        return self._xkey.key

    @property
    def xpubkey(self) -> str:
        return str(self)
