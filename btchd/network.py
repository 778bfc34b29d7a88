#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Network constants and lookup functions.

The network tables are loaded once, at import time,
from the JSON files in the _data folder.
"""

import json
from dataclasses import dataclass
from os import path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from btchd.alias import Octets
from btchd.exceptions import HDErrorKind, HDKeyError
from btchd.utils import bytes_from_octets

DEFAULT_NETWORK = "mainnet"

_Network = TypeVar("_Network", bound="Network")


@dataclass(frozen=True)
class Network:
    name: str
    aliases: Tuple[str, ...]

    # BIP32 extended key version bytes
    # mainnet starts with 'xprv'/'xpub', testnet with 'tprv'/'tpub'
    bip32_prv: bytes
    bip32_pub: bytes

    def __init__(
        self,
        name: str,
        aliases: List[str],
        bip32_prv: Octets,
        bip32_pub: Octets,
    ) -> None:

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "aliases", tuple(aliases))
        object.__setattr__(self, "bip32_prv", bytes_from_octets(bip32_prv, 4))
        object.__setattr__(self, "bip32_pub", bytes_from_octets(bip32_pub, 4))

    def to_dict(self) -> Dict[str, Any]:

        return {
            "name": self.name,
            "aliases": list(self.aliases),
            "bip32_prv": self.bip32_prv.hex(),
            "bip32_pub": self.bip32_pub.hex(),
        }

    @classmethod
    def from_dict(cls: Type[_Network], dict_: Mapping[str, Any]) -> _Network:

        return cls(
            dict_["name"],
            dict_["aliases"],
            dict_["bip32_prv"],
            dict_["bip32_pub"],
        )


NETWORKS: Dict[str, Network] = {}
datadir = path.join(path.dirname(__file__), "_data")
for net in ("mainnet", "testnet"):
    filename = path.join(datadir, net + ".json")
    with open(filename, "r") as f:
        NETWORKS[net] = Network.from_dict(json.load(f))

_ALIASES = {alias: n for n in NETWORKS.values() for alias in (n.name,) + n.aliases}


def get_network(network: Union[str, Network, None] = None) -> Network:
    """Return the Network from its name, one of its aliases, or itself.

    None selects the default network.
    """

    if network is None:
        network = DEFAULT_NETWORK
    if isinstance(network, Network):
        return network
    if isinstance(network, str):
        net = _ALIASES.get(network.strip().lower())
        if net is not None:
            return net
    err_msg = f"unknown network: {network!r}"
    raise HDKeyError(HDErrorKind.INVALID_NETWORK_ARGUMENT, err_msg)


def network_from_version(version: bytes) -> Optional[Network]:
    """Return the Network owning the BIP32 version bytes, if any."""

    for net in NETWORKS.values():
        if version in (net.bip32_prv, net.bip32_pub):
            return net
    return None
