#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Transaction output: an amount locked by a script."

from dataclasses import InitVar, dataclass
from typing import Type

from btchd import compact_size
from btchd.alias import BinaryData
from btchd.exceptions import BTChdValueError
from btchd.utils import bytes_from_octets, bytesio_from_binarydata, read_exact

# also the value of the blanked outputs of SIGHASH_SINGLE
MAX_VALUE = 0xFFFFFFFFFFFFFFFF


@dataclass
class TxOut:
    # satoshi, eight bytes little endian on the wire
    value: int
    script_pub_key: bytes
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        self.script_pub_key = bytes_from_octets(self.script_pub_key)
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        if not 0 <= self.value <= MAX_VALUE:
            raise BTChdValueError(f"invalid value: {self.value}")

    def serialize(self, check_validity: bool = True) -> bytes:
        if check_validity:
            self.assert_valid()
        value = self.value.to_bytes(8, byteorder="little", signed=False)
        return value + compact_size.serialize_bytes(self.script_pub_key)

    @classmethod
    def parse(
        cls: Type["TxOut"], data: BinaryData, check_validity: bool = True
    ) -> "TxOut":

        stream = bytesio_from_binarydata(data)
        value = int.from_bytes(read_exact(stream, 8, "value"), byteorder="little")
        return cls(value, compact_size.parse_bytes(stream), check_validity)
