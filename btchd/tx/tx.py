#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Legacy (non-witness) transaction.

https://en.bitcoin.it/wiki/Transaction
"""

from dataclasses import InitVar, dataclass, field
from typing import List, Type

from btchd import compact_size
from btchd.alias import BinaryData
from btchd.exceptions import BTChdValueError
from btchd.hashes import hash256
from btchd.tx.tx_in import TxIn
from btchd.tx.tx_out import TxOut
from btchd.utils import bytesio_from_binarydata, read_exact


@dataclass
class Tx:
    # four bytes on the wire, handled as unsigned
    version: int = 1
    # 0: not locked, < 500000000: block height, otherwise UNIX time
    lock_time: int = 0
    vin: List[TxIn] = field(default_factory=list)
    vout: List[TxOut] = field(default_factory=list)
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        self.vin = list(self.vin)
        self.vout = list(self.vout)
        if check_validity:
            self.assert_valid()

    @property
    def id(self) -> bytes:
        "Return the transaction id in display byte order."
        return hash256(self.unchecked_serialize())[::-1]

    def assert_valid(self) -> None:
        if not 0 <= self.version <= 0xFFFFFFFF:
            raise BTChdValueError(f"invalid version: {self.version}")
        if not 0 <= self.lock_time <= 0xFFFFFFFF:
            raise BTChdValueError(f"invalid lock time: {self.lock_time}")
        for tx_in in self.vin:
            tx_in.assert_valid()
        for tx_out in self.vout:
            tx_out.assert_valid()

    def serialize(self, check_validity: bool = True) -> bytes:
        if check_validity:
            self.assert_valid()

        parts = [self.version.to_bytes(4, byteorder="little")]
        parts.append(compact_size.serialize(len(self.vin)))
        parts.extend(tx_in.serialize(check_validity) for tx_in in self.vin)
        parts.append(compact_size.serialize(len(self.vout)))
        parts.extend(tx_out.serialize(check_validity) for tx_out in self.vout)
        parts.append(self.lock_time.to_bytes(4, byteorder="little"))
        return b"".join(parts)

    def unchecked_serialize(self) -> bytes:
        "Return the serialization, skipping any validity check."
        return self.serialize(check_validity=False)

    @classmethod
    def parse(cls: Type["Tx"], data: BinaryData, check_validity: bool = True) -> "Tx":
        "Return the Tx serialized in data, with no trailing bytes allowed."

        stream = bytesio_from_binarydata(data)
        version = int.from_bytes(read_exact(stream, 4, "version"), byteorder="little")
        vin = [
            TxIn.parse(stream, check_validity)
            for _ in range(compact_size.parse(stream))
        ]
        vout = [
            TxOut.parse(stream, check_validity)
            for _ in range(compact_size.parse(stream))
        ]
        lock_time = int.from_bytes(
            read_exact(stream, 4, "lock time"), byteorder="little"
        )
        if stream.read(1):
            raise BTChdValueError("trailing data after lock time")

        return cls(version, lock_time, vin, vout, check_validity)
