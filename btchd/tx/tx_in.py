#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Transaction input and the previous output it spends.

The tx_id of an OutPoint is held in display (RPC) byte order
and reversed on the wire.
"""

from dataclasses import InitVar, dataclass, field
from typing import Type

from btchd import compact_size
from btchd.alias import BinaryData, Octets
from btchd.exceptions import BTChdValueError
from btchd.utils import bytes_from_octets, bytesio_from_binarydata, read_exact

NULL_TX_ID = b"\x00" * 32
NULL_VOUT = 0xFFFFFFFF
# a sequence that disables lock time for the input
FINAL_SEQUENCE = 0xFFFFFFFF


def _uint32(data: bytes) -> int:
    return int.from_bytes(data, byteorder="little", signed=False)


@dataclass
class OutPoint:
    tx_id: bytes = NULL_TX_ID
    vout: int = NULL_VOUT
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        self.tx_id = bytes_from_octets(self.tx_id)
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        if len(self.tx_id) != 32:
            err_msg = f"invalid OutPoint tx_id: {len(self.tx_id)} bytes instead of 32"
            raise BTChdValueError(err_msg)
        if not 0 <= self.vout <= 0xFFFFFFFF:
            raise BTChdValueError(f"invalid vout: {self.vout}")
        # the null tx_id and the null vout only come together (coinbase)
        if (self.tx_id == NULL_TX_ID) != (self.vout == NULL_VOUT):
            raise BTChdValueError("invalid OutPoint")

    def serialize(self, check_validity: bool = True) -> bytes:
        if check_validity:
            self.assert_valid()
        return self.tx_id[::-1] + self.vout.to_bytes(4, byteorder="little")

    @classmethod
    def parse(
        cls: Type["OutPoint"], data: BinaryData, check_validity: bool = True
    ) -> "OutPoint":
        "Return the OutPoint read from the next 36 bytes of the stream."

        stream = bytesio_from_binarydata(data)
        tx_id = read_exact(stream, 32, "OutPoint tx_id")[::-1]
        vout = _uint32(read_exact(stream, 4, "OutPoint vout"))
        return cls(tx_id, vout, check_validity)


@dataclass
class TxIn:
    prev_out: OutPoint = field(default_factory=OutPoint)
    script_sig: bytes = b""
    sequence: int = 0
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        self.script_sig = bytes_from_octets(self.script_sig)
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        self.prev_out.assert_valid()
        if not 0 <= self.sequence <= 0xFFFFFFFF:
            raise BTChdValueError(f"invalid sequence: {self.sequence}")

    def serialize(self, check_validity: bool = True) -> bytes:
        if check_validity:
            self.assert_valid()
        return (
            self.prev_out.serialize(check_validity)
            + compact_size.serialize_bytes(self.script_sig)
            + self.sequence.to_bytes(4, byteorder="little")
        )

    @classmethod
    def parse(
        cls: Type["TxIn"], data: BinaryData, check_validity: bool = True
    ) -> "TxIn":

        stream = bytesio_from_binarydata(data)
        prev_out = OutPoint.parse(stream, check_validity)
        script_sig = compact_size.parse_bytes(stream)
        sequence = _uint32(read_exact(stream, 4, "sequence"))
        return cls(prev_out, script_sig, sequence, check_validity)
