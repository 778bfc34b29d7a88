#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Bitcoin Script opcode walking.

A script is a sequence of opcodes, some of them (the pushes)
followed by the data they push:

- 0x01..0x4b push the next opcode-value bytes
- OP_PUSHDATA1 (0x4c) pushes the number of bytes in the next byte
- OP_PUSHDATA2 (0x4d) pushes the number of bytes in the next 2 bytes (LE)
- OP_PUSHDATA4 (0x4e) pushes the number of bytes in the next 4 bytes (LE)

Scripts are never executed here: they are split in opcodes only
to remove OP_CODESEPARATOR without touching the pushed data.
A truncated push is kept as it is, up to the end of the script.
"""

from typing import Iterator, List, Tuple

from btchd.alias import Octets
from btchd.utils import bytes_from_octets

OP_0 = 0x00
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_CODESEPARATOR = 0xAB

_PUSHDATA_SIZES = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}


def iter_ops(script: bytes) -> Iterator[Tuple[int, bytes]]:
    """Yield (opcode, raw bytes) for each opcode of the script.

    The raw bytes include the opcode itself and its push data, if any.
    """

    i = 0
    script_len = len(script)
    while i < script_len:
        op = script[i]
        header_size = 1
        if OP_0 < op < OP_PUSHDATA1:
            data_size = op
        elif op in _PUSHDATA_SIZES:
            header_size += _PUSHDATA_SIZES[op]
            if i + header_size > script_len:
                # truncated push size
                yield op, script[i:]
                return
            size_bytes = script[i + 1 : i + header_size]
            data_size = int.from_bytes(size_bytes, byteorder="little", signed=False)
        else:
            data_size = 0
        end = i + header_size + data_size
        yield op, script[i:end]
        i = end


def parse(script: Octets) -> List[bytes]:
    "Return the list of raw opcodes (with their push data) of a script."
    return [raw for _, raw in iter_ops(bytes_from_octets(script))]


def remove_code_separators(script: Octets) -> bytes:
    "Return the script without its OP_CODESEPARATOR opcodes."

    script = bytes_from_octets(script)
    return b"".join(raw for op, raw in iter_ops(script) if op != OP_CODESEPARATOR)
