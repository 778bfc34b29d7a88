#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Type aliases shared across the package.

They document the input conventions too: most functions accepting
bytes also accept their hex-string rendering.
"""

from io import BytesIO
from typing import Tuple, Union

# bytes, or a hex-string accepted by bytes.fromhex (spaces allowed):
# chain codes, keys, seeds, scripts, transaction ids
Octets = Union[bytes, str]

# bytes or an ascii text string, e.g. a Base58Check encoded extended key
String = Union[bytes, str]

# a byte stream to be consumed, or the Octets it should be built from
BinaryData = Union[BytesIO, Octets]

# affine curve point (x, y)
Point = Tuple[int, int]

# no point of a prime order group has y == 0,
# so (_, 0) is used for the point at infinity
INF = 5, 0

# Jacobian curve point (X, Y, Z), with x = X/Z^2 and y = Y/Z^3
JacPoint = Tuple[int, int, int]

# Z == 0 marks the point at infinity
INFJ = 7, 0, 0
