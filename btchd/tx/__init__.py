#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Legacy transaction data structures."

from btchd.tx.tx import Tx
from btchd.tx.tx_in import OutPoint, TxIn
from btchd.tx.tx_out import TxOut

__all__ = ["OutPoint", "TxIn", "TxOut", "Tx"]
