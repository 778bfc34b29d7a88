#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the btchd package."

name = "btchd"
__version__ = "2024.6.1"
__author__ = "The btchd developers"
__author_email__ = "devs@btchd.org"
__copyright__ = "Copyright (C) 2024 The btchd developers"
__license__ = "MIT License"
