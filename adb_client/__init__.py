# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""ADB client code.

"""


__version__ = '0.1.0'
