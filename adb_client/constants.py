# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Constants used throughout the code.

"""


#: The address of the ADB server
DEFAULT_HOST = '127.0.0.1'

#: The port on which the ADB server listens
DEFAULT_PORT = 5037

#: Host command responses
OKAY = b'OKAY'
FAIL = b'FAIL'

#: The length of a host command response
HOST_RESPONSE_SIZE = 4

#: The length of the hex-encoded length prefix used by host commands
HOST_LENGTH_SIZE = 4

#: The maximum length that fits in the hex-encoded length prefix
MAX_HOST_LENGTH = 0xFFFF

#: Shell v2 packet ids
SHELL_STDIN = 0
SHELL_STDOUT = 1
SHELL_STDERR = 2
SHELL_EXIT = 3
SHELL_CLOSE_STDIN = 4

#: A shell v2 packet header is a 1-byte id followed by a 4-byte little-endian length
SHELL_HEADER_FORMAT = b'<BI'

#: The size of a shell v2 packet header
SHELL_HEADER_SIZE = 5

#: The amount of stdin data to read and send in a single shell v2 packet
SHELL_CHUNK_SIZE = 1024

#: FileSync request and response ids
DATA = b'DATA'
DENT = b'DENT'
DNT2 = b'DNT2'
DONE = b'DONE'
LIS2 = b'LIS2'
LIST = b'LIST'
LST2 = b'LST2'
RECV = b'RECV'
SEND = b'SEND'
STA2 = b'STA2'
STAT = b'STAT'

#: A FileSync request header is a 4-byte id followed by a 4-byte little-endian length
FILESYNC_REQUEST_FORMAT = b'<4sI'

#: Legacy stat record: mode, size, mtime
FILESYNC_STAT_FORMAT = b'<3I'

#: StatV2 record: error, dev, ino, mode, nlink, uid, gid, size, atime, mtime, ctime
FILESYNC_STAT_V2_FORMAT = b'<i2Q4IQ3q'

#: ``SYNC_DATA_MAX``, the maximum amount of data in a single FileSync ``DATA`` packet
SYNC_DATA_MAX = 64 * 1024

#: The permission bits that may be sent along with a ``SEND`` request
PUSH_PERMISSIONS_MASK = 0o777

#: Default permissions for a pushed file
DEFAULT_PUSH_MODE = 0o644

#: The modification time of a pushed file is sent as an unsigned 32-bit integer
MAX_PUSH_MTIME = 0xFFFFFFFF

#: The only supported framebuffer protocol version
FRAMEBUFFER_VERSION = 2

#: The framebuffer header fields that follow the version: 13 little-endian 32-bit unsigned integers
FRAMEBUFFER_HEADER_FORMAT = b'<13I'
