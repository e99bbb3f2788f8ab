# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Data types returned by :class:`~adb_client.adb_client_async.AdbClientAsync` and :class:`~adb_client.adb_sync_async.AdbSyncClientAsync`.

.. rubric:: Contents

* :class:`AdbConnectionState`
* :class:`AdbSyncErrorCode`
* :class:`DeviceInfo`
* :class:`StatEntry`
* :class:`StatV2Entry`
* :class:`UnixFileMode`
* :func:`get_connection_state`
* :func:`parse_device_list`
* :func:`to_datetime`

"""


from collections import namedtuple
from datetime import datetime, timezone
from enum import Enum, IntEnum, IntFlag


#: A device attached to the ADB server and its connection state
DeviceInfo = namedtuple('DeviceInfo', ['serial', 'state'])

#: Legacy ``stat()`` information; ``size`` wraps around at 4 GiB
StatEntry = namedtuple('StatEntry', ['path', 'mode', 'size', 'mtime'])

#: ``stat()`` information from the ``STA2``, ``LST2``, and ``LIS2`` requests
StatV2Entry = namedtuple('StatV2Entry', ['path', 'mode', 'uid', 'gid', 'size', 'atime', 'mtime', 'ctime', 'error_code'])


class AdbConnectionState(Enum):
    """The connection state of a device, as reported by the ADB server.

    """
    CONNECTING = 'connecting'
    AUTHORIZING = 'authorizing'
    UNAUTHORIZED = 'unauthorized'
    NOPERM = 'no permissions'
    DETACHED = 'detached'
    OFFLINE = 'offline'
    BOOTLOADER = 'bootloader'
    DEVICE = 'device'
    HOST = 'host'
    RECOVERY = 'recovery'
    SIDELOAD = 'sideload'
    RESCUE = 'rescue'
    UNKNOWN = 'unknown'


class AdbSyncErrorCode(IntEnum):
    """POSIX error codes reported by FileSync stat requests.

    """
    NO_ERROR = 0
    EPERM = 1
    ENOENT = 2
    EINTR = 4
    EIO = 5
    ENOMEM = 12
    EACCES = 13
    EFAULT = 14
    EEXIST = 17
    ENOTDIR = 20
    EISDIR = 21
    EINVAL = 22
    ENFILE = 23
    EMFILE = 24
    ETXTBSY = 26
    EFBIG = 27
    ENOSPC = 28
    EROFS = 30
    ENAMETOOLONG = 36
    ELOOP = 40
    EOVERFLOW = 75


class UnixFileMode(IntFlag):
    """The file type and permission bits of ``st_mode``.

    See https://man7.org/linux/man-pages/man7/inode.7.html

    """
    FIFO = 0o010000
    CHARACTER_DEVICE = 0o020000
    DIRECTORY = 0o040000
    REGULAR_FILE = 0o100000

    # File types that share bits with the ones above
    BLOCK_DEVICE = 0o060000
    SYMLINK = 0o120000
    SOCKET = 0o140000

    SET_UID = 0o4000
    SET_GID = 0o2000
    STICKY = 0o1000

    OWNER_READ = 0o400
    OWNER_WRITE = 0o200
    OWNER_EXECUTE = 0o100

    GROUP_READ = 0o040
    GROUP_WRITE = 0o020
    GROUP_EXECUTE = 0o010

    OTHERS_READ = 0o004
    OTHERS_WRITE = 0o002
    OTHERS_EXECUTE = 0o001


# https://android.googlesource.com/platform/packages/modules/adb/+/refs/heads/master/adb.cpp
_CONNECTION_STATES = {state.value: state for state in AdbConnectionState if state is not AdbConnectionState.NOPERM}


def get_connection_state(state):
    """Map the state token from a device list to an :class:`AdbConnectionState`.

    Parameters
    ----------
    state : str
        The state token (e.g., ``'device'``)

    Returns
    -------
    AdbConnectionState
        The corresponding state, or :attr:`AdbConnectionState.UNKNOWN` if the token is not recognized

    """
    if state in _CONNECTION_STATES:
        return _CONNECTION_STATES[state]

    # "no permissions (reason); see <URL>"
    if state.startswith(AdbConnectionState.NOPERM.value):
        return AdbConnectionState.NOPERM

    return AdbConnectionState.UNKNOWN


def parse_device_list(text):
    """Parse the device list sent by the ``host:devices`` and ``host:track-devices`` commands.

    Each line is ``<serial>\\t<state>``.  Lines that do not have this format are skipped.

    Parameters
    ----------
    text : str
        The device list

    Returns
    -------
    list[DeviceInfo]
        The devices, in the order in which they were listed

    """
    devices = []
    for line in text.splitlines():
        serial, sep, state = line.rpartition('\t')
        if not sep or not serial.strip() or not state.strip():
            continue

        devices.append(DeviceInfo(serial, get_connection_state(state)))

    return devices


def to_datetime(timestamp):
    """Convert seconds since the Unix epoch to a timezone-aware UTC ``datetime``.

    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
