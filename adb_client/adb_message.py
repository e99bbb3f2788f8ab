# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Functions and classes for packing and unpacking the messages exchanged with the ADB server.

.. rubric:: Contents

* :func:`pack_host_request`
* :func:`pack_sync_request`
* :func:`unpack_host_length`
* :func:`unpack_shell_header`
* :class:`ShellPacket`

    * :meth:`ShellPacket.pack`

"""


import struct

from . import constants
from .exceptions import InvalidResponseError


# The characters that may appear in a host length prefix
_HEX_DIGITS = frozenset(b'0123456789abcdefABCDEF')


def pack_host_request(command):
    """Pack a host command into its over-the-wire format.

    The command's length in bytes is sent as 4 uppercase, zero-padded hex digits, followed by the command itself.

    Parameters
    ----------
    command : str, bytes
        The host command (e.g., ``'host:devices'``)

    Returns
    -------
    bytes
        The packed request

    Raises
    ------
    ValueError
        The command is too long to be sent.

    """
    if not isinstance(command, (bytes, bytearray)):
        command = command.encode('utf-8')

    if len(command) > constants.MAX_HOST_LENGTH:
        raise ValueError('Host command is too long ({} bytes)'.format(len(command)))

    return '{:04X}'.format(len(command)).encode('ascii') + bytes(command)


def unpack_host_length(data):
    """Unpack the 4 hex digit length that precedes a host response string.

    Parameters
    ----------
    data : bytes
        The 4 bytes that were received

    Returns
    -------
    int
        The length of the response string

    Raises
    ------
    InvalidResponseError
        ``data`` is not exactly 4 hex digits.

    """
    if len(data) != constants.HOST_LENGTH_SIZE or not _HEX_DIGITS.issuperset(data):
        raise InvalidResponseError('Invalid length prefix: {!r}'.format(data))

    return int(data, 16)


def pack_sync_request(command_id, size):
    """Pack a FileSync request header.

    Parameters
    ----------
    command_id : bytes
        The 4-byte request id (e.g., ``b'RECV'``)
    size : int
        The length of the payload that follows; for ``b'DONE'`` this is the file's modification time

    Returns
    -------
    bytes
        The packed header

    """
    return struct.pack(constants.FILESYNC_REQUEST_FORMAT, command_id, size)


def unpack_shell_header(header):
    """Unpack a shell v2 packet header.

    Parameters
    ----------
    header : bytes
        The 5-byte header that was received

    Returns
    -------
    packet_id : int
        The type of the packet
    length : int
        The length of the payload that follows the header

    """
    return struct.unpack(constants.SHELL_HEADER_FORMAT, header)


class ShellPacket(object):
    """A shell v2 packet.

    Parameters
    ----------
    packet_id : int
        The type of the packet (e.g., :const:`adb_client.constants.SHELL_STDIN`)
    data : bytes
        The payload

    """
    def __init__(self, packet_id, data=b''):
        self.packet_id = packet_id
        self.data = data

    def __repr__(self):
        return 'ShellPacket({}, {!r})'.format(self.packet_id, self.data)

    def pack(self):
        """Returns this packet in an over-the-wire format.

        Returns
        -------
        bytes
            The header followed by the payload

        """
        return struct.pack(constants.SHELL_HEADER_FORMAT, self.packet_id, len(self.data)) + bytes(self.data)
