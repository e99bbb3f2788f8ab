# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Implement the :class:`AdbConnectionAsync` class, a single connection to the ADB server over which host commands are sent.

* :class:`AdbConnectionAsync`

    * :meth:`AdbConnectionAsync.close`
    * :meth:`AdbConnectionAsync.connect`
    * :meth:`AdbConnectionAsync.read_exact`
    * :meth:`AdbConnectionAsync.read_string`
    * :meth:`AdbConnectionAsync.read_uint32`
    * :meth:`AdbConnectionAsync.read_unpack`
    * :meth:`AdbConnectionAsync.send_command`
    * :meth:`AdbConnectionAsync.write`

"""


import logging
import struct

from . import constants
from . import exceptions
from .adb_message import pack_host_request, unpack_host_length
from .hidden_helpers import read_exact
from .transport.base_transport_async import BaseTransportAsync


_LOGGER = logging.getLogger(__name__)


class AdbConnectionAsync(object):
    """A connection to the ADB server.

    A connection is owned by a single operation at a time.  Once a service such as ``sync:`` has been selected via
    :meth:`AdbConnectionAsync.send_command`, the rest of the connection belongs to that service's protocol.

    Parameters
    ----------
    transport : BaseTransportAsync
        The transport that is used to talk to the ADB server

    Raises
    ------
    TypeError
        ``transport`` is not an instance of a subclass of :class:`~adb_client.transport.base_transport_async.BaseTransportAsync`

    Attributes
    ----------
    _transport : BaseTransportAsync
        The transport that is used to talk to the ADB server

    """
    def __init__(self, transport):
        if not isinstance(transport, BaseTransportAsync):
            raise TypeError("`transport` must be an instance of a subclass of `BaseTransportAsync`")

        self._transport = transport

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()

    async def close(self):
        """Close the connection.

        """
        await self._transport.close()

    async def connect(self):
        """Open the connection to the ADB server.

        The transport's default timeout applies.

        Returns
        -------
        AdbConnectionAsync
            This connection

        """
        await self._transport.connect()
        return self

    async def send_command(self, command):
        """Send a host command and check the ADB server's response.

        1. Send the command, prefixed by its length as 4 hex digits, in a single write
        2. Read the 4-byte response
        3. If the response is ``b'OKAY'``, we are done
        4. If the response is ``b'FAIL'``, read the error message and raise an exception
        5. Otherwise, raise an exception


        Parameters
        ----------
        command : str
            The host command (e.g., ``'host:devices'``)

        Raises
        ------
        adb_client.exceptions.AdbCommandFailureException
            The ADB server responded with ``b'FAIL'``.
        adb_client.exceptions.InvalidResponseError
            The ADB server sent an unknown response.

        """
        _LOGGER.debug("send_command: %s", command)
        await self.write(pack_host_request(command))

        response = await self.read_exact(constants.HOST_RESPONSE_SIZE)
        if response == constants.OKAY:
            return

        if response == constants.FAIL:
            message = await self.read_string()
            raise exceptions.AdbCommandFailureException(message)

        raise exceptions.InvalidResponseError('Invalid response type {!r} to command {!r}'.format(response, command))

    async def read_string(self):
        """Read a string prefixed by its length as 4 hex digits.

        Returns
        -------
        str
            The UTF-8 decoded string

        """
        length = unpack_host_length(await self.read_exact(constants.HOST_LENGTH_SIZE))
        return (await self.read_exact(length)).decode('utf-8')

    async def read_exact(self, numbytes):
        """Read exactly ``numbytes`` bytes.

        Parameters
        ----------
        numbytes : int
            The amount of data to read

        Returns
        -------
        bytes
            The received data

        Raises
        ------
        adb_client.exceptions.AdbConnectionError
            The connection was closed before all of the data was received.

        """
        return await read_exact(self._transport, numbytes)

    async def read_uint32(self):
        """Read a little-endian unsigned 32-bit integer.

        """
        return (await self.read_unpack(b'<I'))[0]

    async def read_unpack(self, fmt):
        """Read and unpack a fixed-size structure.

        Parameters
        ----------
        fmt : bytes
            A ``struct`` format

        Returns
        -------
        tuple
            The unpacked values

        """
        return struct.unpack(fmt, await self.read_exact(struct.calcsize(fmt)))

    async def write(self, data):
        """Send data to the ADB server.

        Parameters
        ----------
        data : bytes
            The data that will be sent

        """
        _LOGGER.debug("bulk_write: %.1000s", repr(data))
        await self._transport.bulk_write(data)
