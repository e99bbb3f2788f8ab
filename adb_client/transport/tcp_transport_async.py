# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""A class for creating a socket connection with the ADB server and sending and receiving data.

* :class:`TcpTransportAsync`

    * :meth:`TcpTransportAsync.bulk_read`
    * :meth:`TcpTransportAsync.bulk_write`
    * :meth:`TcpTransportAsync.close`
    * :meth:`TcpTransportAsync.connect`

"""


import asyncio

from .base_transport_async import BaseTransportAsync
from .. import constants
from ..exceptions import AdbConnectionError, TcpTimeoutException


class TcpTransportAsync(BaseTransportAsync):
    """TCP connection object.

    Parameters
    ----------
    host : str
        The address of the ADB server; may be an IP address or a host name
    port : int
        The port on which the ADB server listens (default is 5037)
    default_transport_timeout_s : float, None
        Default timeout in seconds for TCP packets, or ``None``

    Attributes
    ----------
    _default_transport_timeout_s : float, None
        Default timeout in seconds for TCP packets, or ``None``
    _host : str
        The address of the ADB server; may be an IP address or a host name
    _port : int
        The port on which the ADB server listens
    _reader : StreamReader, None
        Object for reading data from the socket
    _writer : StreamWriter, None
        Object for writing data to the socket

    """
    def __init__(self, host=constants.DEFAULT_HOST, port=constants.DEFAULT_PORT, default_transport_timeout_s=None):
        self._host = host
        self._port = port
        self._default_transport_timeout_s = default_transport_timeout_s

        self._reader = None
        self._writer = None

    async def close(self):
        """Close the socket connection.

        """
        if self._writer:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except OSError:
                pass

        self._reader = None
        self._writer = None

    async def connect(self, transport_timeout_s=None):
        """Create a socket connection to the ADB server.

        Parameters
        ----------
        transport_timeout_s : float, None
            Timeout for connecting to the socket; if it is ``None``, then it will block until the operation completes

        Raises
        ------
        AdbConnectionError
            The connection was refused or could not be established.
        TcpTimeoutException
            Connecting timed out.

        """
        timeout = self._default_transport_timeout_s if transport_timeout_s is None else transport_timeout_s

        try:
            self._reader, self._writer = await asyncio.wait_for(asyncio.open_connection(self._host, self._port), timeout)
        except asyncio.TimeoutError:
            msg = 'Connecting to {}:{} timed out ({} seconds)'.format(self._host, self._port, timeout)
            raise TcpTimeoutException(msg)
        except OSError as exc:
            msg = 'Unable to connect to the ADB server at {}:{}: {}'.format(self._host, self._port, exc)
            raise AdbConnectionError(msg) from exc

    async def bulk_read(self, numbytes, transport_timeout_s=None):
        """Receive data from the socket.

        Parameters
        ----------
        numbytes : int
            The maximum amount of data to be received
        transport_timeout_s : float, None
            Timeout for reading data from the socket; if it is ``None``, then it will block until the read operation completes

        Returns
        -------
        bytes
            The received data; ``b''`` once the ADB server has closed the connection

        Raises
        ------
        AdbConnectionError
            The socket is not connected or reading failed.
        TcpTimeoutException
            Reading timed out.

        """
        if self._reader is None:
            raise AdbConnectionError('Not connected to the ADB server at {}:{}'.format(self._host, self._port))

        timeout = self._default_transport_timeout_s if transport_timeout_s is None else transport_timeout_s

        try:
            return await asyncio.wait_for(self._reader.read(numbytes), timeout)
        except asyncio.TimeoutError:
            msg = 'Reading from {}:{} timed out ({} seconds)'.format(self._host, self._port, timeout)
            raise TcpTimeoutException(msg)
        except OSError as exc:
            raise AdbConnectionError('Reading from {}:{} failed: {}'.format(self._host, self._port, exc)) from exc

    async def bulk_write(self, data, transport_timeout_s=None):
        """Send data to the socket.

        Parameters
        ----------
        data : bytes
            The data to be sent
        transport_timeout_s : float, None
            Timeout for writing data to the socket; if it is ``None``, then it will block until the write operation completes

        Returns
        -------
        int
            The number of bytes sent

        Raises
        ------
        AdbConnectionError
            The socket is not connected or writing failed.
        TcpTimeoutException
            Sending data timed out.

        """
        if self._writer is None:
            raise AdbConnectionError('Not connected to the ADB server at {}:{}'.format(self._host, self._port))

        timeout = self._default_transport_timeout_s if transport_timeout_s is None else transport_timeout_s

        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout)
            return len(data)
        except asyncio.TimeoutError:
            msg = 'Sending data to {}:{} timed out after {} seconds.'.format(self._host, self._port, timeout)
            raise TcpTimeoutException(msg)
        except OSError as exc:
            raise AdbConnectionError('Sending data to {}:{} failed: {}'.format(self._host, self._port, exc)) from exc
