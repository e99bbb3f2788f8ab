# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""A base class for transports used to communicate with the ADB server.

A transport carries the raw bytes of a single connection to the ADB server; framing is handled by
:class:`~adb_client.adb_connection_async.AdbConnectionAsync`.  Implementations must follow these rules:

* Failures are reported as :class:`~adb_client.exceptions.AdbConnectionError` (or its subclass
  :class:`~adb_client.exceptions.TcpTimeoutException` for timeouts), never as a bare ``OSError``
* :meth:`BaseTransportAsync.bulk_read` returns ``b''`` once the ADB server has closed the connection, and
  :func:`~adb_client.hidden_helpers.read_exact` turns that into an error
* :meth:`BaseTransportAsync.close` can be called more than once, and on a transport that never connected
* A timeout of ``None`` means that the transport's own default is used

.. rubric:: Contents

* :class:`BaseTransportAsync`

    * :meth:`BaseTransportAsync.bulk_read`
    * :meth:`BaseTransportAsync.bulk_write`
    * :meth:`BaseTransportAsync.close`
    * :meth:`BaseTransportAsync.connect`

"""


from abc import ABC, abstractmethod


class BaseTransportAsync(ABC):
    """A byte stream to the ADB server.

    """

    @abstractmethod
    async def close(self):
        """Close the connection; this must not raise if it is already closed.

        """

    @abstractmethod
    async def connect(self, transport_timeout_s=None):
        """Open a connection to the ADB server.

        Parameters
        ----------
        transport_timeout_s : float, None
            Timeout in seconds for connecting, or ``None`` to use the transport's default

        Raises
        ------
        adb_client.exceptions.AdbConnectionError
            The connection could not be established.

        """

    @abstractmethod
    async def bulk_read(self, numbytes, transport_timeout_s=None):
        """Read up to ``numbytes`` bytes from the ADB server.

        Parameters
        ----------
        numbytes : int
            The maximum amount of data to be received
        transport_timeout_s : float, None
            Timeout in seconds for the read, or ``None`` to use the transport's default

        Returns
        -------
        bytes
            The received data, which may be shorter than ``numbytes``; ``b''`` means that the ADB server closed the
            connection

        Raises
        ------
        adb_client.exceptions.AdbConnectionError
            The transport is not connected or the read failed.

        """

    @abstractmethod
    async def bulk_write(self, data, transport_timeout_s=None):
        """Send all of ``data`` to the ADB server.

        Parameters
        ----------
        data : bytes
            The data to be sent
        transport_timeout_s : float, None
            Timeout in seconds for the write, or ``None`` to use the transport's default

        Returns
        -------
        int
            The number of bytes sent

        Raises
        ------
        adb_client.exceptions.AdbConnectionError
            The transport is not connected or the write failed.

        """
