# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Implement the :class:`AdbClientAsync` class, which uses an ADB server to communicate with attached devices.

* :class:`AdbClientAsync`

    * :meth:`AdbClientAsync._connect`
    * :meth:`AdbClientAsync._open_service`
    * :meth:`AdbClientAsync._read_shell_output`
    * :meth:`AdbClientAsync._send_stdin`
    * :meth:`AdbClientAsync.devices`
    * :meth:`AdbClientAsync.execute`
    * :meth:`AdbClientAsync.screencap`
    * :meth:`AdbClientAsync.shell`
    * :meth:`AdbClientAsync.sync`
    * :meth:`AdbClientAsync.track_devices`
    * :meth:`AdbClientAsync.version`

"""


import asyncio
from io import BytesIO
import logging

from . import constants
from . import exceptions
from .adb_connection_async import AdbConnectionAsync
from .adb_message import ShellPacket, unpack_shell_header
from .adb_sync_async import AdbSyncClientAsync
from .framebuffer import Framebuffer, FramebufferHeader
from .hidden_helpers import get_shell_command, read_stream, write_stream
from .models import parse_device_list
from .transport.tcp_transport_async import TcpTransportAsync


_LOGGER = logging.getLogger(__name__)


class AdbClientAsync(object):
    """A client that talks to an ADB server in order to communicate with attached Android devices.

    Each method opens its own connection to the ADB server and closes it when it is done, even if it fails or is
    cancelled.  The exception is :meth:`AdbClientAsync.sync`, which returns a client that owns its connection.

    See https://android.googlesource.com/platform/packages/modules/adb/+/refs/heads/master/SERVICES.TXT

    Parameters
    ----------
    host : str
        The address of the ADB server
    port : int
        The port on which the ADB server listens
    default_transport_timeout_s : float, None
        Default timeout in seconds for connecting and for each read and write, or ``None`` to block

    Attributes
    ----------
    _default_transport_timeout_s : float, None
        Default timeout in seconds for connecting and for each read and write, or ``None`` to block
    _host : str
        The address of the ADB server
    _port : int
        The port on which the ADB server listens

    """
    def __init__(self, host=constants.DEFAULT_HOST, port=constants.DEFAULT_PORT, default_transport_timeout_s=None):
        self._host = host
        self._port = port
        self._default_transport_timeout_s = default_transport_timeout_s

    # ======================================================================= #
    #                                                                         #
    #                              Host Services                              #
    #                                                                         #
    # ======================================================================= #
    async def version(self):
        """Ask the ADB server for its internal version number.

        Returns
        -------
        int
            The ADB server's version

        """
        async with await self._connect() as connection:
            await connection.send_command('host:version')
            return int(await connection.read_string(), 16)

    async def devices(self):
        """Get the devices that are attached to the ADB server.

        Returns
        -------
        list[adb_client.models.DeviceInfo]
            The serial number and connection state of each device

        """
        async with await self._connect() as connection:
            await connection.send_command('host:devices')
            return parse_device_list(await connection.read_string())

    async def track_devices(self):
        """Yield the list of attached devices each time a device is added or removed or its state changes.

        The connection stays open until the generator is closed or the task that is iterating over it is cancelled.
        Empty updates are skipped.

        Yields
        ------
        list[adb_client.models.DeviceInfo]
            The serial number and connection state of each attached device

        Raises
        ------
        adb_client.exceptions.InvalidResponseError
            An update did not contain any ``<serial>\\t<state>`` lines.

        """
        async with await self._connect() as connection:
            await connection.send_command('host:track-devices')

            while True:
                result = await connection.read_string()
                if not result.strip():
                    _LOGGER.debug("track_devices: skipping empty update")
                    continue

                devices = parse_device_list(result)
                if not devices:
                    raise exceptions.InvalidResponseError('Invalid response: {!r}'.format(result))

                yield devices

    # ======================================================================= #
    #                                                                         #
    #                             Device Services                             #
    #                                                                         #
    # ======================================================================= #
    async def execute(self, serial, command, args=(), stdin=None, stdout=None, stderr=None, chunk_size=constants.SHELL_CHUNK_SIZE):
        """Run a command on the device via the shell v2 protocol.

        1. Start the ``shell,v2,raw:`` service on the device
        2. If ``stdin`` was provided, copy it to the command in a separate task
        3. Copy the command's output to ``stdout`` and ``stderr`` until the exit code is received
        4. Cancel the ``stdin`` task, wait for it to finish, and return the exit code


        Parameters
        ----------
        serial : str
            The serial number of the device
        command : str
            The command to run; it is not quoted
        args : list[str], tuple[str]
            The arguments for ``command``; each one will be quoted
        stdin : io.BufferedIOBase, AsyncBufferedIOBase, None
            A file-like object to copy to the command's stdin, or ``None``
        stdout : io.BufferedIOBase, AsyncBufferedIOBase, None
            A file-like object to which the command's stdout is written, or ``None`` to discard it
        stderr : io.BufferedIOBase, AsyncBufferedIOBase, None
            A file-like object to which the command's stderr is written, or ``None`` to discard it
        chunk_size : int
            The maximum amount of stdin data to send in a single packet

        Returns
        -------
        int
            The command's exit code

        Raises
        ------
        adb_client.exceptions.InvalidResponseError
            Received an unknown shell v2 packet.

        """
        service = 'shell,v2,raw:' + get_shell_command(command, args)

        async with await self._open_service(serial, service) as connection:
            stdin_task = None
            stdin_error = None
            if stdin is not None:
                stdin_task = asyncio.ensure_future(self._send_stdin(connection, stdin, chunk_size))

            try:
                exit_code = await self._read_shell_output(connection, stdout, stderr)
            finally:
                if stdin_task is not None:
                    stdin_task.cancel()
                    await asyncio.wait([stdin_task])
                    if not stdin_task.cancelled():
                        stdin_error = stdin_task.exception()

            if stdin_error is not None:
                raise stdin_error

            return exit_code

    async def shell(self, serial, command, args=(), stdin=None):
        """Run a command on the device and collect its output.

        Parameters
        ----------
        serial : str
            The serial number of the device
        command : str
            The command to run; it is not quoted
        args : list[str], tuple[str]
            The arguments for ``command``; each one will be quoted
        stdin : bytes, None
            Data to send to the command's stdin, or ``None``

        Returns
        -------
        exit_code : int
            The command's exit code
        stdout : bytes
            The command's stdout
        stderr : bytes
            The command's stderr

        """
        stdout = BytesIO()
        stderr = BytesIO()
        exit_code = await self.execute(serial, command, args, BytesIO(stdin) if stdin is not None else None, stdout, stderr)

        return exit_code, stdout.getvalue(), stderr.getvalue()

    async def sync(self, serial):
        """Start the ``sync:`` service on the device.

        The returned client owns the connection, and it can be used for several FileSync operations.  Close it when you
        are done with it, e.g., by using it as an asynchronous context manager.

        Parameters
        ----------
        serial : str
            The serial number of the device

        Returns
        -------
        adb_client.adb_sync_async.AdbSyncClientAsync
            A FileSync client for the device

        """
        return AdbSyncClientAsync(await self._open_service(serial, 'sync:'))

    async def screencap(self, serial):
        """Get a snapshot of the device's display via the ``framebuffer:`` service.

        Parameters
        ----------
        serial : str
            The serial number of the device

        Returns
        -------
        adb_client.framebuffer.Framebuffer
            The raw pixel data, along with its dimensions and layout

        Raises
        ------
        adb_client.exceptions.InvalidResponseError
            The framebuffer version or pixel layout is not supported.

        """
        async with await self._open_service(serial, 'framebuffer:') as connection:
            version = await connection.read_uint32()
            if version != constants.FRAMEBUFFER_VERSION:
                raise exceptions.InvalidResponseError('Invalid framebuffer version {}'.format(version))

            fields = await connection.read_unpack(constants.FRAMEBUFFER_HEADER_FORMAT)
            header = FramebufferHeader(version, *fields)
            data = await connection.read_exact(header.size)

        return Framebuffer(header, data)

    # ======================================================================= #
    #                                                                         #
    #                              Hidden Methods                             #
    #                                                                         #
    # ======================================================================= #
    async def _connect(self):
        """Open a new connection to the ADB server.

        Returns
        -------
        AdbConnectionAsync
            The connection

        """
        connection = AdbConnectionAsync(TcpTransportAsync(self._host, self._port, self._default_transport_timeout_s))
        return await connection.connect()

    async def _open_service(self, serial, service):
        """Open a new connection and start a service on a device.

        Parameters
        ----------
        serial : str
            The serial number of the device
        service : str
            The service (e.g., ``'sync:'``)

        Returns
        -------
        AdbConnectionAsync
            A connection that belongs to the service

        """
        connection = await self._connect()
        try:
            await connection.send_command('host:transport:' + serial)
            await connection.send_command(service)
        except BaseException:
            await connection.close()
            raise

        return connection

    @staticmethod
    async def _read_shell_output(connection, stdout, stderr):
        """Read shell v2 packets until the exit code is received.

        Parameters
        ----------
        connection : AdbConnectionAsync
            The connection on which the shell v2 service was started
        stdout : io.BufferedIOBase, AsyncBufferedIOBase, None
            A file-like object to which stdout is written, or ``None``
        stderr : io.BufferedIOBase, AsyncBufferedIOBase, None
            A file-like object to which stderr is written, or ``None``

        Returns
        -------
        int
            The exit code

        """
        while True:
            packet_id, length = unpack_shell_header(await connection.read_exact(constants.SHELL_HEADER_SIZE))
            data = await connection.read_exact(length)

            if packet_id == constants.SHELL_STDOUT:
                if stdout is not None:
                    await write_stream(stdout, data)

            elif packet_id == constants.SHELL_STDERR:
                if stderr is not None:
                    await write_stream(stderr, data)

            elif packet_id == constants.SHELL_EXIT:
                if not data:
                    raise exceptions.InvalidResponseError('Exit packet has no exit code')
                return data[0]

            else:
                raise exceptions.InvalidResponseError('Invalid shell packet type {}'.format(packet_id))

    @staticmethod
    async def _send_stdin(connection, stdin, chunk_size):
        """Copy ``stdin`` to the command, then close the command's stdin.

        Parameters
        ----------
        connection : AdbConnectionAsync
            The connection on which the shell v2 service was started
        stdin : io.BufferedIOBase, AsyncBufferedIOBase
            A file-like object for reading from
        chunk_size : int
            The maximum amount of data to send in a single packet

        """
        while True:
            data = await read_stream(stdin, chunk_size)
            if not data:
                break

            await connection.write(ShellPacket(constants.SHELL_STDIN, data).pack())

        await connection.write(ShellPacket(constants.SHELL_CLOSE_STDIN).pack())
        _LOGGER.debug("stdin closed")
