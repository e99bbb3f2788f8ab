# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Implement helpers for the :class:`~adb_client.adb_connection_async.AdbConnectionAsync` class and the clients built on it.

.. rubric:: Contents

* :func:`get_shell_command`
* :func:`maybe_await`
* :func:`read_exact`
* :func:`read_stream`
* :func:`write_stream`

"""


import inspect
import logging

from .exceptions import AdbConnectionError


_LOGGER = logging.getLogger(__name__)


def get_shell_command(command, args=()):
    """Build the command line that will be run by the device's shell.

    Each argument is wrapped in single quotes, and any single quotes inside of it are written as ``'\\''``.

    Parameters
    ----------
    command : str
        The command that will be run; it is not quoted
    args : list[str], tuple[str]
        The arguments that will be passed to ``command``

    Returns
    -------
    str
        The command line

    """
    return ''.join([command] + [" '{}'".format(arg.replace("'", "'\\''")) for arg in args])


async def maybe_await(result):
    """Await ``result`` if it is awaitable, otherwise return it as-is.

    This allows both regular file-like objects (e.g., ``io.BytesIO``) and asynchronous ones
    (e.g., files opened via ``aiofiles``) to be used for reading and writing.

    """
    if inspect.isawaitable(result):
        return await result
    return result


async def read_exact(transport, numbytes):
    """Read exactly ``numbytes`` bytes from ``transport``.

    Short reads are repeated until the requested amount of data has been received.

    Parameters
    ----------
    transport : adb_client.transport.base_transport_async.BaseTransportAsync
        The transport from which data will be read
    numbytes : int
        The amount of data to read

    Returns
    -------
    bytes
        The received data

    Raises
    ------
    adb_client.exceptions.AdbConnectionError
        The stream ended before ``numbytes`` bytes were received.

    """
    data = bytearray()
    while len(data) < numbytes:
        temp = await transport.bulk_read(numbytes - len(data))
        _LOGGER.debug("bulk_read(%d): %.1000s", numbytes - len(data), repr(temp))
        if not temp:
            raise AdbConnectionError('Connection closed after {} of {} bytes were received'.format(len(data), numbytes))

        data += temp

    return bytes(data)


async def read_stream(stream, size):
    """Read up to ``size`` bytes from a regular or asynchronous file-like object.

    """
    return await maybe_await(stream.read(size))


async def write_stream(stream, data):
    """Write ``data`` to a regular or asynchronous file-like object.

    """
    await maybe_await(stream.write(data))
