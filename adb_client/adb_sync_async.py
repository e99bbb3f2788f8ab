# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Implement the :class:`AdbSyncClientAsync` class, which transfers files via the FileSync protocol.

* :class:`AdbSyncClientAsync`

    * :meth:`AdbSyncClientAsync._read_response`
    * :meth:`AdbSyncClientAsync._read_string`
    * :meth:`AdbSyncClientAsync._send_request`
    * :meth:`AdbSyncClientAsync._to_stat_v2`
    * :meth:`AdbSyncClientAsync.close`
    * :meth:`AdbSyncClientAsync.list`
    * :meth:`AdbSyncClientAsync.list_v2`
    * :meth:`AdbSyncClientAsync.pull`
    * :meth:`AdbSyncClientAsync.pull_file`
    * :meth:`AdbSyncClientAsync.push`
    * :meth:`AdbSyncClientAsync.push_file`
    * :meth:`AdbSyncClientAsync.stat`
    * :meth:`AdbSyncClientAsync.stat_v2`

"""


import asyncio
from datetime import datetime
import logging
import stat
import struct
import time

import aiofiles
import aiofiles.os

from . import constants
from . import exceptions
from .adb_message import pack_sync_request
from .hidden_helpers import read_stream, write_stream
from .models import AdbSyncErrorCode, StatEntry, StatV2Entry, UnixFileMode, to_datetime


_LOGGER = logging.getLogger(__name__)

# A directory listing ends with ``b'DONE'`` followed by an empty entry, which must be skipped
_LIST_DONE_SIZE = struct.calcsize(constants.FILESYNC_STAT_FORMAT) + 4
_LIST_V2_DONE_SIZE = struct.calcsize(constants.FILESYNC_STAT_V2_FORMAT) + 4


def _get_error_code(error):
    """Convert a raw error code to an :class:`~adb_client.models.AdbSyncErrorCode`, if it is a known code.

    """
    try:
        return AdbSyncErrorCode(error)
    except ValueError:
        return error


class AdbSyncClientAsync(object):
    """A client for the FileSync protocol.

    All operations share a single connection, so they are serialized: each public method acquires a lock before
    touching the connection and releases it when it is done, even if it fails or is cancelled.

    See https://android.googlesource.com/platform/packages/modules/adb/+/refs/heads/master/SYNC.TXT

    Parameters
    ----------
    connection : adb_client.adb_connection_async.AdbConnectionAsync
        A connection on which the ``sync:`` service has already been started

    Attributes
    ----------
    _connection : adb_client.adb_connection_async.AdbConnectionAsync
        A connection on which the ``sync:`` service has been started
    _lock : asyncio.Lock
        A lock that is held while a FileSync operation is in progress

    """
    def __init__(self, connection):
        self._connection = connection
        self._lock = asyncio.Lock()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()

    async def close(self):
        """Close the connection.

        """
        await self._connection.close()

    # ======================================================================= #
    #                                                                         #
    #                                 Transfers                               #
    #                                                                         #
    # ======================================================================= #
    async def pull(self, device_path, stream):
        """Pull a file from the device.

        Parameters
        ----------
        device_path : str
            The file on the device that will be pulled
        stream : io.BufferedIOBase, AsyncBufferedIOBase
            File-like object to which the file's contents will be written

        Raises
        ------
        adb_client.exceptions.AdbCommandFailureException
            The device could not send the file.
        adb_client.exceptions.InvalidResponseError
            Received an unexpected response.

        """
        async with self._lock:
            _LOGGER.debug("pull: %s", device_path)
            await self._send_request(constants.RECV, device_path)

            while True:
                response = await self._read_response()

                if response == constants.DATA:
                    size = await self._connection.read_uint32()
                    if size > constants.SYNC_DATA_MAX:
                        raise exceptions.InvalidResponseError('Data packet is too large ({} bytes)'.format(size))

                    await write_stream(stream, await self._connection.read_exact(size))

                elif response == constants.DONE:
                    await self._connection.read_uint32()
                    return

                else:
                    raise exceptions.InvalidResponseError('Invalid response type {!r}'.format(response))

    async def pull_file(self, device_path, local_path):
        """Pull a file from the device and save it to ``local_path``.

        Parameters
        ----------
        device_path : str
            The file on the device that will be pulled
        local_path : str
            The path to where the file will be downloaded

        """
        async with aiofiles.open(local_path, 'wb') as stream:
            await self.pull(device_path, stream)

    async def push(self, device_path, stream, mtime=None, permissions=constants.DEFAULT_PUSH_MODE):
        """Push a file to the device.

        1. Send a ``b'SEND'`` request with ``<device_path>,0<octal permissions>``
        2. Send the contents of ``stream`` in ``b'DATA'`` packets of at most :const:`~adb_client.constants.SYNC_DATA_MAX` bytes
        3. Send a ``b'DONE'`` request whose length field is the modification time
        4. Check the response


        Parameters
        ----------
        device_path : str
            Destination on the device to write to
        stream : io.BufferedIOBase, AsyncBufferedIOBase
            File-like object for reading from
        mtime : int, float, datetime.datetime, None
            The modification time to set on the file; if it is ``None``, the current time is used
        permissions : int, adb_client.models.UnixFileMode
            The permissions for the file; only the ``0o777`` bits are used

        Raises
        ------
        ValueError
            ``mtime`` does not fit in an unsigned 32-bit integer; nothing is sent.
        adb_client.exceptions.AdbCommandFailureException
            The push failed.
        adb_client.exceptions.InvalidResponseError
            Received an unexpected response.

        """
        if mtime is None:
            mtime = time.time()
        elif isinstance(mtime, datetime):
            mtime = mtime.timestamp()

        mtime = int(mtime)
        if not 0 <= mtime <= constants.MAX_PUSH_MTIME:
            raise ValueError('Modification time {} is out of range'.format(mtime))

        fileinfo = '{},0{:o}'.format(device_path, int(permissions) & constants.PUSH_PERMISSIONS_MASK)

        async with self._lock:
            _LOGGER.debug("push: %s", fileinfo)
            await self._send_request(constants.SEND, fileinfo)

            while True:
                data = await read_stream(stream, constants.SYNC_DATA_MAX)
                if not data:
                    break

                await self._connection.write(pack_sync_request(constants.DATA, len(data)) + data)

            # DONE doesn't send data, but it hides the modification time in the size field.
            await self._connection.write(pack_sync_request(constants.DONE, mtime))

            response = await self._read_response()
            if response != constants.OKAY:
                raise exceptions.InvalidResponseError('Invalid response type {!r}'.format(response))

            await self._connection.read_uint32()

    async def push_file(self, local_path, device_path, mtime=None, permissions=None):
        """Push a local file to the device.

        Parameters
        ----------
        local_path : str
            The file that will be pushed
        device_path : str
            Destination on the device to write to
        mtime : int, float, datetime.datetime, None
            The modification time to set on the file; if it is ``None``, the local file's modification time is used
        permissions : int, adb_client.models.UnixFileMode, None
            The permissions for the file; if it is ``None``, the local file's permissions are used

        """
        local_stat = await aiofiles.os.stat(local_path)
        if mtime is None:
            mtime = local_stat.st_mtime
        if permissions is None:
            permissions = stat.S_IMODE(local_stat.st_mode)

        async with aiofiles.open(local_path, 'rb') as stream:
            await self.push(device_path, stream, mtime, permissions)

    # ======================================================================= #
    #                                                                         #
    #                                   Stat                                  #
    #                                                                         #
    # ======================================================================= #
    async def list(self, device_path):
        """Return a directory listing of the given path.

        .. note::

           Prefer :meth:`AdbSyncClientAsync.list_v2` if the device supports it.


        Parameters
        ----------
        device_path : str
            Directory to list

        Returns
        -------
        list[StatEntry]
            The entries in the directory

        """
        async with self._lock:
            await self._send_request(constants.LIST, device_path)

            files = []
            while True:
                response = await self._read_response()

                if response == constants.DONE:
                    await self._connection.read_exact(_LIST_DONE_SIZE)
                    return files

                if response != constants.DENT:
                    raise exceptions.InvalidResponseError('Invalid response type {!r}'.format(response))

                mode, size, mtime = await self._connection.read_unpack(constants.FILESYNC_STAT_FORMAT)
                name = await self._read_string()
                files.append(StatEntry('{}/{}'.format(device_path.rstrip('/'), name), UnixFileMode(mode), size, to_datetime(mtime)))

    async def list_v2(self, device_path):
        """Return a directory listing of the given path, with ``stat()`` information from the ``LIS2`` request.

        The entire listing is read before any entry is converted or an error is raised, so the connection can still be
        used afterwards.

        Parameters
        ----------
        device_path : str
            Directory to list

        Returns
        -------
        list[StatV2Entry]
            The entries in the directory

        Raises
        ------
        adb_client.exceptions.AdbSyncError
            An entry had a nonzero error code.
        adb_client.exceptions.InvalidResponseError
            Received an unexpected response, or an entry has a timestamp that cannot be represented.

        """
        async with self._lock:
            await self._send_request(constants.LIS2, device_path)

            records = []
            while True:
                response = await self._read_response()

                if response == constants.DONE:
                    await self._connection.read_exact(_LIST_V2_DONE_SIZE)
                    break

                if response != constants.DNT2:
                    raise exceptions.InvalidResponseError('Invalid response type {!r}'.format(response))

                record = await self._connection.read_unpack(constants.FILESYNC_STAT_V2_FORMAT)
                path = '{}/{}'.format(device_path.rstrip('/'), await self._read_string())
                records.append((path, record))

        files = []
        for path, record in records:
            if record[0] != 0:
                raise exceptions.AdbSyncError(_get_error_code(record[0]), path)

            files.append(self._to_stat_v2(path, record))

        return files

    async def stat(self, device_path):
        """Get a file's ``stat()`` information.

        .. note::

           The legacy ``STAT`` response has no error field, so a missing file is reported as an entry whose fields are
           all zero.  Prefer :meth:`AdbSyncClientAsync.stat_v2` if the device supports it.


        Parameters
        ----------
        device_path : str
            The file on the device for which we will get information

        Returns
        -------
        StatEntry
            The file's mode, size, and modification time

        """
        async with self._lock:
            await self._send_request(constants.STAT, device_path)

            response = await self._read_response()
            if response != constants.STAT:
                raise exceptions.InvalidResponseError('Invalid response type {!r}'.format(response))

            mode, size, mtime = await self._connection.read_unpack(constants.FILESYNC_STAT_FORMAT)
            return StatEntry(device_path, UnixFileMode(mode), size, to_datetime(mtime))

    async def stat_v2(self, device_path, lstat=True):
        """Get a file's ``stat()`` or ``lstat()`` information.

        Parameters
        ----------
        device_path : str
            The file on the device for which we will get information
        lstat : bool
            If ``True``, information about a symbolic link itself is returned instead of the file it points to

        Returns
        -------
        StatV2Entry
            The file's information

        Raises
        ------
        adb_client.exceptions.AdbSyncError
            The device reported an error.
        adb_client.exceptions.InvalidResponseError
            Received an unexpected response, or a timestamp cannot be represented.

        """
        command_id = constants.LST2 if lstat else constants.STA2

        async with self._lock:
            await self._send_request(command_id, device_path)

            response = await self._read_response()
            if response != command_id:
                raise exceptions.InvalidResponseError('Invalid response type {!r}'.format(response))

            record = await self._connection.read_unpack(constants.FILESYNC_STAT_V2_FORMAT)

        # The other fields are not meaningful if there was an error
        if record[0] != 0:
            raise exceptions.AdbSyncError(_get_error_code(record[0]), device_path)

        return self._to_stat_v2(device_path, record)

    # ======================================================================= #
    #                                                                         #
    #                              Hidden Methods                             #
    #                                                                         #
    # ======================================================================= #
    async def _read_response(self):
        """Read a 4-byte response id.

        Returns
        -------
        bytes
            The response id

        Raises
        ------
        adb_client.exceptions.AdbCommandFailureException
            The response was ``b'FAIL'``.

        """
        response = await self._connection.read_exact(4)
        if response == constants.FAIL:
            raise exceptions.AdbCommandFailureException(await self._read_string())

        return response

    async def _read_string(self):
        """Read a string that is prefixed by its length as a little-endian 32-bit integer.

        """
        size = await self._connection.read_uint32()
        return (await self._connection.read_exact(size)).decode('utf-8')

    async def _send_request(self, command_id, path):
        """Send a request whose payload is a path.

        Parameters
        ----------
        command_id : bytes
            The request id (e.g., ``b'RECV'``)
        path : str
            The payload

        """
        data = path.encode('utf-8')
        await self._connection.write(pack_sync_request(command_id, len(data)) + data)

    @staticmethod
    def _to_stat_v2(path, record):
        """Convert an unpacked :const:`~adb_client.constants.FILESYNC_STAT_V2_FORMAT` record to a :class:`~adb_client.models.StatV2Entry`.

        Raises
        ------
        adb_client.exceptions.InvalidResponseError
            A timestamp is outside the range of ``datetime``.

        """
        error, _dev, _ino, mode, _nlink, uid, gid, size, atime, mtime, ctime = record
        try:
            atime, mtime, ctime = to_datetime(atime), to_datetime(mtime), to_datetime(ctime)
        except (OverflowError, OSError, ValueError):
            raise exceptions.InvalidResponseError('Invalid timestamps for {}: {}, {}, {}'.format(path, atime, mtime, ctime))

        return StatV2Entry(path, UnixFileMode(mode), uid, gid, size, atime, mtime, ctime, AdbSyncErrorCode(error))
