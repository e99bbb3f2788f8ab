# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""ADB-related exceptions.

"""


class AdbCommandFailureException(Exception):
    """A ``b'FAIL'`` response was received from the ADB server.

    Parameters
    ----------
    message : str
        The error message sent by the ADB server

    Attributes
    ----------
    message : str
        The error message sent by the ADB server

    """
    def __init__(self, message):
        super(AdbCommandFailureException, self).__init__(message)
        self.message = message


class AdbConnectionError(Exception):
    """Connecting to the ADB server failed, or the connection failed while reading or writing.

    """


class AdbSyncError(Exception):
    """A FileSync stat request reported a nonzero error code.

    Parameters
    ----------
    error_code : adb_client.models.AdbSyncErrorCode, int
        The POSIX-like error code reported by the device
    path : str
        The path on the device that was being queried

    Attributes
    ----------
    error_code : adb_client.models.AdbSyncErrorCode, int
        The POSIX-like error code reported by the device
    path : str
        The path on the device that was being queried

    """
    def __init__(self, error_code, path):
        super(AdbSyncError, self).__init__(error_code, path)
        self.error_code = error_code
        self.path = path

    def __str__(self):
        return 'Error code {} for {}'.format(self.error_code, self.path)


class InvalidResponseError(Exception):
    """Got an invalid or unexpected response from the ADB server.

    """


class TcpTimeoutException(AdbConnectionError):
    """TCP connection timed read/write operation exceeded the allowed time.

    """
