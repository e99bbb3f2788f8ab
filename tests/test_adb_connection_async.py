import logging
import sys
import unittest

from adb_client import exceptions
from adb_client.adb_connection_async import AdbConnectionAsync

from .async_patchers import FakeTcpTransportAsync
from .async_wrapper import awaiter
from .sync_helpers import fail, host_string, okay


# https://stackoverflow.com/a/7483862
_LOGGER = logging.getLogger('adb_client.adb_connection_async')
_LOGGER.setLevel(logging.DEBUG)
_LOGGER.addHandler(logging.StreamHandler(sys.stdout))


class TestAdbConnectionAsync(unittest.TestCase):
    def setUp(self):
        self.transport = FakeTcpTransportAsync()
        self.connection = AdbConnectionAsync(self.transport)

    def tearDown(self):
        self.assertFalse(self.transport.bulk_read_data)

    def test_init_invalid_transport(self):
        with self.assertRaises(TypeError):
            AdbConnectionAsync(transport=123)

    @awaiter
    async def test_connect_close(self):
        self.assertIs(await self.connection.connect(), self.connection)
        self.assertTrue(self.transport.connected)

        await self.connection.close()
        self.assertTrue(self.transport.closed)

    @awaiter
    async def test_context_manager_closes(self):
        self.transport.bulk_read_data = fail('device offline')

        with self.assertRaises(exceptions.AdbCommandFailureException):
            async with await self.connection.connect() as connection:
                await connection.send_command('host:transport:serial')

        self.assertTrue(self.transport.closed)

    @awaiter
    async def test_send_command_okay(self):
        self.transport.bulk_read_data = okay()
        await self.connection.send_command('host:devices')
        self.assertEqual(self.transport.bulk_write_data, b'000Chost:devices')

    @awaiter
    async def test_send_command_fail(self):
        self.transport.bulk_read_data = fail("device 'abc' not found")

        with self.assertRaises(exceptions.AdbCommandFailureException) as cm:
            await self.connection.send_command('host:transport:abc')

        self.assertEqual(cm.exception.message, "device 'abc' not found")

    @awaiter
    async def test_send_command_invalid_response(self):
        self.transport.bulk_read_data = b'WHAT'

        with self.assertRaises(exceptions.InvalidResponseError):
            await self.connection.send_command('host:devices')

    @awaiter
    async def test_send_command_connection_closed(self):
        self.transport.bulk_read_data = b'OK'

        with self.assertRaises(exceptions.AdbConnectionError):
            await self.connection.send_command('host:devices')

    @awaiter
    async def test_read_string(self):
        self.transport.bulk_read_data = host_string('emulator-5554\tdevice\n') + host_string('')
        self.transport.max_read = 5

        self.assertEqual(await self.connection.read_string(), 'emulator-5554\tdevice\n')
        self.assertEqual(await self.connection.read_string(), '')

    @awaiter
    async def test_read_string_utf8(self):
        self.transport.bulk_read_data = host_string('héllo')
        self.assertEqual(await self.connection.read_string(), 'héllo')

    @awaiter
    async def test_read_string_negative_length(self):
        self.transport.bulk_read_data = b'-001OKAY'

        with self.assertRaises(exceptions.InvalidResponseError):
            await self.connection.read_string()

        self.assertEqual(self.transport.bulk_read_data, b'OKAY')
        self.transport.bulk_read_data = b''

    @awaiter
    async def test_read_uint32_and_unpack(self):
        self.transport.bulk_read_data = b'\x02\x00\x00\x00\x01\x00\x02\x00\x00\x00'
        self.assertEqual(await self.connection.read_uint32(), 2)
        self.assertEqual(await self.connection.read_unpack(b'<HI'), (1, 2))
