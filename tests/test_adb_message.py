import struct
import unittest

from adb_client import constants
from adb_client.adb_message import ShellPacket, pack_host_request, pack_sync_request, unpack_host_length, unpack_shell_header
from adb_client.exceptions import InvalidResponseError


class TestHostRequest(unittest.TestCase):
    def test_pack_host_request(self):
        self.assertEqual(pack_host_request('host:devices'), b'000Chost:devices')
        self.assertEqual(pack_host_request(b'host:version'), b'000Chost:version')
        self.assertEqual(pack_host_request(''), b'0000')

    def test_pack_host_request_uppercase(self):
        self.assertEqual(pack_host_request('x' * 0xAB)[:4], b'00AB')
        self.assertEqual(pack_host_request('x' * 0xFFFF)[:4], b'FFFF')

    def test_pack_host_request_utf8_length(self):
        # The length is the number of bytes, not characters
        self.assertEqual(pack_host_request('host:transport:é'), b'0011host:transport:\xc3\xa9')

    def test_pack_host_request_too_long(self):
        with self.assertRaises(ValueError):
            pack_host_request('x' * 0x10000)

    def test_length_round_trip(self):
        for length in (0, 1, 0xF, 0x10, 0xFF, 0x100, 0xABC, 0xFFF, 0x1000, 0xFFFF):
            request = pack_host_request(b'a' * length)
            self.assertEqual(unpack_host_length(request[:4]), length)
            self.assertEqual(len(request), length + 4)

    def test_unpack_host_length(self):
        self.assertEqual(unpack_host_length(b'001a'), 26)
        self.assertEqual(unpack_host_length(b'001A'), 26)

        with self.assertRaises(InvalidResponseError):
            unpack_host_length(b'OKAY')

        with self.assertRaises(InvalidResponseError):
            unpack_host_length(b'\xff\xff\xff\xff')

    def test_unpack_host_length_malformed(self):
        for data in [b'-001', b'0x1F', b' 1F ', b'+01F', b'1_FF', b'001', b'00001', b'']:
            with self.assertRaises(InvalidResponseError):
                unpack_host_length(data)


class TestShellPacket(unittest.TestCase):
    def test_pack(self):
        self.assertEqual(ShellPacket(constants.SHELL_STDIN, b'abc').pack(), b'\x00\x03\x00\x00\x00abc')
        self.assertEqual(ShellPacket(constants.SHELL_CLOSE_STDIN).pack(), b'\x04\x00\x00\x00\x00')

    def test_pack_length_little_endian(self):
        packet = ShellPacket(constants.SHELL_STDIN, b'\0' * 0x0102).pack()
        self.assertEqual(packet[:5], b'\x00\x02\x01\x00\x00')

    def test_unpack_shell_header(self):
        self.assertEqual(unpack_shell_header(b'\x03\x01\x00\x00\x00'), (constants.SHELL_EXIT, 1))
        self.assertEqual(unpack_shell_header(b'\x01\x00\x00\x01\x00'), (constants.SHELL_STDOUT, 0x10000))

    def test_repr(self):
        self.assertEqual(repr(ShellPacket(1, b'x')), "ShellPacket(1, b'x')")


class TestSyncRequest(unittest.TestCase):
    def test_pack_sync_request(self):
        self.assertEqual(pack_sync_request(constants.RECV, 5), b'RECV\x05\x00\x00\x00')
        self.assertEqual(pack_sync_request(constants.DONE, 1600000000), b'DONE' + struct.pack('<I', 1600000000))
