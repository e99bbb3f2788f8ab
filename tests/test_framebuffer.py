import unittest

from adb_client.exceptions import InvalidResponseError
from adb_client.framebuffer import Framebuffer, FramebufferHeader, PixelFormat, get_pixel_format


def make_header(bpp, red, green, blue, alpha, width=2, height=1):
    """Build a header; note that the fields are in wire order, so blue comes before green."""
    size = width * height * bpp // 8
    return FramebufferHeader(2, bpp, 0, size, width, height, red[0], red[1], blue[0], blue[1], green[0], green[1], alpha[0], alpha[1])


RGBA_8888 = make_header(32, (0, 8), (8, 8), (16, 8), (24, 8))
RGBX_8888 = make_header(32, (0, 8), (8, 8), (16, 8), (24, 0))
RGB_888 = make_header(24, (0, 8), (8, 8), (16, 8), (0, 0))
BGR_565 = make_header(16, (11, 5), (5, 6), (0, 5), (0, 0))
BGRA_8888 = make_header(32, (16, 8), (8, 8), (0, 8), (24, 8))


class TestGetPixelFormat(unittest.TestCase):
    def test_known_formats(self):
        self.assertEqual(get_pixel_format(RGBA_8888), PixelFormat.RGBA_8888)
        self.assertEqual(get_pixel_format(RGBX_8888), PixelFormat.RGBX_8888)
        self.assertEqual(get_pixel_format(RGB_888), PixelFormat.RGB_888)
        self.assertEqual(get_pixel_format(BGR_565), PixelFormat.BGR_565)
        self.assertEqual(get_pixel_format(BGRA_8888), PixelFormat.BGRA_8888)

    def test_alpha_offset_ignored_without_alpha(self):
        self.assertEqual(get_pixel_format(make_header(32, (0, 8), (8, 8), (16, 8), (0, 0))), PixelFormat.RGBX_8888)
        self.assertEqual(get_pixel_format(make_header(16, (11, 5), (5, 6), (0, 5), (16, 0))), PixelFormat.BGR_565)

    def test_unknown_formats(self):
        for header in [make_header(24, (0, 8), (8, 8), (16, 8), (24, 8)),
                       make_header(32, (0, 8), (16, 8), (8, 8), (24, 8)),
                       make_header(16, (0, 5), (5, 6), (11, 5), (0, 0)),
                       make_header(32, (16, 8), (8, 8), (0, 8), (0, 0)),
                       make_header(8, (0, 8), (0, 8), (0, 8), (0, 0))]:
            with self.assertRaises(InvalidResponseError):
                get_pixel_format(header)

    def test_green_and_blue_swapped(self):
        # Swapping the green and blue fields of an RGBA header describes a different layout
        header = RGBA_8888._replace(blue_offset=8, green_offset=16)
        with self.assertRaises(InvalidResponseError):
            get_pixel_format(header)


class TestFramebuffer(unittest.TestCase):
    def test_properties(self):
        framebuffer = Framebuffer(RGBA_8888, b'\x01\x02\x03\x04\x05\x06\x07\x08')
        self.assertEqual(framebuffer.width, 2)
        self.assertEqual(framebuffer.height, 1)
        self.assertEqual(framebuffer.pixel_format, PixelFormat.RGBA_8888)
        self.assertEqual(framebuffer.data, b'\x01\x02\x03\x04\x05\x06\x07\x08')

    def test_invalid_format(self):
        with self.assertRaises(InvalidResponseError):
            Framebuffer(make_header(8, (0, 8), (0, 8), (0, 8), (0, 0)), b'\0\0')

    def test_to_image_rgba(self):
        image = Framebuffer(RGBA_8888, b'\x01\x02\x03\x04\x05\x06\x07\x08').to_image()
        self.assertEqual(image.mode, 'RGBA')
        self.assertEqual(image.size, (2, 1))
        self.assertEqual(image.getpixel((0, 0)), (1, 2, 3, 4))
        self.assertEqual(image.getpixel((1, 0)), (5, 6, 7, 8))

    def test_to_image_rgbx_is_opaque(self):
        image = Framebuffer(RGBX_8888, b'\x01\x02\x03\x00\x05\x06\x07\x00').to_image()
        self.assertEqual(image.mode, 'RGBA')
        self.assertEqual(image.getpixel((0, 0)), (1, 2, 3, 255))
        self.assertEqual(image.getpixel((1, 0)), (5, 6, 7, 255))

    def test_to_image_rgb(self):
        image = Framebuffer(RGB_888, b'\x01\x02\x03\x04\x05\x06').to_image()
        self.assertEqual(image.mode, 'RGB')
        self.assertEqual(image.getpixel((1, 0)), (4, 5, 6))

    def test_to_image_bgra(self):
        image = Framebuffer(BGRA_8888, b'\x03\x02\x01\x04\x07\x06\x05\x08').to_image()
        self.assertEqual(image.mode, 'RGBA')
        self.assertEqual(image.getpixel((0, 0)), (1, 2, 3, 4))

    def test_to_image_bgr565(self):
        image = Framebuffer(BGR_565, b'\xff\xff\x00\x00').to_image()
        self.assertEqual(image.mode, 'RGB')
        self.assertEqual(image.size, (2, 1))
        self.assertEqual(image.getpixel((0, 0)), (255, 255, 255))
        self.assertEqual(image.getpixel((1, 0)), (0, 0, 0))
