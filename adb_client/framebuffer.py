# Copyright (c) 2021 Jeff Irion and contributors
#
# This file is part of the adb-client package.

"""Parse the output of the ``framebuffer:`` service.

.. rubric:: Contents

* :class:`Framebuffer`

    * :attr:`Framebuffer.height`
    * :attr:`Framebuffer.pixel_format`
    * :meth:`Framebuffer.to_image`
    * :attr:`Framebuffer.width`

* :class:`FramebufferHeader`
* :class:`PixelFormat`
* :func:`get_pixel_format`

"""


from collections import namedtuple
from enum import Enum

from PIL import Image

from .exceptions import InvalidResponseError


#: The framebuffer header, in wire order (note that blue comes before green)
FramebufferHeader = namedtuple('FramebufferHeader', ['version', 'bpp', 'color_space', 'size', 'width', 'height',
                                                     'red_offset', 'red_length', 'blue_offset', 'blue_length',
                                                     'green_offset', 'green_length', 'alpha_offset', 'alpha_length'])


class PixelFormat(Enum):
    """The supported pixel layouts.

    """
    RGBA_8888 = 'RGBA_8888'
    #: 32 bits per pixel, but the alpha channel is unused and the pixels are opaque
    RGBX_8888 = 'RGBX_8888'
    RGB_888 = 'RGB_888'
    BGR_565 = 'BGR_565'
    BGRA_8888 = 'BGRA_8888'


# (bpp, (red offset, length), (green offset, length), (blue offset, length), (alpha offset, length))
# An alpha channel of length 0 is stored as ``None``, since its offset is meaningless
_PIXEL_FORMATS = {
    (32, (0, 8), (8, 8), (16, 8), (24, 8)): PixelFormat.RGBA_8888,
    (32, (0, 8), (8, 8), (16, 8), None): PixelFormat.RGBX_8888,
    (24, (0, 8), (8, 8), (16, 8), None): PixelFormat.RGB_888,
    (16, (11, 5), (5, 6), (0, 5), None): PixelFormat.BGR_565,
    (32, (16, 8), (8, 8), (0, 8), (24, 8)): PixelFormat.BGRA_8888,
}

# Pillow (mode, raw mode) for each pixel format
_PILLOW_MODES = {
    PixelFormat.RGBA_8888: ('RGBA', 'RGBA'),
    PixelFormat.RGBX_8888: ('RGB', 'RGBX'),
    PixelFormat.RGB_888: ('RGB', 'RGB'),
    PixelFormat.BGR_565: ('RGB', 'BGR;16'),
    PixelFormat.BGRA_8888: ('RGBA', 'BGRA'),
}


def get_pixel_format(header):
    """Determine the pixel layout described by a framebuffer header.

    Parameters
    ----------
    header : FramebufferHeader
        The framebuffer header

    Returns
    -------
    PixelFormat
        The pixel layout

    Raises
    ------
    adb_client.exceptions.InvalidResponseError
        The pixel layout is not supported.

    """
    alpha = (header.alpha_offset, header.alpha_length) if header.alpha_length else None
    key = (header.bpp, (header.red_offset, header.red_length), (header.green_offset, header.green_length), (header.blue_offset, header.blue_length), alpha)

    try:
        return _PIXEL_FORMATS[key]
    except KeyError:
        raise InvalidResponseError('Invalid pixel format {}'.format(key))


class Framebuffer(object):
    """A snapshot of a device's display.

    Parameters
    ----------
    header : FramebufferHeader
        The framebuffer header
    data : bytes
        The raw pixel data

    Raises
    ------
    adb_client.exceptions.InvalidResponseError
        The pixel layout is not supported.

    Attributes
    ----------
    data : bytes
        The raw pixel data
    header : FramebufferHeader
        The framebuffer header

    """
    def __init__(self, header, data):
        self.header = header
        self.data = data
        self._pixel_format = get_pixel_format(header)

    @property
    def height(self):
        """The height of the display, in pixels.

        """
        return self.header.height

    @property
    def pixel_format(self):
        """The layout of the pixels in :attr:`Framebuffer.data`.

        Returns
        -------
        PixelFormat
            The pixel layout

        """
        return self._pixel_format

    @property
    def width(self):
        """The width of the display, in pixels.

        """
        return self.header.width

    def to_image(self):
        """Decode the raw pixel data into an image.

        Images in the :attr:`PixelFormat.RGBX_8888` format are returned as opaque ``'RGBA'`` images.

        Returns
        -------
        PIL.Image.Image
            The decoded image

        """
        mode, rawmode = _PILLOW_MODES[self._pixel_format]
        image = Image.frombytes(mode, (self.width, self.height), self.data, 'raw', rawmode)

        if self._pixel_format is PixelFormat.RGBX_8888:
            return image.convert('RGBA')

        return image
