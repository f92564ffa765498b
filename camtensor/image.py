"""This module provides the following class:

Image - Holds a single frame as an owned byte buffer plus the metadata needed
        to interpret it: height, width, channels, depth and stride (bytes per row).

Images are not modified once made. Each Image owns its buffer; nothing that
produces an Image hands out memory that it will later reuse.
"""

from datetime import datetime

import numpy as np

from .formats import Depth, MAX_CHANNELS, cv_type_name


class Image:
    """Abstraction to hold an image frame.
    data is a 1-D numpy uint8 array of at least height*stride bytes."""
    def __init__(self, *, data, height, width, channels, depth, stride=None, src=None, mtime=None):
        depth = Depth(depth)
        if height <= 0 or width <= 0:
            raise ValueError(f"image dimensions must be positive, got {width}x{height}")
        if not 1 <= channels <= MAX_CHANNELS:
            raise ValueError(f"channels must be between 1 and {MAX_CHANNELS}, got {channels}")
        row_bytes = width * channels * depth.element_size
        if stride is None:
            stride = row_bytes
        if stride < row_bytes:
            raise ValueError(f"stride {stride} is less than row size {row_bytes}")
        data = np.asarray(data)
        if data.dtype != np.uint8 or data.ndim != 1:
            raise ValueError("data must be a 1-D uint8 buffer")
        if data.size < height * stride:
            raise ValueError(f"buffer has {data.size} bytes, needs {height * stride}")
        data = np.array(data, dtype=np.uint8, copy=True)   # owned and contiguous
        data.flags.writeable = False

        self.data     = data
        self.height   = height
        self.width    = width
        self.channels = channels
        self.depth    = depth
        self.stride   = stride
        self.src      = src
        self.mtime    = mtime if mtime is not None else datetime.now()

    @classmethod
    def from_ndarray(cls, img, *, src=None):
        """Copy an OpenCV image (a numpy array) into a new Image.
        The copy is packed, so stride == row size."""
        img = np.asarray(img)
        if img.ndim == 2:
            channels = 1
        elif img.ndim == 3:
            channels = img.shape[2]
        else:
            raise ValueError(f"cannot make an image from an array with shape {img.shape}")
        depth = Depth.from_np_dtype(img.dtype)
        packed = np.ascontiguousarray(img)
        data = np.empty(packed.nbytes, dtype=np.uint8)
        data[:] = packed.reshape(-1).view(np.uint8)
        return cls(data=data, height=img.shape[0], width=img.shape[1],
                   channels=channels, depth=depth, src=src)

    def __repr__(self):
        return f"<Image {self.width}x{self.height} {self.type_name} stride={self.stride} src={self.src}>"

    def __eq__(self, b):
        if not isinstance(b, Image):
            return NotImplemented
        return (self.height, self.width, self.channels, self.depth) == \
            (b.height, b.width, b.channels, b.depth) and np.array_equal(self.rows(), b.rows())

    __hash__ = None

    @property
    def type_name(self):
        return cv_type_name(self.depth, self.channels)

    @property
    def shape(self):
        """Returns shape. note: shape[0] = height, shape[1]=width, shape[2]==channels"""
        return (self.height, self.width, self.channels)

    @property
    def element_size(self):
        """Bytes per pixel, all channels included."""
        return self.channels * self.depth.element_size

    @property
    def row_bytes(self):
        return self.width * self.element_size

    @property
    def nbytes(self):
        """Bytes of pixel data, not counting row padding."""
        return self.height * self.row_bytes

    def rows(self):
        """Read-only (height, row_bytes) uint8 view of the pixel bytes, skipping row padding."""
        return np.ndarray((self.height, self.row_bytes), dtype=np.uint8,
                          buffer=self.data, strides=(self.stride, 1))

    @property
    def array(self):
        """Read-only OpenCV-style view: (h, w) for one channel, otherwise (h, w, c)."""
        esize = self.depth.element_size
        if self.channels == 1:
            shape, strides = (self.height, self.width), (self.stride, esize)
        else:
            shape = (self.height, self.width, self.channels)
            strides = (self.stride, self.element_size, esize)
        return np.ndarray(shape, dtype=self.depth.np_dtype, buffer=self.data, strides=strides)

    def tobytes(self):
        """Packed pixel bytes"""
        return self.rows().tobytes()

    def copy(self):
        """Returns a packed copy with its own buffer."""
        data = np.empty(self.nbytes, dtype=np.uint8)
        data.reshape(self.height, self.row_bytes)[:] = self.rows()
        return Image(data=data, height=self.height, width=self.width, channels=self.channels,
                     depth=self.depth, src=self.src, mtime=self.mtime)
