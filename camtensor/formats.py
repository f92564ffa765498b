"""This module provides the following:

Depth - The element encodings an Image can have. The values are the OpenCV
        depth codes (CV_8U, CV_8S, ...), so cv2 type numbers can be built from them.

FormatTable - A partial, invertible lookup between Depth values and torch dtypes.
              Lookups that have no entry raise UnsupportedFormat.

DEFAULT_FORMAT_TABLE - The table used when a caller does not supply one.

"""

import enum

import numpy as np
import torch

from .errors import UnsupportedFormat

MAX_CHANNELS = 4


class Depth(enum.IntEnum):
    """Per-channel element encoding of an image. Matches cv2.CV_8U..cv2.CV_16F"""
    U8  = 0
    S8  = 1
    U16 = 2
    S16 = 3
    S32 = 4
    F32 = 5
    F64 = 6
    F16 = 7

    @property
    def element_size(self):
        """bytes per channel element"""
        return _ELEMENT_SIZE[self]

    @property
    def np_dtype(self):
        return _NP_DTYPE[self]

    @property
    def cv_name(self):
        return 'CV_' + self.name[1:] + self.name[0]

    @classmethod
    def from_np_dtype(cls, dtype):
        """Return the Depth for a numpy dtype, or raise UnsupportedFormat."""
        dtype = np.dtype(dtype)
        for depth, d in _NP_DTYPE.items():
            if d == dtype:
                return depth
        raise UnsupportedFormat(dtype, f"no image depth for numpy dtype {dtype}")


_ELEMENT_SIZE = {Depth.U8:1, Depth.S8:1, Depth.U16:2, Depth.S16:2,
                 Depth.S32:4, Depth.F32:4, Depth.F64:8, Depth.F16:2}

_NP_DTYPE = {Depth.U8:  np.dtype(np.uint8),
             Depth.S8:  np.dtype(np.int8),
             Depth.U16: np.dtype(np.uint16),
             Depth.S16: np.dtype(np.int16),
             Depth.S32: np.dtype(np.int32),
             Depth.F32: np.dtype(np.float32),
             Depth.F64: np.dtype(np.float64),
             Depth.F16: np.dtype(np.float16)}


def cv_type_name(depth, channels):
    """OpenCV name for a depth and channel count, e.g. CV_8UC3"""
    return f"{Depth(depth).cv_name}C{channels}"


class FormatTable:
    """Bidirectional mapping between image Depth and torch dtype.
    Every entry must be invertible: no Depth and no dtype may appear twice."""

    def __init__(self, entries):
        self.entries = list(entries)
        self._dtype_for_depth = {}
        self._depth_for_dtype = {}
        for (depth, dtype) in self.entries:
            depth = Depth(depth)
            if depth in self._dtype_for_depth:
                raise ValueError(f"{depth.name} appears twice in format table")
            if dtype in self._depth_for_dtype:
                raise ValueError(f"{dtype} appears twice in format table")
            if torch.empty((), dtype=dtype).element_size() != depth.element_size:
                raise ValueError(f"{depth.name} and {dtype} have different element sizes")
            self._dtype_for_depth[depth] = dtype
            self._depth_for_dtype[dtype] = depth

    def __repr__(self):
        pairs = ", ".join(f"{depth.name}:{dtype}" for (depth, dtype) in self._dtype_for_depth.items())
        return f"<FormatTable {pairs}>"

    def __len__(self):
        return len(self.entries)

    def __contains__(self, depth):
        return depth in self._dtype_for_depth

    def tensor_dtype(self, depth):
        """Return the torch dtype for an image depth."""
        try:
            return self._dtype_for_depth[Depth(depth)]
        except (KeyError, ValueError):
            raise UnsupportedFormat(depth, f"no tensor encoding for image depth {depth!r}") from None

    def image_depth(self, dtype, channels):
        """Return the image Depth for a tensor dtype with the given number of channels."""
        if not 1 <= channels <= MAX_CHANNELS:
            raise UnsupportedFormat((dtype, channels),
                                    f"cannot make an image with {channels} channels from {dtype}")
        try:
            return self._depth_for_dtype[dtype]
        except KeyError:
            raise UnsupportedFormat((dtype, channels),
                                    f"no image encoding for tensor dtype {dtype}") from None


# torch.uint16 exists but most operators do not support it, so U16 is left out.
DEFAULT_FORMAT_TABLE = FormatTable([
    (Depth.U8,  torch.uint8),
    (Depth.S8,  torch.int8),
    (Depth.S16, torch.int16),
    (Depth.S32, torch.int32),
    (Depth.F32, torch.float32),
    (Depth.F64, torch.float64),
    (Depth.F16, torch.float16),
])
