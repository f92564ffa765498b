"""
Conversion between Image and torch.Tensor.

Both directions copy bytes; nothing is scaled or clamped, and the source and
destination never share memory. A U8 image becomes a uint8 tensor with the
same values, an F32 image a float32 tensor, and so on, as given by the
FormatTable.

Tensors are laid out row-major as [height, width] for single channel images
and [height, width, channels] otherwise.
"""

import logging

import numpy as np
import torch

from .errors import ConversionError, ShapeError
from .formats import DEFAULT_FORMAT_TABLE
from .image import Image

logger = logging.getLogger(__name__)


def _byte_view(t):
    """Flat uint8 numpy view of a contiguous CPU tensor's storage."""
    if not t.is_contiguous():
        raise ConversionError(f"tensor with shape {tuple(t.shape)} is not contiguous")
    return t.reshape(-1).view(torch.uint8).numpy()


def to_tensor(image:Image, table=DEFAULT_FORMAT_TABLE):
    """Return a new tensor holding the pixels of image.
    Raises UnsupportedFormat if the image depth has no tensor encoding."""
    dtype = table.tensor_dtype(image.depth)
    if image.channels == 1:
        shape = (image.height, image.width)
    else:
        shape = (image.height, image.width, image.channels)

    dst = torch.empty(shape, dtype=dtype)
    # rows * cols * bytes per pixel (all channels)
    nbytes = image.height * image.width * image.element_size
    dst_bytes = _byte_view(dst)
    if dst_bytes.size != nbytes:
        raise ConversionError(f"tensor holds {dst_bytes.size} bytes, image has {nbytes}")
    np.copyto(dst_bytes.reshape(image.height, image.row_bytes), image.rows())
    logger.debug("to_tensor %s -> %s %s", image, tuple(shape), dtype)
    return dst


def to_image(tensor:torch.Tensor, table=DEFAULT_FORMAT_TABLE, *, src=None):
    """Return a new Image holding the values of a rank 2 or rank 3 tensor.
    Raises ShapeError for other ranks and UnsupportedFormat for unmapped dtype/channel pairs."""
    shape = tuple(tensor.shape)
    if len(shape) not in (2, 3):
        raise ShapeError(shape, f"tensor must have rank 2 or 3, got rank {len(shape)}")
    if any(dim <= 0 for dim in shape):
        raise ShapeError(shape)
    (height, width) = shape[0:2]
    channels = 1 if len(shape) == 2 else shape[-1]
    depth = table.image_depth(tensor.dtype, channels)

    src_t = tensor.detach()
    if not src_t.is_contiguous():
        src_t = src_t.contiguous()
    src_bytes = _byte_view(src_t)
    nbytes = height * width * channels * src_t.element_size()
    if src_bytes.size != nbytes:
        raise ConversionError(f"tensor holds {src_bytes.size} bytes, expected {nbytes}")

    data = np.empty(nbytes, dtype=np.uint8)
    np.copyto(data, src_bytes)
    logger.debug("to_image %s %s -> %dx%d", shape, tensor.dtype, width, height)
    return Image(data=data, height=height, width=width, channels=channels,
                 depth=depth, src=src)
