"""
Tests for Image
"""

import pytest
import sys

from os.path import abspath, dirname

sys.path.append( dirname(dirname(dirname(abspath(__file__)))))

import numpy as np

from camtensor.errors import UnsupportedFormat
from camtensor.formats import Depth
from camtensor.image import Image

def padded_image():
    """2x3 one-channel U8 image with 2 bytes of padding per row"""
    data = np.array([1, 2, 3, 99, 99,
                     4, 5, 6, 99, 99], dtype=np.uint8)
    return Image(data=data, height=2, width=3, channels=1, depth=Depth.U8, stride=5)

def test_from_ndarray():
    a = np.arange(24, dtype=np.uint8).reshape(2, 4, 3)
    img = Image.from_ndarray(a, src='camera0')
    assert img.shape == (2, 4, 3)
    assert img.depth == Depth.U8
    assert img.stride == 12
    assert img.type_name == 'CV_8UC3'
    assert img.src == 'camera0'
    assert np.array_equal(img.array, a)

    # the image has its own buffer
    a[:] = 0
    assert img.array[1, 3, 2] == 23

def test_from_ndarray_gray_and_float():
    a = np.linspace(-1, 1, 6, dtype=np.float32).reshape(2, 3)
    img = Image.from_ndarray(a)
    assert img.channels == 1
    assert img.depth == Depth.F32
    assert img.element_size == 4
    assert img.nbytes == 24
    assert np.array_equal(img.array, a)

def test_from_ndarray_noncontiguous():
    a = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
    crop = a[1:3, 1:3]
    img = Image.from_ndarray(crop)
    assert np.array_equal(img.array, crop)
    assert img.stride == img.row_bytes

def test_from_ndarray_unsupported():
    with pytest.raises(UnsupportedFormat):
        Image.from_ndarray(np.zeros((2, 2), dtype=np.int64))
    with pytest.raises(ValueError):
        Image.from_ndarray(np.zeros(5, dtype=np.uint8))

def test_stride():
    img = padded_image()
    assert img.row_bytes == 3
    assert img.tobytes() == bytes([1, 2, 3, 4, 5, 6])
    assert img.array.tolist() == [[1, 2, 3], [4, 5, 6]]
    c = img.copy()
    assert c.stride == 3
    assert c == img

def test_equality():
    a = Image.from_ndarray(np.zeros((2, 2), dtype=np.uint8))
    b = Image.from_ndarray(np.zeros((2, 2), dtype=np.uint8))
    assert a == b
    assert a != Image.from_ndarray(np.ones((2, 2), dtype=np.uint8))
    assert a != Image.from_ndarray(np.zeros((2, 2), dtype=np.int8))
    assert a != Image.from_ndarray(np.zeros((2, 1, 2), dtype=np.uint8))

def test_read_only():
    img = Image.from_ndarray(np.zeros((2, 2), dtype=np.uint8))
    with pytest.raises(ValueError):
        img.array[0, 0] = 1
    with pytest.raises(ValueError):
        img.data[0] = 1

def test_invariants():
    data = np.zeros(100, dtype=np.uint8)
    with pytest.raises(ValueError):
        Image(data=data, height=0, width=2, channels=1, depth=Depth.U8)
    with pytest.raises(ValueError):
        Image(data=data, height=2, width=2, channels=5, depth=Depth.U8)
    with pytest.raises(ValueError):
        Image(data=data, height=2, width=4, channels=3, depth=Depth.U8, stride=10)
    with pytest.raises(ValueError):
        Image(data=data, height=10, width=4, channels=3, depth=Depth.U8)
    with pytest.raises(ValueError):
        Image(data=data.view(np.int8), height=2, width=2, channels=1, depth=Depth.U8)

def test_owns_buffer():
    buf = np.zeros(12, dtype=np.uint8)
    img = Image(data=buf, height=2, width=2, channels=3, depth=Depth.U8)
    buf[0] = 200
    assert img.tobytes()[0] == 0
    assert buf.flags.writeable       # the caller's array is left alone

def test_strided_buffer():
    from camtensor.convert import to_tensor
    buf = np.arange(24, dtype=np.uint8)[::2]
    img = Image(data=buf, height=2, width=2, channels=3, depth=Depth.U8)
    assert img.data.flags.c_contiguous
    assert img.tobytes() == bytes(range(0, 24, 2))
    assert to_tensor(img).reshape(-1).tolist() == list(range(0, 24, 2))
