"""
Tests for the OpenCV display, with highgui calls replaced
"""

import sys

from os.path import abspath, dirname

sys.path.append( dirname(dirname(dirname(abspath(__file__)))))

import cv2
import numpy as np

import camtensor.display as display_mod
from camtensor.image import Image

def test_display(monkeypatch):
    calls = []
    monkeypatch.setattr(cv2, 'namedWindow', lambda title, flags: calls.append(('named', title)))
    monkeypatch.setattr(cv2, 'imshow', lambda title, img: calls.append(('show', title, img.shape)))
    monkeypatch.setattr(cv2, 'destroyWindow', lambda title: calls.append(('destroy', title)))
    keys = [-1, 27, 0x10001b]
    monkeypatch.setattr(cv2, 'waitKey', lambda wait: keys.pop(0))

    d = display_mod.Display()
    img = Image.from_ndarray(np.zeros((4, 5, 3), dtype=np.uint8))
    d.show('w', img)
    d.show('w', img)
    assert calls == [('named', 'w'), ('show', 'w', (4, 5, 3)), ('show', 'w', (4, 5, 3))]

    assert d.poll_key(1) is None
    assert d.poll_key(1) == 27
    assert d.poll_key(1) == 27

    d.close()
    assert calls[-1] == ('destroy', 'w')
    assert d.windows == set()
