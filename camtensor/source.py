"""
This module provides the following:

SourceOptions - options for opening a source
CameraFrameSource - opens a cv2.VideoCapture and produces a lazy sequence of Image objects

A source is either running or exhausted. produce_next() returns None at the
end of the stream (and iteration stops); a transport failure raises ReadError.
Once exhausted, a source stays exhausted; open a new one to start again.

Details:
https://stackoverflow.com/questions/11420748/setting-camera-parameters-in-opencv-python
https://docs.opencv.org/4.x/dd/d43/tutorial_py_video_display.html

"""

import logging

import cv2

from .constants import C
from .errors import OpenError, ConfigurationMismatch, ReadError
from .image import Image

logger = logging.getLogger(__name__)

RUNNING = 'running'
EXHAUSTED = 'exhausted'


class SourceOptions:
    __slots__=('limit','backend','counter')
    def __init__(self,**kwargs):
        self.limit = None           # stop after this many frames
        self.backend = cv2.CAP_ANY
        self.counter = 0
        for (k,v) in kwargs.items():
            setattr(self,k,v)

    def atlimit(self):
        """Increment counter and return True if we are at the limit."""
        self.counter += 1
        if self.limit is None:
            return False
        elif self.counter >= self.limit:
            return True
        return False


class CameraFrameSource:
    """Frames from a camera (or anything else cv2.VideoCapture opens).
    Use open() rather than the constructor."""

    def __init__(self, cap, device, o:SourceOptions):
        self.cap    = cap
        self.device = device
        self.o      = o
        self.state  = RUNNING
        self.src    = C.CAMERA_SRC_TEMPLATE.format(device=device)

    @classmethod
    def open(cls, device=0, width=None, height=None, *, o:SourceOptions=None, capture_factory=cv2.VideoCapture):
        """Open device. If width or height are given, set them and read them back;
        raise ConfigurationMismatch if the device used something else.
        :param capture_factory: called with (device, backend); returns a cv2.VideoCapture-like object.
        """
        if o is None:
            o = SourceOptions()
        cap = capture_factory(device, o.backend)
        if not cap.isOpened():
            cap.release()
            raise OpenError(f"Cannot open device {device}")

        for (prop, name, requested) in ((cv2.CAP_PROP_FRAME_WIDTH, 'width', width),
                                        (cv2.CAP_PROP_FRAME_HEIGHT, 'height', height)):
            if requested is None:
                continue
            cap.set(prop, float(requested))
            effective = int(round(cap.get(prop)))
            if effective != requested:
                cap.release()
                raise ConfigurationMismatch(name, requested, effective)

        source = cls(cap, device, o)
        logger.info("opened %s at %sx%s", source.src, *source.effective_size)
        return source

    def __repr__(self):
        return f"<CameraFrameSource {self.src} state={self.state} frames={self.o.counter}>"

    @property
    def effective_size(self):
        """(width, height) as reported by the device"""
        return (int(round(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))),
                int(round(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))))

    def produce_next(self):
        """Return the next Image, or None at the end of the stream.
        Raises ReadError if the device fails."""
        if self.state == EXHAUSTED:
            return None
        if self.o.limit is not None and self.o.counter >= self.o.limit:
            logger.info("%s reached limit of %s frames", self.src, self.o.limit)
            self.state = EXHAUSTED
            return None
        try:
            ret, img = self.cap.read()
        except cv2.error as e:  # pylint: disable=catching-non-exception
            self.state = EXHAUSTED
            raise ReadError(f"{self.src}: {e}") from e

        if not ret or img is None:
            logger.warning("%s read bad result: %s", self.src, ret)
            self.state = EXHAUSTED
            return None
        if img.ndim < 2 or img.shape[0] <= 0 or img.shape[1] <= 0:
            logger.warning("%s produced bad image with size: %s", self.src, img.shape)
            self.state = EXHAUSTED
            return None

        f = Image.from_ndarray(img, src=self.src)
        if self.o.atlimit():
            logger.info("%s reached limit of %s frames", self.src, self.o.limit)
            self.state = EXHAUSTED
        return f

    def __iter__(self):
        return self

    def __next__(self):
        f = self.produce_next()
        if f is None:
            raise StopIteration
        return f

    def close(self):
        """Release the device. Safe to call more than once."""
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("closed %s", self.src)
        self.state = EXHAUSTED

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def __del__(self):
        if getattr(self, 'cap', None) is not None:
            self.cap.release()
