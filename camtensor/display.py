"""
Display collaborator: shows Images in OpenCV windows and polls the keyboard.
Anything with the same show() and poll_key() methods can stand in for it.
"""

import logging

import cv2

from .image import Image

logger = logging.getLogger(__name__)


class Display:
    """OpenCV highgui windows"""
    def __init__(self):
        self.windows = set()

    def show(self, title, image:Image):
        if title not in self.windows:
            cv2.namedWindow(title, 0)
            self.windows.add(title)
        cv2.imshow(title, image.array)

    def poll_key(self, wait):
        """Wait up to wait milliseconds for a key. Returns None if no key was pressed."""
        key = cv2.waitKey(wait)
        if key < 0:
            return None
        return key & 0xff

    def close(self):
        for title in self.windows:
            logger.debug("destroy window %s", title)
            cv2.destroyWindow(title)
        self.windows.clear()
