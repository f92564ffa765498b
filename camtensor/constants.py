"""Constants"""

# pylint: disable=too-few-public-methods
class C:
    """Constants"""
    ESC = 27                      # key code that stops a stream
    DEFAULT_TITLE = 'camtensor'
    DEFAULT_WAIT  = 1             # milliseconds to wait for a key after each frame
    CAMERA_SRC_TEMPLATE = "camera{device}"
