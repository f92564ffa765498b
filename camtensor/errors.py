"""
Exceptions raised by camtensor.

Everything derives from CamTensorError so that a caller can stop a stream
on any of them. End of stream is not an exception here; sources signal it
by returning None (or StopIteration when iterated).
"""

class CamTensorError(RuntimeError):
    """Base class for camtensor errors"""


class OpenError(CamTensorError):
    """The capture device cannot be opened"""


class ConfigurationMismatch(OpenError):
    """The device did not accept a requested width or height."""
    def __init__(self, prop, requested, effective):
        super().__init__(f"Desired {prop} {requested} wasn't set, got {effective}")
        self.prop = prop
        self.requested = requested
        self.effective = effective


class ReadError(CamTensorError):
    """Transport failure while reading a frame"""


class ConversionError(CamTensorError):
    """An image or tensor could not be converted"""


class UnsupportedFormat(ConversionError):
    """No FormatTable entry for the encoding"""
    def __init__(self, encoding, msg=None):
        super().__init__(msg or f"unsupported format: {encoding}")
        self.encoding = encoding


class ShapeError(ConversionError):
    """Tensor rank or dimensions cannot be turned into an image"""
    def __init__(self, shape, msg=None):
        shape = tuple(shape)
        super().__init__(msg or f"cannot make an image from shape {shape}")
        self.shape = shape
