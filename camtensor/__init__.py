"""Design document.

Abstractions related to image content:

Image -  A single frame: an owned byte buffer with height, width,
         channels, depth and stride. Every Image has its own buffer;
         sources never hand out memory they will reuse for the next
         frame, so an Image can be kept as long as wanted.

Tensor - A torch.Tensor laid out row-major as [height, width] or
         [height, width, channels].

FormatTable - Pairs each supported image Depth with a torch dtype.
         The pairing is partial but invertible. Anything not in the
         table is rejected with UnsupportedFormat; bytes are never
         reinterpreted as some other encoding.

Abstractions related to streaming:

Sources - CameraFrameSource opens a device and produces Images until
         the device stops giving frames (end of stream) or fails
         (ReadError).

convert - to_tensor() and to_image() copy bytes between Images and
         tensors without scaling or clamping.

Stage - the nodes of the pipeline: ToTensor, ApplyTransform, ToImage,
         ShowFrames.

Pipeline - StreamPipeline pulls one frame at a time from a source,
         runs it through the stages, and polls the display for the
         quit key (ESC).

"""

from .errors import (CamTensorError, OpenError, ConfigurationMismatch, ReadError,
                     ConversionError, UnsupportedFormat, ShapeError)
from .formats import Depth, FormatTable, DEFAULT_FORMAT_TABLE
from .image import Image
from .convert import to_tensor, to_image
from .source import CameraFrameSource, SourceOptions
from .pipeline import StreamPipeline, StreamResult, stream
