"""
Stage implementation and the stages that make up a tensor stream.

Stages are connected into a linear pipeline. An item enters the head stage,
and each stage passes what it produces to the next with output(). Items are
Images or torch.Tensors depending on where in the pipeline they are.
"""

import time
import math
import logging
from abc import ABC

from .constants import C
from .convert import to_tensor, to_image
from .formats import DEFAULT_FORMAT_TABLE

logger = logging.getLogger(__name__)


def validate_stage(stage):
    if not hasattr(stage,'count'):
        raise RuntimeError(str(stage) + "did not call super().__init__()")


class Stage(ABC):
    """Abstract base class for stages"""

    def __init__(self, input_filter=None, output_filter=None):
        self.next_stages = []
        self.sum_t   = 0
        self.sum_t2  = 0
        self.count   = 0
        self.pipeline = None    # my pipeline
        self.input_filter = input_filter
        self.output_filter = output_filter

    def __repr__(self):
        return f"<{self.__class__.__name__}>"

    def process(self, item):
        """Called to process. Default behavior is to copy the item to output."""
        self.output(item)

    def _run_item(self, item):
        """Processes and then passes the item to the output stages."""
        t0 = time.time()
        if (self.input_filter is None) or self.input_filter(item):
            self.process(item)
        t = time.time() - t0
        self.sum_t  += t
        self.sum_t2 += (t*t)
        self.count  += 1

    def output(self, item):
        """output(item) queues item for the next stages when the current stage is done."""
        if (self.output_filter is not None) and not self.output_filter(item):
            return            # filtered out
        for s in self.next_stages:
            self.pipeline.queue_output_stage_item_pair( (s,item) )

    def pipeline_shutdown(self):
        """Called when pipeline is being shut down."""

    @property
    def t_mean(self):
        return self.sum_t / self.count if self.count>0 else float("nan")

    @property
    def t2_mean(self):
        return self.sum_t2 / self.count if self.count>0 else float("nan")

    @property
    def t_variance(self):
        return self.t2_mean - self.t_mean * self.t_mean

    @property
    def t_stddev(self):
        # rounding can make the variance slightly negative
        return math.sqrt(max(self.t_variance, 0.0))


class ToTensor(Stage):
    """Image in, torch.Tensor out"""
    def __init__(self, table=DEFAULT_FORMAT_TABLE, **kwargs):
        super().__init__(**kwargs)
        self.table = table

    def process(self, image):
        self.output(to_tensor(image, self.table))


class ApplyTransform(Stage):
    """Runs a tensor through fn and outputs the result.
    With no fn, the tensor passes through unchanged. If fn returns None, nothing is output."""
    def __init__(self, fn=None, **kwargs):
        super().__init__(**kwargs)
        self.fn = fn

    def process(self, tensor):
        result = tensor if self.fn is None else self.fn(tensor)
        if result is None:
            logger.debug("%s dropped frame", self)
            return
        self.output(result)


class ToImage(Stage):
    """torch.Tensor in, Image out"""
    def __init__(self, table=DEFAULT_FORMAT_TABLE, **kwargs):
        super().__init__(**kwargs)
        self.table = table

    def process(self, tensor):
        self.output(to_image(tensor, self.table))


class ShowFrames(Stage):
    """Shows every Image coming through, and then copies it to output"""
    def __init__(self, display, title=C.DEFAULT_TITLE, **kwargs):
        super().__init__(**kwargs)
        self.display = display
        self.title = title

    def process(self, image):
        self.display.show(self.title, image)
        self.output(image)


def Connect(prev_:Stage, next_:Stage):
    """Make the output of stage prev_ go to next_"""
    validate_stage(prev_)
    validate_stage(next_)
    if next_ not in prev_.next_stages:
        prev_.next_stages.append(next_)


def tensor_stages(transform=None, *, display=None, title=C.DEFAULT_TITLE, show_source=False,
                  table=DEFAULT_FORMAT_TABLE):
    """The usual stream: Image -> tensor -> transform -> Image -> display.
    :param show_source: also show each captured frame before conversion.
    """
    stages = []
    if show_source and display is not None:
        stages += [ ShowFrames(display, title=title + ' source') ]
    stages += [ ToTensor(table),
                ApplyTransform(transform),
                ToImage(table) ]
    if display is not None:
        stages += [ ShowFrames(display, title=title) ]
    return stages
