"""
Pipeline

Pipeline - holds the stages and moves items between them.
StreamPipeline - pulls frames from a source, runs each through the stages in
                 the caller's thread, and polls the display for the quit key
                 after every frame.

Errors raised by the source or by a stage (ReadError, UnsupportedFormat,
ShapeError, ...) are not caught here; they end the run and reach the caller.
"""

import collections
import sys
import logging
from abc import ABC,abstractmethod

from .constants import C
from .formats import DEFAULT_FORMAT_TABLE
from .stage import Connect,validate_stage,tensor_stages


logger = logging.getLogger(__name__)

END_OF_STREAM = 'end_of_stream'
QUIT = 'quit'

StreamResult = collections.namedtuple('StreamResult', ['frames', 'reason'])


class Pipeline(ABC):
    """Base pipeline class"""
    def __init__(self, verbose=False, debug=False, out=sys.stdout):
        self.queued_output_stage_item_pairs = collections.deque()
        self.head = None
        self.stages = []
        self.count  = 0
        self.running = False
        self.verbose = verbose
        self.debug   = debug
        self.out     = out
        if debug:
            logger.setLevel(logging.DEBUG)
        elif verbose:
            logger.setLevel(logging.INFO)
        else:
            logger.setLevel(logging.WARNING)

    def queue_output_stage_item_pair(self, pair):
        self.queued_output_stage_item_pairs.append(pair)

    def addLinearPipeline(self, stages:list):
        if not stages:
            raise ValueError("a pipeline needs at least one stage")
        for stage in stages:
            validate_stage(stage)
            stage.pipeline = self
        self.head = stages[0]
        self.stages.extend(stages)   # collect all stages for printing stats
        for i in range(len(stages)-1):
            Connect( stages[i], stages[i+1] )

    def process(self, item):
        """Run an item through the pipeline."""
        if not self.running:
            raise RuntimeError("pipeline not running")
        if self.head is None:
            raise RuntimeError("pipeline has no stages")
        self.count += 1
        logger.debug("== process %s",item)
        self.queue_output_stage_item_pair( (self.head, item))
        self.run_queue()

    @abstractmethod
    def run_queue(self):
        """Deliver queued items to their stages."""

    def print_stats(self, out=None):
        if out is None:
            out = self.out
        if out is None:
            return
        for stage in self.stages:
            name = stage.__class__.__name__
            print(f"{name}: calls: {stage.count}  mean: {stage.t_mean:.2}s  stddev: {stage.t_stddev:.2}",
                  file=out)

    def __enter__(self):
        self.running = True
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        for stage in self.stages:
            stage.pipeline_shutdown()
        self.print_stats()
        self.running = False
        return False


class StreamPipeline(Pipeline):
    """Runs the pipeline in the caller's thread, one frame at a time.
    After each frame, display.poll_key(wait) is called; the quit key ends the run."""
    def __init__(self, *, display=None, wait=C.DEFAULT_WAIT, quit_key=C.ESC, **kwargs):
        super().__init__(**kwargs)
        self.display  = display
        self.wait     = wait
        self.quit_key = quit_key

    def run_queue(self):
        while True:
            try:
                (s,item) = self.queued_output_stage_item_pairs.popleft()
            except IndexError:
                break
            logger.debug("<%s> processing %s",s.__class__.__name__,item)
            try:
                s._run_item(item)
            except Exception:
                # drop the rest of this frame so nothing partial is shown later
                self.queued_output_stage_item_pairs.clear()
                raise

    def run(self, source):
        """Process frames from source until it ends or the quit key is pressed.
        Returns a StreamResult. Exceptions from the source or the stages propagate."""
        frames = 0
        reason = END_OF_STREAM
        for image in source:
            self.process(image)
            frames += 1
            if self.display is None:
                continue
            key = self.display.poll_key(self.wait)
            if key == self.quit_key:
                logger.info("quit key after %s frames", frames)
                reason = QUIT
                break
        logger.info("stream finished: %s frames (%s)", frames, reason)
        return StreamResult(frames, reason)


def stream(source, transform=None, *, display=None, title=C.DEFAULT_TITLE, show_source=False,
           table=DEFAULT_FORMAT_TABLE, **kwargs):
    """Run source through transform and show the results until the stream ends or the user quits.
    Extra keyword arguments go to StreamPipeline."""
    with StreamPipeline(display=display, **kwargs) as p:
        p.addLinearPipeline(tensor_stages(transform, display=display, title=title,
                                          show_source=show_source, table=table))
        return p.run(source)
