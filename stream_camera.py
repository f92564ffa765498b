#!/usr/bin/env python3
"""
Stream a camera through a tensor round trip and show the result.
Press ESC in the window to stop.
"""

import sys
import logging

from camtensor.constants import C
from camtensor.display import Display
from camtensor.errors import CamTensorError
from camtensor.pipeline import stream
from camtensor.source import CameraFrameSource, SourceOptions


def device_arg(s):
    """Camera index if s is a number, otherwise a path or URL."""
    return int(s) if s.isdigit() else s

if __name__=="__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Show camera frames after converting them to tensors and back",
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    parser.add_argument("device", nargs='?', default=0, type=device_arg, help='Camera index, file or URL.')
    parser.add_argument("--width", type=int, help="Required frame width")
    parser.add_argument("--height", type=int, help="Required frame height")
    parser.add_argument("--limit", type=int, help="Stop after this many frames")
    parser.add_argument("--title", default=C.DEFAULT_TITLE, help="Window title")
    parser.add_argument("--wait", default=C.DEFAULT_WAIT, type=int, help="Milliseconds to wait for a key after each frame")
    parser.add_argument("--show-source", help="Also show each frame as captured", action='store_true')
    parser.add_argument("--verbose", help="Log each frame", action='store_true')
    parser.add_argument("--debug", help="Log each stage", action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    display = Display()
    try:
        with CameraFrameSource.open(args.device, args.width, args.height,
                                    o=SourceOptions(limit=args.limit)) as source:
            result = stream(source, display=display, title=args.title, show_source=args.show_source,
                            wait=args.wait, verbose=args.verbose, debug=args.debug)
    except CamTensorError as e:
        print(f"{e.__class__.__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        display.close()
    print(f"{result.frames} frames ({result.reason})")
