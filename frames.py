# Screen frames: capturing them with mss and turning them into RGBA images

import logging # used to report which monitor is captured
import time # used to name screenshots after the Unix time
from pathlib import Path # used for the screenshot directory
from typing import NamedTuple, Optional # used to mark some parameters as optional

import mss # used to get a picture of the monitor
import numpy as np # used to reorder the colour channels of a frame
from mss.exception import ScreenShotError # raised by mss when the capture fails
from PIL import Image # used to write screenshots to disk

from config import DEFAULT_MONITOR

logger = logging.getLogger(__name__)


# Base class for the failures that stop the program
class AmbientError(Exception):
    pass


# No display, or the capturer could not produce a frame
class CaptureError(AmbientError):
    pass


# A frame buffer that is shorter than its dimensions claim
class MalformedFrameError(AmbientError):
    pass


# The capturer has no new frame yet, try again shortly
class FrameNotReady(Exception):
    pass


class RawFrame(NamedTuple):
    # Capture-native channel order (BGRA for mss), rows may be padded
    width: int
    height: int
    data: bytes
    stride: Optional[int] = None


class NormalizedImage(NamedTuple):
    # RGBA, exactly width * height * 4 bytes
    width: int
    height: int
    data: bytes


'''
Swap the first and third channel of every pixel, leaving alpha alone, so BGRA
in gives RGBA out (and the other way round). Only width * height pixels are
read; row padding given by the stride and any trailing bytes are dropped.
'''
def normalize_frame(frame: RawFrame) -> NormalizedImage:
    row_bytes = frame.width * 4
    stride = frame.stride or row_bytes
    if stride < row_bytes:
        raise MalformedFrameError(f"Stride {stride} is shorter than a row of {frame.width} pixels")

    needed = stride * (frame.height - 1) + row_bytes if frame.height else 0
    if len(frame.data) < needed:
        raise MalformedFrameError(
            f"Frame buffer has {len(frame.data)} bytes, {frame.width}x{frame.height} needs {needed}"
        )

    if frame.width == 0 or frame.height == 0:
        return NormalizedImage(frame.width, frame.height, b"")

    buffer = np.frombuffer(frame.data, dtype=np.uint8, count=needed)
    if stride != row_bytes:
        # Pad the last row so every row can be viewed with the same stride
        buffer = np.concatenate([buffer, np.zeros(stride - row_bytes, dtype=np.uint8)])
    pixels = buffer.reshape(frame.height, stride)[:, :row_bytes].reshape(frame.height, frame.width, 4)

    swapped = pixels[:, :, [2, 1, 0, 3]]
    return NormalizedImage(frame.width, frame.height, swapped.tobytes())


def to_pil_image(image: NormalizedImage) -> Image.Image:
    return Image.frombytes("RGBA", (image.width, image.height), image.data)


# Write the image as a JPEG named after the current Unix time
def save_screenshot(image: NormalizedImage, directory: Path, file_name: Optional[str] = None) -> Path:
    if file_name is None:
        file_name = f"{int(time.time())}.jpeg"
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    # JPEG has no alpha channel
    to_pil_image(image).convert("RGB").save(path, "JPEG")
    return path


'''
Grabs whole-monitor frames with mss. The mss session lives as long as the
with block, so it is released even when sampling stops on an error.
'''
class MssFrameSource:

    def __init__(self, monitor_index: int = DEFAULT_MONITOR):
        self.monitor_index = monitor_index
        self._sct = None
        self._monitor = None

    def __enter__(self) -> "MssFrameSource":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        try:
            self._sct = mss.mss()
        except ScreenShotError as exc:
            raise CaptureError(f"Failed to create capturer: {exc}") from exc

        # monitors[0] is every display stitched together, the real ones start at 1
        monitors = self._sct.monitors
        if self.monitor_index >= len(monitors) or len(monitors) < 2:
            self.close()
            raise CaptureError("Couldn't find any display.")
        self._monitor = monitors[self.monitor_index]
        logger.debug(f"Capturing monitor {self.monitor_index}: {self._monitor}")

    def close(self) -> None:
        if self._sct is not None:
            self._sct.close()
            self._sct = None

    @property
    def width(self) -> int:
        return self._monitor["width"]

    @property
    def height(self) -> int:
        return self._monitor["height"]

    def next_frame(self) -> RawFrame:
        if self._sct is None:
            raise CaptureError("Capturer is not open")
        try:
            shot = self._sct.grab(self._monitor)
        except ScreenShotError as exc:
            raise CaptureError(f"Error: {exc}") from exc

        # mss hands over BGRx: the fourth byte is padding, often 0, so make every pixel opaque
        pixels = np.frombuffer(shot.raw, dtype=np.uint8).reshape(-1, 4).copy()
        pixels[:, 3] = 255
        return RawFrame(shot.width, shot.height, pixels.tobytes())
