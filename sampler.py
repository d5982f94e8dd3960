# The colour picker loop: sample the screen, and update the bulb when the colour moves

import logging # used to report every sampling step
import time # used to control loop speed
from dataclasses import dataclass # used for the loop state
from typing import Callable, Optional # used to mark some parameters as optional

from change_detector import ChangeDecision, detect_change
from colour_space import BLACK, HSLColor, rgb_to_hsl
from config import Config
from device import DeviceError, DeviceSink, create_colour_picker_payload
from frames import FrameNotReady, RawFrame, normalize_frame, save_screenshot
from quantizer import get_dominant_colour

logger = logging.getLogger(__name__)


@dataclass
class SamplingState:
    # Last sampled colour, not the last one sent to the bulb
    last_color: HSLColor = BLACK


class SamplingLoop:
    def __init__(self, frame_source, sink: DeviceSink, config: Config,
                 sleep: Callable[[float], None] = time.sleep):
        self.frame_source = frame_source
        self.sink = sink
        self.config = config
        self.sleep = sleep
        self.state = SamplingState()

    def grab_frame(self) -> RawFrame:
        # Busy-poll until the capturer hands over a frame; other errors propagate
        while True:
            try:
                return self.frame_source.next_frame()
            except FrameNotReady:
                self.sleep(self.config.frame_interval)

    def sample_colour(self) -> HSLColor:
        frame = self.grab_frame()

        image = normalize_frame(frame)
        logger.debug("Swapped color channels.")

        if self.config.save_screenshots:
            path = save_screenshot(image, self.config.screenshot_dir)
            logger.debug(f"Saved screenshot: {path}")

        dominant = get_dominant_colour(image, self.config.palette_size, self.config.palette_quality)
        logger.debug(f"Dominant color: {dominant}")
        return rgb_to_hsl(dominant)

    # Run one sampling iteration, sending the colour when it changed enough
    def step(self) -> ChangeDecision:
        dominant_color = self.sample_colour()
        decision = detect_change(self.state.last_color, dominant_color, self.config.threshold)

        if decision.emit:
            logger.info("Color is different, sending payload.")
            payload = create_colour_picker_payload(self.config.device_id, dominant_color)
            try:
                self.sink.send(payload)
            except DeviceError as exc:
                logger.warning(f"Failed to send payload: {exc}")
        else:
            logger.info("Color is the same, not sending payload.")

        self.state.last_color = dominant_color
        return decision

    # Sample forever (or max_iterations times), one sample per interval
    def run(self, max_iterations: Optional[int] = None) -> None:
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            self.step()
            iterations += 1
            self.sleep(self.config.sample_interval)
