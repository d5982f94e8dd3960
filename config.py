# Settings for the screen colour sampler and the Tuya bulb it drives

from dataclasses import dataclass # used for the settings record
from pathlib import Path # used for the screenshot directory
from typing import Any # used for the parsed arguments

# Palette extraction: 10 colours, quality 2 (lower is slower but more accurate)
PALETTE_SIZE = 10
PALETTE_QUALITY = 2

# Sum of the hue/saturation/lightness deltas needed before the bulb is updated
COLOUR_THRESHOLD = 10.0

# Seconds between two samples of the screen
SAMPLE_INTERVAL = 1.0
# Backoff while the capturer has no frame ready yet (one frame at 60Hz)
FRAME_INTERVAL = 1.0 / 60

# Where --save-screenshots writes its files
SCREENSHOT_DIR = Path("./screenshots/")

# Tuya LAN protocol version spoken by the bulb
PROTOCOL_VERSION = 3.3

# mss monitor index, 1 is the primary display (0 is all of them stitched together)
DEFAULT_MONITOR = 1


# Everything the program needs, built once at startup and passed around
@dataclass
class Config:
    device_id: str
    local_key: str
    ip: str
    mode: str = "color-picker"
    debug: bool = False
    save_screenshots: bool = False
    monitor: int = DEFAULT_MONITOR
    screenshot_dir: Path = SCREENSHOT_DIR
    threshold: float = COLOUR_THRESHOLD
    sample_interval: float = SAMPLE_INTERVAL
    frame_interval: float = FRAME_INTERVAL
    palette_size: int = PALETTE_SIZE
    palette_quality: int = PALETTE_QUALITY
    protocol_version: float = PROTOCOL_VERSION

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        return cls(
            device_id=args.id,
            local_key=args.key,
            ip=args.ip,
            mode=args.mode,
            debug=args.debug,
            save_screenshots=args.save_screenshots,
            monitor=args.monitor,
        )
