import argparse # used to read the device details and the mode from the command line
import logging # used to report what the colour picker is doing
import os # used for the TUYA_* environment defaults
import sys # used to exit with a status code
from typing import List, Optional # used to mark some parameters as optional

from config import DEFAULT_MONITOR, Config
from device import ColourMode, DeviceError, DeviceSink, connect, create_colour_mode_payload
from frames import AmbientError, MssFrameSource
from sampler import SamplingLoop

logger = logging.getLogger("ambient_monitor")

# The features the bulb can be driven with, as they are typed on the command line
SWITCH_LED = "switch-led"
COLOR_PICKER = "color-picker"
WHITE_MODE = "white-mode"
COLOR_MODE = "color-mode"
FEATURES = [SWITCH_LED, COLOR_PICKER, WHITE_MODE, COLOR_MODE]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Make a Tuya bulb follow the colour of your screen")
    # The id, local key and IP can be found with `python -m tinytuya wizard`
    parser.add_argument("--id", default=os.getenv("TUYA_DEVICE_ID"), required=os.getenv("TUYA_DEVICE_ID") is None)
    parser.add_argument("--key", default=os.getenv("TUYA_LOCAL_KEY"), required=os.getenv("TUYA_LOCAL_KEY") is None)
    parser.add_argument("--ip", default=os.getenv("TUYA_DEVICE_IP"), required=os.getenv("TUYA_DEVICE_IP") is None)
    parser.add_argument("--debug", action="store_true", help="Log every sampling step")
    parser.add_argument("--mode", choices=FEATURES, required=True)
    parser.add_argument("--save-screenshots", action="store_true",
                        help="Keep every sampled frame as a JPEG in ./screenshots/")
    parser.add_argument("--monitor", type=int, default=DEFAULT_MONITOR,
                        help="mss monitor index, 1 is the primary display")
    return parser


def setup_logging(config: Config) -> None:
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # tinytuya is chatty at debug level
    logging.getLogger("tinytuya").setLevel(logging.WARNING)


def colour_mode(sink: DeviceSink, device_id: str, mode: ColourMode) -> None:
    # One shot, a failed send is reported but not retried
    try:
        sink.send(create_colour_mode_payload(device_id, mode))
    except DeviceError as exc:
        logger.error(f"Failed to change mode: {exc}")


def colour_picker(sink: DeviceSink, config: Config) -> None:
    # Leaving the with block releases the capture session, also on errors
    with MssFrameSource(config.monitor) as frame_source:
        logger.info(f"Capturing {frame_source.width}x{frame_source.height}")
        SamplingLoop(frame_source, sink, config).run()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config.from_args(args)
    setup_logging(config)

    if config.mode == SWITCH_LED:
        logger.error("Not implemented yet")
        return 0

    try:
        sink = connect(config)
    except DeviceError as exc:
        logger.error(f"Failed to connect to the device. {exc}")
        return 1

    try:
        if config.mode == COLOR_PICKER:
            logger.info("Starting to see color on the screen...")
            colour_picker(sink, config)
        elif config.mode == COLOR_MODE:
            logger.info("Changing mode to color")
            colour_mode(sink, config.device_id, ColourMode.COLOUR)
        elif config.mode == WHITE_MODE:
            logger.info("Changing mode to white")
            colour_mode(sink, config.device_id, ColourMode.WHITE)
    except AmbientError as exc:
        logger.error(f"Error: {exc}")
        return 1

    return 0


def run_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run_main()
