# Talking to the Tuya bulb: data points, payloads and the tinytuya transport

import logging # used to report what is sent to the bulb
import time # used to stamp payloads with the Unix time
from dataclasses import dataclass, field # used for the payload record
from enum import Enum # used for the closed sets of data point keys and modes
from typing import Any, Dict, Optional, Protocol # used to mark some parameters as optional

import tinytuya # used to speak the Tuya LAN protocol to the bulb

from colour_space import HSLColor, device_colour_code
from config import Config
from frames import AmbientError

logger = logging.getLogger(__name__)


# Data point ids understood by the bulb, as they appear on the wire
class DataPointKey(str, Enum):
    COLOR_MODE = "21"
    COLOR = "24"


class ColourMode(str, Enum):
    COLOUR = "colour"
    WHITE = "white"


# The bulb could not be reached or rejected the command
class DeviceError(AmbientError):
    pass


@dataclass
class DevicePayload:
    dev_id: str
    dps: Dict[str, Any]
    gw_id: Optional[str] = None
    t: int = field(default_factory=lambda: int(time.time()))

    def __post_init__(self):
        # The bulb is its own gateway unless told otherwise
        if self.gw_id is None:
            self.gw_id = self.dev_id

    def to_dict(self) -> Dict[str, Any]:
        return {"devId": self.dev_id, "gwId": self.gw_id, "t": str(self.t), "dps": dict(self.dps)}


# A colour update always switches the bulb to colour mode as well
def create_colour_picker_payload(device_id: str, hsl: HSLColor) -> DevicePayload:
    dps = {
        DataPointKey.COLOR_MODE.value: ColourMode.COLOUR.value,
        DataPointKey.COLOR.value: device_colour_code(hsl),
    }
    return DevicePayload(device_id, dps)


def create_colour_mode_payload(device_id: str, mode: ColourMode) -> DevicePayload:
    return DevicePayload(device_id, {DataPointKey.COLOR_MODE.value: ColourMode(mode).value})


class DeviceSink(Protocol):
    def send(self, payload: DevicePayload) -> None:
        ...


# Sends payloads to a bulb over the local network with tinytuya
class TuyaSink:

    def __init__(self, device: tinytuya.BulbDevice):
        self.device = device

    def send(self, payload: DevicePayload) -> None:
        logger.debug(f"Sending payload: {payload.to_dict()}")
        try:
            result = self.device.set_multiple_values(payload.dps)
        except (OSError, ValueError) as exc:
            raise DeviceError(f"Failed to send payload: {exc}") from exc

        # tinytuya reports failures as a dict instead of raising
        if isinstance(result, dict) and "Error" in result:
            raise DeviceError(f"Device returned error {result.get('Err')}: {result['Error']}")


def connect(config: Config) -> TuyaSink:
    try:
        device = tinytuya.BulbDevice(
            dev_id=config.device_id,
            address=config.ip,
            local_key=config.local_key,
            version=config.protocol_version,
        )
    except (OSError, ValueError) as exc:
        raise DeviceError(f"Failed to connect to the device: {exc}") from exc
    logger.debug(f"Created device {config.device_id} at {config.ip}")
    return TuyaSink(device)
