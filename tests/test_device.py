import json
import time
import unittest
from unittest import mock

from colour_space import HSLColor
from config import Config
from device import (
    ColourMode,
    DataPointKey,
    DeviceError,
    DevicePayload,
    TuyaSink,
    connect,
    create_colour_mode_payload,
    create_colour_picker_payload,
)


class PayloadTests(unittest.TestCase):

    def test_data_point_keys(self):
        self.assertEqual(DataPointKey.COLOR_MODE.value, "21")
        self.assertEqual(DataPointKey.COLOR.value, "24")
        self.assertEqual({key.value for key in DataPointKey}, {"21", "24"})

    def test_colour_picker_payload_sets_mode_and_colour(self):
        before = int(time.time())
        payload = create_colour_picker_payload("bulb1", HSLColor(0.0, 100.0, 50.0))

        self.assertEqual(payload.dps, {"21": "colour", "24": "000003e803e8"})
        self.assertEqual(payload.dev_id, "bulb1")
        self.assertEqual(payload.gw_id, "bulb1")
        self.assertGreaterEqual(payload.t, before)

    def test_colour_picker_payload_caps_bright_colours(self):
        payload = create_colour_picker_payload("bulb1", HSLColor(120.0, 50.0, 75.0))
        self.assertEqual(payload.dps["24"], "007801f401f4")

    def test_mode_payload_only_sets_mode(self):
        self.assertEqual(create_colour_mode_payload("bulb1", ColourMode.WHITE).dps, {"21": "white"})
        self.assertEqual(create_colour_mode_payload("bulb1", "colour").dps, {"21": "colour"})

    def test_gateway_can_differ_from_device(self):
        payload = DevicePayload("bulb1", {"21": "white"}, gw_id="gateway", t=1700000000)
        self.assertEqual(
            payload.to_dict(),
            {"devId": "bulb1", "gwId": "gateway", "t": "1700000000", "dps": {"21": "white"}},
        )
        json.dumps(payload.to_dict())


class TuyaSinkTests(unittest.TestCase):

    def setUp(self):
        self.device = mock.Mock()
        self.sink = TuyaSink(self.device)
        self.payload = DevicePayload("bulb1", {"21": "colour", "24": "000003e803e8"})

    def test_sends_data_points(self):
        self.device.set_multiple_values.return_value = {"dps": {"21": "colour"}}
        self.sink.send(self.payload)
        self.device.set_multiple_values.assert_called_once_with({"21": "colour", "24": "000003e803e8"})

    def test_no_response_is_fine(self):
        self.device.set_multiple_values.return_value = None
        self.sink.send(self.payload)

    def test_error_result_raises(self):
        self.device.set_multiple_values.return_value = {"Error": "Network Error: Unable to Connect", "Err": "901"}
        with self.assertRaises(DeviceError):
            self.sink.send(self.payload)

    def test_socket_error_raises(self):
        self.device.set_multiple_values.side_effect = ConnectionResetError("reset")
        with self.assertRaises(DeviceError):
            self.sink.send(self.payload)


class ConnectTests(unittest.TestCase):

    def test_builds_bulb_device(self):
        config = Config(device_id="bulb1", local_key="secret", ip="192.168.1.20")
        with mock.patch("device.tinytuya.BulbDevice") as bulb_device:
            sink = connect(config)

        bulb_device.assert_called_once_with(
            dev_id="bulb1", address="192.168.1.20", local_key="secret", version=3.3
        )
        self.assertIs(sink.device, bulb_device.return_value)

    def test_construction_failure_raises(self):
        config = Config(device_id="bulb1", local_key="secret", ip="not-an-ip")
        with mock.patch("device.tinytuya.BulbDevice", side_effect=ValueError("bad address")):
            with self.assertRaises(DeviceError):
                connect(config)


if __name__ == "__main__":
    unittest.main()
