# Colour conversions: RGB to HSL, and HSV-style triples to the bulb's hex code

from typing import NamedTuple, Tuple # used for the small colour value types

from colour import Color # used to help work with colours

# Each field of the bulb's colour code is four hex digits
FIELD_MAX = 0xFFFF


class RGBColor(NamedTuple):
    r: int
    g: int
    b: int


class HSLColor(NamedTuple):
    hue: float  # degrees, 0 <= hue < 360
    saturation: float  # percent
    lightness: float  # percent


BLACK = HSLColor(0.0, 0.0, 0.0)


def rgb_to_hsl(rgb: RGBColor) -> HSLColor:
    # colour works with 0..1 floats for every component
    h, s, l = Color(rgb=(rgb.r / 255, rgb.g / 255, rgb.b / 255)).hsl
    return HSLColor((h * 360) % 360, s * 100, l * 100)


def _hex_field(value: int) -> str:
    return f"{max(0, min(value, FIELD_MAX)):04x}"


# Encode hue (0-359), saturation (0-100) and value (0-100) as 12 hex digits.
# The bulb wants saturation and value in tenths of a percent
def hsv_to_tuya(hsv: Tuple[int, int, int]) -> str:
    h, s, v = hsv
    return _hex_field(h) + _hex_field(s * 10) + _hex_field(v * 10)


# Bright screens run the bulb at half brightness, everything else at full.
# The value sent never follows the real lightness; 50.0 itself still counts as dark
def brightness_cap(lightness: float) -> int:
    return 50 if lightness > 50.0 else 100


def device_colour_code(hsl: HSLColor) -> str:
    return hsv_to_tuya((int(hsl.hue), int(hsl.saturation), brightness_cap(hsl.lightness)))
