# Decide whether a newly sampled colour differs enough from the last one

from typing import NamedTuple # used for the decision value

from colour_space import HSLColor
from config import COLOUR_THRESHOLD


class ChangeDecision(NamedTuple):
    distance: float
    emit: bool


# Sum of the hue, saturation and lightness differences. Hue wraps around, so 350 and 10 are 20 degrees apart
def colour_diff(color1: HSLColor, color2: HSLColor) -> float:
    hue_diff = abs(color1.hue - color2.hue)
    if hue_diff > 180.0:
        hue_diff = 360.0 - hue_diff

    sat_diff = abs(color1.saturation - color2.saturation)
    lum_diff = abs(color1.lightness - color2.lightness)
    return hue_diff + sat_diff + lum_diff


# Only a distance strictly above the threshold is worth sending to the bulb
def detect_change(previous: HSLColor, current: HSLColor, threshold: float = COLOUR_THRESHOLD) -> ChangeDecision:
    distance = colour_diff(previous, current)
    return ChangeDecision(distance, distance > threshold)
