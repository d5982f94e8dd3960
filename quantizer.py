# Reduce a screen image to a single colour with fast_colorthief

import logging # used to report the picked colour

import fast_colorthief # used to get the dominant colour of the screenshot
import numpy as np # used to hand the pixels to fast_colorthief without copying them

from colour_space import RGBColor
from config import PALETTE_QUALITY, PALETTE_SIZE
from frames import AmbientError, NormalizedImage

logger = logging.getLogger(__name__)


# The palette extraction produced nothing to pick from
class QuantizationError(AmbientError):
    pass


# Build a palette of the image and return the first entry fast_colorthief gives back
def get_dominant_colour(
    image: NormalizedImage,
    color_count: int = PALETTE_SIZE,
    quality: int = PALETTE_QUALITY,
) -> RGBColor:
    if image.width == 0 or image.height == 0:
        raise QuantizationError("Cannot quantize an empty image")

    # fast_colorthief takes an RGBA numpy array directly, no need to encode the image first
    pixels = np.frombuffer(image.data, dtype=np.uint8).reshape(image.height, image.width, 4)

    try:
        palette = fast_colorthief.get_palette(pixels, color_count, quality)
    except (RuntimeError, ValueError) as exc:
        raise QuantizationError(f"Palette extraction failed: {exc}") from exc

    if not palette:
        raise QuantizationError("Palette extraction returned no colours")

    dominant = RGBColor(*(int(c) for c in palette[0]))
    logger.debug(f"get_dominant_colour: {dominant}")
    return dominant
