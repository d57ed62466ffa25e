"""
Thumbnail rendering service for the photo server
Decodes a source image, applies a transform plan and rotation, and encodes
the result as a progressive JPEG without metadata
"""

import logging
import math
import threading
from io import BytesIO
from pathlib import Path
from typing import Tuple, Union

from PIL import Image

from photoserver.exceptions import DecodeError, EncodeError, TransformError
from photoserver.services.sizes import BoundingBox, ScaleFactor, TransformPlan

logger = logging.getLogger(__name__)

Size = Tuple[int, int]


def is_quarter_turn(rotation: int) -> bool:
    return rotation % 180 != 0 and rotation % 90 == 0


def effective_box(box: BoundingBox, rotation: int) -> Size:
    """Bounding box in storage orientation.

    Boxes are requested in display orientation; when the photo is displayed
    a quarter turn away from how its pixels are stored, width and height
    trade places.
    """
    if is_quarter_turn(rotation):
        return box.height, box.width
    return box.width, box.height


def fit_within(size: Size, box: Size) -> Size:
    """Largest aspect-preserving size inside ``box`` that never upscales."""
    width, height = size
    ratio = min(box[0] / width, box[1] / height, 1.0)
    if ratio >= 1.0:
        return width, height
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def rotated_bounds(size: Size, rotation: int) -> Size:
    """Canvas size needed to hold ``size`` after rotating with ``expand``."""
    if rotation % 90 == 0:
        return (size[1], size[0]) if is_quarter_turn(rotation) else size
    theta = math.radians(rotation)
    cos, sin = abs(math.cos(theta)), abs(math.sin(theta))
    width, height = size
    return math.ceil(width * cos + height * sin), math.ceil(width * sin + height * cos)


def fit_rotated(size: Size, box: BoundingBox, rotation: int) -> Size:
    """Resize target in storage orientation so the rotated result fits ``box``.

    Quarter turns swap the box; any other angle fits the expanded canvas.
    """
    if rotation % 90 == 0:
        return fit_within(size, effective_box(box, rotation))
    bounds = rotated_bounds(size, rotation)
    ratio = min(box.width / bounds[0], box.height / bounds[1], 1.0)
    if ratio >= 1.0:
        return size
    return max(1, int(size[0] * ratio)), max(1, int(size[1] * ratio))


def scaled_down(size: Size, factor: int) -> Size:
    return max(1, size[0] // factor), max(1, size[1] // factor)


class ThumbnailEngine:
    def __init__(self, concurrency: int = 4, quality: int = 80):
        self.quality = quality
        self._slots = threading.BoundedSemaphore(max(1, concurrency))

    def render(self, source_path: Union[str, Path], plan: TransformPlan, rotation: int = 0) -> bytes:
        """
        Render ``source_path`` according to ``plan`` and ``rotation``.

        Args:
            source_path: Absolute path of the stored photo
            plan: ScaleFactor or BoundingBox from the size vocabulary
            rotation: Clockwise display rotation in degrees

        Returns:
            JPEG bytes

        Raises:
            DecodeError, TransformError, EncodeError
        """
        if rotation:
            logger.info("Rotation: %d, file %s", rotation, source_path)

        with self._slots:
            try:
                src = Image.open(source_path)
            except (OSError, Image.DecompressionBombError) as e:
                raise DecodeError(source_path, "failed to open image", e) from e

            with src:
                try:
                    src.load()
                except (OSError, Image.DecompressionBombError) as e:
                    raise DecodeError(source_path, "failed to decode image", e) from e

                try:
                    out = self._transform(src, plan, rotation)
                except (OSError, ValueError, MemoryError) as e:
                    raise TransformError(source_path, "failed to resize or rotate image", e) from e

                with out:
                    try:
                        return self._encode(out)
                    except (OSError, ValueError) as e:
                        raise EncodeError(source_path, "failed to export image", e) from e

    def _transform(self, src: Image.Image, plan: TransformPlan, rotation: int) -> Image.Image:
        # Every image created here is closed unless it is handed back to the caller.
        working = []
        result = None
        img = src
        try:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
                working.append(img)

            if isinstance(plan, ScaleFactor):
                target = scaled_down(img.size, plan.factor)
                resample = Image.Resampling.NEAREST
            elif isinstance(plan, BoundingBox):
                target = fit_rotated(img.size, plan, rotation)
                resample = Image.Resampling.LANCZOS
            else:
                raise ValueError(f"unsupported transform plan {plan!r}")

            if target != img.size:
                img = img.resize(target, resample)
                working.append(img)

            if rotation % 360:
                img = img.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True, fillcolor="black")
                working.append(img)

                # Canvas rounding on odd angles can overshoot the box by a pixel or two
                if isinstance(plan, BoundingBox) and rotation % 90:
                    bounded = fit_within(img.size, (plan.width, plan.height))
                    if bounded != img.size:
                        img = img.resize(bounded, Image.Resampling.LANCZOS)
                        working.append(img)

            result = img.copy() if img is src else img
            return result
        finally:
            for im in working:
                if im is not result:
                    im.close()

    def _encode(self, img: Image.Image) -> bytes:
        # Drop EXIF/ICC and anything else carried over from the source.
        img.info.clear()
        buf = BytesIO()
        img.save(
            buf,
            format="JPEG",
            quality=self.quality,
            progressive=True,
            optimize=True,
            exif=b"",
        )
        return buf.getvalue()
