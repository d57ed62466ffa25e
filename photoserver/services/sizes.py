"""
Named size vocabulary for thumbnails.

Every size token a client may send resolves to exactly one transform plan:
an integer downscale factor, an aspect-preserving bounding box, or the
explicit passthrough plan that serves the original bytes.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class Passthrough:
    pass


@dataclass(frozen=True)
class ScaleFactor:
    factor: int


@dataclass(frozen=True)
class BoundingBox:
    width: int
    height: int


TransformPlan = Union[Passthrough, ScaleFactor, BoundingBox]

PASSTHROUGH = Passthrough()

# token -> (factor, box width, box height)
_SIZES: Dict[str, Tuple[int, int, int]] = {
    "full": (1, 0, 0),
    "half": (2, 0, 0),
    "quarter": (4, 0, 0),
    "eighth": (8, 0, 0),
    "xsmall": (0, 80, 80),
    "small": (0, 160, 160),
    "medium": (0, 320, 320),
    "large": (0, 640, 480),
    "xlarge": (0, 800, 600),
    "xxlarge": (0, 1024, 768),
    "xxxlarge": (0, 1280, 1024),
    "xxxxlarge": (0, 1600, 1200),
    "tivo": (0, 320, 320),
    "blog": (0, 852, 852),
    "home": (0, 990, 990),
}

SIZE_TOKENS = tuple(_SIZES)


def plan_from(factor: int, box_width: int, box_height: int) -> TransformPlan:
    """Build a plan from raw table values; anything degenerate is passthrough."""
    if factor > 0:
        return ScaleFactor(factor)
    if box_width > 0 and box_height > 0:
        return BoundingBox(box_width, box_height)
    return PASSTHROUGH


def resolve(size_token: Optional[str]) -> TransformPlan:
    """Map a size token to its transform plan. Unknown tokens serve the original."""
    entry = _SIZES.get(size_token or "")
    if entry is None:
        return PASSTHROUGH
    return plan_from(*entry)
