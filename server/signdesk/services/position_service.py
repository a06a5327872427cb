from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from signdesk.schemas.position import SignaturePosition

# Absolute offsets (PDF units from the bottom-left corner of the last page)
# used when no usable position was stored.
SIGNATURE_FALLBACK: Tuple[float, float] = (40.0, 75.0)
DATE_FALLBACK: Tuple[float, float] = (40.0, 40.0)

# Written by old uploads instead of a position; means "use the fallback".
LEGACY_BOTTOM_SENTINEL = "bottom"


@dataclass(frozen=True)
class PageBox:
    width: float
    height: float
    left: float = 0.0
    bottom: float = 0.0


@dataclass(frozen=True)
class ResolvedPoint:
    page_index: int
    x: float
    y: float
    is_fallback: bool = False


PositionInput = Union[SignaturePosition, str, None]


def parse_position(raw: PositionInput) -> Optional[SignaturePosition]:
    if isinstance(raw, SignaturePosition):
        return raw
    if raw is None or raw.strip() == LEGACY_BOTTOM_SENTINEL:
        return None
    return SignaturePosition.parse_descriptor(raw)


def resolve_position(
    raw: PositionInput,
    pages: Sequence[PageBox],
    fallback: Tuple[float, float],
) -> ResolvedPoint:
    """
    Project a stored position onto a concrete page.

    An out-of-range page index lands on the last page. Missing, sentinel and
    malformed descriptors resolve to ``fallback`` on the last page; this
    function never raises for bad descriptors.
    """
    if not pages:
        raise ValueError("document has no pages")

    last = len(pages) - 1
    position = parse_position(raw)
    if position is None:
        return ResolvedPoint(page_index=last, x=fallback[0], y=fallback[1], is_fallback=True)

    page_index = min(max(position.page, 0), last)
    box = pages[page_index]
    # Ratios are captured top-down; PDF space runs bottom-up.
    return ResolvedPoint(
        page_index=page_index,
        x=box.width * position.x_ratio,
        y=box.height * (1 - position.y_ratio),
    )
