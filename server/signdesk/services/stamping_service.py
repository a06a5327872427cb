from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from signdesk.core.logging import get_logger
from signdesk.services.position_service import (
    DATE_FALLBACK,
    SIGNATURE_FALLBACK,
    PageBox,
    PositionInput,
    resolve_position,
)

logger = get_logger(__name__)

# Captures come from a canvas drawn at twice the stamped size.
SIGNATURE_PRESCALE = 0.5
MAX_SIGNATURE_WIDTH = 200.0
MAX_SIGNATURE_HEIGHT = 70.0

DATE_FONT = "Helvetica"
DATE_FONT_SIZE = 11
DATE_COLOR = (0.15, 0.15, 0.15)
# Shift applied to the date's baseline origin so the text sits centred on the point.
DATE_OFFSET = (30.0, 5.0)
DATE_FORMAT = "%d/%m/%Y"


@dataclass(frozen=True)
class ImageMark:
    image: Image.Image
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class TextMark:
    text: str
    x: float
    y: float


@dataclass
class PageMarks:
    images: List[ImageMark]
    texts: List[TextMark]


def format_signing_date(moment: datetime) -> str:
    return moment.strftime(DATE_FORMAT)


def fit_signature(width: float, height: float) -> Tuple[float, float]:
    """Halve the capture, then scale it down uniformly into the signature box. Never upscales."""
    if width <= 0 or height <= 0:
        raise ValueError("signature image has no area")
    width, height = width * SIGNATURE_PRESCALE, height * SIGNATURE_PRESCALE
    scale = min(MAX_SIGNATURE_WIDTH / width, MAX_SIGNATURE_HEIGHT / height, 1.0)
    return width * scale, height * scale


def load_signature_image(data: bytes) -> Image.Image:
    try:
        with Image.open(BytesIO(data)) as image:
            return image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ValueError("signature image is not a readable image") from exc


def _page_boxes(reader: PdfReader) -> List[PageBox]:
    boxes = []
    for page in reader.pages:
        box = page.mediabox
        boxes.append(PageBox(float(box.width), float(box.height), float(box.left), float(box.bottom)))
    return boxes


def _render_overlay(box: PageBox, marks: PageMarks) -> bytes:
    buf = BytesIO()
    # invariant keeps reportlab from embedding timestamps and random ids.
    c = canvas.Canvas(buf, pagesize=(box.width, box.height), invariant=1)
    for mark in marks.images:
        c.drawImage(
            ImageReader(mark.image),
            mark.x,
            mark.y,
            width=mark.width,
            height=mark.height,
            mask="auto",
        )
    for mark in marks.texts:
        c.setFillColorRGB(*DATE_COLOR)
        c.setFont(DATE_FONT, DATE_FONT_SIZE)
        c.drawString(mark.x, mark.y, mark.text)
    c.showPage()
    c.save()
    return buf.getvalue()


def stamp_document(
    pdf_bytes: bytes,
    *,
    signature_position: PositionInput,
    date_position: PositionInput,
    signature_image: Optional[bytes],
    date_text: str,
) -> bytes:
    """
    Stamp a signature image and a date onto a PDF and return the new file.

    The signature is scaled into a 200x70 box and centred on its resolved
    point; without an image only the date is drawn. The input is not
    modified and the output depends only on the arguments.
    """
    try:
        reader = PdfReader(BytesIO(bytes(pdf_bytes)))
        boxes = _page_boxes(reader)
    except PdfReadError as exc:
        raise ValueError("document is not a readable PDF") from exc

    marks: Dict[int, PageMarks] = {}

    signature_point = resolve_position(signature_position, boxes, SIGNATURE_FALLBACK)
    if signature_image:
        image = load_signature_image(signature_image)
        width, height = fit_signature(image.width, image.height)
        marks.setdefault(signature_point.page_index, PageMarks([], [])).images.append(
            ImageMark(
                image=image,
                x=signature_point.x - width / 2,
                y=signature_point.y - height / 2,
                width=width,
                height=height,
            )
        )

    date_point = resolve_position(date_position, boxes, DATE_FALLBACK)
    marks.setdefault(date_point.page_index, PageMarks([], [])).texts.append(
        TextMark(text=date_text, x=date_point.x - DATE_OFFSET[0], y=date_point.y - DATE_OFFSET[1])
    )

    writer = PdfWriter(clone_from=reader)
    for page_index, page_marks in sorted(marks.items()):
        box = boxes[page_index]
        overlay = PdfReader(BytesIO(_render_overlay(box, page_marks))).pages[0]
        writer.pages[page_index].merge_translated_page(overlay, tx=box.left, ty=box.bottom)

    out = BytesIO()
    writer.write(out)
    logger.info(
        "document.stamped",
        pages=len(boxes),
        signature_page=signature_point.page_index,
        signature_fallback=signature_point.is_fallback,
        date_page=date_point.page_index,
        date_fallback=date_point.is_fallback,
        has_signature=bool(signature_image),
    )
    return out.getvalue()
