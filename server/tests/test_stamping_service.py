import io
from datetime import datetime
from unittest.mock import patch

import pytest
from PIL import Image
from pypdf import PdfReader
from reportlab.pdfgen.canvas import Canvas

from signdesk.services.stamping_service import (
    DATE_OFFSET,
    fit_signature,
    format_signing_date,
    stamp_document,
)


def page_text(pdf: bytes, index: int) -> str:
    return PdfReader(io.BytesIO(pdf)).pages[index].extract_text()


class TestFitSignature:

    def test_wide_image_is_bounded(self):
        width, height = fit_signature(400, 100)
        assert width <= 200 and height <= 70
        assert width / height == pytest.approx(4.0)

    def test_tall_image_is_bounded_by_height(self):
        width, height = fit_signature(100, 700)
        assert height == pytest.approx(70)
        assert width == pytest.approx(10)

    def test_capture_is_halved_before_fitting(self):
        assert fit_signature(300, 60) == pytest.approx((150, 30))

    def test_small_image_is_never_upscaled(self):
        assert fit_signature(50, 20) == pytest.approx((25, 10))

    def test_empty_image(self):
        with pytest.raises(ValueError):
            fit_signature(0, 10)


def test_signing_date_format():
    assert format_signing_date(datetime(2024, 3, 7, 23, 59)) == "07/03/2024"


class TestStampDocument:

    def test_image_drawn_within_box_and_centred(self, one_page_pdf, signature_png):
        with patch.object(Canvas, "drawImage", autospec=True) as draw_image:
            stamp_document(
                one_page_pdf,
                signature_position='{"page":0,"xRatio":0.5,"yRatio":0.5}',
                date_position=None,
                signature_image=signature_png,
                date_text="01/02/2024",
            )

        draw_image.assert_called_once()
        _, _, x, y = draw_image.call_args.args
        width = draw_image.call_args.kwargs["width"]
        height = draw_image.call_args.kwargs["height"]
        assert width <= 200 and height <= 70
        assert width / height == pytest.approx(400 / 100)
        assert x + width / 2 == pytest.approx(306)
        assert y + height / 2 == pytest.approx(396)

    def test_date_is_drawn_with_offset(self, one_page_pdf):
        with patch.object(Canvas, "drawString", autospec=True) as draw_string:
            stamp_document(
                one_page_pdf,
                signature_position=None,
                date_position='{"page":0,"xRatio":0.5,"yRatio":0.5}',
                signature_image=None,
                date_text="01/02/2024",
            )

        _, x, y, text = draw_string.call_args.args
        assert text == "01/02/2024"
        assert (x, y) == pytest.approx((306 - DATE_OFFSET[0], 396 - DATE_OFFSET[1]))

    def test_date_only_without_image(self, one_page_pdf):
        with patch.object(Canvas, "drawImage", autospec=True) as draw_image:
            stamped = stamp_document(
                one_page_pdf,
                signature_position=None,
                date_position=None,
                signature_image=None,
                date_text="15/06/2024",
            )
        draw_image.assert_not_called()
        assert "15/06/2024" in page_text(stamped, 0)

    def test_fallback_stamps_the_last_page(self, three_page_pdf, signature_png):
        stamped = stamp_document(
            three_page_pdf,
            signature_position="bottom",
            date_position="bottom",
            signature_image=signature_png,
            date_text="15/06/2024",
        )
        reader = PdfReader(io.BytesIO(stamped))
        assert len(reader.pages) == 3
        assert "15/06/2024" in reader.pages[2].extract_text()
        assert "15/06/2024" not in reader.pages[0].extract_text()

    def test_signature_and_date_on_different_pages(self, three_page_pdf, signature_png):
        stamped = stamp_document(
            three_page_pdf,
            signature_position='{"page":0,"xRatio":0.5,"yRatio":0.9}',
            date_position='{"page":1,"xRatio":0.5,"yRatio":0.9}',
            signature_image=signature_png,
            date_text="15/06/2024",
        )
        assert "15/06/2024" in page_text(stamped, 1)
        assert "15/06/2024" not in page_text(stamped, 2)

    def test_output_is_deterministic_and_input_untouched(self, one_page_pdf, signature_png):
        original = bytes(one_page_pdf)
        kwargs = dict(
            signature_position='{"page":0,"xRatio":0.3,"yRatio":0.8}',
            date_position='{"page":0,"xRatio":0.7,"yRatio":0.8}',
            signature_image=signature_png,
            date_text="15/06/2024",
        )
        first = stamp_document(one_page_pdf, **kwargs)
        second = stamp_document(one_page_pdf, **kwargs)
        assert first == second
        assert one_page_pdf == original
        assert first != original

    def test_unreadable_pdf(self):
        with pytest.raises(ValueError, match="not a readable PDF"):
            stamp_document(
                b"definitely not a pdf",
                signature_position=None,
                date_position=None,
                signature_image=None,
                date_text="15/06/2024",
            )

    def test_oversized_signature_image(self, one_page_pdf, signature_png, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(ValueError, match="not a readable image"):
            stamp_document(
                one_page_pdf,
                signature_position=None,
                date_position=None,
                signature_image=signature_png,
                date_text="15/06/2024",
            )

    def test_unreadable_signature_image(self, one_page_pdf):
        with pytest.raises(ValueError, match="not a readable image"):
            stamp_document(
                one_page_pdf,
                signature_position=None,
                date_position=None,
                signature_image=b"not a png",
                date_text="15/06/2024",
            )
