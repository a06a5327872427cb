"""
Shared test configuration and fixtures for the SignDesk test suite.
"""

import io
import json
from typing import Callable, List, Sequence, Tuple

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from PIL import Image
from reportlab.pdfgen import canvas

from signdesk.core.config import Settings
from signdesk.integrations.mail import Attachment, EmailMessage


def build_pdf(page_sizes: Sequence[Tuple[float, float]]) -> bytes:
    """Render a PDF with one labelled page per size."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, invariant=1)
    for index, (width, height) in enumerate(page_sizes):
        c.setPageSize((width, height))
        c.drawString(20, height - 30, f"Page {index + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def build_png(width: int, height: int) -> bytes:
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    for x in range(width):
        image.putpixel((x, height // 2), (10, 10, 120, 255))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class RecordingTransport:
    """httpx MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses: List[httpx.Response] = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(202, json={"id": "queued"})
        return self.responses.pop(0)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def json(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        _env_file=None,
        secret_key="test-secret-key-for-testing-only",
        database_url="sqlite+aiosqlite://",
        sender_display_name="Signature Desk",
        oauth_token_url="https://oauth.test/token",
        gmail_api_send_url="https://gmail.test/send",
        sendgrid_url="https://sendgrid.test/v3/mail/send",
        resend_url="https://resend.test/emails",
        mailgun_base_url="https://mailgun.test/v3",
        brevo_url="https://brevo.test/v3/smtp/email",
    )


@pytest.fixture
def transport_factory() -> Callable[..., RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def one_page_pdf() -> bytes:
    return build_pdf([(612, 792)])


@pytest.fixture
def three_page_pdf() -> bytes:
    return build_pdf([(612, 792), (595, 842), (842, 595)])


@pytest.fixture
def signature_png() -> bytes:
    return build_png(400, 100)


@pytest.fixture(scope="session")
def rsa_private_key_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def sample_message() -> EmailMessage:
    return EmailMessage(
        sender="owner@example.com",
        to="client@example.com",
        cc=("legal@example.com", "ops@example.com"),
        subject="Signed document: NDA - Acme",
        html="<p>Signed</p>",
        attachment=Attachment(content=b"%PDF-1.4 test", filename="NDA_signed_Acme.pdf"),
    )


@pytest.fixture
def pdf_factory() -> Callable[[Sequence[Tuple[float, float]]], bytes]:
    return build_pdf


@pytest.fixture
def png_factory() -> Callable[[int, int], bytes]:
    return build_png
