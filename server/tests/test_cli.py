import io
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner
from pypdf import PdfReader

from signdesk.cli.main import cli
from signdesk.core.exceptions import ProviderError


def test_stamp_writes_signed_pdf(tmp_path, three_page_pdf, signature_png):
    source = tmp_path / "in.pdf"
    source.write_bytes(three_page_pdf)
    signature = tmp_path / "sig.png"
    signature.write_bytes(signature_png)
    output = tmp_path / "out.pdf"

    result = CliRunner().invoke(
        cli,
        [
            "stamp",
            str(source),
            str(output),
            "--signature",
            str(signature),
            "--signature-position",
            '{"page":1,"xRatio":0.5,"yRatio":0.5}',
            "--date",
            "01/01/2025",
        ],
    )

    assert result.exit_code == 0, result.output
    reader = PdfReader(io.BytesIO(output.read_bytes()))
    assert len(reader.pages) == 3
    assert "01/01/2025" in reader.pages[2].extract_text()


def test_stamp_rejects_non_pdf(tmp_path):
    source = tmp_path / "in.pdf"
    source.write_bytes(b"plain text")
    result = CliRunner().invoke(cli, ["stamp", str(source), str(tmp_path / "out.pdf")])
    assert result.exit_code == 1
    assert "not a readable PDF" in result.output


def test_test_email_sends_through_provider():
    with patch("signdesk.cli.main.send_test_message", new_callable=AsyncMock) as send:
        result = CliRunner().invoke(
            cli,
            ["test-email", "--provider", "sendgrid", "--credential", "SG.key", "--sender", "a@example.com", "--to", "b@example.com"],
        )

    assert result.exit_code == 0, result.output
    kwargs = send.await_args.kwargs
    assert kwargs["provider"] == "sendgrid"
    assert kwargs["credential_blob"] == "SG.key"
    assert kwargs["receiver_email"] == "b@example.com"


def test_test_email_reports_provider_error():
    failing = AsyncMock(side_effect=ProviderError("sendgrid", 401, "bad key"))
    with patch("signdesk.cli.main.send_test_message", failing):
        result = CliRunner().invoke(
            cli,
            ["test-email", "--provider", "sendgrid", "--credential", "SG.bad", "--sender", "a@example.com", "--to", "b@example.com"],
        )
    assert result.exit_code == 1
    assert "sendgrid error: 401 bad key" in result.output


def test_test_email_needs_a_credential():
    result = CliRunner().invoke(
        cli, ["test-email", "--provider", "sendgrid", "--sender", "a@example.com", "--to", "b@example.com"]
    )
    assert result.exit_code == 2
