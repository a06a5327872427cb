"""
RFC-822 message building shared by the SMTP sender and both Gmail API senders.
"""

import base64
from email import encoders
from email.errors import MessageError
from email.message import Message
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.policy import compat32

from signdesk.core.exceptions import ConfigError

from .base import EmailMessage

CRLF_POLICY = compat32.clone(linesep="\r\n")


def encode_subject(subject: str) -> str:
    """Encode a subject as a single UTF-8 base64 encoded-word."""
    encoded = base64.b64encode(subject.encode("utf-8")).decode("ascii")
    return f"=?UTF-8?B?{encoded}?="


def _filename_param(filename: str):
    if filename.isascii():
        return filename
    return ("utf-8", "", filename)


def _set_header(mime: Message, name: str, value: str) -> None:
    if "\r" in value or "\n" in value:
        raise ConfigError(f"{name} header contains a line break")
    try:
        mime[name] = value
    except MessageError as exc:
        raise ConfigError(f"invalid {name} header: {exc}") from exc


def build_mime_message(message: EmailMessage) -> Message:
    """
    Build the MIME tree for a message.

    Without an attachment the message is a single text/html part; with one it
    is multipart/mixed with the HTML body first.
    """
    body = MIMEText(message.html, "html", "utf-8")

    if message.attachment is None:
        mime: Message = body
    else:
        mime = MIMEMultipart("mixed")
        mime.attach(body)
        maintype, _, subtype = message.attachment.content_type.partition("/")
        part = MIMEBase(maintype, subtype or "octet-stream")
        part.set_payload(message.attachment.content)
        encoders.encode_base64(part)
        part.set_param("name", _filename_param(message.attachment.filename))
        part.add_header("Content-Disposition", "attachment", filename=_filename_param(message.attachment.filename))
        mime.attach(part)

    _set_header(mime, "From", message.sender)
    _set_header(mime, "To", message.to)
    if message.cc:
        _set_header(mime, "Cc", ", ".join(message.cc))
    mime["Subject"] = encode_subject(message.subject)
    return mime


def render_message(message: EmailMessage) -> bytes:
    return build_mime_message(message).as_bytes(policy=CRLF_POLICY)


def encode_raw_message(message: EmailMessage) -> str:
    """Base64url-encode the whole message, unpadded, for the Gmail API ``raw`` field."""
    return base64.urlsafe_b64encode(render_message(message)).decode("ascii").rstrip("=")
