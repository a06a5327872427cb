import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from signdesk.core.exceptions import ConfigError, NotFoundError
from signdesk.models import SenderSettings, SignableDocument
from signdesk.schemas.receivers import DispatchMode
from signdesk.services.records import DocumentRecord, SettingsRecord
from signdesk.services.storage_service import LocalDocumentStorage


def settings_row(**overrides) -> SenderSettings:
    values = dict(
        user_id="owner-1",
        sender_email=" owner@example.com ",
        receiver_email='{"entries": [{"email": "a@example.com"}], "multiSendMode": "single"}',
        email_provider="brevo",
        email_api_key="xkeysib-1",
    )
    values.update(overrides)
    return SenderSettings(**values)


class TestSettingsRecord:

    def test_from_row(self, app_settings):
        record = SettingsRecord.from_model(settings_row(), app_settings)
        assert record.sender_email == "owner@example.com"
        assert record.provider == "brevo"
        assert record.receivers.active_emails() == ["a@example.com"]
        assert "xkeysib-1" not in repr(record)

    def test_provider_defaults_when_unset(self, app_settings):
        assert SettingsRecord.from_model(settings_row(email_provider=None), app_settings).provider == "sendgrid"

    def test_missing_sender(self, app_settings):
        with pytest.raises(ConfigError, match="missing sender"):
            SettingsRecord.from_model(settings_row(sender_email="  "), app_settings)

    def test_missing_credential(self, app_settings):
        with pytest.raises(ConfigError, match="missing credential"):
            SettingsRecord.from_model(settings_row(email_api_key=None), app_settings)

    def test_dispatch_mode_precedence(self, app_settings):
        stored_single = SettingsRecord.from_model(settings_row(), app_settings)
        legacy = SettingsRecord.from_model(settings_row(receiver_email="a@example.com"), app_settings)

        assert stored_single.dispatch_mode(DispatchMode.MULTIPLE, app_settings) is DispatchMode.MULTIPLE
        assert stored_single.dispatch_mode(None, app_settings) is DispatchMode.SINGLE
        assert legacy.dispatch_mode(None, app_settings) is DispatchMode.MULTIPLE


def test_document_record_from_row():
    row = SignableDocument(
        id="doc-1",
        user_id="owner-1",
        name="NDA",
        file_path="owner-1/nda.pdf",
        signature_position="bottom",
        date_position=None,
    )
    record = DocumentRecord.from_model(row)
    assert record.owner_id == "owner-1"
    assert record.signature_position == "bottom"
    assert record.date_position is None


class TestLocalDocumentStorage:

    @pytest.mark.asyncio
    async def test_reads_below_root(self, tmp_path):
        (tmp_path / "owner-1").mkdir()
        (tmp_path / "owner-1" / "nda.pdf").write_bytes(b"%PDF")
        assert await LocalDocumentStorage(tmp_path).read("owner-1/nda.pdf") == b"%PDF"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError, match="Failed to download document"):
            await LocalDocumentStorage(tmp_path).read("owner-1/missing.pdf")

    @pytest.mark.asyncio
    async def test_path_escaping_root(self, tmp_path):
        (tmp_path / "secret.pdf").write_bytes(b"%PDF")
        storage = LocalDocumentStorage(tmp_path / "docs")
        with pytest.raises(NotFoundError):
            await storage.read("../secret.pdf")

    @pytest.mark.asyncio
    async def test_file_is_read_in_a_worker_thread(self, tmp_path):
        (tmp_path / "nda.pdf").write_bytes(b"%PDF")
        threads = []
        real_read = Path.read_bytes

        def recording_read(self):
            threads.append(threading.get_ident())
            return real_read(self)

        with patch.object(Path, "read_bytes", autospec=True, side_effect=recording_read):
            assert await LocalDocumentStorage(tmp_path).read("nda.pdf") == b"%PDF"

        assert threads and threads[0] != threading.get_ident()
