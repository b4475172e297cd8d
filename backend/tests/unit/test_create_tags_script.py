import importlib.util
from pathlib import Path

import pytest

from tagclaim.models.nfc_tag import NfcTag, TagStatus

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "create_tags.py"


@pytest.fixture
def script(db_session, settings, monkeypatch):
    found = importlib.util.spec_from_file_location("create_tags", SCRIPT)
    module = importlib.util.module_from_spec(found)
    found.loader.exec_module(module)

    engine = db_session.get_bind()
    monkeypatch.setattr(module, "get_engine", lambda: engine)
    monkeypatch.setattr(module, "get_session_local", lambda: lambda: db_session)
    monkeypatch.setattr(module, "get_settings", lambda: settings)
    return module


def test_create_tags_prints_urls(script, db_session, capsys):
    script.create_tags(3)

    out = capsys.readouterr().out
    assert "Created 3 NFC tag(s)" in out
    tags = db_session.query(NfcTag).all()
    assert len(tags) == 3
    for tag in tags:
        assert tag.status == TagStatus.AVAILABLE
        assert tag.tag_url in out


def test_list_pending(script, registry, capsys):
    pending_url = registry.create().tag_url
    injected = registry.create()
    injected_url = registry.set_injected(injected.tag_id, True).tag_url

    script.list_pending()

    out = capsys.readouterr().out
    assert "1 tag(s) waiting to be injected" in out
    assert pending_url in out
    assert injected_url not in out


def test_list_pending_when_empty(script, capsys):
    script.list_pending()

    assert "No pending tags" in capsys.readouterr().out
