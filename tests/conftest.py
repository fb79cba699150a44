"""Shared fixtures for chat_wrapped tests."""

import os
import zipfile

import pytest

from chat_wrapped.config import ENV_PREFIX
from chat_wrapped.data_extraction import parse_chat
from helpers import ANDROID_CHAT, NOW


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def android_chat():
    """ParsedChat for the two-person Android sample transcript."""
    return parse_chat(ANDROID_CHAT, now=NOW)


@pytest.fixture()
def chat_txt(tmp_path):
    """Android sample written to disk as a .txt export."""
    path = tmp_path / "WhatsApp Chat with Trip.txt"
    path.write_text(ANDROID_CHAT, encoding='utf-8')
    return path


@pytest.fixture()
def chat_zip(tmp_path):
    """Android sample zipped the way WhatsApp exports it on macOS."""
    path = tmp_path / "WhatsApp Chat with Trip.zip"
    with zipfile.ZipFile(path, 'w') as zf:
        zf.writestr("__MACOSX/._WhatsApp Chat with Trip.txt", b"\x00\x05\x16\x07")
        zf.writestr("IMG-20240115-WA0001.jpg", b"\xff\xd8\xff")
        zf.writestr("WhatsApp Chat with Trip.txt", ANDROID_CHAT.encode('utf-8'))
    return path


@pytest.fixture()
def isolated_env(monkeypatch, tmp_path):
    """
    Run with no CHAT_WRAPPED_* variables and an empty working directory.

    load_dotenv writes straight into os.environ, so anything it adds is
    removed again afterwards.
    """
    saved = {key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)}
    for key in saved:
        del os.environ[key]
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    for key in [key for key in os.environ if key.startswith(ENV_PREFIX)]:
        del os.environ[key]
    os.environ.update(saved)
