from __future__ import annotations

import base64
from pathlib import Path

import pytest

from jyoti_tool.storage import (
    LOGO_URL,
    USER_IMAGE_KEY,
    AppConfig,
    SQLiteStore,
    decode_profile_image,
    image_to_data_url,
)


def test_get_set_round_trip_and_overwrite(tmp_path: Path) -> None:
    store = SQLiteStore(tmp_path / "nested" / "app.sqlite3")
    assert store.get("missing") is None
    store.set("k", "v1")
    store.set("k", "v2")
    assert store.get("k") == "v2"


def test_store_config_defaults_and_save(tmp_path: Path) -> None:
    store = SQLiteStore(tmp_path / "app.sqlite3")
    assert store.load_config() == AppConfig()

    config = AppConfig(
        model="gemini-2.5-flash",
        temperature=0.3,
        timeout_seconds=12.5,
        speech_language="en-IN",
        export_dir="/data/out",
    )
    store.save_config(config)
    assert store.load_config() == config


def test_store_config_malformed_number_falls_back(tmp_path: Path) -> None:
    store = SQLiteStore(tmp_path / "app.sqlite3")
    store.set("temperature", "warm")
    assert store.load_config().temperature == AppConfig().temperature


def test_profile_image_default_is_logo(tmp_path: Path) -> None:
    store = SQLiteStore(tmp_path / "app.sqlite3")
    assert store.load_profile_image() == LOGO_URL


def test_profile_image_saved_as_data_url(tmp_path: Path) -> None:
    image = tmp_path / "me.png"
    image.write_bytes(b"\x89PNG fake")
    store = SQLiteStore(tmp_path / "app.sqlite3")

    payload = store.save_profile_image(image)

    assert payload.startswith("data:image/png;base64,")
    assert store.get(USER_IMAGE_KEY) == payload
    assert store.load_profile_image() == payload
    assert decode_profile_image(payload) == (b"\x89PNG fake", "png")


def test_image_to_data_url_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "nope.jpg"
    with pytest.raises(FileNotFoundError, match="nope.jpg"):
        image_to_data_url(missing)


def test_decode_profile_image_plain_url_and_jpeg() -> None:
    assert decode_profile_image(LOGO_URL) is None
    encoded = base64.b64encode(b"abc").decode("ascii")
    assert decode_profile_image(f"data:image/jpeg;base64,{encoded}") == (b"abc", "jpeg")


@pytest.mark.parametrize(
    "payload",
    [
        "data:application/octet-stream;base64,YWJj",
        "data:image/png;base64,@@not base64@@",
        "data:image/png;base64,",
        "data:image/png,raw",
    ],
)
def test_decode_profile_image_rejects_corrupt_payload(payload: str) -> None:
    with pytest.raises(ValueError):
        decode_profile_image(payload)


def test_save_profile_image_rejects_non_image(tmp_path: Path) -> None:
    blob = tmp_path / "notes.bin"
    blob.write_bytes(b"\x00\x01")
    store = SQLiteStore(tmp_path / "app.sqlite3")
    with pytest.raises(ValueError, match="notes.bin"):
        store.save_profile_image(blob)
    assert store.load_profile_image() == LOGO_URL
