"""SQLite key/value persistence for settings and the profile picture."""

from __future__ import annotations

import base64
import logging
import mimetypes
import sqlite3
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

USER_IMAGE_KEY = "jyoti_app_user_profile_pic"
LOGO_URL = (
    "https://raw.githubusercontent.com/fede-navas/test-images/main/"
    "jyoti-new-branding.png"
)


@dataclass(frozen=True)
class AppConfig:
    """Persisted app settings."""

    model: str = "gemini-2.0-flash"
    temperature: float = 0.7
    timeout_seconds: float = 30.0
    speech_language: str = "hi-IN"
    export_dir: str = ""


class SQLiteStore:
    """Key/value store backed by a single SQLite table."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def get(self, key: str) -> str | None:
        """Stored value for ``key`` or None when absent."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM app_config WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite ``key``."""
        self._set_many({key: value})

    def _set_many(self, payload: dict[str, str]) -> None:
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()

    def load_config(self) -> AppConfig:
        """Return saved settings, falling back to defaults."""
        defaults = AppConfig()
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            model=values.get("model") or defaults.model,
            temperature=_parse_float(values.get("temperature"), defaults.temperature),
            timeout_seconds=_parse_float(
                values.get("timeout_seconds"), defaults.timeout_seconds
            ),
            speech_language=values.get("speech_language") or defaults.speech_language,
            export_dir=values.get("export_dir", defaults.export_dir),
        )

    def save_config(self, config: AppConfig) -> None:
        """Save settings into the key/value table."""
        self._set_many(
            {
                "model": config.model,
                "temperature": repr(config.temperature),
                "timeout_seconds": repr(config.timeout_seconds),
                "speech_language": config.speech_language,
                "export_dir": config.export_dir,
            }
        )

    def load_profile_image(self) -> str:
        """Saved profile picture (data URL) or the default logo URL."""
        return self.get(USER_IMAGE_KEY) or LOGO_URL

    def save_profile_image(self, image_path: Path) -> str:
        """Store an image file as a base64 data URL and return it."""
        payload = image_to_data_url(image_path)
        self.set(USER_IMAGE_KEY, payload)
        logger.info("Profile image saved from %s", image_path)
        return payload


def image_to_data_url(image_path: Path) -> str:
    """Encode a local image file as ``data:<mime>;base64,...``."""
    if not image_path.exists():
        raise FileNotFoundError(str(image_path))
    mime, _ = mimetypes.guess_type(image_path.name)
    if mime is None or not mime.startswith("image/"):
        raise ValueError(f"Not an image file: {image_path.name}")
    encoded = base64.b64encode(image_path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def decode_profile_image(payload: str) -> tuple[bytes, str] | None:
    """Image bytes and extension from a stored data URL.

    Returns None for plain URLs (e.g. the default logo).

    Raises:
        ValueError: If the data URL is not a base64 image.
    """
    if not payload.startswith("data:"):
        return None
    header, sep, body = payload[len("data:") :].partition(";base64,")
    if not sep or not header.startswith("image/"):
        raise ValueError(f"Unsupported profile image payload: {header[:40]!r}")
    raw = base64.b64decode(body, validate=True)
    if not raw:
        raise ValueError("Empty profile image payload")
    return raw, header.split("/", 1)[1]


def _parse_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default
