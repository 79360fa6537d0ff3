"""Environment-driven storage and app configuration."""

import os
from pathlib import Path

DEFAULT_JSONBIN_BASE_URL = "https://api.jsonbin.io/v3/b"
DEFAULT_JSONBIN_BIN_ID = "675ea851e41b4d34e4596e04"
STORE_KINDS = ("memory", "file", "jsonbin")


def _parse_env_line(line: str):
    """Split one ``KEY=VALUE`` line, or return ``None`` for comments and junk."""
    line = line.strip()
    if line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value.strip().strip('"').strip("'")


def _load_env_file(path: Path) -> None:
    """Seed board settings from a ``.env`` file.

    Variables already exported in the environment win over the file.

    :param path: Location of the ``.env`` file; a missing file is ignored.
    :type path: pathlib.Path
    """
    if not path.is_file():
        return
    with path.open(encoding="utf-8") as env_file:
        pairs = [_parse_env_line(line) for line in env_file]
    for key, value in filter(None, pairs):
        os.environ.setdefault(key, value)


def _autoload_env() -> None:
    """Load local .env defaults when variables were not pre-exported."""
    src_dir = Path(__file__).resolve().parent
    _load_env_file(src_dir.parent / ".env")


_autoload_env()


def get_store_kind() -> str:
    """Return the configured gateway backend name.

    Unknown values fall back to the in-memory store.

    :returns: One of ``memory``, ``file`` or ``jsonbin``.
    :rtype: str
    """
    kind = os.getenv("BOARD_STORE", "memory").strip().lower()
    if kind not in STORE_KINDS:
        print(f"Unknown BOARD_STORE {kind!r}, using in-memory store.")
        return "memory"
    return kind


def get_data_path() -> Path:
    """Return the JSON file used by the file-backed gateway.

    :returns: Path to the board document.
    :rtype: pathlib.Path
    """
    return Path(os.getenv("BOARD_DATA_PATH", "data/board.json"))


def get_jsonbin_settings() -> dict:
    """Return hosted document-bin connection settings.

    ``JSONBIN_MASTER_KEY`` is optional; public bins are readable without it.

    :returns: Mapping with ``base_url``, ``bin_id``, ``master_key`` and ``timeout``.
    :rtype: dict[str, object]
    """
    return {
        "base_url": os.getenv("JSONBIN_BASE_URL", DEFAULT_JSONBIN_BASE_URL).rstrip("/"),
        "bin_id": os.getenv("JSONBIN_BIN_ID") or DEFAULT_JSONBIN_BIN_ID,
        "master_key": os.getenv("JSONBIN_MASTER_KEY") or None,
        "timeout": float(os.getenv("JSONBIN_TIMEOUT", "10")),
    }


def get_admin_password() -> str:
    """Return the shared secret that unlocks the admin panel."""
    return os.getenv("BOARD_ADMIN_PASSWORD", "12345")


def get_secret_key() -> str:
    """Return the Flask session signing key."""
    return os.getenv("FLASK_SECRET_KEY", "idea-board-dev")
