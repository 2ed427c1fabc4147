"""Root conftest: settings are read at import time, so the env is prepared first."""
from __future__ import annotations

import os
from pathlib import Path

_ROOT = Path(__file__).resolve().parent

_DEFAULTS = {
    "POSTGRES_USER": "test",
    "POSTGRES_PASSWORD": "test",
    "POSTGRES_DB": "social_chat_test",
}


def _load_env_file(path: Path) -> None:
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


if (_ROOT / ".env.test").exists():
    _load_env_file(_ROOT / ".env.test")

for _key, _value in _DEFAULTS.items():
    os.environ.setdefault(_key, _value)
