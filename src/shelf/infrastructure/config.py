"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    environment: str
    log_level: str
    conflict_retries: int

    @property
    def json_logs(self) -> bool:
        return self.environment in ("production", "staging")


def load_settings() -> Settings:
    environment = (
        os.getenv("SHELF_ENV") or os.getenv("ENVIRONMENT") or "development"
    ).lower()
    data_dir = os.getenv("SHELF_DATA_DIR")
    retries = os.getenv("SHELF_CONFLICT_RETRIES", "3")
    try:
        conflict_retries = max(1, int(retries))
    except ValueError as exc:
        raise ValueError(
            f"SHELF_CONFLICT_RETRIES must be an integer, got {retries!r}"
        ) from exc

    return Settings(
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        environment=environment,
        log_level=os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(environment, "INFO")).upper(),
        conflict_retries=conflict_retries,
    )
