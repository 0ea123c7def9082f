"""Configuration management for Planboard."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PLANBOARD_HOME = Path(os.environ.get("PLANBOARD_HOME", Path.home() / "planboard"))
CONFIG_FILE = PLANBOARD_HOME / "config" / "planboard.conf"
DATA_DIR = PLANBOARD_HOME / "data"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Config:
    """Planboard configuration."""

    data_dir: str = ""
    export_dir: str = ""
    import_timeout: float | None = None
    all_day_label: str = "all-day"
    log_level: str = "WARNING"

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser() if self.data_dir else DATA_DIR

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir).expanduser() if self.export_dir else Path.cwd()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_config(text: str) -> Config:
    """Parse KEY=value lines into a Config. Unknown keys are ignored."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "export_dir":
                config.export_dir = value
            case "import_timeout":
                if not value:
                    config.import_timeout = None
                    continue
                try:
                    timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid IMPORT_TIMEOUT: {value}")
                    continue
                config.import_timeout = timeout if timeout > 0 else None
            case "all_day_label":
                if value:
                    config.all_day_label = value
            case "log_level":
                if value.upper() in _LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Invalid LOG_LEVEL: {value}")

    return config


def load_config() -> Config:
    """Load configuration from planboard.conf file."""
    if not CONFIG_FILE.exists():
        return Config()
    return parse_config(CONFIG_FILE.read_text())
