"""Server configuration.

The configuration is read once at startup from ``config.json`` and the
environment, validated, and passed explicitly to the store, the scheduler and
the app. Invalid values never stop the server: they are logged and replaced by
defaults.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from padpool.domain.pool_rules import POOL_SIZE
from padpool.models.dc_models import ConfigModel, ServerDataMode

DEFAULT_DAYS_TO_KEEP = 7
DEFAULT_SERVER_DATA_MODE = ServerDataMode.daily
DEFAULT_CONFIG = {
    "daysToKeep": DEFAULT_DAYS_TO_KEEP,
    "serverDataMode": DEFAULT_SERVER_DATA_MODE.value,
}


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    days_to_keep: int = DEFAULT_DAYS_TO_KEEP
    server_data_mode: ServerDataMode = DEFAULT_SERVER_DATA_MODE
    data_dir: Path = Path("server_data")
    pool_size: int = Field(default=POOL_SIZE, gt=0)
    host: str = "0.0.0.0"
    port: int = 3000

    def public_view(self) -> ConfigModel:
        return ConfigModel(
            days_to_keep=self.days_to_keep,
            server_data_mode=self.server_data_mode,
        )


def _parse_mode(value: Any) -> ServerDataMode:
    try:
        return ServerDataMode(value)
    except ValueError:
        logging.warning(
            f"Invalid 'serverDataMode' in config.json ({value!r}). "
            f"Using default: {DEFAULT_SERVER_DATA_MODE.value!r}"
        )
        return DEFAULT_SERVER_DATA_MODE


def _parse_days_to_keep(value: Any, mode: ServerDataMode) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    # daysToKeep is ignored in single mode, so only warn where it matters
    if mode == ServerDataMode.daily:
        logging.warning(
            f"Invalid 'daysToKeep' in config.json for daily mode ({value!r}). "
            f"Using default: {DEFAULT_DAYS_TO_KEEP}"
        )
    return DEFAULT_DAYS_TO_KEEP


def parse_config_data(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Validate raw config.json contents, substituting defaults for bad values

    Args:
        raw (Dict[str, Any]): Decoded config.json object

    Returns:
        Dict[str, Any]: days_to_keep and server_data_mode ready for ServerConfig
    """
    merged = {**DEFAULT_CONFIG, **raw}
    mode = _parse_mode(merged["serverDataMode"])
    days_to_keep = _parse_days_to_keep(merged["daysToKeep"], mode)
    return {"days_to_keep": days_to_keep, "server_data_mode": mode}


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """Read config.json, creating it with defaults when missing

    Args:
        config_path (Path): Location of config.json

    Returns:
        Dict[str, Any]: Validated settings, defaults on any error
    """
    defaults = parse_config_data({})
    try:
        if not config_path.exists():
            config_path.write_text(json.dumps(DEFAULT_CONFIG, indent=2), encoding="utf-8")
            logging.info(f"{config_path.name} not found. Created with default settings: {DEFAULT_CONFIG}")
            return defaults

        raw = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("top-level value must be an object")
    except (OSError, ValueError) as e:
        logging.error(f"Error loading or creating {config_path.name}. Using default settings: {e}")
        return defaults

    settings = parse_config_data(raw)
    logging.info(f"Loaded configuration from {config_path.name}: {settings}")
    return settings


def load_config(
    config_path: Path | str,
    data_dir: Path | str,
    host: str = "0.0.0.0",
    port: int = 3000,
    pool_size: int = POOL_SIZE,
) -> ServerConfig:
    settings = read_config_file(Path(config_path))
    return ServerConfig(
        data_dir=Path(data_dir),
        host=host,
        port=port,
        pool_size=pool_size,
        **settings,
    )
