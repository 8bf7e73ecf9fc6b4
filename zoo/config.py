"""Settings for the zoo.

Layered: field defaults, then an optional YAML file, then environment
variables. `.env` files are loaded into the environment by main() before
load_settings() runs.

Example zoo.yaml:

    data_dir: zoo_data
    day_night_interval_seconds: 5
    feeding_time_scale: 0.5
    journal_format: xml
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Environment variable -> settings field
ENV_OVERRIDES: dict[str, str] = {
    "ZOO_DATA_DIR": "data_dir",
    "ZOO_DAY_NIGHT_INTERVAL": "day_night_interval_seconds",
    "ZOO_FEEDING_TIME_SCALE": "feeding_time_scale",
    "ZOO_JOURNAL_FORMAT": "journal_format",
}


class ZooSettings(BaseModel):
    """Runtime configuration for one zoo session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data_dir: Path = Path("zoo_data")
    database_name: str = "zoo.db"
    day_night_interval_seconds: float = Field(default=10.0, gt=0)
    feeding_time_scale: float = Field(default=1.0, ge=0)
    journal_format: Literal["json", "xml"] = "json"
    default_food: str = Field(default="food", min_length=1)
    seed_defaults: bool = True

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_name

    @property
    def journal_path(self) -> Path:
        return self.data_dir / f"journal.{self.journal_format}"


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ZooSettings:
    """Build settings from defaults, an optional YAML file and the environment.

    Args:
        path: YAML file to read; skipped if None
        environ: Environment mapping (default: os.environ)

    Raises:
        FileNotFoundError: If path is given but does not exist
        pydantic.ValidationError: If any value is invalid
    """
    values: dict[str, Any] = {}

    if path is not None:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data:
            if not isinstance(data, dict):
                raise ValueError(f"Settings file {path} must contain a mapping")
            values.update(data)
        logger.debug(f"Loaded settings file {path}: {sorted(values)}")

    env = os.environ if environ is None else environ
    for variable, field_name in ENV_OVERRIDES.items():
        if variable in env:
            values[field_name] = env[variable]
            logger.debug(f"Setting {field_name} from {variable}")

    return ZooSettings.model_validate(values)
