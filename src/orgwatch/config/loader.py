"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from orgwatch.config.models import OrgWatchConfig


def load_config(path: Path | str) -> OrgWatchConfig:
    """Load configuration from YAML file.

    An empty file yields the all-defaults configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return OrgWatchConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).parent.parent.parent.parent / "configs" / "default.yaml"
