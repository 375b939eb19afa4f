"""
Project configuration.

Defaults come from the environment (optionally a .env file); a project's
config.yaml is merged over them with OmegaConf, then programmatic overrides.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from folio.contexts.rendering.exceptions import InvalidConfigError

load_dotenv()
FOLIO_MODE = os.getenv("FOLIO_MODE", "build")
FOLIO_ENVIRONMENT = os.getenv("FOLIO_ENVIRONMENT", "development")
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

CONFIG_FILENAME = "config.yaml"
DATA_SUFFIXES = (".yml", ".yaml", ".json")
MODES = ("build", "server")


def default_config() -> Dict[str, Any]:
    """Return the built-in configuration values."""
    return {
        "source_dir": "source",
        "layouts_dir": "layouts",
        "data_dir": "data",
        # Layout applied to every page render; null renders pages bare
        "layout": None,
        "mode": FOLIO_MODE,
        "environment": FOLIO_ENVIRONMENT,
    }


def load_config(root: Path, overrides: Optional[Dict[str, Any]] = None) -> DictConfig:
    """
    Load the configuration for a project.

    Args:
        root: Project root directory (may contain config.yaml)
        overrides: Values taking precedence over both defaults and config.yaml

    Returns:
        Merged OmegaConf configuration

    Raises:
        InvalidConfigError: If the merged configuration names an unknown mode
    """
    layers = [OmegaConf.create(default_config())]

    config_path = root / CONFIG_FILENAME
    if config_path.exists():
        layers.append(OmegaConf.load(config_path))

    if overrides:
        layers.append(OmegaConf.create(overrides))

    config = OmegaConf.merge(*layers)

    if config.mode not in MODES:
        raise InvalidConfigError(
            f"Unknown mode '{config.mode}' in {config_path}. Valid modes: {', '.join(MODES)}"
        )

    return config


def load_data(data_dir: Path) -> DictConfig:
    """
    Load every data file in a directory into one store keyed by file stem.

    Args:
        data_dir: Directory holding .yml/.yaml/.json files (may not exist)

    Returns:
        OmegaConf store, e.g. data/nav.yml is reachable as store.nav
    """
    store: Dict[str, Any] = {}

    if data_dir.is_dir():
        for path in sorted(data_dir.iterdir()):
            if path.is_file() and path.suffix in DATA_SUFFIXES:
                store[path.stem] = OmegaConf.to_container(OmegaConf.load(path), resolve=True)

    return OmegaConf.create(store)
