"""Load the optional unused.config.yaml of an analysed project"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from reachability.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE = 'unused.config.yaml'
DEFAULT_ENTRY = 'lib/main.dart'
KNOWN_KEYS = {'entry', 'assets', 'deps', 'localisation'}


@dataclass
class Config:
    entry: str = DEFAULT_ENTRY
    asset_ignore: List[str] = field(default_factory=list)
    dep_ignore: List[str] = field(default_factory=list)
    class_name: Optional[str] = None
    arb_dir: Optional[str] = None


def _section(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{key}' must be a mapping in {CONFIG_FILE}")
    return value


def _patterns(section: dict, key: str) -> List[str]:
    value = section.get('ignore') or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigurationError(f"'{key}.ignore' must be a list in {CONFIG_FILE}")
    return [str(pattern) for pattern in value]


def parse_config(text: str) -> Config:
    """Parse the YAML text of a config file

    Raises:
        ConfigurationError: invalid YAML or a malformed section
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid {CONFIG_FILE}: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigurationError(f"{CONFIG_FILE} must contain a mapping")

    for key in data:
        if key not in KNOWN_KEYS:
            logger.debug(f"Ignoring unknown config key {key}")

    localisation = _section(data, 'localisation')
    return Config(
        entry=str(data.get('entry') or DEFAULT_ENTRY),
        asset_ignore=_patterns(_section(data, 'assets'), 'assets'),
        dep_ignore=_patterns(_section(data, 'deps'), 'deps'),
        class_name=localisation.get('class_name'),
        arb_dir=localisation.get('arb_dir'),
    )


def load_config(project_root, config_file: Optional[str] = None) -> Config:
    """Load the run configuration

    Args:
        project_root: Directory of the analysed project
        config_file: Explicit config path; when omitted unused.config.yaml in
            the project root is used if present

    Returns:
        Parsed configuration, or defaults when no file exists

    Raises:
        ConfigurationError: an explicit config file is missing or invalid
    """
    path = Path(config_file) if config_file else Path(project_root) / CONFIG_FILE
    if not path.exists():
        if config_file:
            raise ConfigurationError(f"Config file {path} does not exist")
        logger.info(f"No {CONFIG_FILE} found, using defaults")
        return Config()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = parse_config(f.read())
    except OSError as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    logger.info(f"Loaded config from {path}")
    return config
