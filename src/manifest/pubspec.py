"""
Flutter Package Manifest Reader

Loads pubspec.yaml and turns its declarations into the inventories the
reachability walker prunes: registered assets, declared dependencies,
translation keys and the project's Dart sources.
"""

import fnmatch
import glob
import json
import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Set

import yaml

from reachability.errors import ManifestError
from reachability.walker import Asset

logger = logging.getLogger(__name__)

PUBSPEC_FILE = 'pubspec.yaml'


@dataclass
class FlutterIntl:
    class_name: str = 'AppLocalizations'
    arb_dir: str = 'lib/l10n'


@dataclass
class Pubspec:
    name: str
    dependencies: Dict[str, Any] = field(default_factory=dict)
    assets: List[str] = field(default_factory=list)
    flutter_intl: FlutterIntl = field(default_factory=FlutterIntl)


def _as_mapping(value, key: str) -> Dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"'{key}' in {PUBSPEC_FILE} must be a mapping")
    return value


def parse_pubspec(text: str) -> Pubspec:
    """Parse the contents of a pubspec.yaml

    Asset entries are either plain paths or `{path: ..., flavors: [...]}`
    mappings; only the path is kept.

    Raises:
        ManifestError: invalid YAML or no package name
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid {PUBSPEC_FILE}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get('name'), str):
        raise ManifestError(f"{PUBSPEC_FILE} does not declare a package name")

    flutter = _as_mapping(data.get('flutter'), 'flutter')
    assets = []
    for entry in flutter.get('assets') or []:
        if isinstance(entry, dict):
            entry = entry.get('path')
        if entry:
            assets.append(str(entry))

    intl = _as_mapping(data.get('flutter_intl'), 'flutter_intl')
    defaults = FlutterIntl()
    flutter_intl = FlutterIntl(
        class_name=str(intl.get('class_name') or defaults.class_name),
        arb_dir=str(intl.get('arb_dir') or defaults.arb_dir),
    )

    return Pubspec(
        name=data['name'],
        dependencies=_as_mapping(data.get('dependencies'), 'dependencies'),
        assets=assets,
        flutter_intl=flutter_intl,
    )


def load_pubspec(project_root) -> Pubspec:
    """Load pubspec.yaml from the project root

    Raises:
        ManifestError: the file is missing, unreadable or invalid
    """
    path = Path(project_root) / PUBSPEC_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise ManifestError(f"Failed to read {path}: {e}") from e

    pubspec = parse_pubspec(text)
    logger.info(f"Loaded package {pubspec.name} with {len(pubspec.dependencies)} dependencies")
    return pubspec


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def registered_assets(project_root, asset_paths: List[str]) -> List[str]:
    """Expand declared asset paths to the files they register

    A directory registers only the files directly inside it, matching how
    Flutter bundles assets.

    Returns:
        Sorted project-relative POSIX paths
    """
    root = Path(project_root)
    assets: Set[str] = set()
    for declared in asset_paths:
        logger.debug(f"Looking in {declared}")
        path = root / declared
        if path.is_file():
            assets.add(_relative(path, root))
        elif path.is_dir():
            for entry in path.iterdir():
                if entry.is_file():
                    assets.add(_relative(entry, root))
        else:
            logger.warning(f"Asset path {declared} does not exist")
    return sorted(assets)


def remove_ignored(paths: List[str], ignore_patterns: List[str], project_root) -> List[str]:
    """Drop every path matched by an ignore pattern

    Patterns are literal file paths or globs relative to the project root.
    """
    root = Path(project_root)
    ignored: Set[str] = set()
    for pattern in ignore_patterns:
        if (root / pattern).is_file():
            ignored.add(posixpath.normpath(pattern))
            continue
        for match in glob.glob(str(root / pattern), recursive=True):
            match_path = Path(match)
            if match_path.is_file():
                ignored.add(_relative(match_path, root))
    return [p for p in paths if p not in ignored]


def candidate_assets(project_root, pubspec: Pubspec, ignore_patterns: List[str]) -> List[Asset]:
    """Registered, non-ignored assets paired with their base filename"""
    logger.info("Finding registered assets")
    registered = registered_assets(project_root, pubspec.assets)
    logger.debug(f"{len(registered)} registered assets")
    kept = remove_ignored(registered, ignore_patterns, project_root)
    logger.debug(f"{len(kept)} registered assets after removing ignored assets")
    return [Asset(path, posixpath.basename(path)) for path in kept]


def candidate_dependencies(pubspec: Pubspec, ignore_patterns: List[str]) -> List[str]:
    """Declared dependencies except the package itself and ignored names"""
    names = []
    for name in pubspec.dependencies:
        if name == pubspec.name:
            continue
        if any(fnmatch.fnmatchcase(name, pattern) for pattern in ignore_patterns):
            logger.debug(f"Ignoring dependency {name}")
            continue
        names.append(name)
    return names


def translation_keys(project_root, arb_dir: str) -> Set[str]:
    """Collect the message keys of every ARB file in arb_dir

    Metadata entries (`@@locale`, `@app_name`) are not keys.

    Raises:
        ManifestError: an ARB file is unreadable or not a JSON object
    """
    directory = Path(project_root) / arb_dir
    if not directory.is_dir():
        logger.warning(f"Translation directory {arb_dir} does not exist")
        return set()

    keys: Set[str] = set()
    for arb_file in sorted(directory.glob('*.arb')):
        try:
            with open(arb_file, 'r', encoding='utf-8') as f:
                messages = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {arb_file}: {e}")
            raise ManifestError(f"Failed to load {arb_file}: {e}") from e
        if not isinstance(messages, dict):
            raise ManifestError(f"{arb_file} is not a JSON object")
        keys.update(key for key in messages if not key.startswith('@'))

    logger.info(f"Loaded {len(keys)} translation keys from {arb_dir}")
    return keys


def source_inventory(project_root, source_root: str = 'lib') -> List[str]:
    """Every Dart file under the source root, project-relative and sorted"""
    root = Path(project_root)
    return sorted(_relative(path, root) for path in (root / source_root).rglob('*.dart') if path.is_file())
