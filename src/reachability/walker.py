"""
Dart Reachability Walker

Walks the import graph of a Dart package from its entry file and prunes the
candidate-unused sets (assets, dependencies, localisation keys, locator
registrations) as usages are found in the files it reaches.
"""

import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set

from reachability.errors import SourceReadError
from reachability.localisation import LocalisationKeyParser
from reachability.locator import Get, Register, parse_locator_usage
from reachability.paths import SOURCE_ROOT, DependencyTarget, resolve_statement
from reachability.statements import parse_statement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Asset:
    """A registered asset and the base filename searched for in sources"""
    path: str
    file_name: str


@dataclass
class AnalysisContext:
    """Mutable state of one analysis run

    Every set starts out holding everything declared and shrinks as usages
    are found; whatever is left once the walk ends is unused. The context is
    shared by every step of the walk and never copied.
    """
    visited_files: Set[str] = field(default_factory=set)
    assets: List[Asset] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    localisation_keys: Set[str] = field(default_factory=set)
    locator_registry: Dict[str, bool] = field(default_factory=dict)

    def unused_registrations(self) -> List[str]:
        """Registered types that were never retrieved"""
        return sorted(name for name, used in self.locator_registry.items() if not used)


class _Frame:
    """A file being scanned, with its position in its own lines"""

    def __init__(self, path: str, contents: str):
        self.path = path
        self.contents = contents
        self.lines: Iterator[str] = iter(contents.splitlines())


class ReachabilityWalker:
    """Finds every file reachable from an entry file"""

    def __init__(self, project_root, package_name: str,
                 localisation: Optional[LocalisationKeyParser] = None,
                 check_locator: bool = False,
                 source_root: str = SOURCE_ROOT):
        """Initialize the walker

        Args:
            project_root: Directory containing pubspec.yaml
            package_name: Name of the analysed package
            localisation: Key parser, or None to skip localisation checks
            check_locator: Whether to record locator registrations and usages
            source_root: Directory that `package:<own name>/` maps to
        """
        self.project_root = Path(project_root)
        self.package_name = package_name
        self.localisation = localisation
        self.check_locator = check_locator
        self.source_root = source_root

    def read_source(self, path: str) -> str:
        """Read a project file

        Raises:
            SourceReadError: the file is missing or not valid UTF-8
        """
        try:
            with open(self.project_root / path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise SourceReadError(path, str(e)) from e

    def walk(self, entry: str, context: AnalysisContext) -> AnalysisContext:
        """Traverse the import graph depth first from entry

        A newly found file is scanned completely before the rest of the file
        that referenced it, the same order a recursive walk would take, but
        with an explicit stack so deep import chains cannot exhaust the call
        stack. Files are marked visited before they are scanned, which is
        what stops cycles.

        Args:
            entry: Project-relative path of the entry file, normalised to the
                same form as resolved imports (`./lib/main.dart` is
                `lib/main.dart`)
            context: Candidate sets to prune, mutated in place

        Returns:
            The same context
        """
        entry = posixpath.normpath(entry)
        logger.info(f"Walking imports from {entry}")
        context.visited_files.add(entry)
        stack = [self._open(entry)]

        while stack:
            frame = stack[-1]
            next_file = self._next_file(frame, context)
            if next_file is None:
                stack.pop()
                self._record_usages(frame, context)
            else:
                stack.append(self._open(next_file))

        logger.info(f"Reached {len(context.visited_files)} files")
        return context

    def _open(self, path: str) -> _Frame:
        logger.debug(f"Scanning {path}")
        return _Frame(path, self.read_source(path))

    def _next_file(self, frame: _Frame, context: AnalysisContext) -> Optional[str]:
        """Consume lines until a file that has to be scanned turns up"""
        for line in frame.lines:
            statement = parse_statement(line)
            if statement is None:
                continue

            target = resolve_statement(statement, frame.path, self.package_name, self.source_root)
            if isinstance(target, DependencyTarget):
                if target.name in context.dependencies:
                    context.dependencies.remove(target.name)
                continue

            if target.path in context.visited_files:
                continue
            context.visited_files.add(target.path)
            if target.path.startswith('../') or target.path == '..':
                logger.warning(f"{frame.path} reaches {target.path} outside the project")
            # part files share their parent's imports
            if target.follow:
                return target.path
        return None

    def _record_usages(self, frame: _Frame, context: AnalysisContext):
        """Prune the candidate sets with what a fully scanned file uses

        Asset and dependency usage is plain substring containment over the
        whole file, comments included.
        """
        contents = frame.contents

        used_assets = {asset.path for asset in context.assets if asset.file_name in contents}
        if used_assets:
            context.assets[:] = [a for a in context.assets if a.path not in used_assets]

        used_deps = {dep for dep in context.dependencies if dep in contents}
        if used_deps:
            context.dependencies[:] = [d for d in context.dependencies if d not in used_deps]

        if self.localisation is not None:
            for key in self.localisation.parse(contents):
                context.localisation_keys.discard(key)

        if self.check_locator:
            _, events = parse_locator_usage(contents)
            for event in events:
                if isinstance(event, Register):
                    context.locator_registry.setdefault(event.type_name, False)
                elif isinstance(event, Get):
                    context.locator_registry[event.type_name] = True
