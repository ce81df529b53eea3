"""Resolve statement literals to project-relative file paths"""

import posixpath
from dataclasses import dataclass
from typing import Union

from reachability.statements import Export, Import, PackageImport, Part, Statement

SOURCE_ROOT = 'lib'


@dataclass(frozen=True)
class FileTarget:
    """A project file reached through a statement

    follow is False for part files, which are reachable but not scanned.
    """
    path: str
    follow: bool = True


@dataclass(frozen=True)
class DependencyTarget:
    """An import from another package, marking that dependency as used"""
    name: str


Target = Union[FileTarget, DependencyTarget]


def decode_path(literal: str) -> str:
    # only %20 is ever written by the IDE for paths with spaces
    return literal.replace('%20', ' ')


def resolve_relative(declaring_file: str, literal: str) -> str:
    """Join literal onto the declaring file's directory and collapse . and .."""
    joined = posixpath.join(posixpath.dirname(declaring_file), decode_path(literal))
    return posixpath.normpath(joined)


def resolve_part(declaring_file: str, file_name: str) -> str:
    """Swap the declaring file's name for the part's name

    Unlike a plain file-name swap, the name is decoded and dot segments are
    collapsed like an import, so `part '../x.g.dart'` and `import '../x.g.dart'`
    give the same visited path.
    """
    return posixpath.normpath(
        posixpath.join(posixpath.dirname(declaring_file), decode_path(file_name))
    )


def resolve_statement(statement: Statement, declaring_file: str, package_name: str,
                      source_root: str = SOURCE_ROOT) -> Target:
    """Resolve what a statement points at

    Args:
        statement: Parsed statement
        declaring_file: Project-relative path of the file holding the statement
        package_name: Name of the analysed package
        source_root: Directory that `package:<own name>/` maps to

    Returns:
        FileTarget for files of this project, DependencyTarget for imports of
        other packages
    """
    if isinstance(statement, PackageImport):
        if statement.package_name != package_name:
            return DependencyTarget(statement.package_name)
        path = posixpath.normpath(source_root + decode_path(statement.sub_path))
        return FileTarget(path)
    if isinstance(statement, (Import, Export)):
        return FileTarget(resolve_relative(declaring_file, statement.path))
    if isinstance(statement, Part):
        return FileTarget(resolve_part(declaring_file, statement.file_name), follow=False)
    raise TypeError(f"Unknown statement: {statement!r}")
