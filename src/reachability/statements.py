"""
Dart Statement Parser

Recognizes the four statement shapes that link Dart files together:
relative imports, package imports, part declarations and exports.
Each physical line is parsed on its own; a statement split over several
lines by the formatter is only seen if its keyword and literal share a line.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from reachability.errors import UnsupportedImportError

PACKAGE_SCHEME = 'package:'

# keyword, mandatory whitespace, then a quoted literal closed by either quote
IMPORT_RE = re.compile(r"import\s+['\"](?P<path>[^'\"]+)['\"]")
EXPORT_RE = re.compile(r"export\s+['\"](?P<path>[^'\"]+)['\"]")
PART_RE = re.compile(r"part\s+['\"](?P<name>[^'\"]+)['\"]")
PACKAGE_IMPORT_RE = re.compile(
    r"import\s+['\"]package:(?P<package>[^/'\"]+)(?P<path>/[^'\"]*)['\"]"
)


@dataclass(frozen=True)
class Import:
    path: str


@dataclass(frozen=True)
class PackageImport:
    package_name: str
    sub_path: str


@dataclass(frozen=True)
class Part:
    file_name: str


@dataclass(frozen=True)
class Export:
    path: str


Statement = Union[Import, PackageImport, Part, Export]


def _reject_scheme(path: str) -> str:
    if ':' in path:
        raise UnsupportedImportError(f"Unsupported import of {path!r}")
    return path


def parse_package_import(line: str) -> Optional[PackageImport]:
    """Parse `import 'package:<name>/<sub path>';`

    The sub path keeps its leading slash, so
    `import 'package:flutter/material.dart';` gives
    PackageImport('flutter', '/material.dart').
    """
    match = PACKAGE_IMPORT_RE.match(line)
    if not match:
        return None
    return PackageImport(match.group('package'), match.group('path'))


def parse_import(line: str) -> Optional[Import]:
    """Parse a relative import

    Raises:
        UnsupportedImportError: the literal contains a colon (`dart:io`,
            `package:...`), which never names a file in the project
    """
    match = IMPORT_RE.match(line)
    if not match:
        return None
    return Import(_reject_scheme(match.group('path')))


def parse_part(line: str) -> Optional[Part]:
    """Parse `part '<sibling file>';`"""
    match = PART_RE.match(line)
    if not match:
        return None
    return Part(match.group('name'))


def parse_export(line: str) -> Optional[Export]:
    """Parse a relative export, rejecting colon-bearing literals like parse_import"""
    match = EXPORT_RE.match(line)
    if not match:
        return None
    return Export(_reject_scheme(match.group('path')))


def parse_statement(line: str) -> Optional[Statement]:
    """Parse one source line

    Parsers are tried in priority order: package import, import, part,
    export. Most lines are not statements, so no match returns None, and an
    unsupported import form is treated the same way.

    Args:
        line: A single physical line of Dart source

    Returns:
        The first recognized statement, or None
    """
    for parser in (parse_package_import, parse_import, parse_part, parse_export):
        try:
            statement = parser(line)
        except UnsupportedImportError:
            continue
        if statement is not None:
            return statement
    return None
