"""Errors raised while analysing a Dart project"""


class AnalysisError(Exception):
    """Base class for fatal analysis errors"""


class ConfigurationError(AnalysisError):
    """Invalid or missing run configuration"""


class ManifestError(AnalysisError):
    """pubspec.yaml or a translation resource could not be read"""


class SourceReadError(AnalysisError):
    """A reachable source file could not be read

    Raised instead of producing a partial report, since an incomplete
    traversal would mark reachable files as unused.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class UnsupportedImportError(ValueError):
    """An import or export literal that names a runtime library (dart:io)"""
