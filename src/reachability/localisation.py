"""Find localisation keys read through the generated accessor class"""

import re
from typing import List

from reachability.errors import ConfigurationError

# of(context), current, maybeOf(context)? in that order
CONTEXT_BINDING = r"(?:of\([A-Za-z0-9]+\)|current|maybeOf\([A-Za-z0-9]+\)\s*\?)"


class LocalisationKeyParser:
    """Extracts keys from accessor usages such as `S.of(context).app_name`

    The accessor class name is fixed for the lifetime of the parser, which is
    built once per run and passed to whoever needs it.
    """

    def __init__(self, class_name: str):
        """Initialize the parser

        Args:
            class_name: Name of the generated accessor class (`S`,
                `AppLocalizations`, ...)

        Raises:
            ConfigurationError: the class name is empty
        """
        if not class_name:
            raise ConfigurationError("Localisation accessor class name is not configured")
        self.class_name = class_name
        self.pattern = re.compile(
            re.escape(class_name)
            + r"\s*\.\s*"
            + CONTEXT_BINDING
            + r"\s*\.(?P<key>[\w.]*)"
        )

    def parse(self, text: str) -> List[str]:
        """Return every key referenced in text, in order of appearance

        Whitespace and newlines are allowed between the dotted components,
        so formatter-wrapped chains are found too. Dotted trailing
        identifiers are kept whole (`S.current.a.b` gives `a.b`).
        """
        return [match.group('key') for match in self.pattern.finditer(text)]
