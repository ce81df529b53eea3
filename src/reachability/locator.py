"""
Service Locator Usage Parser

Finds get_it style registrations and retrievals on a variable named
`locator`:

    locator.registerLazySingleton<ChatPageBloc>(() => ...);
    locator.get<AppLogger>();
    locator<UserInfoNotifier>();
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

MEMBER_ANCHOR = 'locator.'
GENERIC_ANCHOR = 'locator<'

WHITESPACE_RE = re.compile(r"\s*")
TYPE_NAME_RE = re.compile(r"[\w.]*")


@dataclass(frozen=True)
class Register:
    type_name: str


@dataclass(frozen=True)
class Get:
    type_name: str


@dataclass(frozen=True)
class LocatorImport:
    """`locator.dart` seen in an import line, dropped by callers"""


LocatorEvent = Union[Register, Get, LocatorImport]
Match = Optional[Tuple[LocatorEvent, str]]


def _keyword_with_generic(text: str, keyword: str) -> Optional[Tuple[str, str]]:
    """Match `<keyword><anything up to '<'><TypeName>` and return (type, rest)"""
    rest = text[WHITESPACE_RE.match(text).end():]
    if not rest.startswith(keyword):
        return None
    start = rest.find('<', len(keyword))
    if start == -1:
        return None
    type_match = TYPE_NAME_RE.match(rest, start + 1)
    end = type_match.end()
    if not rest.startswith('>', end):
        return None
    return type_match.group(), rest[end + 1:]


def _import(text: str) -> Match:
    if text.startswith('dart'):
        return LocatorImport(), text[len('dart'):]
    return None


def _register(text: str) -> Match:
    # any keyword starting with register: register, registerFactory,
    # registerLazySingleton, registerSingleton ...
    found = _keyword_with_generic(text, 'register')
    if found is None:
        return None
    return Register(found[0]), found[1]


def _get(text: str) -> Match:
    found = _keyword_with_generic(text, 'get')
    if found is None:
        return None
    return Get(found[0]), found[1]


def _get_generic(text: str) -> Match:
    # the type name is taken verbatim up to '>', which is left unconsumed
    rest = text[WHITESPACE_RE.match(text).end():]
    end = rest.find('>')
    if end == -1:
        return None
    return Get(rest[:end]), rest[end:]


MEMBER_FORMS: Tuple[Callable[[str], Match], ...] = (_import, _register, _get)
GENERIC_FORMS: Tuple[Callable[[str], Match], ...] = (_import, _register, _get, _get_generic)


def _scan(text: str, anchor: str, forms) -> Tuple[str, List[LocatorEvent]]:
    """Repeatedly find anchor and match the first form that fits after it

    Returns:
        The text left after the last matched event, and the events in order
    """
    events = []
    remainder = text
    position = 0
    while True:
        index = remainder.find(anchor, position)
        if index == -1:
            return remainder, events
        after = remainder[index + len(anchor):]
        for form in forms:
            found = form(after)
            if found is not None:
                event, remainder = found
                events.append(event)
                position = 0
                break
        else:
            position = index + len(anchor)


def parse_locator_usage(text: str) -> Tuple[str, List[LocatorEvent]]:
    """Collect locator events from a block of Dart source

    Member-call usages (`locator.`) and generic-call usages (`locator<`) are
    scanned in two independent passes. Their events are concatenated with the
    member events first, and the shorter of the two remainders is returned.
    The remainder is not needed for reachability but is kept stable for
    callers that compare output.

    Args:
        text: File contents

    Returns:
        (remainder, events) where events may include LocatorImport entries
    """
    member_rest, member_events = _scan(text, MEMBER_ANCHOR, MEMBER_FORMS)
    generic_rest, generic_events = _scan(text, GENERIC_ANCHOR, GENERIC_FORMS)
    events = member_events + generic_events
    if len(member_rest) > len(generic_rest):
        return generic_rest, events
    return member_rest, events
