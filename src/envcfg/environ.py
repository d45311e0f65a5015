"""
Environment Snapshot builder (raw KEY=VALUE entries → read-only mapping).

The binder never reads os.environ itself. It receives a snapshot: an
immutable name → value mapping, captured in a single pass, with every
value already variable-expanded.

Entry Format:
    KEY=VALUE       split on the first '=' (values may contain '=')
    KEY=            defined, empty value
    KEY             malformed → EnvironFormatError

Expansion:
    $NAME and ${NAME} are replaced by the value of NAME, or by the empty
    string when NAME is not defined. A '$' not followed by a name is kept.

    Shell special parameters are not recognised, unlike Go's os.ExpandEnv:
        $$          not an escape; the first '$' is kept, the second may
                    start a reference ("a$$b" → "a$" + value of b)
        $@, $*, $#  kept literally
        ${OPEN      an unclosed brace is kept literally
        $12         one name "12", not "$1" followed by "2"
"""

import logging
import os
import re
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from envcfg.errors import EnvironFormatError

logger = logging.getLogger(__name__)

_EXPAND_RE = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z0-9_]+))")


def parse_environ_list(entries: Iterable[str]) -> Dict[str, str]:
    """
    Parse KEY=VALUE strings into a dict.

    Duplicate names are allowed; the last entry wins.

    Args:
        entries: Raw environment entries

    Returns:
        Dict of name → unexpanded value

    Raises:
        EnvironFormatError: If an entry has no '='
    """
    env: Dict[str, str] = {}
    for entry in entries:
        name, sep, value = entry.partition("=")
        if not sep:
            raise EnvironFormatError(entry)
        env[name] = value
    return env


def expand(value: str, lookup: Mapping[str, str]) -> str:
    """Expand $NAME / ${NAME} references against lookup (undefined → '')."""
    return _EXPAND_RE.sub(lambda m: lookup.get(m.group(1) or m.group(2), ""), value)


def process_environ_list() -> List[str]:
    """Current process environment as KEY=VALUE entries."""
    return [f"{name}={value}" for name, value in os.environ.items()]


def snapshot(entries: Optional[Iterable[str]] = None) -> Mapping[str, str]:
    """
    Capture an Environment Snapshot.

    Args:
        entries: Raw KEY=VALUE entries (defaults to the process environment)

    Returns:
        Read-only mapping of name → expanded value

    Raises:
        EnvironFormatError: If an entry is malformed
    """
    if entries is None:
        entries = process_environ_list()
    raw = parse_environ_list(entries)
    env = {name: expand(value, raw) for name, value in raw.items()}
    logger.debug("Captured environment snapshot with %d variable(s)", len(env))
    return MappingProxyType(env)


__all__ = [
    "parse_environ_list",
    "expand",
    "process_environ_list",
    "snapshot",
]
