"""Toggle key extraction from source text.

Extraction is lexical: a hook call is recognised by its identifier followed by
an opening parenthesis and a string literal. Keys passed as variables,
computed expressions or concatenations are not visible to this pass.
"""

import re
from typing import Pattern, Protocol, Set


DEFAULT_HOOK_NAME = "useReleaseToggle"


class KeyExtractor(Protocol):
    """Anything able to pull literal toggle keys out of a source file's text."""

    def extract_used_keys(self, text: str) -> Set[str]:
        ...


def build_toggle_call_pattern(hook_name: str = DEFAULT_HOOK_NAME) -> Pattern[str]:
    """Compile the call pattern for a hook name.

    Matches ``hook('key')``, ``hook("key")`` and ``hook(`key`)`` with optional
    whitespace around the parenthesis. Template literals containing ``${`` are
    not matched. Literal contents are captured verbatim.

    Args:
        hook_name: Identifier of the toggle hook.

    Returns:
        Compiled pattern; the key is in the ``single``, ``double`` or
        ``backtick`` named group.
    """
    return re.compile(
        r"(?<![\w$])"
        + re.escape(hook_name)
        + r"\s*\(\s*"
        r"(?:'(?P<single>[^'\n]+)'"
        r'|"(?P<double>[^"\n]+)"'
        r"|`(?P<backtick>(?:[^`$]|\$(?!\{))+)`)"
    )


class RegexKeyExtractor:
    """Pattern-based extractor for literal first arguments of the toggle hook."""

    def __init__(self, hook_name: str = DEFAULT_HOOK_NAME) -> None:
        self.hook_name = hook_name
        self._pattern = build_toggle_call_pattern(hook_name)

    def extract_used_keys(self, text: str) -> Set[str]:
        """Return the distinct literal keys passed to the hook in ``text``."""
        keys: Set[str] = set()
        for match in self._pattern.finditer(text):
            keys.add(match.group("single") or match.group("double") or match.group("backtick"))
        return keys


_default_extractor = RegexKeyExtractor()


def extract_used_keys(text: str) -> Set[str]:
    """Convenience wrapper using the default ``useReleaseToggle`` hook name."""
    return _default_extractor.extract_used_keys(text)
