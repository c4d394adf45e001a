"""Entry-name matching.

A pattern without ``+`` is a case-insensitive exact match. A pattern with
``+`` is split into tokens that must appear in order: the first token may
start anywhere in the name, each following token must start right after
the previous one, where a run of the previous token's last character is
absorbed in between (``lost+file`` matches ``lostttfile`` but not
``lost_file``).
"""

from __future__ import annotations

from dataclasses import dataclass

from fsearch.constants import TOKEN_SEPARATOR


@dataclass(frozen=True, slots=True)
class NamePattern:
    """A lowercased name pattern; empty means no name constraint."""

    text: str = ""

    @classmethod
    def parse(cls, raw: str | None) -> NamePattern:
        return cls(text=(raw or "").lower())

    @property
    def token_mode(self) -> bool:
        return TOKEN_SEPARATOR in self.text

    @property
    def configured(self) -> bool:
        return bool(self.text)

    def matches(self, entry_name: str) -> bool:
        return matches(self.text, self.token_mode, entry_name)


def matches(pattern: str, token_mode: bool, entry_name: str) -> bool:  # noqa: FBT001
    """Return True if ``entry_name`` satisfies ``pattern``."""
    if not pattern:
        return True
    name = entry_name.lower()
    if not token_mode:
        return name == pattern
    return _match_tokens(pattern.split(TOKEN_SEPARATOR), name)


def _match_tokens(tokens: list[str], name: str) -> bool:
    # An empty token (leading, trailing or doubled "+") never matches.
    if any(not token for token in tokens):
        return False

    offset = name.find(tokens[0])
    if offset < 0:
        return False

    for token in tokens:
        if not name.startswith(token, offset):
            return False
        offset += len(token) - 1
        boundary = name[offset]
        while offset < len(name) and name[offset] == boundary:
            offset += 1
    return True


__all__ = ["NamePattern", "matches"]
