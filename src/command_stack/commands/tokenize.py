from __future__ import annotations

from typing import List


QUOTES = frozenset("\"'")


def tokenize_command(text: str) -> List[str]:
    """Split on whitespace; quote characters are dropped, not treated as grouping."""
    stripped = "".join(ch for ch in text if ch not in QUOTES)
    return stripped.split()


def command_identity(text: str) -> str:
    tokens = tokenize_command(text)
    return tokens[0] if tokens else ""
