"""
Command spec model — package-manager variants of one install command.

A posix command string may carry several alternatives, one per package
manager::

    pacman: sudo pacman -S git | apt: sudo apt install -y git | brew: brew install git

A segment only starts a new variant when it begins with ``tag:`` where
the tag is a single token. Untagged segments after the first variant are
shell pipes inside the previous command and are glued back onto it, so
``apt: curl -fsSL URL | sh`` survives intact.

A string whose first segment is untagged is a plain command and is used
verbatim for every package manager.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

# tag: rest, where the tag is one token (letters, digits, _ . + -)
_VARIANT_RE = re.compile(r"^\s*([A-Za-z0-9_.+-]+)\s*:(.*)$", re.DOTALL)


class CommandVariant(BaseModel):
    """One ``tag: command`` alternative."""

    tag: str
    command: str


class CommandSpec(BaseModel):
    """Parsed form of a raw platform command string."""

    raw: str
    variants: list[CommandVariant] = Field(default_factory=list)

    @classmethod
    def parse(cls, raw: str) -> CommandSpec:
        """Parse a raw command string into its variants.

        Never fails: anything that is not a variant list is a plain
        command with no variants.
        """
        segments = raw.split("|")
        if _VARIANT_RE.match(segments[0]) is None:
            return cls(raw=raw)

        pieces: list[list[str]] = []
        for segment in segments:
            match = _VARIANT_RE.match(segment)
            if match:
                pieces.append([match.group(1), match.group(2)])
            else:
                # pipe inside the previous variant's command
                pieces[-1][1] += "|" + segment

        return cls(
            raw=raw,
            variants=[
                CommandVariant(tag=tag, command=command.strip())
                for tag, command in pieces
            ],
        )

    @property
    def is_plain(self) -> bool:
        """True when the string carries no ``tag:`` variants."""
        return not self.variants

    @property
    def tags(self) -> list[str]:
        return [v.tag for v in self.variants]

    def variant_for(self, package_manager: str | None) -> str | None:
        """Return the command of the first variant tagged ``package_manager``."""
        if not package_manager:
            return None
        for variant in self.variants:
            if variant.tag == package_manager:
                return variant.command
        return None
