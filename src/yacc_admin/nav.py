"""Relative URL construction for host navigation targets."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NavBuilder:
    """Immutable builder; each step returns a new builder."""

    base_url: str = ""
    path: str = ""

    def addons(self) -> "NavBuilder":
        return NavBuilder(self.base_url, "/plugins/servlet/upm")

    def build_relative(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.path}" or "/"


__all__ = ["NavBuilder"]
