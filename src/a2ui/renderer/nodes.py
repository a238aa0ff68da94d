"""Neutral render output."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RenderNode:
    """One rendered component with resolved props and rendered children."""

    kind: str
    component_id: str | None
    props: dict[str, Any] = field(default_factory=dict)
    children: list["RenderNode"] = field(default_factory=list)
    slot: str | None = None
    fallback: bool = False

    def walk(self) -> Iterator["RenderNode"]:
        """Depth-first, pre-order traversal including this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, component_id: str) -> "RenderNode | None":
        return next((node for node in self.walk() if node.component_id == component_id), None)

    def fallbacks(self) -> list["RenderNode"]:
        return [node for node in self.walk() if node.fallback]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind, "componentId": self.component_id, "props": self.props}
        if self.slot is not None:
            data["slot"] = self.slot
        if self.fallback:
            data["fallback"] = True
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
