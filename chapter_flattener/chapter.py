"""Chapter data model for the Chapter Flattener.

This module provides the ChapterNode structure used to represent one entry
of an audiobook chapter tree. A node keeps every key it was read with, so
fields this tool does not interpret survive a read/write round trip in
their original order.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Keys under which the cataloging tool nests sub-chapters
CHILD_KEYS = ("chapters", "children")

# Keys that make a node a standalone chapter
REQUIRED_CHAPTER_KEYS = ("lengthMs", "startOffsetMs", "title")

LEAF = "leaf"
CHAPTER_CONTAINER = "chapter-container"
CONTAINER = "container"


@dataclass
class ChapterNode:
    """One chapter (or chapter-like grouping) in a chapter tree.

    Attributes:
        fields: The node's own JSON fields in source order, without the
            nested child list
        children: Nested sub-chapters, empty for a leaf
    """
    fields: Dict[str, Any] = field(default_factory=dict)
    children: List["ChapterNode"] = field(default_factory=list)

    @property
    def title(self) -> Optional[str]:
        return self.fields.get("title")

    @property
    def length_ms(self) -> Optional[int]:
        return self.fields.get("lengthMs")

    @property
    def start_offset_ms(self) -> Optional[int]:
        return self.fields.get("startOffsetMs")

    @property
    def start_offset_sec(self) -> Optional[float]:
        return self.fields.get("startOffsetSec")

    @property
    def has_chapter_data(self) -> bool:
        """True when the node is a valid standalone chapter in its own right."""
        return all(self.fields.get(key) is not None for key in REQUIRED_CHAPTER_KEYS)

    @property
    def kind(self) -> str:
        """Classify the node as a leaf, a dual-role chapter container or a pure container."""
        if not self.children:
            return LEAF
        if self.has_chapter_data:
            return CHAPTER_CONTAINER
        return CONTAINER

    def without_children(self) -> "ChapterNode":
        """Return a copy of this node with its sub-chapters removed."""
        return ChapterNode(fields=dict(self.fields))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node back to its JSON object form.

        Children are written under the ``chapters`` key, which is what the
        cataloging tool produces. A leaf has no child key at all.
        """
        data = dict(self.fields)
        if self.children:
            data["chapters"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChapterNode":
        """Build a node (and its subtree) from a decoded JSON object.

        Args:
            data: Chapter object as decoded from the chapters file

        Returns:
            ChapterNode: The node with its children parsed recursively

        Raises:
            ValueError: If the node or its child list has the wrong JSON type
        """
        if not isinstance(data, dict):
            raise ValueError(f"chapter entry must be an object, got {type(data).__name__}")

        fields = {}
        raw_children: List[Any] = []
        for key, value in data.items():
            if key in CHILD_KEYS:
                if value is None:
                    continue
                if not isinstance(value, list):
                    raise ValueError(f"'{key}' of a chapter must be a list, got {type(value).__name__}")
                raw_children.extend(value)
            else:
                fields[key] = value

        return cls(
            fields=fields,
            children=[cls.from_dict(child) for child in raw_children]
        )


def chapters_from_list(data: List[Any]) -> List[ChapterNode]:
    """Parse a decoded ``chapters`` list into ChapterNode trees."""
    return [ChapterNode.from_dict(item) for item in data]


def chapters_to_list(chapters: List[ChapterNode]) -> List[Dict[str, Any]]:
    """Convert ChapterNode trees back to their JSON list form."""
    return [chapter.to_dict() for chapter in chapters]
