"""Chapter tree flattening for the Chapter Flattener.

The cataloging tool writes chapters as a tree: a part can hold its own
chapters, which can hold sections, and so on. The audio splitter that
consumes these files only understands a flat list. This module turns the
tree into that list with a pre-order walk, parent before descendants.

A node that carries its own chapter data *and* has sub-chapters is emitted
once without its children, directly ahead of them. A node that only groups
sub-chapters contributes nothing of its own.
"""

from typing import Iterable, Iterator, List

from chapter_flattener.chapter import (
    ChapterNode,
    LEAF,
    CHAPTER_CONTAINER,
)


def flatten_chapters(chapters: Iterable[ChapterNode]) -> List[ChapterNode]:
    """Flatten a chapter tree into a single ordered list.

    Args:
        chapters: Top-level chapter nodes in document order

    Returns:
        New list of childless ChapterNode copies in pre-order. The input
        nodes are not modified.
    """
    return list(_walk(chapters))


def _walk(chapters: Iterable[ChapterNode]) -> Iterator[ChapterNode]:
    for node in chapters:
        kind = node.kind
        if kind == LEAF:
            # Incomplete leaves are passed through as they are
            yield node.without_children()
            continue
        if kind == CHAPTER_CONTAINER:
            yield node.without_children()
        yield from _walk(node.children)