"""Chapters document model for the Chapter Flattener.

A chapters file is a JSON object of the form::

    {
      "contentMetadata": {
        "chapterInfo": {
          "brandIntroDurationMs": ...,
          "brandOutroDurationMs": ...,
          "chapters": [ ... ],
          "isAccurate": ...,
          "runtimeLengthMs": ...,
          "runtimeLengthSec": ...
        },
        "contentReference": { ... },
        "lastPositionHeard": { ... }
      },
      "responseGroups": [ ... ]
    }

Only ``chapters`` is interpreted. Everything else is kept as decoded and
written back unchanged.
"""

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from chapter_flattener.chapter import ChapterNode, chapters_from_list, chapters_to_list
from chapter_flattener.errors import FileSystemError, ParseError
from chapter_flattener.flattener import flatten_chapters


@dataclass
class ChaptersDocument:
    """A whole chapters file.

    Attributes:
        data: The decoded JSON payload, kept whole so that pass-through
            fields survive untouched
    """
    data: Dict[str, Any]

    @property
    def chapter_info(self) -> Dict[str, Any]:
        return self.data["contentMetadata"]["chapterInfo"]

    @property
    def chapters(self) -> List[ChapterNode]:
        """Parse the chapter tree held by this document."""
        return chapters_from_list(self.chapter_info["chapters"])

    def with_chapters(self, chapters: List[ChapterNode]) -> "ChaptersDocument":
        """Return a copy of the document with only the chapter list replaced."""
        data = copy.deepcopy(self.data)
        data["contentMetadata"]["chapterInfo"]["chapters"] = chapters_to_list(chapters)
        return ChaptersDocument(data=data)

    def flattened(self) -> "ChaptersDocument":
        """Return a copy of the document with its chapter tree flattened."""
        return self.with_chapters(flatten_chapters(self.chapters))

    def to_json(self) -> str:
        """Serialize the document as pretty-printed JSON."""
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    def to_file(self, path: str) -> None:
        """Write the document to a JSON file, replacing any existing content.

        Args:
            path: Path where the document should be written

        Raises:
            FileSystemError: If the file cannot be written
        """
        output_path = Path(path)
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(self.to_json())
        except OSError as e:
            raise FileSystemError(
                "Failed to write chapters file",
                context={
                    "file_path": str(output_path),
                    "operation": "write",
                    "cause": str(e)
                }
            )

    @classmethod
    def from_json(cls, text: str, source: str = "<string>") -> "ChaptersDocument":
        """Parse a chapters document from JSON text.

        Args:
            text: JSON content
            source: Name used in error messages

        Returns:
            ChaptersDocument: Parsed document

        Raises:
            ParseError: If the text is not valid JSON or has no chapter list
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                "Chapters file is not valid JSON",
                context={
                    "file_path": source,
                    "operation": "parse",
                    "cause": str(e)
                }
            )

        document = cls(data=data)
        document.validate(source)
        return document

    @classmethod
    def from_file(cls, path: str) -> "ChaptersDocument":
        """Load a chapters document from a JSON file.

        Args:
            path: Path to the chapters file

        Returns:
            ChaptersDocument: Loaded document

        Raises:
            FileSystemError: If the file cannot be read
            ParseError: If the content is not a valid chapters document
        """
        input_path = Path(path)
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileSystemError(
                "Failed to read chapters file",
                context={
                    "file_path": str(input_path),
                    "operation": "read",
                    "cause": str(e)
                }
            )

        return cls.from_json(text, source=str(input_path))

    def validate(self, source: str = "<string>") -> None:
        """Check that the chapter list can be located and parsed.

        Raises:
            ParseError: If the structure needed to flatten is missing
        """
        def fail(cause: str) -> ParseError:
            return ParseError(
                "Chapters file has an unexpected structure",
                context={
                    "file_path": source,
                    "operation": "parse",
                    "cause": cause
                }
            )

        if not isinstance(self.data, dict):
            raise fail("top-level value must be an object")

        node = self.data
        for key in ("contentMetadata", "chapterInfo"):
            node = node.get(key)
            if not isinstance(node, dict):
                raise fail(f"missing '{key}' object")

        if not isinstance(node.get("chapters"), list):
            raise fail("missing 'chapters' list in contentMetadata.chapterInfo")

        try:
            chapters_from_list(node["chapters"])
        except ValueError as e:
            raise fail(str(e))
