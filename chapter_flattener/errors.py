"""
Custom exception classes and error formatting for the Chapter Flattener.

This module provides structured error handling with contextual information
so that a failure on one chapters file can be reported with the file name,
the step that failed and the underlying cause.
"""

from typing import Optional, Dict, Any


class ChapterFlattenerError(Exception):
    """Base exception class for all Chapter Flattener errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """
        Initialize the error with a message and optional context.

        Args:
            message: Human-readable error description
            context: Additional contextual information (file path, operation, cause)
        """
        self.message = message
        self.context = context or {}
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with context information."""
        return format_error_message(self.message, self.context)


class FileSystemError(ChapterFlattenerError):
    """
    Exception raised for file system related errors.

    Examples:
        - Chapters file or backup file not readable
        - Permission denied writing the backup or the flattened file
        - Disk full
        - Backup file cannot be deleted after a restore
    """
    pass


class ParseError(ChapterFlattenerError):
    """
    Exception raised when a chapters file cannot be interpreted.

    Examples:
        - Content is not valid JSON
        - Top-level value is not an object
        - contentMetadata.chapterInfo.chapters is missing or not a list
    """
    pass


def format_error_message(message: str, context: Dict[str, Any]) -> str:
    """
    Format an error message with contextual information.

    Args:
        message: The main error message
        context: Dictionary containing contextual information
            - file_path: Path to the file involved in the error
            - operation: Name of the operation that failed
            - cause: Original error message from the failing call
            - Any other relevant key-value pairs

    Returns:
        Formatted error message string with context

    Example:
        >>> format_error_message(
        ...     "Backup failed",
        ...     {"file_path": "book-chapters.json", "operation": "backup", "cause": "Permission denied"}
        ... )
        'Error: Backup failed\\n  File: book-chapters.json\\n  Operation: backup\\n  Cause: Permission denied'
    """
    lines = [f"Error: {message}"]

    if "file_path" in context:
        lines.append(f"  File: {context['file_path']}")

    if "operation" in context:
        lines.append(f"  Operation: {context['operation']}")

    if "cause" in context:
        lines.append(f"  Cause: {context['cause']}")

    # Add any other context information
    for key, value in context.items():
        if key not in ["file_path", "operation", "cause"]:
            # Format key as title case with spaces
            formatted_key = key.replace("_", " ").title()
            lines.append(f"  {formatted_key}: {value}")

    return "\n".join(lines)
