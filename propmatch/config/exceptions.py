"""Custom exceptions for configuration management."""

from pathlib import Path
from typing import List, Optional


class ConfigurationError(Exception):
    """Raised when the YAML file or environment variables are invalid.

    Collects every validation error found in one pass, plus suggestions, so
    the CLI can report them all at once.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        source: Optional[Path] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: Specific validation errors
            suggestions: Hints for fixing the errors
            source: Configuration file the errors refer to, if any
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        headline = self.message
        if self.source is not None:
            headline = f"{headline} ({self.source})"
        parts = [headline]

        if self.errors:
            parts.append("\nValidation Errors:")
            parts.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            parts.append("\nSuggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(parts)

    def __str__(self) -> str:
        return self._format_message()
