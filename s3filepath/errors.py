"""Structured exception hierarchy for s3filepath.

Provides specific exception types for the failure modes of path
resolution, with context for debugging and troubleshooting.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "S3FilePathError",
    "S3FileNotFoundError",
    "ConfigurationError",
]


class S3FilePathError(Exception):
    """Base exception for all s3filepath errors."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion

        parts = [message]
        if details:
            parts.append("\nDetails:")
            parts.extend(f"  {k}: {v}" for k, v in details.items())
        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class S3FileNotFoundError(S3FilePathError):
    """No candidate export object exists for a bucket/schema/table/date.

    Raised by the resolver after every candidate suffix was probed.
    """

    def __init__(
        self,
        *,
        bucket: str,
        schema: str,
        table: str,
        date: str,
        **kwargs: Any,
    ) -> None:
        self.bucket = bucket
        self.schema = schema
        self.table = table
        self.date = date

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Check that the export for this date has completed and that "
                "the credentials can read the bucket."
            )

        super().__init__(
            f"s3 file not found at: bucket: {bucket} schema: {schema}, "
            f"table: {table} date: {date}",
            details={
                "bucket": bucket,
                "schema": schema,
                "table": table,
                "date": date,
            },
            suggestion=suggestion,
            **kwargs,
        )


class ConfigurationError(S3FilePathError):
    """Invalid or incomplete bucket configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details=details, **kwargs)
