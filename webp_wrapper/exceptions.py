"""Exception classes for the WebP tool wrapper."""

from typing import Any, Dict, Optional


class WebpWrapperError(Exception):
    """Base exception for all wrapper errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Error message
            error_code: Error category code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ExecutableNotFoundError(WebpWrapperError, FileNotFoundError):
    """Raised when the command-line tool cannot be located."""

    def __init__(self, filename: str):
        super().__init__(
            f"Cannot find the file {filename}.",
            error_code="not_found",
            details={"filename": filename},
        )
        self.filename = filename


class UnsupportedPlatformError(WebpWrapperError):
    """Raised when running on a platform without a known tool layout."""

    def __init__(self, platform_name: str):
        super().__init__(
            f"Platform '{platform_name}' is not supported",
            error_code="platform",
            details={"platform": platform_name},
        )


class ToolExecutionError(WebpWrapperError):
    """Raised when the tool exits with a non-zero status."""

    def __init__(self, tool: str, returncode: int):
        super().__init__(
            f"External tool exited with status {returncode}",
            error_code="execution",
            details={"tool": tool, "returncode": returncode},
        )
        self.returncode = returncode
