"""Exceptions and error collection for xpath-plugins.

Predicates themselves never raise for problems in the configuration tree;
they resolve them to a safe default. The exceptions here cover the tooling
around them: looking up registered functions, building trees from path
specifications and loading tree files. The collector lets a tree file with
some malformed lines still load the lines that are valid.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class XPathPluginError(Exception):
    """Base class for xpath-plugins errors."""

    pass


class UnknownFunctionError(XPathPluginError, KeyError):
    """Raised when a custom function name is not registered."""

    def __str__(self) -> str:
        return f"Unknown custom function: {self.args[0]}"


class TreeSpecError(XPathPluginError, ValueError):
    """Raised when a tree path element cannot be parsed."""

    pass


class NodeNotFoundError(XPathPluginError, LookupError):
    """Raised when a path does not resolve to any node in a tree."""

    pass


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    WARNING = "warning"  # Reported, doesn't affect exit code
    ERROR = "error"  # Affects exit code


@dataclass
class PluginError:
    """Represents an error encountered while loading or evaluating.

    Attributes:
        source: Where the error occurred (e.g., "tree.cfg:12")
        message: Human-readable error message
        exception: The original exception that caused the error (if any)
        severity: Error severity level
    """

    source: str
    message: str
    exception: Exception | None = None
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __str__(self) -> str:
        """Format error for logging."""
        if self.exception:
            return f"[{self.source}] {self.message}: {self.exception}"
        return f"[{self.source}] {self.message}"


class ErrorCollector:
    """Collects errors for batch reporting.

    Loading continues past individual bad lines; everything collected is
    reported together at the end.
    """

    def __init__(self) -> None:
        """Initialize an empty error collector."""
        self.errors: list[PluginError] = []

    def add_error(
        self,
        source: str,
        message: str,
        exception: Exception | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> None:
        """Add an error to the collection.

        Args:
            source: Location where the error occurred
            message: Human-readable error message
            exception: Original exception that caused the error
            severity: Error severity level
        """
        error = PluginError(
            source=source,
            message=message,
            exception=exception,
            severity=severity,
        )
        self.errors.append(error)

        if severity == ErrorSeverity.WARNING:
            logger.warning("%s", error)
        else:
            logger.error("%s", error)

    def has_errors(self) -> bool:
        """Check if any ERROR-level errors have been collected."""
        return any(e.severity == ErrorSeverity.ERROR for e in self.errors)

    def has_warnings(self) -> bool:
        """Check if any warnings have been collected."""
        return any(e.severity == ErrorSeverity.WARNING for e in self.errors)

    def get_error_count(self) -> int:
        """Get count of ERROR-level errors."""
        return sum(1 for e in self.errors if e.severity == ErrorSeverity.ERROR)

    def get_warning_count(self) -> int:
        """Get count of WARNING-level errors."""
        return sum(1 for e in self.errors if e.severity == ErrorSeverity.WARNING)

    def log_summary(self) -> None:
        """Log a summary of all collected errors, grouped by source."""
        if not self.errors:
            logger.info("Completed with no errors")
            return

        error_count = self.get_error_count()
        warning_count = self.get_warning_count()

        logger.error("=" * 80)
        logger.error("ERROR SUMMARY")
        logger.error("=" * 80)

        if error_count > 0:
            logger.error("Total errors: %d", error_count)
        if warning_count > 0:
            logger.warning("Total warnings: %d", warning_count)

        errors_by_source: dict[str, list[PluginError]] = {}
        for error in self.errors:
            errors_by_source.setdefault(error.source, []).append(error)

        for source, source_errors in sorted(errors_by_source.items()):
            logger.error("")
            logger.error("Source: %s (%d issues)", source, len(source_errors))
            for error in source_errors:
                level_str = error.severity.value.upper()
                if error.exception:
                    logger.error("  [%s] %s: %s", level_str, error.message, error.exception)
                else:
                    logger.error("  [%s] %s", level_str, error.message)

        logger.error("=" * 80)
