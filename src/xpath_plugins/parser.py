"""Tree file parser.

Loads a configuration tree from a text file holding one path specification
per line (see xpath_plugins.tree for the element syntax). Elements are
separated by whitespace and may be quoted shell-style:

    # dataplane interfaces
    interfaces dataplane/tagnode+dp0xe20 speed+10g
    interfaces dataplane/tagnode+dp0xe21 disable%
    feature "intf-ref+dp0xe20.100"

A line repeating an earlier path adds nothing and is reported as a warning.
"""

import logging
import shlex
from pathlib import Path

from xpath_plugins.errors import ErrorCollector, ErrorSeverity, TreeSpecError
from xpath_plugins.tree import TreeNode, add_path

logger = logging.getLogger(__name__)


class TreeFileParser:
    """Parser for tree files.

    Reads path specifications line by line and adds them to a new tree.
    """

    def __init__(
        self,
        path: str | Path,
        error_collector: ErrorCollector | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            path: Path to the tree file
            error_collector: Optional error collector; if given, malformed lines
                             are recorded and skipped instead of raising, and
                             duplicate lines are recorded as warnings
        """
        self.path = Path(path)
        self.error_collector = error_collector

    def parse(self) -> TreeNode:
        """Parse the tree file.

        Returns:
            Root node of the loaded tree

        Raises:
            FileNotFoundError: If the tree file does not exist
            TreeSpecError: If a line is malformed and no error collector is set
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Tree file not found: {self.path}")

        root = TreeNode("")
        loaded = 0
        first_seen: dict[tuple[str, ...], int] = {}
        for line_number, line in enumerate(self.path.read_text().splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            try:
                elements = tuple(self._split_line(stripped))
                if elements in first_seen:
                    self._report_duplicate(line_number, first_seen[elements])
                    continue
                add_path(root, elements)
            except TreeSpecError as e:
                if self.error_collector is None:
                    raise TreeSpecError(f"{self.path}:{line_number}: {e}") from e
                self.error_collector.add_error(
                    source=f"{self.path.name}:{line_number}",
                    message="Skipping malformed path",
                    exception=e,
                )
                continue
            first_seen[elements] = line_number
            loaded += 1

        logger.debug("Loaded %d path(s) from %s", loaded, self.path)
        return root

    def _report_duplicate(self, line_number: int, first_line: int) -> None:
        """Report a line repeating an earlier path; it adds nothing to the tree."""
        message = f"Duplicate of line {first_line}, ignored"
        if self.error_collector is None:
            logger.warning("%s:%d: %s", self.path, line_number, message)
            return
        self.error_collector.add_error(
            source=f"{self.path.name}:{line_number}",
            message=message,
            severity=ErrorSeverity.WARNING,
        )

    def _split_line(self, line: str) -> list[str]:
        """Split a line into path elements.

        Raises:
            TreeSpecError: If quoting is unbalanced
        """
        try:
            return shlex.split(line)
        except ValueError as e:
            raise TreeSpecError(f"Invalid quoting: {e}") from e


def parse_tree_file(
    path: str | Path,
    error_collector: ErrorCollector | None = None,
) -> TreeNode:
    """Convenience function to load a tree file.

    Args:
        path: Path to the tree file
        error_collector: Optional error collector for graceful error handling

    Returns:
        Root node of the loaded tree
    """
    parser = TreeFileParser(path, error_collector=error_collector)
    return parser.parse()
