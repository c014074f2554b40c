"""Command-line evaluation of custom XPath functions.

Loads a configuration tree from a tree file, then evaluates one registered
function on the node at a given path. Useful for checking how a predicate
treats a configuration without running the full evaluation engine.

Usage:
    python -m xpath_plugins tree_file function path [number ...]
    python -m xpath_plugins --list

Examples:
    python -m xpath_plugins tree.cfg is-interface-leafref /feature/intf-ref
    python -m xpath_plugins tree.cfg verify-siad-link-speed /interfaces/dataplane/speed 20 23
"""

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError

from xpath_plugins.errors import ErrorCollector, NodeNotFoundError, UnknownFunctionError
from xpath_plugins.models import DatumType, EvaluationRequest
from xpath_plugins.parser import parse_tree_file
from xpath_plugins.plugins import REGISTRATION_DATA, call_function, get_function_info
from xpath_plugins.tree import find_first_node

logger = logging.getLogger(__name__)

# Exit codes
EXIT_TRUE = 0
EXIT_FALSE = 1  # Predicate returned false (or 0)
EXIT_ERROR = 2


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: If True, use DEBUG level. Otherwise, use INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_result(result: Any) -> str:
    """Format a function result the way XPath would print it."""
    if isinstance(result, bool):
        return "true" if result else "false"
    return f"{result:g}"


def list_functions() -> None:
    """Print every registered function with its signature and default."""
    for info in REGISTRATION_DATA:
        print(f"{info.signature()}  [default: {format_result(info.default)}]")


def evaluate(tree_file: str, function: str, path: str, numbers: list[float]) -> int:
    """Evaluate a registered function on one node of a tree file.

    Malformed lines in the tree file are reported and skipped; the function
    is still evaluated on the rest of the tree.

    Args:
        tree_file: Path to the tree file
        function: Registered function name
        path: Absolute path of the node to pass as the nodeset argument
        numbers: Leading numeric arguments

    Returns:
        Exit code (0 if the result is true or non-zero, 1 if false or zero,
        2 on errors).
    """
    error_collector = ErrorCollector()

    try:
        request = EvaluationRequest(function=function, path=path, numbers=numbers)
    except ValidationError as e:
        logger.error("Invalid request: %s", e)
        return EXIT_ERROR

    try:
        info = get_function_info(request.function)
    except UnknownFunctionError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    expected_numbers = sum(1 for arg in info.args if arg == DatumType.NUMBER)
    if len(request.numbers) != expected_numbers:
        logger.error(
            "%s takes %d numeric argument(s), got %d",
            info.signature(),
            expected_numbers,
            len(request.numbers),
        )
        return EXIT_ERROR

    try:
        logger.info("Loading tree from %s", tree_file)
        root = parse_tree_file(tree_file, error_collector=error_collector)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    try:
        node = find_first_node(root, request.path)
    except NodeNotFoundError as e:
        logger.error("%s", e)
        error_collector.log_summary()
        return EXIT_ERROR

    result = call_function(info.name, *request.numbers, [node])
    logger.info("%s on %s returned %s", info.name, request.path, format_result(result))
    print(format_result(result))

    if error_collector.has_errors() or error_collector.has_warnings():
        error_collector.log_summary()

    return EXIT_TRUE if result else EXIT_FALSE


def main() -> int:
    """Main entry point.

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        description="Evaluate a custom XPath function against a configuration tree",
        prog="python -m xpath_plugins",
    )
    parser.add_argument("tree_file", nargs="?", help="Path to the tree file")
    parser.add_argument("function", nargs="?", help="Registered function name")
    parser.add_argument("path", nargs="?", help="Absolute path of the node to evaluate on")
    parser.add_argument(
        "numbers",
        nargs="*",
        type=float,
        help="Leading numeric arguments (e.g., interface range start and end)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List registered functions and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    args = parser.parse_args()

    setup_logging(verbose=args.verbose)

    if args.list:
        list_functions()
        return EXIT_TRUE

    if not (args.tree_file and args.function and args.path):
        parser.error("tree_file, function and path are required unless --list is given")

    return evaluate(
        tree_file=args.tree_file,
        function=args.function,
        path=args.path,
        numbers=args.numbers,
    )


if __name__ == "__main__":
    sys.exit(main())
