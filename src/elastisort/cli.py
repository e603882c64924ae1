"""Command Line Interface for sort documents.

This module provides a CLI for checking and normalizing sort clauses before
they are embedded in search requests. Input is one sort document or a list of
them, in any of the forms the search backend accepts.

The CLI supports the following commands:
    - render: Parse the sort clauses and print the canonical sort section
    - validate: Check every sort clause against the sort document schemas

JSON input can be provided either as a direct string or as a file path prefixed with '@'.
Relative file paths are resolved against the current directory.

Example Usage:
    python -m elastisort render '[{"price": "desc"}, "_score"]'
    python -m elastisort validate @sorts.json
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, List, Optional

from elastisort.core.exceptions import QueryError, ValidationError
from elastisort.search.query import SearchSource, parse_sort
from elastisort.utils.validation import SortSchemaValidator

logger = logging.getLogger(__name__)


def parse_json_input(json_str: str) -> Any:
    """Parse JSON input from either a string or file.

    Args:
        json_str (str): Either a JSON string or a file path prefixed with '@'.

    Returns:
        Parsed JSON data.

    Raises:
        ValueError: If the JSON is invalid or the specified file is not found.
    """
    if json_str.startswith("@"):
        file_path = json_str[1:]
        if not os.path.isabs(file_path):
            file_path = os.path.join(os.getcwd(), file_path)

        if not os.path.exists(file_path):
            raise ValueError(f"File not found: {file_path}")

        with open(file_path, "r") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {file_path}: {e}")

    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON input: {e}")


def as_sort_list(data: Any) -> List[Any]:
    """Accept a single sort clause, a list of them, or a {"sort": [...]} body."""
    if isinstance(data, dict) and set(data) == {"sort"}:
        data = data["sort"]
    if not isinstance(data, list):
        data = [data]
    return data


def render(data: Any, indent: Optional[int] = None) -> str:
    """Parse sort clauses and return the canonical JSON of the sort section.

    Raises:
        ValidationError: If a clause cannot be parsed.
        EncodingError: If a parsed clause cannot be encoded.
    """
    search_source = SearchSource().sort_by(*(parse_sort(item) for item in as_sort_list(data)))
    return search_source.to_json(indent=indent)


def validate(data: Any) -> bool:
    """Validate sort clauses and print one line per problem.

    Returns:
        bool: True if every clause is valid.
    """
    validator = SortSchemaValidator()
    all_valid = True
    for position, item in enumerate(as_sort_list(data)):
        result = validator.validate(item)
        key = (result.context or {}).get("sort_key", "?")
        status = "ok" if result.is_valid else "invalid"
        print(f"[{position}] {key}: {status}")
        for error in result.errors:
            print(f"  error: {error}")
        for warning in result.warnings:
            print(f"  warning: {warning}")
        all_valid = all_valid and result.is_valid
    return all_valid


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(description="Sort clause CLI")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    render_cmd = subparsers.add_parser("render", help="Print the canonical sort section")
    render_cmd.add_argument("data", help="JSON string or @filename containing sort clauses")
    render_cmd.add_argument("--indent", type=int, default=None, help="Indent the output")

    validate_cmd = subparsers.add_parser("validate", help="Validate sort clauses")
    validate_cmd.add_argument("data", help="JSON string or @filename containing sort clauses")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Returns:
        int: Process exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        data = parse_json_input(args.data)
        if args.command == "render":
            print(render(data, indent=args.indent))
            return 0
        return 0 if validate(data) else 1
    except (ValueError, ValidationError, QueryError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
