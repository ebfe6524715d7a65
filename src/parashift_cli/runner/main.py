"""
CLI main entry point.
"""

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..api_client import ParashiftClient, ParashiftError
from ..config import (
    ConfigError,
    create_default_config,
    default_config_path,
    list_profiles,
    resolve_profile,
)
from ..schemas import Resource, TextAttributes

logger = logging.getLogger(__name__)

VALUE_COLUMN_WIDTH = 30
TOKEN_COLUMNS = ("confidence", "top", "bottom", "left", "right")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _classification_scope(value: str) -> list[str]:
    """Parse a comma separated list of document types."""
    return [item.strip() for item in value.split(",") if item.strip()]


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="pp",
        description="Command-line client for the Parashift document-processing API",
    )

    parser.add_argument(
        "-p",
        "--profile",
        type=str,
        metavar="NAME",
        help="Profile to use (default: $PP_PROFILE or the profile marked default)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to profiles file (default: ~/.parashift/pp.yaml or $PP_CONFIG)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # images / file commands
    for name, help_text in (
        ("images", "Download the images of a document"),
        ("file", "Download the source file of a document"),
    ):
        download_parser = subparsers.add_parser(name, help=help_text)
        download_parser.add_argument(
            "-d",
            "--document-id",
            type=int,
            required=True,
            help="Id of the document",
        )
        download_parser.add_argument(
            "-o",
            "--output-dir",
            type=Path,
            default=Path("."),
            help="Directory to write files to (default: current directory)",
        )

    # tokens command
    tokens_parser = subparsers.add_parser("tokens", help="Print the OCR tokens of a document")
    tokens_parser.add_argument(
        "-d",
        "--document-id",
        type=int,
        required=True,
        help="Id of the document",
    )

    # upload command
    upload_parser = subparsers.add_parser("upload", help="Upload document")
    upload_parser.add_argument("file_path", type=Path, help="File path")
    upload_parser.add_argument(
        "-s",
        "--classification-scope",
        type=_classification_scope,
        default=None,
        help="Allowed document types, comma separated",
    )

    # document command
    document_parser = subparsers.add_parser("document", help="Work with documents")
    document_sub = document_parser.add_subparsers(dest="document_command")
    document_list = document_sub.add_parser("list", help="List documents")
    document_list.add_argument("document_ids", nargs="+", help="Document ids")

    # config command
    config_parser = subparsers.add_parser("config", help="Work with profiles")
    config_sub = config_parser.add_subparsers(dest="config_command")
    config_sub.add_parser("list", help="List configured profiles")
    init_parser = config_sub.add_parser("init", help="Write a template profiles file")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing profiles file",
    )

    return parser


def format_token_header() -> str:
    columns = " ".join(TOKEN_COLUMNS)
    return f"{'value':<{VALUE_COLUMN_WIDTH}} {columns}"


def format_token_row(token: Resource[TextAttributes]) -> str:
    """One table row; missing confidence shows as 0."""
    attrs = token.attributes
    confidence = attrs.confidence if attrs.confidence is not None else 0.0
    box = attrs.coordinates
    numbers = " ".join(
        f"{n:.8f}" for n in (confidence, box.top, box.bottom, box.left, box.right)
    )
    return f"{attrs.value:<{VALUE_COLUMN_WIDTH}} {numbers}"


def _client(parsed: argparse.Namespace) -> ParashiftClient:
    profile = resolve_profile(parsed.profile, parsed.config)
    logger.debug(f"Using profile '{profile.name}' ({profile.domain})")
    return ParashiftClient.from_profile(profile)


def _announce(path: Path) -> None:
    print(f"Downloading {path}")


def cmd_images(parsed: argparse.Namespace) -> int:
    """Download page images."""
    _client(parsed).get_images(parsed.document_id, parsed.output_dir, progress=_announce)
    return 0


def cmd_file(parsed: argparse.Namespace) -> int:
    """Download source files."""
    _client(parsed).get_source_files(parsed.document_id, parsed.output_dir, progress=_announce)
    return 0


def cmd_tokens(parsed: argparse.Namespace) -> int:
    """Print the OCR token table."""
    tokens = _client(parsed).get_tokens(parsed.document_id)
    print(format_token_header())
    for token in tokens:
        print(format_token_row(token))
    return 0


def cmd_upload(parsed: argparse.Namespace) -> int:
    """Upload a document."""
    document = _client(parsed).upload_document(parsed.file_path, parsed.classification_scope)
    print(f"Uploaded document {document.id} to tenant {document.attributes.tenant_id}.")
    return 0


def cmd_document_list(parsed: argparse.Namespace) -> int:
    """Print the id of every returned document."""
    for document in _client(parsed).list_documents(parsed.document_ids):
        print(document.id)
    return 0


def cmd_config_list(parsed: argparse.Namespace) -> int:
    """Print configured profiles."""
    for line in list_profiles(parsed.config):
        print(line)
    return 0


def cmd_config_init(parsed: argparse.Namespace) -> int:
    """Write the template profiles file."""
    path = parsed.config or default_config_path()
    create_default_config(path, force=parsed.force)
    print(f"Wrote {path}")
    return 0


def _dispatch(parser: argparse.ArgumentParser, parsed: argparse.Namespace) -> int:
    if parsed.command == "images":
        return cmd_images(parsed)
    elif parsed.command == "file":
        return cmd_file(parsed)
    elif parsed.command == "tokens":
        return cmd_tokens(parsed)
    elif parsed.command == "upload":
        return cmd_upload(parsed)
    elif parsed.command == "document" and parsed.document_command == "list":
        return cmd_document_list(parsed)
    elif parsed.command == "config" and parsed.config_command == "list":
        return cmd_config_list(parsed)
    elif parsed.command == "config" and parsed.config_command == "init":
        return cmd_config_init(parsed)
    else:
        parser.print_help()
        return 1


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    try:
        return _dispatch(parser, parsed)
    except (ConfigError, ParashiftError) as e:
        logger.debug("Command failed", exc_info=True)
        print(e)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
