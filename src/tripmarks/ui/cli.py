from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from tripmarks.app import (
    add_image,
    add_text_input,
    create_project,
    process_project_images,
    process_project_text_inputs,
)
from tripmarks.config import configure_logging
from tripmarks.domain.model import ProcessingStatus, TextInputType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tripmarks.domain.extraction_pipeline import BatchSummary

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Collect travel places from screenshots and text")
    subparsers = parser.add_subparsers(dest="command", required=True)

    project = subparsers.add_parser("project", help="Project management commands")
    project_sub = project.add_subparsers(dest="project_command", required=True)
    project_create = project_sub.add_parser("create", help="Create a project")
    project_create.add_argument("--name", type=str, required=True, help="Project name")
    project_create.add_argument(
        "--destination",
        type=str,
        required=True,
        help="City or region the trip goes to",
    )
    project_create.add_argument("--country", type=str, help="Optional country of the destination")

    image = subparsers.add_parser("image", help="Image commands")
    image_sub = image.add_subparsers(dest="image_command", required=True)
    image_add = image_sub.add_parser("add", help="Register a screenshot URL")
    image_add.add_argument("--project-id", type=str, required=True)
    image_add.add_argument("--url", type=str, required=True, help="Publicly reachable image URL")

    text = subparsers.add_parser("text", help="Text input commands")
    text_sub = text.add_subparsers(dest="text_command", required=True)
    text_add = text_sub.add_parser("add", help="Register pasted text or a URL")
    text_add.add_argument("--project-id", type=str, required=True)
    text_add.add_argument("--content", type=str, required=True)
    text_add.add_argument(
        "--type",
        dest="input_type",
        choices=[choice.value for choice in TextInputType],
        default=TextInputType.TEXT.value,
    )
    text_add.add_argument(
        "--extracted-text",
        type=str,
        help="Page text already extracted for a URL input (skips crawling the page)",
    )

    process = subparsers.add_parser("process", help="Extract places from pending items")
    process.add_argument("kind", choices=["images", "text"])
    process.add_argument("--project-id", type=str, required=True)
    process.add_argument(
        "--retry",
        dest="retry_ids",
        action="append",
        default=[],
        metavar="ITEM_ID",
        help="Reset a failed item to pending before processing (repeatable)",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _log_summary(summary: BatchSummary) -> None:
    log.info(
        "%s: total=%s, processed=%s, failed=%s",
        summary.message,
        summary.total,
        summary.processed,
        summary.failed,
    )
    for outcome in summary.outcomes:
        if outcome.error_message:
            log.info("  %s %s: %s", outcome.item_id, outcome.status, outcome.error_message)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        project_id = _parse_uuid(parsed_args.project_id) if "project_id" in parsed_args else None
        retry_ids = [_parse_uuid(value) for value in getattr(parsed_args, "retry_ids", [])]
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "project" and parsed_args.project_command == "create":
            project = create_project(
                name=parsed_args.name,
                destination=parsed_args.destination,
                country=parsed_args.country,
            )
            log.info("Created project %s", project.id)
        elif parsed_args.command == "image" and project_id is not None:
            image = add_image(project_id=project_id, url=parsed_args.url)
            log.info("Added image %s", image.id)
        elif parsed_args.command == "text" and project_id is not None:
            text_input = add_text_input(
                project_id=project_id,
                content=parsed_args.content,
                input_type=TextInputType(parsed_args.input_type),
                extracted_text=parsed_args.extracted_text,
            )
            log.info("Added text input %s", text_input.id)
            if text_input.status is ProcessingStatus.FAILED:
                log.warning("Text input %s failed: %s", text_input.id, text_input.error_message)
        elif parsed_args.command == "process" and project_id is not None:
            processor = (
                process_project_images
                if parsed_args.kind == "images"
                else process_project_text_inputs
            )
            _log_summary(processor(project_id, retry_item_ids=retry_ids))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
