# src/main.py — v1
"""CLI entry point — ingest, run, status commands.

Usage:
    examingest ingest <file> --course <id> --kind exam|calendar [--answer-key <file>]
    examingest run <job_id>
    examingest status <job_id>
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from examingest.version import __version__

if TYPE_CHECKING:
    from examingest.api.models import JobStatusView
    from examingest.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from examingest.config.settings import load_settings

    settings = load_settings()
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="examingest",
        description=f"examingest v{__version__} — exam and course calendar ingestion",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- ingest ---
    p_ingest = subparsers.add_parser(
        "ingest", help="Upload a document, start a job and run it",
    )
    p_ingest.add_argument("file", type=Path, help="Exam PDF or calendar image")
    p_ingest.add_argument("--course", required=True, help="Course pack ID")
    p_ingest.add_argument(
        "--kind", choices=("exam", "calendar"), default="exam",
        help="Document kind (default: exam)",
    )
    p_ingest.add_argument(
        "--answer-key", type=Path, default=None,
        help="Graded answer-key PDF (exam documents only)",
    )
    p_ingest.add_argument(
        "--no-run", action="store_true",
        help="Only create the pending job",
    )
    p_ingest.set_defaults(func=_cmd_ingest)

    # --- run ---
    p_run = subparsers.add_parser("run", help="Run a pending job")
    p_run.add_argument("job_id", help="Job ID")
    p_run.set_defaults(func=_cmd_run)

    # --- status ---
    p_status = subparsers.add_parser("status", help="Show job status")
    p_status.add_argument("job_id", help="Job ID")
    p_status.add_argument(
        "--json", action="store_true", help="Print the status as JSON",
    )
    p_status.set_defaults(func=_cmd_status)

    return parser


async def _cmd_ingest(args: argparse.Namespace, settings: Settings) -> int:
    """Upload, start and (unless --no-run) run one job."""
    from examingest.api.facade import get_job_status, run_job, start_job, upload_document
    from examingest.storage.store_factory import create_object_store, create_repository

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1
    if args.answer_key is not None and args.kind != "exam":
        logger.error("--answer-key only applies to exam documents")
        return 1
    if args.answer_key is not None and not args.answer_key.is_file():
        logger.error("File not found: %s", args.answer_key)
        return 1

    repository = create_repository(settings)
    store = create_object_store(settings)
    try:
        document_ref = await upload_document(store, args.course, args.kind, file_path)
        answer_key_ref = None
        if args.answer_key is not None:
            answer_key_ref = await upload_document(store, args.course, "exam", args.answer_key)

        job_id = await start_job(
            repository, args.course, document_ref, args.kind,
            answer_key_ref=answer_key_ref, file_name=file_path.name,
        )
        print(f"Job created: {job_id}")
        if args.no_run:
            return 0

        status = await run_job(job_id, settings, repository=repository, object_store=store)
        _print_status(await get_job_status(repository, job_id))
        return 0 if status == "completed" else 2
    finally:
        repository.close()


async def _cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    """Run an existing pending job."""
    from examingest.api.facade import get_job_status, run_job
    from examingest.storage.store_factory import create_repository

    repository = create_repository(settings)
    try:
        status = await run_job(args.job_id, settings, repository=repository)
        _print_status(await get_job_status(repository, args.job_id))
        return 0 if status == "completed" else 2
    finally:
        repository.close()


async def _cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    """Display a job's status."""
    from examingest.api.facade import get_job_status
    from examingest.core.errors import JobNotFoundError
    from examingest.storage.store_factory import create_repository

    repository = create_repository(settings)
    try:
        view = await get_job_status(repository, args.job_id)
    except JobNotFoundError as exc:
        logger.error("%s", exc.message)
        return 1
    finally:
        repository.close()

    if args.json:
        print(view.model_dump_json(indent=2))
    else:
        _print_status(view)
    return 0


def _print_status(view: JobStatusView) -> None:
    """Print a human-readable summary of JobStatusView."""
    print(f"\nJob {view.job_id} ({view.kind}):")
    print(f"  Status:        {view.status}")
    print(f"  Step:          {view.step or '-'} ({view.progress_pct}%)")
    print(f"  Extracted:     {view.counts.extracted}")
    print(f"  Needs review:  {view.counts.pending_review}")
    if view.error_message:
        print(f"  Error:         {view.error_message}")


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from examingest.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
