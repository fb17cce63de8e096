"""
Application entry point — wires dependencies and runs one generation.

Composition root: creates concrete adapters, injects them into the
pipeline, and runs the pipeline inside a LoggingExecutionContext.

This is the ONLY place where concrete classes are instantiated.
Everything else depends on Protocol interfaces.

Responsibilities:
  1. Parse command-line flags (click) on top of AppSettings
  2. Configure structlog for console logging on stderr
  3. Create concrete adapter instances
  4. Run the pipeline and map its outcome to an exit status
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import structlog
from pydantic import ValidationError
from railway import ErrorCode, FailureDescription, LoggingExecutionContext

from roots_gen import __version__
from roots_gen.adapters.go_source import GoSourceRenderer
from roots_gen.adapters.http_client import HttpTrustListFetcher
from roots_gen.adapters.pem_store import (
    PemFileStoreExporter,
    PemFingerprintIndexer,
    SecurityToolStoreExporter,
)
from roots_gen.adapters.trust_list_parser import HtmlTrustListParser
from roots_gen.adapters.writer import AtomicFileBundleWriter
from roots_gen.config import AppSettings
from roots_gen.domain.models import Bundle
from roots_gen.domain.ports import LocalStoreExporter
from roots_gen.pipeline import run_pipeline

EXIT_STATUS: dict[ErrorCode, int] = {
    ErrorCode.TRANSPORT_ERROR: 2,
    ErrorCode.STRUCTURAL_PARSE_ERROR: 3,
    ErrorCode.ROW_SHAPE_ERROR: 3,
    ErrorCode.LOCAL_EXPORT_ERROR: 4,
    ErrorCode.OUTPUT_WRITE_ERROR: 5,
}


def exit_status(code: ErrorCode) -> int:
    """Process exit status for a fatal error code (1 for anything unlisted)."""
    return EXIT_STATUS.get(code, 1)


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for human-readable console logging.

    Everything goes to stderr: the run's diagnostics are advisory and never
    mixed with anything a caller might capture from stdout.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def _create_exporter(pem_file: Path | None) -> LocalStoreExporter:
    if pem_file is not None:
        return PemFileStoreExporter(pem_file)
    return SecurityToolStoreExporter()


def _summarize_validation_error(error: ValidationError) -> str:
    """First settings error as `field: message`, with a count of any others."""
    first, *rest = error.errors()
    location = ".".join(str(part) for part in first["loc"])
    summary = " ".join(first["msg"].split())
    if location:
        summary = f"{location}: {summary}"
    if rest:
        summary += f" (+{len(rest)} more)"
    return summary


def _report_failure(error: FailureDescription) -> int:
    log = structlog.get_logger()
    log.error(
        "pipeline.failed",
        code=error.code.value,
        message=error.message,
        exception=repr(error.exception) if error.exception is not None else None,
    )
    click.echo(f"FATAL: {error.code.value}: {error.describe()}", err=True)
    return exit_status(error.code)


def _report_success(bundle: Bundle, output: Path) -> int:
    log = structlog.get_logger()
    log.info(
        "app.complete",
        output=str(output),
        certificates=len(bundle.certificates),
        unmatched=len(bundle.unmatched),
        excluded=bundle.excluded,
    )
    return 0


@click.command()
@click.version_option(version=__version__, prog_name="roots-gen")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File name to write (default: roots_list.go, or ROOTS_GEN_OUTPUT).",
)
@click.option(
    "--local-store",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read root certificates from this PEM bundle instead of the system keychain.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level).")
@click.pass_context
def cli(
    ctx: click.Context,
    output: Path | None,
    local_store: Path | None,
    verbose: bool,
) -> None:
    """Generate the embedded trusted-roots bundle for the mobile runtime.

    Downloads the vendor's list of currently trusted root certificates,
    matches it by SHA-256 fingerprint against the local system root store,
    keeps only allow-listed CA subjects, and writes the PEM bundle as
    generated Go source.
    """
    try:
        settings = AppSettings()
    except ValidationError as e:
        click.echo(
            f"FATAL: {ErrorCode.CONFIGURATION_ERROR.value}: {_summarize_validation_error(e)}",
            err=True,
        )
        ctx.exit(exit_status(ErrorCode.CONFIGURATION_ERROR))

    configure_structlog("DEBUG" if verbose else settings.log_level)
    log = structlog.get_logger()

    output_path = output if output is not None else settings.output
    pem_file = local_store if local_store is not None else settings.local_store.pem_file

    log.info(
        "app.starting",
        version=__version__,
        output=str(output_path),
        local_store=str(pem_file) if pem_file is not None else "system keychain",
    )

    context = LoggingExecutionContext(operation="RootsGeneration")
    result = context.execute(
        lambda: run_pipeline(
            fetcher=HttpTrustListFetcher(timeout=settings.http_timeout_seconds),
            parser=HtmlTrustListParser(),
            exporter=_create_exporter(pem_file),
            indexer=PemFingerprintIndexer(),
            renderer=GoSourceRenderer(output_name=str(output_path)),
            writer=AtomicFileBundleWriter(output_path),
        )
    )

    ctx.exit(
        result.either(
            on_success=lambda bundle: _report_success(bundle, output_path),
            on_failure=_report_failure,
        )
    )


def main() -> None:
    cli(prog_name="roots-gen")


if __name__ == "__main__":
    main()
