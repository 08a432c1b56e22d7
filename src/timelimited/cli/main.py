"""
CLI for applying time limits to annotated source files.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

import click

from timelimited.config import Config, get_config, load_config_from_file
from timelimited.temporal.apply_time_limits import apply_time_limits, apply_time_limits_to_file
from timelimited.temporal.find_expiring_markers import find_expiring_markers, format_report
from timelimited.temporal.models import DiagnosticKind, TransformResult
from timelimited.util.datetime_utils import format_timestamp, parse_reference_instant, utc_now
from timelimited.util.file_utils import read_file_content, save_to_disk

logger = logging.getLogger('timelimited')

EXIT_CHANGES_FOUND = 1
EXIT_STRUCTURAL_ERROR = 2
EXIT_FILE_ERROR = 2


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure console logging for a CLI run."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # Log to stderr so rewritten text on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger


def _report_diagnostics(source_name: str, result: TransformResult) -> None:
    for diagnostic in result.diagnostics:
        if diagnostic.kind is DiagnosticKind.STRUCTURAL_ERROR:
            logger.error(f"{source_name}: {diagnostic} - file left unchanged")
        elif diagnostic.kind is DiagnosticKind.ATTRIBUTE_ERROR:
            logger.warning(f"{source_name}: {diagnostic}")
        else:
            logger.info(f"{source_name}: {diagnostic}")


def _load_config(config_file: Optional[str], overrides: dict) -> Config:
    if config_file:
        try:
            config = load_config_from_file(Path(config_file))
        except (FileNotFoundError, ValueError) as e:
            raise click.BadParameter(str(e), param_hint="--config")
    else:
        config = get_config()

    markers = replace(config.markers, **{key: value for key, value in overrides.items() if value is not None})
    config = Config(markers=markers, output=config.output)

    warnings = config.validate()
    if warnings:
        raise click.BadParameter(warnings[0])
    return config


@click.command()
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the result here instead of in place (single input only)")
@click.option("--now", "now", help="Reference instant, YYYY-MM-DD HH:MM:SS or ISO-8601 (default: current UTC time)")
@click.option("--delimiter-start", help="Opening comment delimiter (default: /*)")
@click.option("--delimiter-end", help="Closing comment delimiter (default: */)")
@click.option("--tag-name", help="Marker tag name (default: time-limited)")
@click.option("--time-offset", help="UTC offset the to=\"...\" timestamps are written in (default: +00:00)")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="YAML or JSON config file")
@click.option("--list", "list_expired", is_flag=True, help="List expired blocks instead of rewriting")
@click.option("--list-all", is_flag=True, help="List expired and pending blocks instead of rewriting")
@click.option("--check", is_flag=True, help="Exit with status 1 if any file would change; write nothing")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def clean(
    files: Tuple[str, ...],
    output: Optional[str],
    now: Optional[str],
    delimiter_start: Optional[str],
    delimiter_end: Optional[str],
    tag_name: Optional[str],
    time_offset: Optional[str],
    config_file: Optional[str],
    list_expired: bool,
    list_all: bool,
    check: bool,
    verbose: bool,
) -> None:
    """Remove or unwrap expired time-limited blocks in FILES (or stdin)."""
    if output and len(files) > 1:
        raise click.UsageError("--output can only be used with a single input file")

    config = _load_config(config_file, {
        "delimiter_start": delimiter_start,
        "delimiter_end": delimiter_end,
        "tag_name": tag_name,
        "time_offset": time_offset,
    })
    setup_logging(verbose or config.output.default_verbose)

    try:
        reference_instant = parse_reference_instant(now) if now else utc_now()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--now")

    logger.debug(f"Reference instant: {format_timestamp(reference_instant)}")
    logger.debug(str(config))

    encoding = config.output.encoding
    if files:
        sources = [(path, None) for path in files]
    else:
        # Read bytes so line endings reach the engine untranslated
        stdin = click.get_binary_stream("stdin")
        if stdin.isatty():
            raise click.UsageError("No input file or stdin. More information: --help")
        try:
            sources = [("<stdin>", stdin.read().decode(encoding))]
        except UnicodeDecodeError as e:
            raise click.ClickException(f"Cannot decode stdin as {encoding}: {e}")

    exit_code = 0
    if list_expired or list_all:
        for name, content in sources:
            if content is None:
                try:
                    content = read_file_content(name, encoding)
                except (IOError, FileNotFoundError) as e:
                    logger.error(str(e))
                    exit_code = EXIT_FILE_ERROR
                    continue
            reports, diagnostics = find_expiring_markers(
                content, reference_instant, config.markers, include_active=list_all
            )
            for diagnostic in diagnostics:
                logger.warning(f"{name}: {diagnostic}")
            click.echo(format_report(reports, name), nl=False)
        sys.exit(exit_code)

    for name, content in sources:
        try:
            if content is None:
                result = apply_time_limits_to_file(
                    name, reference_instant, output, config.markers, encoding, dry_run=check
                )
            else:
                result = apply_time_limits(content, reference_instant, config.markers)
                if check:
                    logger.debug(f"{name}: check only, nothing written")
                elif output:
                    save_to_disk(output, result.text, encoding)
                else:
                    stdout = click.get_binary_stream("stdout")
                    stdout.write(result.text.encode(encoding))
                    stdout.flush()
        except (IOError, FileNotFoundError) as e:
            logger.error(str(e))
            exit_code = EXIT_FILE_ERROR
            continue

        _report_diagnostics(name, result)
        if result.is_fatal:
            exit_code = EXIT_STRUCTURAL_ERROR
        elif check and result.changed:
            click.echo(f"{name} would change", err=True)
            exit_code = max(exit_code, EXIT_CHANGES_FOUND)
        elif result.changed:
            logger.debug(f"{name}: updated")

    sys.exit(exit_code)


def main() -> None:
    """Entry point for the CLI command."""
    clean()


if __name__ == "__main__":
    main()
