from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from formfill.config.loader import ConfigError, load_config
from formfill.logging.init import enable_debug, log_summary, setup_logging
from formfill.models.config_models import ON_ERROR_CONTINUE, FillConfig
from formfill.services.orchestrator import ProcessingError, process_all
from formfill.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the optional YAML config, then apply command line overrides
- Fill one PDF per CSV row (or, with --inspect-data, only show what would be used)
- Print the SUMMARY line and map the outcome onto an exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    FORMFILL_TEMPLATE / FORMFILL_CSV / FORMFILL_OUTPUT_DIR from .env take
    precedence over the YAML config. Failure only prints a warning.
    """
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fill a PDF form template once per CSV row")
    p.add_argument("--config", help="YAML config file (default: config/fill.yml if present)")
    p.add_argument("--template", help="PDF form template")
    p.add_argument("--csv", help="CSV file with Field;Value;Field;Value rows")
    p.add_argument("--output-dir", help="Directory for generated PDFs")
    p.add_argument("--continue-on-error", action="store_true", help="Log failed rows and keep going")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print template fields & parsed rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: FillConfig) -> int:
    from formfill.csvfile.reader import CsvReadError, detect_delimiter, read_rows
    from formfill.pdf.form_filler import TemplateError, load_template, template_fields

    try:
        template = load_template(cfg.template_path)
        rows = read_rows(cfg.csv_path)
    except (TemplateError, CsvReadError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL

    fields = template_fields(template)
    print(f"TEMPLATE: {cfg.template_path} fields={len(fields)}")
    for name, kind in fields.items():
        print(f"  {name} ({kind.value})")

    print(f"CSV: {cfg.csv_path} delimiter='{detect_delimiter(cfg.csv_path)}' rows={len(rows)}")
    for row in rows[:3]:
        unknown = [n for n in row.values if n not in fields]
        print(f"  row {row.index}: {row.values}")
        if unknown:
            print(f"    not in template: {unknown}")
    return 0


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when called without arguments (tests pass []).
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()

    try:
        cfg = load_config(
            Path(args.config) if args.config else None,
            required=args.config is not None,
        )
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    cfg = cfg.with_overrides(
        template=args.template,
        csv_file=args.csv,
        output_dir=args.output_dir,
        on_error=ON_ERROR_CONTINUE if args.continue_on_error else None,
    )

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary adds the "SUMMARY " prefix itself
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_rows > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
