from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from issue_sync.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, with_mock_answer
from issue_sync.logging.init import log_summary, set_debug, setup_logging
from issue_sync.logging.trace_log import TraceLogBuffer
from issue_sync.models.config_models import SyncConfig
from issue_sync.models.sync_result import BatchOutcome
from issue_sync.models.trace_event import TraceObserver
from issue_sync.services.github_client import GitHubIssueClient
from issue_sync.services.notifier import NotificationDispatcher, SmtpTransport
from issue_sync.services.orchestrator import BatchDriver, SyncError
from issue_sync.services.reconciler import RowReconciler
from issue_sync.services.summary import render_alert_text, render_summary_line
from issue_sync.sheet.context import ContextError
from issue_sync.sheet.reader import WorkbookContextProvider, preview_sheet

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment: GITHUB_TOKEN, SMTP_*)
- Load config (config/sync.yml or --config)
- Run one batch over the sheet (or a single row with --row)
- Log the SUMMARY line

Exit codes: 0 on a completed run, 1 on configuration / sheet errors.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; failures only warn."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sync planning sheet rows with GitHub issue state")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--mock", action="store_true", help="Do not call GitHub; treat every valid issue as closed")
    p.add_argument("--trace", action="store_true", help="Write the per-row trace to logs/trace-*.log")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet header & first rows then exit")
    p.add_argument("--row", type=int, default=None, help="Sync only this 1-based sheet row")
    return p.parse_args(argv)


def _inspect_data(cfg: SyncConfig) -> int:
    path = Path(cfg.workbook_path)
    try:
        df = preview_sheet(path, cfg.sheet_name)
    except ContextError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name}")
    print(f"  SHEET: {cfg.sheet_name} cols={[str(c) for c in df.columns]}")
    # datetime 含む場合に備えて文字列化
    sample_rows = [{str(k): str(v) for k, v in r.items()} for r in df.to_dict(orient="records")]
    print("    sample_rows=", sample_rows)
    return EXIT_SUCCESS


def _report_outcome(outcome: BatchOutcome) -> None:
    summary_line = render_summary_line(outcome)
    log_summary(summary_line[len("SUMMARY "):])
    if sys.stdout.isatty():
        print("Sync Completed\n" + render_alert_text(outcome))


def build_driver(cfg: SyncConfig, observer: TraceObserver | None = None) -> BatchDriver:
    client = GitHubIssueClient(cfg.github)
    dispatcher = NotificationDispatcher(SmtpTransport(cfg.smtp)) if cfg.email_notifications_enabled else None
    reconciler = RowReconciler(cfg, client, dispatcher, observer=observer)
    return BatchDriver(cfg, WorkbookContextProvider(cfg), reconciler, reporter=_report_outcome)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.mock:
        cfg = with_mock_answer(cfg)

    if args.inspect_data:
        return _inspect_data(cfg)

    trace_buffer = TraceLogBuffer() if args.trace else None
    driver = build_driver(cfg, observer=trace_buffer)

    try:
        if args.row is not None:
            driver.run_single_row(args.row)
        else:
            driver.run_batch()
    except (ContextError, SyncError) as e:
        logger.error(f"sync: {e}")
        return EXIT_FATAL
    finally:
        driver.reconciler.client.close()
        if trace_buffer is not None:
            logger.info(f"trace written to {trace_buffer.flush()}")

    return EXIT_SUCCESS
