"""Main entry point for the rolewatch service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from rolewatch.adapters import suggest_companies, suggest_role_queries
from rolewatch.config.environment import EnvironmentConfig
from rolewatch.config.exceptions import ConfigurationError
from rolewatch.config.loader import load_config
from rolewatch.config.models import AppConfig
from rolewatch.logging import get_logger
from rolewatch.logging.config import configure_logging
from rolewatch.persistence.database import close_database, init_database
from rolewatch.persistence.store import StateStore
from rolewatch.pipeline import RefreshPipeline, RefreshRunResult
from rolewatch.scheduler import SchedulerService
from rolewatch.state import ActionRejectedError
from rolewatch.state.controller import WatchController
from rolewatch.summary import resolve_job_dates
from rolewatch.utils.timestamps import format_timestamp

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_controller(app_config: AppConfig) -> WatchController:
    """Wire store, pipeline and controller from configuration."""
    pipeline = RefreshPipeline(advanced_config=app_config.advanced)
    return WatchController(
        store=StateStore(),
        limits=app_config.limits,
        pipeline=pipeline,
        seed=app_config.profile,
    )


def format_run_summary(controller: WatchController, result: RefreshRunResult) -> str:
    """Human-readable report of a refresh: matches per company, tracked jobs, badge."""
    lines = [
        f"Refreshed {len(result.company_stats)} companies "
        f"({result.total_fetched} postings, {result.total_errors} errors)"
    ]

    for company in controller.companies:
        entry = controller.company_cache.get(company.id)
        if not company.is_fetchable:
            lines.append(f"  {company.name}: link only ({company.careers_url or 'no careers url'})")
        elif entry is None:
            lines.append(f"  {company.name}: not fetched yet")
        elif entry.error:
            lines.append(f"  {company.name}: error: {entry.error}")
        else:
            matches = controller.relevant_matches(company.id)
            lines.append(f"  {entry.company_name}: {len(matches)} relevant of {len(entry.jobs)} jobs")
            for relevant in matches:
                posted = format_timestamp(relevant.job.posted_at) or "undated"
                seen_at, freshness_at = resolve_job_dates(relevant.job)
                lines.append(
                    f"    - {relevant.job.title} [{relevant.job.location or 'n/a'}] "
                    f"{posted} score={relevant.match.score:.2f} ({relevant.match.query}) "
                    f"seen {format_timestamp(seen_at)}, updated {format_timestamp(freshness_at)}"
                )

    if controller.tracked_jobs:
        lines.append("Tracked jobs:")
        for tracked in controller.tracked_jobs:
            lines.append(f"  [{tracked.status}] {tracked.company_name}: {tracked.title}")

    summary = controller.match_summary()
    badge = controller.notification_count()
    lines.append(
        f"Relevant matches: {summary.total}"
        + (f", newest {format_timestamp(summary.newest_posted_at)}" if summary.newest_posted_at else "")
    )
    lines.append(f"Badge: {badge.label or '0'}")
    return "\n".join(lines)


def apply_cli_actions(controller: WatchController, args: argparse.Namespace) -> bool:
    """
    Apply the profile and tracking actions given on the command line.

    Companies are added with a verifying fetch, so a bad board is rejected
    before it is saved.

    Returns:
        True if any action was requested.

    Raises:
        ActionRejectedError: If an action fails validation
    """
    requested = False

    if args.set_queries:
        controller.set_role_queries(args.set_queries)
        print(f"Role queries: {', '.join(controller.role_queries)}")
        requested = True

    for value in args.add_company or ():
        controller.add_tracked_company(value, verify=True)
        print(f"Tracking company: {controller.companies[-1].name}")
        requested = True

    for company_id in args.remove_company or ():
        controller.remove_tracked_company(company_id)
        print(f"Stopped tracking company: {company_id}")
        requested = True

    for company_id, job_id in args.track_job or ():
        controller.add_tracked_job(company_id, job_id)
        print(f"Tracking job: {job_id}")
        requested = True

    for job_id in args.untrack_job or ():
        controller.remove_tracked_job(job_id)
        print(f"Stopped tracking job: {job_id}")
        requested = True

    return requested


def format_suggestions(text: str) -> str:
    """Directory companies and role templates matching a partial input."""
    lines = ["Companies:"]
    companies = suggest_companies(text)
    lines.extend(f"  {company.name} ({company.id})" for company in companies)
    if not companies:
        lines.append("  none")

    lines.append("Role queries:")
    roles = suggest_role_queries(text)
    lines.extend(f"  {role}" for role in roles)
    if not roles:
        lines.append("  none")
    return "\n".join(lines)


def main(argv=None) -> int:
    """
    Main entry point for rolewatch.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="rolewatch - watch company job boards for roles matching your queries"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single refresh, print a summary and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--set-queries",
        nargs="+",
        metavar="QUERY",
        help="Replace the role queries",
    )
    parser.add_argument(
        "--add-company",
        action="append",
        metavar="NAME_OR_URL",
        help="Track a company by directory name, board slug or board URL (repeatable)",
    )
    parser.add_argument(
        "--remove-company",
        action="append",
        metavar="COMPANY_ID",
        help="Stop tracking a company (repeatable)",
    )
    parser.add_argument(
        "--track-job",
        nargs=2,
        action="append",
        metavar=("COMPANY_ID", "JOB_ID"),
        help="Pin a fetched job so it is followed until it closes (repeatable)",
    )
    parser.add_argument(
        "--untrack-job",
        action="append",
        metavar="JOB_ID",
        help="Unpin a tracked job (repeatable)",
    )
    parser.add_argument(
        "--suggest",
        metavar="TEXT",
        default=None,
        help="Print directory companies and role queries matching TEXT and exit",
    )

    args = parser.parse_args(argv)

    if args.suggest is not None:
        print(format_suggestions(args.suggest))
        return 0

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "rolewatch starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "manual_run": args.manual_run,
            },
        )

        init_database(env_config.database_url)

        controller = build_controller(app_config)
        controller.load()

        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "company_count": len(controller.companies),
                "query_count": len(controller.role_queries),
                "scan_interval_seconds": app_config.scan_interval_seconds,
            },
        )

        if apply_cli_actions(controller, args) and not args.manual_run:
            close_database()
            return 0

        if args.manual_run:
            logger.info("Executing manual refresh", extra={"event": "service.manual_refresh.starting"})
            result = controller.refresh()
            print(format_run_summary(controller, result))

            logger.info(
                "Manual refresh completed",
                extra={
                    "event": "service.manual_refresh.completed",
                    "duration_seconds": result.total_duration_seconds,
                    "had_errors": result.had_errors,
                    "total_fetched": result.total_fetched,
                },
            )
            close_database()

            logger.info(
                "rolewatch stopped",
                extra={"event": "service.stopping", "uptime_seconds": round(time.time() - start_time, 2)},
            )
            return 1 if result.had_errors else 0

        shutdown_event = threading.Event()
        scheduler_service = SchedulerService(
            refresh_callable=controller.refresh,
            interval_seconds=app_config.scan_interval_seconds,
            shutdown_event=shutdown_event,
        )

        def signal_handler(signum, frame):
            logger.info(
                f"Received signal {signum}, shutting down",
                extra={"event": "service.signal_received", "signal": signum},
            )
            scheduler_service.shutdown(wait=False)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        scheduler_service.start()
        logger.info("Scheduler started. Press Ctrl+C to stop", extra={"event": "service.daemon_mode.started"})

        try:
            shutdown_event.wait()
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received, shutting down", extra={"event": "service.keyboard_interrupt"})
            scheduler_service.shutdown(wait=False)

        close_database()
        logger.info(
            "rolewatch stopped",
            extra={"event": "service.stopping", "uptime_seconds": round(time.time() - start_time, 2)},
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except ActionRejectedError as e:
        print(f"Rejected: {e.message}", file=sys.stderr)
        close_database()
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={"event": "service.startup.failed", "error_type": type(e).__name__, "error": str(e)},
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
