#!/usr/bin/env python3
"""
Parstock management CLI.

Usage:
    python manage.py migrate              Apply pending database migrations
    python manage.py status               Show applied/pending migrations
    python manage.py serve                Start the API server
    python manage.py suggest VENUE        Print suggested orders for a venue
    python manage.py variance VENUE       Print the stock variance report
"""

import argparse
import asyncio
import json
import sys

from parstock.config import configure_logging, get_settings


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply every pending migration."""
    from parstock.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version} {result.name}: {state}")
    if not all(r.success for r in results):
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    """Show migration status of the configured database."""
    from parstock.infrastructure.storage.sqlite.migrations.migrator import get_migration_status

    status = asyncio.run(get_migration_status())
    print(f"Database: {get_settings().storage.db_path}")
    if not status.exists:
        print("  not created yet, run 'migrate'")
    print(f"  applied: {', '.join(status.applied) or '-'}")
    print(f"  pending: {', '.join(status.pending) or '-'}")
    if status.drifted:
        print(f"  changed since applied: {', '.join(status.drifted)}")
    if status.missing_tables:
        print(f"  missing tables: {', '.join(status.missing_tables)}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "parstock.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


async def _suggest(args: argparse.Namespace) -> dict:
    from parstock.application.dto.requests import BuildSuggestedOrdersRequest
    from parstock.application.use_cases import BuildSuggestedOrdersUseCase
    from parstock.infrastructure.storage.sqlite import close_pool

    use_case = BuildSuggestedOrdersUseCase()
    try:
        plan = await use_case.execute(
            BuildSuggestedOrdersRequest(
                venue_id=args.venue,
                round_to_pack=False if args.no_round else None,
            )
        )
        return use_case.to_response(plan).model_dump(mode="json")
    finally:
        await close_pool()


def cmd_suggest(args: argparse.Namespace) -> None:
    """Print the replenishment plan without creating drafts."""
    _print_json(asyncio.run(_suggest(args)))


async def _variance(args: argparse.Namespace) -> dict:
    from parstock.application.dto.requests import VarianceReportRequest
    from parstock.application.use_cases import VarianceReportUseCase
    from parstock.infrastructure.storage.sqlite import close_pool

    use_case = VarianceReportUseCase()
    try:
        report = await use_case.execute(
            VarianceReportRequest(
                venue_id=args.venue,
                department_id=args.department,
                include_uncounted=False if args.skip_uncounted else None,
                with_bands=True,
            )
        )
        return use_case.to_response(report).model_dump(mode="json")
    finally:
        await close_pool()


def cmd_variance(args: argparse.Namespace) -> None:
    """Print shortages and excess against par."""
    _print_json(asyncio.run(_variance(args)))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Parstock management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=cmd_status)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # suggest
    p_suggest = sub.add_parser("suggest", help="Print suggested orders for a venue")
    p_suggest.add_argument("venue", help="Venue ID")
    p_suggest.add_argument("--no-round", action="store_true", help="Keep exact deficits")
    p_suggest.set_defaults(func=cmd_suggest)

    # variance
    p_variance = sub.add_parser("variance", help="Print the variance report for a venue")
    p_variance.add_argument("venue", help="Venue ID")
    p_variance.add_argument("--department", default=None, help="Restrict to one department")
    p_variance.add_argument(
        "--skip-uncounted",
        action="store_true",
        help="Leave out products with a par but no counted location",
    )
    p_variance.set_defaults(func=cmd_variance)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
