"""shiftclock CLI interface."""

import argparse
import asyncio
import logging
import sys

from .clock import ClockAction, ClockEvent, ClockService
from .errors import SessionNotFoundError, TransitionRejected
from .models import ShiftclockConfig
from .notify import build_notifier
from .reports import department_hours, member_hours
from .store import JsonSessionStore
from .timeutil import now_ms

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_service(config: ShiftclockConfig) -> ClockService:
    """Get a clock service over the configured data file."""
    return ClockService(JsonSessionStore(config.data_file))


def cmd_clock(args: argparse.Namespace, config: ShiftclockConfig) -> int:
    """Apply a clock-in, break, or clock-out event."""
    service = get_service(config)
    event = ClockEvent(
        action=ClockAction(args.command),
        guild_id=args.guild,
        user_id=args.user,
        department_id=args.department,
        timestamp=args.at if args.at is not None else now_ms(),
        department_name=args.department_name,
    )

    try:
        result = service.handle(event)
    except TransitionRejected as e:
        print(e, file=sys.stderr)
        return 1
    except SessionNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.reply)
    asyncio.run(build_notifier(config.webhook_url).send(result.notification))
    return 0


def cmd_my_hours(args: argparse.Namespace, config: ShiftclockConfig) -> int:
    """Show a member's monthly, weekly, and all-time hours."""
    weeks = args.weeks if args.weeks is not None else config.history_weeks
    if weeks < 0:
        print(f"Error: --weeks must be non-negative, got {weeks}", file=sys.stderr)
        return 1

    report = member_hours(
        get_service(config).store,
        args.guild,
        args.user,
        now=now_ms(),
        tz=config.tz,
        weeks=weeks,
    )
    print(report.render())
    return 0


def cmd_department_hours(args: argparse.Namespace, config: ShiftclockConfig) -> int:
    """Show a department's monthly total and this week's hours per member."""
    report = department_hours(
        get_service(config).store,
        args.guild,
        args.department,
        now=now_ms(),
        tz=config.tz,
    )
    print(report.render())
    return 0


def cmd_serve(args: argparse.Namespace, config: ShiftclockConfig) -> int:
    """Start the HTTP shell."""
    from .web import main as web_main

    web_main(config)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="shiftclock",
        description="Shift clock-in, break, and hours tracking",
    )
    parser.add_argument("--data-file", help="Session data file (default: from env)")
    parser.add_argument("--timezone", help="Timezone for week/month boundaries")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for action in ClockAction:
        clock_parser = subparsers.add_parser(action.value, help=f"Record a {action.value}")
        clock_parser.add_argument("--guild", "-g", required=True, help="Guild ID")
        clock_parser.add_argument("--user", "-u", required=True, help="User ID")
        clock_parser.add_argument(
            "--department", "-d", required=True, help="Department (role) ID"
        )
        clock_parser.add_argument("--department-name", help="Department display name")
        clock_parser.add_argument(
            "--at", type=int, help="Event time in ms since epoch (default: now)"
        )

    # my-hours
    my_hours_parser = subparsers.add_parser("my-hours", help="Show a member's hours")
    my_hours_parser.add_argument("--guild", "-g", required=True, help="Guild ID")
    my_hours_parser.add_argument("--user", "-u", required=True, help="User ID")
    my_hours_parser.add_argument("--weeks", "-w", type=int, help="Weeks of history")

    # department-hours
    dept_parser = subparsers.add_parser(
        "department-hours", help="Show a department's hours"
    )
    dept_parser.add_argument("--guild", "-g", required=True, help="Guild ID")
    dept_parser.add_argument(
        "--department", "-d", required=True, help="Department (role) ID"
    )

    # serve
    subparsers.add_parser("serve", help="Start the HTTP server")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT
    )

    config = ShiftclockConfig.from_env()
    if args.data_file:
        config.data_file = args.data_file
    if args.timezone:
        config.timezone = args.timezone

    # Dispatch to command handlers
    handlers = {
        "my-hours": cmd_my_hours,
        "department-hours": cmd_department_hours,
        "serve": cmd_serve,
    }
    handlers.update({action.value: cmd_clock for action in ClockAction})

    handler = handlers.get(args.command)
    if handler:
        return handler(args, config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
