#!/usr/bin/env python3
"""
Main CLI entry point for Catholic Schedule.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

from ..__version__ import __version__, print_version_info
from ..config import ALLOWED_RADII, DEFAULT_RADIUS
from ..core.admin_forms import AdminConsole, AdminForm
from ..core.db import create_session_client, get_supabase_client
from ..core.presentation import distance_label
from ..core.schedule import DAY_NAMES, ScheduleKind
from ..core.search import SearchView
from ..core.session import AuthSession


def day_of_week(value: str) -> int:
    """Accept 0-6 (Sunday=0) or a day name such as 'sat'."""
    if value.isdigit() and 0 <= int(value) <= 6:
        return int(value)
    for index, name in enumerate(DAY_NAMES):
        if len(value) >= 3 and name.lower().startswith(value.lower()):
            return index
    raise argparse.ArgumentTypeError(f"invalid day: {value!r} (use 0-6 or a day name)")


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="catholic-schedule",
        description="Find local Mass and Confession times",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  catholic-schedule search 15010                        Mass times within 25 miles
  catholic-schedule search 15010 --radius 10 --kind confession
  catholic-schedule serve --port 8000                   Start the API server
  catholic-schedule admin list-churches                 List churches (needs ADMIN_EMAIL/ADMIN_PASSWORD)
        """,
    )

    parser.add_argument("--version", "-v", action="store_true", help="Show version information")
    parser.add_argument("--verbose", action="store_true", help="Show detailed version information")

    subparsers = parser.add_subparsers(dest="command", help="Available commands", metavar="COMMAND")

    # Search command
    search_parser = subparsers.add_parser(
        "search", help="Search churches near a ZIP code", description="List nearby churches with their schedules"
    )
    search_parser.add_argument("zip", help="5-digit ZIP code")
    search_parser.add_argument(
        "--radius", type=int, choices=ALLOWED_RADII, default=DEFAULT_RADIUS, help=f"Radius in miles (default: {DEFAULT_RADIUS})"
    )
    search_parser.add_argument(
        "--kind", choices=[k.value for k in ScheduleKind], default=ScheduleKind.MASS.value, help="Schedule to show (default: mass)"
    )
    search_parser.add_argument("--json", action="store_true", help="Print the raw search result as JSON")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server", description="Run the HTTP API with uvicorn")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Admin commands
    admin_parser = subparsers.add_parser(
        "admin", help="Add churches and schedule entries", description="Authenticated create-only admin commands"
    )
    admin_parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"), help="Admin email (default: $ADMIN_EMAIL)")
    admin_parser.add_argument(
        "--password", default=os.getenv("ADMIN_PASSWORD"), help="Admin password (default: $ADMIN_PASSWORD)"
    )
    admin_sub = admin_parser.add_subparsers(dest="admin_command", metavar="ACTION")

    admin_sub.add_parser("list-churches", help="List churches available for schedule entries")

    church_parser = admin_sub.add_parser("add-church", help="Add a church")
    church_parser.add_argument("--name", required=True)
    church_parser.add_argument("--address", required=True)
    church_parser.add_argument("--city", required=True)
    church_parser.add_argument("--state", required=True)
    church_parser.add_argument("--zip", required=True)
    church_parser.add_argument("--lat", required=True, help="Latitude, e.g. 40.7501")
    church_parser.add_argument("--lng", required=True, help="Longitude, e.g. -80.3202")

    mass_parser = admin_sub.add_parser("add-mass", help="Add a Mass time")
    mass_parser.add_argument("--church-id", help="Church ID (default: first church by name)")
    mass_parser.add_argument("--day", type=day_of_week, default=0, help="Day (0-6 or name, default: Sunday)")
    mass_parser.add_argument("--time", default="09:00", help="Time as HH:MM (default: 09:00)")
    mass_parser.add_argument("--notes", default="", help="Optional: Vigil, English, Spanish...")

    confession_parser = admin_sub.add_parser("add-confession", help="Add a confession time")
    confession_parser.add_argument("--church-id", help="Church ID (default: first church by name)")
    confession_parser.add_argument("--day", type=day_of_week, default=6, help="Day (0-6 or name, default: Saturday)")
    confession_parser.add_argument("--start", default="15:00", help="Start as HH:MM (default: 15:00)")
    confession_parser.add_argument("--end", default="16:00", help="End as HH:MM (default: 16:00)")
    confession_parser.add_argument("--notes", default="")

    return parser


def handle_version(args: argparse.Namespace) -> None:
    """Handle version command."""
    if args.verbose:
        print_version_info(verbose=True)
    else:
        print(f"Catholic Schedule v{__version__}")


def handle_search(args: argparse.Namespace) -> int:
    """Handle search command."""
    view = SearchView(get_supabase_client(), kind=ScheduleKind(args.kind))
    view.submit(zip_code=args.zip, radius=args.radius)

    if args.json:
        print(json.dumps(view.to_dict(), indent=2))
        return 1 if view.error else 0

    if view.error:
        print(f"❌ {view.error}", file=sys.stderr)
        return 1

    if not view.cards:
        print(f"No churches found within {view.radius} miles of {view.zip}.")
        return 0

    for card in view.cards:
        church = card.church
        label = distance_label(church.miles_away)
        distance = f" ({label})" if label else ""
        print(f"\n⛪ {church.name}{distance}")
        print(f"   {church.address_line}")
        if card.schedule:
            for line in card.schedule.render_text():
                print(f"   {line}")
    return 0


def handle_serve(args: argparse.Namespace) -> int:
    """Handle serve command."""
    import uvicorn

    uvicorn.run("catholic_schedule.backend.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _report(form: AdminForm, ok: bool) -> int:
    stream = sys.stdout if ok else sys.stderr
    print(("✅ " if ok else "❌ ") + form.message, file=stream)
    return 0 if ok else 1


def handle_admin(args: argparse.Namespace) -> int:
    """Handle admin commands: sign in, run one action, sign out."""
    if not args.admin_command:
        print("❌ Choose an action: list-churches, add-church, add-mass, add-confession", file=sys.stderr)
        return 1
    if not args.email or not args.password:
        print("❌ Admin email and password are required (--email/--password or ADMIN_EMAIL/ADMIN_PASSWORD).", file=sys.stderr)
        return 1

    console = AdminConsole(AuthSession(create_session_client()))
    if not console.sign_in(args.email, args.password):
        print(f"❌ {console.session.message}", file=sys.stderr)
        return 1

    try:
        if args.admin_command == "list-churches":
            if console.directory.message:
                print(f"❌ {console.directory.message}", file=sys.stderr)
                return 1
            for church_id, name in console.directory.options:
                print(f"{church_id}\t{name}")
            return 0

        if args.admin_command == "add-church":
            form = console.church_form
            for key in form.FIELDS:
                setattr(form, key, getattr(args, key))
            return _report(form, form.submit())

        if args.admin_command == "add-mass":
            form = console.mass_form
            form.church_id = args.church_id or form.church_id
            form.day_of_week = args.day
            form.time = args.time
            form.notes = args.notes
            return _report(form, form.submit())

        if args.admin_command == "add-confession":
            form = console.confession_form
            form.church_id = args.church_id or form.church_id
            form.day_of_week = args.day
            form.start_time = args.start
            form.end_time = args.end
            form.notes = args.notes
            return _report(form, form.submit())
    finally:
        console.sign_out()

    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        handle_version(args)
        return 0

    if args.command == "search":
        return handle_search(args)
    elif args.command == "serve":
        return handle_serve(args)
    elif args.command == "admin":
        return handle_admin(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
