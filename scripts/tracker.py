#!/usr/bin/env python3
"""
Command-line front end for InternCoach.

Usage:
  python scripts/tracker.py serve [--host 127.0.0.1] [--port 3000]
  python scripts/tracker.py list [--search acme]
  python scripts/tracker.py add --company Acme --role "Data Intern" --location Remote --deadline 2026-10-01
  python scripts/tracker.py status <id> Interview
  python scripts/tracker.py delete <id>
  python scripts/tracker.py clear --yes
  python scripts/tracker.py stats
  python scripts/tracker.py export --format csv [--output file.csv]
  python scripts/tracker.py import backup.json
  python scripts/tracker.py goal 8
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the interncoach package importable without installing it
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from interncoach.client import ClientError, ClientPreferences, DashboardController, InternshipClient  # noqa: E402
from interncoach.client.formatting import format_date, time_ago  # noqa: E402
from interncoach.client.transfer import ImportFormatError  # noqa: E402
from interncoach.core.config import get_settings  # noqa: E402
from interncoach.core.log import configure_logging  # noqa: E402
from interncoach.domain.internships import PLATFORMS, STATUSES, ValidationError  # noqa: E402


def cmd_serve(args) -> None:
    import uvicorn

    from interncoach.app import create_app

    settings = get_settings()
    uvicorn.run(create_app(settings), host=args.host or settings.host, port=args.port or settings.port)


def cmd_list(ctl: DashboardController, args) -> None:
    records = ctl.search(args.search) if args.search else ctl.snapshot.internships
    if not records:
        print("No applications yet.")
        return
    for r in records:
        print(
            f"{r.get('id', '')}  {r.get('company', '')} - {r.get('role', '')} "
            f"[{r.get('status', '')}] {r.get('location', '')} "
            f"({format_date(r.get('deadline'))}, added {time_ago(r.get('createdAt'))})"
        )


def cmd_add(ctl: DashboardController, args) -> None:
    created = ctl.submit(
        {
            "company": args.company,
            "role": args.role,
            "platform": args.platform,
            "location": args.location,
            "status": args.status,
            "deadline": args.deadline,
            "notes": args.notes or "",
        }
    )
    print(f"OK: application added ({created['id']})")


def cmd_status(ctl: DashboardController, args) -> None:
    updated = ctl.change_status(args.id, args.status)
    print(f"OK: {updated.get('company', args.id)} -> {updated['status']}")


def cmd_delete(ctl: DashboardController, args) -> None:
    ctl.remove(args.id)
    print("OK: application deleted")


def cmd_clear(ctl: DashboardController, args) -> None:
    if not args.yes:
        raise SystemExit("Refusing to clear without --yes")
    ctl.clear_all()
    print("OK: all applications cleared")


def cmd_stats(ctl: DashboardController, args) -> None:
    snap = ctl.snapshot
    s = snap.stats
    print(f"Total applications: {s.total}")
    for status, count in s.by_status.items():
        print(f"  {status}: {count} ({s.status_share[status]}%)")
    print(f"Interview rate: {s.interview_rate}%")
    print(f"Offer rate: {s.offer_rate}%")
    print(f"Avg response time: {s.avg_response_days} days")
    print(f"This week: {s.weekly_goal.label} applications ({s.weekly_goal.percent}%)")
    print("Platforms:")
    for p in s.platforms:
        print(f"  {p.platform}: {p.count} application{'' if p.count == 1 else 's'}, offer rate {p.offer_rate}%")
    if s.per_month:
        print("Applications per month:")
        for month, count in s.per_month.items():
            print(f"  {month}: {count}")
    if snap.backup_due:
        print("Consider backing up your data! Use: tracker.py export")


def cmd_export(ctl: DashboardController, args) -> None:
    if args.format == "csv":
        target = ctl.export_csv(args.output)
    else:
        target = ctl.export_json(args.output)
    print(f"OK: exported to {target}")


def cmd_import(ctl: DashboardController, args) -> None:
    created = ctl.import_json(args.file)
    print(f"OK: imported {len(created)} applications")


def cmd_goal(ctl: DashboardController, args) -> None:
    if args.goal is not None:
        ctl.set_weekly_goal(args.goal)
    print(f"Weekly goal: {ctl.snapshot.stats.weekly_goal.label}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="InternCoach internship tracker")
    ap.add_argument("--api-url", help="Base URL of the store service (default: INTERNCOACH_API_URL)")
    ap.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the HTTP store service")
    p.add_argument("--host")
    p.add_argument("--port", type=int)

    p = sub.add_parser("list", help="List applications")
    p.add_argument("--search", help="Filter by company, role or location")
    p.set_defaults(handler=cmd_list)

    p = sub.add_parser("add", help="Add an application")
    p.add_argument("--company", required=True)
    p.add_argument("--role", required=True)
    p.add_argument("--location", required=True)
    p.add_argument("--deadline", required=True, help="Application date (YYYY-MM-DD)")
    p.add_argument("--platform", default="Other", choices=PLATFORMS)
    p.add_argument("--status", default="Applied", choices=STATUSES)
    p.add_argument("--notes")
    p.set_defaults(handler=cmd_add)

    p = sub.add_parser("status", help="Change the status of an application")
    p.add_argument("id")
    p.add_argument("status", choices=STATUSES)
    p.set_defaults(handler=cmd_status)

    p = sub.add_parser("delete", help="Delete an application")
    p.add_argument("id")
    p.set_defaults(handler=cmd_delete)

    p = sub.add_parser("clear", help="Delete every application")
    p.add_argument("--yes", action="store_true")
    p.set_defaults(handler=cmd_clear)

    p = sub.add_parser("stats", help="Show derived statistics")
    p.set_defaults(handler=cmd_stats)

    p = sub.add_parser("export", help="Export all applications")
    p.add_argument("--format", choices=("csv", "json"), default="json")
    p.add_argument("--output", help="Target file (default: internships_<date>.<format>)")
    p.set_defaults(handler=cmd_export)

    p = sub.add_parser("import", help="Replace all applications with a JSON backup")
    p.add_argument("file")
    p.set_defaults(handler=cmd_import)

    p = sub.add_parser("goal", help="Show or set the weekly application goal")
    p.add_argument("goal", nargs="?", type=int)
    p.set_defaults(handler=cmd_goal)
    return ap


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level)
    if args.command == "serve":
        cmd_serve(args)
        return
    settings = get_settings()
    with InternshipClient(args.api_url) as client:
        ctl = DashboardController(client, ClientPreferences(settings.prefs_file))
        try:
            args.handler(ctl, args)
        except ValidationError as exc:
            raise SystemExit("\n".join(exc.errors))
        except ImportFormatError as exc:
            raise SystemExit(str(exc))
        except ClientError as exc:
            raise SystemExit(f"Error: {exc.message}")


if __name__ == "__main__":
    main()
