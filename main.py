"""
MindMate — Entry Point.

Small terminal front end over the session core:

    python main.py users                 reconciled admin user directory
    python main.py sessions              today/upcoming sessions
    python main.py presets               mentor's preset schedules
"""

import argparse
import asyncio
import logging
import sys

from mindmate.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from mindmate.adapters.factory import create_action_service, create_directory_adapter
from mindmate.core.identity import load_directory
from mindmate.core.responses import Err
from mindmate.ports.errors import RemoteFailure


async def _users() -> int:
    try:
        users = await load_directory(create_directory_adapter())
    except RemoteFailure as exc:
        print(f"Error fetching users: {exc}", file=sys.stderr)
        return 1
    for user in users:
        print(f"{user.key:<24} {user.role:<8} {user.name} ({user.program} {user.year_level})".rstrip())
    print(f"{len(users)} user(s)")
    return 0


async def _sessions(role: str | None) -> int:
    service = create_action_service(role=role)
    response = await service.load_sessions()
    if isinstance(response, Err):
        print(response.message, file=sys.stderr)
        return 1
    for title, sessions in (
        ("Today", service.store.today_sessions),
        ("Upcoming", service.store.upcoming_sessions),
    ):
        print(f"{title}:")
        if not sessions:
            print("  (none)")
        for s in sessions:
            print(f"  {s.date} {s.time}  {s.subject}  [{s.session_type}]  {s.location}".rstrip())
    return 0


async def _presets(mentor_id: str) -> int:
    service = create_action_service(role="mentor", mentor_id=mentor_id)
    manager = service.presets
    response = await manager.list()
    if isinstance(response, Err):
        print(response.message, file=sys.stderr)
        return 1
    for p in manager.schedules:
        days = ", ".join(d[:3].capitalize() for d in p.days)
        print(f"  {p.subject} ({p.specialization}, {p.course}) {days} at {p.time} - {len(p.participants)} enrolled")
    print(
        f"Active schedules: {len(manager.schedules)}/{manager.limit}  "
        f"Total participants: {manager.total_participants}  "
        f"Avg. participants: {manager.average_participants}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="mindmate", description="MindMate session tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("users", help="Show the reconciled user directory")

    p_sessions = sub.add_parser("sessions", help="Show today/upcoming sessions")
    p_sessions.add_argument("--role", choices=["mentor", "learner"], default=None)

    p_presets = sub.add_parser("presets", help="Show preset schedules")
    p_presets.add_argument("--mentor-id", default="")

    args = parser.parse_args(argv)

    if args.command == "users":
        return asyncio.run(_users())
    if args.command == "sessions":
        return asyncio.run(_sessions(args.role))
    return asyncio.run(_presets(args.mentor_id))


if __name__ == "__main__":
    sys.exit(main())
