import argparse
from datetime import datetime
from zoneinfo import ZoneInfo

from planner import orchestrator
from planner.time_utils import TZ


def main():
    p = argparse.ArgumentParser(description="Post today's periods and reminders.")
    p.add_argument("--force", action="store_true", help="send even if already sent today")
    p.add_argument("--asof", type=str, help=f"YYYY-MM-DD HH:MM in {TZ}")
    p.add_argument("--user", type=str, help="user id (defaults to ACTIVE_USER_ID)")
    args = p.parse_args()

    asof_dt = None
    if args.asof:
        asof_dt = datetime.strptime(args.asof, "%Y-%m-%d %H:%M").replace(tzinfo=ZoneInfo(TZ))

    orchestrator.today_digest(user_id=args.user, force=args.force, asof=asof_dt)


if __name__ == "__main__":
    main()
