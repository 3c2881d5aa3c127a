import argparse
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

from planner import orchestrator
from planner.time_utils import TZ


def main():
    p = argparse.ArgumentParser(description="Review past-due reminders.")
    p.add_argument("--complete", action="store_true", help="mark every past-due reminder completed")
    p.add_argument("--asof", type=str, help=f"YYYY-MM-DD HH:MM in {TZ}")
    p.add_argument("--user", type=str, help="user id (defaults to ACTIVE_USER_ID)")
    args = p.parse_args()

    asof_dt = None
    if args.asof:
        asof_dt = datetime.strptime(args.asof, "%Y-%m-%d %H:%M").replace(tzinfo=ZoneInfo(TZ))

    result = orchestrator.past_due_review(user_id=args.user, complete=args.complete, asof=asof_dt)
    for rid, err in result.failed.items():
        print(f"[past_due] {rid}: {err}", file=sys.stderr)
    if result.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
