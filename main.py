"""
Sales KPI Tracker — End-to-end smoke test.

Wires a record store, client and snapshot feed, lets the client seed the
sample weeks into an empty collection, and prints the dashboard outputs.

Usage:
    python main.py [--backend memory|firestore]
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from kpi_tracker.config import (
    BACKEND_FIRESTORE,
    BACKEND_MEMORY,
    WEEKLY_OUTBOUND_GOAL,
    load_backend_config,
)
from kpi_tracker.client import SnapshotFeed, TrackerClient
from kpi_tracker.dashboard import get_dashboard_view
from kpi_tracker.sample_data import SAMPLE_WEEKS
from kpi_tracker.store import build_store

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the smoke test and print outputs. Returns a process exit code."""
    parser = argparse.ArgumentParser(description="Sales KPI Tracker smoke test")
    parser.add_argument(
        "--backend",
        choices=[BACKEND_MEMORY, BACKEND_FIRESTORE],
        default=BACKEND_MEMORY,
        help="record store to use (default: memory)",
    )
    args = parser.parse_args(argv)

    print("=" * 70)
    print("  SALES KPI TRACKER — Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Connect
    # ------------------------------------------------------------------
    print("[ 1 ] CONNECTING")
    print("-" * 40)

    config = dataclasses.replace(load_backend_config(), backend=args.backend)
    store = build_store(config)
    if store is None:
        print("\n  No backend configured. Set FIREBASE_CREDENTIALS or use --backend memory.")
        return 1

    client = TrackerClient(store, app_id=config.app_id, auth_token=config.auth_token)
    if not client.initialize():
        print("\n  Authentication failed; see log.")
        return 1
    print(f"\nIdentity: {client.identity.uid} (anonymous={client.identity.anonymous})")
    print(f"Collection: {client.path}")

    feed = SnapshotFeed()
    client.subscribe(feed)
    print(f"Snapshot: {len(feed.records)} weekly records (loading={feed.loading})")

    # ------------------------------------------------------------------
    # 2. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    view = get_dashboard_view(feed.records)

    print("\nAll-time summary:")
    for card in view["cards"]:
        print(f"  {card['title']:28s} | {card['value']:>10s} | {card['subtext']}")

    latest = view["latest_week"]
    if latest is not None:
        print(f"\nLatest week ({latest['display_date']}): {latest}")

    print("\nCumulative progress vs goal:")
    if not view["progress"].empty:
        print(view["progress"].to_string(index=False))

    print("\nRecent window:")
    if not view["recent"].empty:
        print(view["recent"][
            ["label", "emails_delivered", "calls_dialed", "total_linkedin_activity", "meetings_booked"]
        ].to_string(index=False))

    print("\nHistorical data:")
    if not view["history"].empty:
        print(view["history"].to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Acceptance criteria verification (sample data)
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    progress = view["progress"]
    n_weeks = len(progress)

    check1 = n_weeks >= len(SAMPLE_WEEKS)
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] {n_weeks} weeks loaded (need >= {len(SAMPLE_WEEKS)})")

    if n_weeks:
        final = progress.iloc[-1]
        check2 = final["cumulative_outbound"] == view["summary"]["total_outbound"]
        print(f"  [{'PASS' if check2 else 'FAIL'}] Final cumulative = {final['cumulative_outbound']} "
              f"(total outbound {view['summary']['total_outbound']})")
        check3 = final["cumulative_goal_pace"] == n_weeks * WEEKLY_OUTBOUND_GOAL
        print(f"  [{'PASS' if check3 else 'FAIL'}] Final goal pace = {final['cumulative_goal_pace']} "
              f"(expect {n_weeks * WEEKLY_OUTBOUND_GOAL})")

    check4 = len(view["recent"]) == min(8, n_weeks)
    print(f"  [{'PASS' if check4 else 'FAIL'}] Recent window has {len(view['recent'])} weeks")

    client.close()

    print("\n" + "=" * 70)
    print("  Smoke test complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
