#!/usr/bin/env python3
"""
List analysis runs, or the scored leads of one run.

Usage:
    python scripts/list_leads.py                 # leads of the latest completed run
    python scripts/list_leads.py --run-id <id>   # leads of a specific run
    python scripts/list_leads.py --runs --limit 20
"""

import os
import sys
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prospector.db import get_competitors_for_lead, get_db_path, get_latest_run_id, list_leads, list_runs


def main():
    parser = argparse.ArgumentParser(description="List analysis runs and scored leads")
    parser.add_argument("--run-id", help="Run to show (default: latest completed)")
    parser.add_argument("--runs", action="store_true", help="List runs instead of leads")
    parser.add_argument("--limit", type=int, default=20, help="Max runs to list (default 20)")
    args = parser.parse_args()

    db_path = get_db_path()
    if not os.path.isfile(db_path):
        print(f"No database at {db_path}. Run scripts/analyze_leads.py first.")
        return

    if args.runs:
        runs = list_runs(limit=args.limit)
        if not runs:
            print("No runs found.")
            return
        print(f"Runs (db: {db_path})\n")
        for r in runs:
            print(f"  {r['id'][:8]}...  {r['created_at']}  leads={r.get('leads_count') or 0}  {r.get('status')}")
        return

    run_id = args.run_id or get_latest_run_id()
    if not run_id:
        print("No completed runs found.")
        return

    leads = list_leads(run_id)
    print(f"Run {run_id}: {len(leads)} lead(s)\n")
    for lead in leads:
        flag = "  incomplete" if lead["incomplete_data"] else ""
        print(
            f"  [{lead['tier'] or '-'}] {lead['name']}  {lead['rating']} rating, "
            f"{lead['review_count']} reviews  ({lead['source']}){flag}"
        )
        for c in get_competitors_for_lead(lead["id"]):
            print(f"      - {c['name']}: {c['rating']} rating, {c['review_count']} reviews")


if __name__ == "__main__":
    main()
