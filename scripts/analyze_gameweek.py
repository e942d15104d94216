#!/usr/bin/env python3
"""
Analyze Gameweek

Runs the decision engine over FPL payloads saved to disk and prints the
recommendation plus the reasoning log. Nothing is fetched: save the API
responses first (bootstrap-static, fixtures, entry picks, entry history).

Expected files in the payload directory:
    bootstrap-static.json   /api/bootstrap-static/
    fixtures.json           /api/fixtures/
    picks.json              /api/entry/{id}/event/{gw}/picks/
    history.json            /api/entry/{id}/history/

Usage:
    python scripts/analyze_gameweek.py payloads/                 # Analyze next GW
    python scripts/analyze_gameweek.py payloads/ --free-transfers 2
    python scripts/analyze_gameweek.py payloads/ --show-log      # Reasoning log only
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from analyzer.engine import create_engine, create_recorder
from data.fpl_records import build_request, target_gameweek
from infrastructure.errors import AnalyzerError
from models.recommendation import Recommendation
from utils.config import check_config, load_config
from utils.log_setup import setup_logging

logger = logging.getLogger('fpl_analyzer.analyze_gameweek')

PAYLOAD_FILES = {
    'bootstrap': 'bootstrap-static.json',
    'fixtures': 'fixtures.json',
    'picks': 'picks.json',
    'history': 'history.json',
}


def load_payloads(directory: Path) -> Dict[str, Any]:
    """Read the saved API responses; AnalyzerError names any missing file."""
    payloads = {}
    for key, filename in PAYLOAD_FILES.items():
        path = directory / filename
        if not path.exists():
            raise AnalyzerError(f"Missing payload file: {path}")
        with open(path) as f:
            payloads[key] = json.load(f)
    return payloads


def print_recommendation(gameweek: int, recommendation: Recommendation):
    print("\n" + "=" * 80)
    print(f"GW{gameweek} RECOMMENDATION ({recommendation.confidence.value} confidence)")
    print("=" * 80)
    print(f"\n{recommendation.summary}")

    if recommendation.transfers:
        print("\nTRANSFERS:")
        for t in recommendation.transfers:
            print(f"  🔄 {t.player_out_name} → {t.player_in_name}")
            print(f"     {t.reason}")
    else:
        print("\nNo transfers recommended.")

    if recommendation.captain:
        print(f"\n👑 Captain: {recommendation.captain.name} - {recommendation.captain.reason}")
    if recommendation.vice_captain:
        print(f"🥈 Vice: {recommendation.vice_captain.name} - {recommendation.vice_captain.reason}")

    advice = recommendation.chip_advice
    print(f"\nChip: {advice.chip_to_play_this_week.display_name}")
    if advice.reasoning:
        print(f"  {advice.reasoning}")
    if advice.future_strategy:
        print(f"  Later: {advice.future_strategy}")

    if recommendation.key_insights:
        print("\nKEY INSIGHTS:")
        for insight in recommendation.key_insights:
            print(f"  • {insight}")


def print_reasoning_log(recorder, gameweek: int, limit: int):
    events = recorder.reasoning_log(gameweek, limit=limit)
    print("\n" + "-" * 80)
    print(f"REASONING LOG GW{gameweek} (newest first)")
    print("-" * 80)
    if not events:
        print("No reasoning recorded yet.")
    for event in events:
        print(f"  {event.timestamp:%H:%M:%S} {event}")


def main(args, config: Optional[Dict[str, Any]] = None) -> int:
    config = config or load_config()
    setup_logging(config['log_level'])

    status = check_config()
    if not status['anthropic_api_key'] or status['demo_mode']:
        print("ℹ️  No API key (or demo mode) - using the rule-based strategy")

    payloads = load_payloads(Path(args.payloads))
    recorder = create_recorder(config['database_path'])

    if args.show_log:
        gameweek = target_gameweek(payloads['bootstrap'].get('events', []))
        print_reasoning_log(recorder, gameweek, args.limit)
        return 0

    picks = payloads['picks']
    bank = (picks.get('entry_history') or {}).get('bank', 0)
    request = build_request(
        payloads['bootstrap'],
        payloads['fixtures'],
        picks.get('picks', []),
        payloads['history'],
        bank=bank,
        free_transfers=args.free_transfers,
        max_penalty=config['max_hits'],
    )

    engine = create_engine(config, recorder=recorder)
    recommendation = engine.produce_recommendation(request)

    print_recommendation(request.gameweek, recommendation)
    print_reasoning_log(recorder, request.gameweek, args.limit)
    return 0


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Produce a transfer/captain/chip recommendation from saved FPL payloads',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_gameweek.py payloads/                      # Analyze next GW
  python analyze_gameweek.py payloads/ -f 3                 # Override FT count
  python analyze_gameweek.py payloads/ --show-log -n 20     # Last 20 log entries
        """
    )
    parser.add_argument('payloads', help='Directory holding the saved API responses')
    parser.add_argument(
        '-f', '--free-transfers',
        type=int,
        help='Override free transfer count (default: derived from history)'
    )
    parser.add_argument(
        '--show-log',
        action='store_true',
        help='Only print the stored reasoning log for the target gameweek'
    )
    parser.add_argument(
        '-n', '--limit',
        type=int,
        default=50,
        help='Reasoning log entries to show (default: 50)'
    )
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = parse_args()
    try:
        sys.exit(main(args))
    except KeyboardInterrupt:
        print("\n\nAnalysis cancelled by user.")
        sys.exit(1)
    except AnalyzerError as e:
        logger.error(f"AnalyzeGameweek: {e}")
        print(f"\n❌ {e}")
        sys.exit(1)
