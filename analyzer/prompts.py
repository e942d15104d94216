"""
Prompt composition for the reasoning service.

The prompt embeds the squad with per-player stats, the top of the market by
form, teams with easy near-term fixtures, blank/double gameweeks, chip status
and the numeric constraints, then asks for one JSON object in the
Recommendation schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from models.player import Player
from rules.rules_engine import RulesEngine

if TYPE_CHECKING:
    from agents.base_strategy import AnalysisContext

MARKET_PROMPT_SIZE = 30

RESPONSE_SCHEMA = """{
  "transfers": [
    {"player_out_id": <id>, "player_out_name": "<name>", "player_in_id": <id>, "player_in_name": "<name>", "reason": "<brief reason>"}
  ],
  "captain": {"id": <id>, "name": "<name>", "reason": "<brief reason>"},
  "vice_captain": {"id": <id>, "name": "<name>", "reason": "<brief reason>"},
  "chip_advice": {
    "chip_to_play_this_week": "none" | "wildcard" | "free-hit" | "bench-boost" | "triple-captain",
    "reasoning": "<why or why not to use a chip this week>",
    "future_strategy": "<brief advice on when to use remaining chips>"
  },
  "confidence": "high" | "medium" | "low",
  "summary": "<2-3 sentence summary of your analysis>",
  "key_insights": ["<insight 1>", "<insight 2>", "<insight 3>"]
}"""

CHIP_GUIDE = """- WILDCARD: Best when the team needs 4+ transfers, or before a good fixture run.
- FREE HIT: Best for blank gameweeks - build a one-week team.
- BENCH BOOST: Best for double gameweeks when the bench has good fixtures too.
- TRIPLE CAPTAIN: Best for a double gameweek with a premium captain playing twice."""


def _player_line(player: Player, with_xgi: bool = False) -> str:
    form = "n/a" if player.form is None else player.form
    line = (f"- [{player.id}] {player.name} ({player.position.value}, {player.team}) - "
            f"Form: {form}, Points: {player.total_points}, Price: £{player.price}m")
    if with_xgi:
        line += f", xGI: {player.expected_goal_involvements:.2f}"
    if player.news:
        line += f" [NEWS: {player.news}]"
    return line


def _squad_section(context: AnalysisContext) -> List[str]:
    lines = []
    for slot in sorted(context.squad, key=lambda s: s.position):
        line = _player_line(slot.player)
        if slot.is_captain:
            line += " (C)"
        elif slot.is_vice_captain:
            line += " (VC)"
        if not slot.is_starter:
            line += " [bench]"
        lines.append(line)
    return lines


def _fixture_section(context: AnalysisContext) -> List[str]:
    lines = []
    for team_id, entries in context.easy_fixture_teams:
        labels = ', '.join(e.label for e in entries)
        lines.append(f"- {context.team_name(team_id)}: {labels}")
    return lines or ["- None this window"]


def _hardest_section(context: AnalysisContext) -> List[str]:
    lines = [f"- {context.team_name(r.team_id)}: average FDR {r.average_difficulty:.1f}"
             for r in context.hardest_runs]
    return lines or ["- None this window"]


def build_analysis_prompt(context: AnalysisContext, rules: RulesEngine = None) -> str:
    """Compose the full analysis prompt for one gameweek."""
    rules = rules or RulesEngine()
    ft = context.free_transfers

    market = '\n'.join(_player_line(p, with_xgi=True)
                       for p in context.top_players[:MARKET_PROMPT_SIZE])

    if context.special_gameweeks:
        special = '\n'.join(f"- {s.describe()}" for s in context.special_gameweeks)
    else:
        special = "No blank or double gameweeks detected in the lookahead window"

    chips_available = '\n'.join(f"- {c.display_name.upper()}" for c in context.chips_available) or "- None"
    chips_used = ""
    if context.chips_used:
        chips_used = f"\nChips already used: {', '.join(c.display_name for c in context.chips_used)}"

    constraints = '\n'.join(f"- {line}" for line in rules.constraint_lines(ft, context.max_penalty))

    return f"""You are an expert Fantasy Premier League manager. Analyze the current team and recommend transfers, captain picks, AND chip strategy.

## Current Squad (GW{context.gameweek})
Budget: £{context.budget:.1f}m | Free Transfers: {ft}
{chr(10).join(_squad_section(context))}

## Top Available Players by Form
{market}

## Fixture Difficulty
Teams with easy fixtures (FDR 2 or less over their next 3):
{chr(10).join(_fixture_section(context))}
Teams with the toughest runs (avoid bringing these players in):
{chr(10).join(_hardest_section(context))}

## Special Gameweeks Detected
{special}

## Chips Available
{chips_available}{chips_used}

## Chip Strategy Guide
{CHIP_GUIDE}

## Constraints
{constraints}

## Transfer Strategy
With {ft} free transfer(s) available, recommend UP TO {ft} transfers if there are clear improvements.
Free transfers bank up to a maximum of {rules.transfer_rules.MAX_BANKED_TRANSFERS}; any beyond that are lost.
Only recommend a chip that is listed as available.

## Task
Analyze the team and reply with exactly one JSON object in this format:
{RESPONSE_SCHEMA}

Use player ids exactly as shown in square brackets.
If no transfers are recommended, use an empty array for transfers.
If no chip should be used this week, set chip_to_play_this_week to "none".
Captain and vice_captain must be different players from the current squad."""
