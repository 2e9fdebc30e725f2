# Time totals for an RPM block's massive actions.
#
# Output format:
# {
#   "blockId": "...",
#   "actions": N,
#   "totalMinutes": M, "totalTime": "1h30m",
#   "mustMinutes": M,  "mustTime": "0h45m",     # actions keyed ✔
#   "byKey": {"✘": N, "✔": N, "O": N, "➜": N, "": N}
# }

import math
from typing import Dict, List

MINUTES_PER_UNIT = {
    "min": 1,
    "hr": 60,
    "d": 24 * 60,
    "wk": 7 * 24 * 60,
    "mo": 30 * 24 * 60,
}
MUST_KEY = "✔"
KEYS = ("✘", "✔", "O", "➜")


def action_minutes(action: Dict) -> int:
    try:
        amount = float(action.get("durationAmount") or 0)
    except (TypeError, ValueError):
        return 0
    factor = MINUTES_PER_UNIT.get(action.get("durationUnit") or "min", 1)
    minutes = amount * factor
    if not math.isfinite(minutes):
        return 0
    return max(0, int(round(minutes)))


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}h{minutes % 60}m"


def _key_counts(actions: List[Dict]) -> Dict[str, int]:
    cnt = {k: 0 for k in KEYS}
    cnt[""] = 0
    for a in actions:
        k = a.get("key") or ""
        cnt[k if k in cnt else ""] += 1
    return cnt


def summarize_block(block: Dict) -> Dict:
    actions = [a for a in (block.get("massiveActions") or []) if isinstance(a, dict)]
    total = 0
    must = 0
    for a in actions:
        m = action_minutes(a)
        total += m
        if a.get("key") == MUST_KEY:
            must += m
    return {
        "blockId": block.get("id"),
        "actions": len(actions),
        "totalMinutes": total,
        "totalTime": format_minutes(total),
        "mustMinutes": must,
        "mustTime": format_minutes(must),
        "byKey": _key_counts(actions),
    }
