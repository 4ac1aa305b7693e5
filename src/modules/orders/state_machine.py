"""Order state machine.

Pure functions over status values; nothing here reads or writes storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

from modules.orders.constants import TRANSITIONS, StockEffect
from modules.orders.exceptions import InvalidStatusTransition


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    stock_effect: StockEffect
    allowed_next: FrozenSet[str]
    is_noop: bool = False


def allowed_next(current: str) -> FrozenSet[str]:
    return frozenset(TRANSITIONS.get(current, {}))


def evaluate_transition(current: str, target: str) -> TransitionDecision:
    """Decide whether *current* may move to *target* and with which stock effect.

    Moving to the same status is an allowed no-op with no stock effect.
    """
    legal = allowed_next(current)
    if current == target:
        return TransitionDecision(True, StockEffect.NONE, legal, is_noop=True)
    effect = TRANSITIONS.get(current, {}).get(target)
    if effect is None:
        return TransitionDecision(False, StockEffect.NONE, legal)
    return TransitionDecision(True, effect, legal)


def ensure_transition(current: str, target: str) -> TransitionDecision:
    """Like ``evaluate_transition`` but raises ``InvalidStatusTransition`` on refusal."""
    decision = evaluate_transition(current, target)
    if not decision.allowed:
        raise InvalidStatusTransition(current, target, decision.allowed_next)
    return decision
