from __future__ import annotations

from dataclasses import dataclass

from config import SignalWeights
from schemas import User
from services.signals import SignalValues

SIGNALS = ("pref", "sim", "geo", "pop", "cold")


@dataclass(frozen=True)
class ActiveSignals:
    pref: bool
    sim: bool
    geo: bool
    pop: bool = True
    cold: bool = False

    @classmethod
    def for_user(cls, user: User) -> ActiveSignals:
        has_prefs = bool(user.preferences)
        has_history = bool(user.attended_events)
        return cls(
            pref=has_prefs,
            sim=has_history,
            geo=user.location is not None,
            pop=True,
            # independent of location
            cold=not has_prefs and not has_history,
        )

    def names(self) -> tuple[str, ...]:
        return tuple(s for s in SIGNALS if getattr(self, s))


class WeightNormalizer:
    """
    Blends signal values with weights renormalized over the user's active
    signals, so users with fewer available signals are not outscored by
    users with more.
    """

    def __init__(self, weights: SignalWeights, active: ActiveSignals) -> None:
        self.active = active
        self._pairs = tuple((name, getattr(weights, name)) for name in active.names())
        total = sum(w for _, w in self._pairs)
        self.weight_sum = total if total > 0 else 1.0

    def combine(self, values: SignalValues) -> float:
        raw = sum(w * getattr(values, name) for name, w in self._pairs)
        return raw / self.weight_sum
