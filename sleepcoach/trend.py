from __future__ import annotations
from typing import Any, List, Optional, Sequence
import numpy as np
from .models import Observation, TrendSummary
from .advice import validate_observation
from .errors import InvalidObservation


TREND_WINDOW = 3
INSUFFICIENT_REPORT = "Not enough data for trend analysis."
TREND_HEADER = "[Trend over the last 3 days]\n"
BULLET = "• "

SLEEPINESS_HIGH = "Daytime sleepiness is persistently high"
SLEEPINESS_CONTROLLED = "Daytime sleepiness is well under control"
CONCENTRATION_LOW = "Concentration is persistently low"
CONCENTRATION_MAINTAINED = "Concentration is well maintained"
DURATION_SHORT = "Sleep duration is persistently insufficient"
DURATION_SECURED = "Sleep duration is sufficiently secured"


def _band(mean: float, low: float, high: float, below: str, above: str) -> Optional[str]:
    # the closed interval [low, high] is the neutral band
    if mean < low:
        return below
    elif mean > high:
        return above
    return None


def recent_window(history: Sequence[Any]) -> List[Observation]:
    """Last TREND_WINDOW entries, oldest first. Only those entries are validated."""
    entries = list(history)
    offset = max(0, len(entries) - TREND_WINDOW)
    window = []
    for i, entry in enumerate(entries[offset:], start=offset):
        try:
            window.append(validate_observation(entry))
        except InvalidObservation as e:
            raise e.prefixed(f"history[{i}]") from e
    return window


def analyze_trend(history: Sequence[Any]) -> TrendSummary:
    if len(history) < TREND_WINDOW:
        return TrendSummary(sufficient=False, report=INSUFFICIENT_REPORT)

    window = recent_window(history)
    avg_q = float(np.mean([o.sleep_quality_score for o in window]))
    avg_c = float(np.mean([o.concentration_score for o in window]))
    avg_h = float(np.mean([o.sleep_duration_hours for o in window]))

    bullets = [b for b in (
        _band(avg_q, 2.5, 3.5, SLEEPINESS_HIGH, SLEEPINESS_CONTROLLED),
        _band(avg_c, 2.5, 3.5, CONCENTRATION_LOW, CONCENTRATION_MAINTAINED),
        _band(avg_h, 6.5, 7.5, DURATION_SHORT, DURATION_SECURED),
    ) if b]
    report = TREND_HEADER + "".join(f"{BULLET}{b}\n" for b in bullets)
    return TrendSummary(sufficient=True, window=len(window), avg_sleep_quality=avg_q,
                        avg_concentration=avg_c, avg_sleep_duration=avg_h,
                        bullets=bullets, report=report)


def summarize_trend(history: Sequence[Any]) -> str:
    return analyze_trend(history).report
