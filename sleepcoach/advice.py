from __future__ import annotations
import math
from typing import Any, Dict, List, Tuple
from .models import AdviceResult, Category, Observation, Priority
from .errors import InvalidObservation
from .utils import is_number


# field -> (low, high, integral)
BOUNDS: Dict[str, Tuple[float, float, bool]] = {
    "sleep_quality_score": (1, 5, True),
    "concentration_score": (1, 5, True),
    "sleep_duration_hours": (0, 24, False),
}

SLEEP_POOR_QUALITY = ("You are getting enough hours of sleep, but the quality of your sleep may be the problem. "
                      "Try reviewing your routine before going to bed.")
SLEEP_TOO_SHORT = ("Lack of sleep is the cause of your daytime sleepiness. "
                   "Aim for at least 7 hours of sleep and try going to bed earlier.")
SLEEP_GOOD_BUT_SHORT = ("Feeling little sleepiness despite a short night is a good sign. "
                        "In the long run, though, aim for 7-8 hours of sleep.")
SLEEP_EXCELLENT = "Your sleep quality is good! Keep up your current sleep habits."
SLEEP_BALANCED = "Your sleep quality and sleep duration are well balanced. Keep up your current habits."

CONC_SLEEP_DEFICIT = ("Lack of sleep is lowering your concentration. "
                      "Sleeping longer should bring an improvement.")
CONC_LOW_DESPITE_SLEEP = ("You are sleeping enough, but your concentration is low. "
                          "Try adding a morning routine or some exercise.")
CONC_IDEAL = "Your concentration is high and you are sleeping enough. You are keeping an ideal state!"
CONC_HIGH_BUT_SHORT = ("Your concentration is high, but you are not sleeping enough. "
                       "Consider sleeping longer for the sake of your long-term health.")
CONC_STANDARD = ("Your concentration is at a standard level. "
                 "Keeping a balance between sleep and exercise should improve it further.")

OVERALL_DURATION_FIRST = ("Not sleeping long enough is the main problem. "
                          "Make getting at least 7 hours of sleep your top priority.")
OVERALL_REVIEW_ROUTINES = ("Both your sleep quality and your concentration have room for improvement. "
                           "Review your habits before bed and your morning routine.")
OVERALL_BALANCED = "You are in a balanced state. Small improvements added up should take you further."
OVERALL_VERY_GOOD = "You are in very good shape! Keep your current habits and continue monitoring regularly."

SLEEP_LABEL = "[About sleep]"
CONCENTRATION_LABEL = "[About concentration]"


def validate_observation(obs: Any) -> Observation:
    """
    Build (or re-check) an Observation. Bounds are checked on the instance too,
    since model_construct() skips pydantic validation.
    """
    obs = Observation.from_payload(obs)
    errors: List[Dict[str, Any]] = []
    for name, (lo, hi, integral) in BOUNDS.items():
        v = getattr(obs, name, None)
        if not is_number(v) or math.isnan(v) or math.isinf(v):
            errors.append({"field": name, "value": v, "reason": "not a number"})
        elif integral and not float(v).is_integer():
            errors.append({"field": name, "value": v, "reason": "not an integer"})
        elif not lo <= v <= hi:
            errors.append({"field": name, "value": v, "reason": f"must be between {lo} and {hi}"})
    if errors:
        raise InvalidObservation(errors)
    return obs


def sleep_message(quality: int, hours: float) -> str:
    if quality <= 2 and hours >= 7:
        return SLEEP_POOR_QUALITY
    elif quality <= 2 and hours < 7:
        return SLEEP_TOO_SHORT
    elif quality >= 4 and hours < 6:
        return SLEEP_GOOD_BUT_SHORT
    elif quality >= 4 and hours >= 7:
        return SLEEP_EXCELLENT
    return SLEEP_BALANCED


def concentration_message(concentration: int, hours: float) -> str:
    if concentration <= 2 and hours < 6:
        return CONC_SLEEP_DEFICIT
    elif concentration <= 2 and hours >= 7:
        return CONC_LOW_DESPITE_SLEEP
    elif concentration >= 4 and hours >= 7:
        return CONC_IDEAL
    elif concentration >= 4 and hours < 6:
        return CONC_HIGH_BUT_SHORT
    return CONC_STANDARD


def overall_advice(quality: int, concentration: int, hours: float) -> str:
    total = quality + concentration
    if total <= 4:
        return OVERALL_DURATION_FIRST if hours < 6 else OVERALL_REVIEW_ROUTINES
    elif total <= 7:
        return OVERALL_BALANCED
    return OVERALL_VERY_GOOD


def priority_for(quality: int, concentration: int, hours: float) -> Priority:
    if quality <= 2 or concentration <= 2 or hours < 6:
        return "high"
    elif quality >= 4 and concentration >= 4 and hours >= 7:
        return "low"
    return "medium"


def category_for(quality: int, concentration: int, hours: float) -> Category:
    if quality <= 2 or hours < 6:
        return "sleep"
    elif concentration <= 2:
        return "concentration"
    return "overall"


def compose_message(overall: str, sleep: str, concentration: str) -> str:
    return f"{overall}\n\n{SLEEP_LABEL}\n{sleep}\n\n{CONCENTRATION_LABEL}\n{concentration}"


def classify(observation: Any) -> AdviceResult:
    obs = validate_observation(observation)
    q, c, h = obs.sleep_quality_score, obs.concentration_score, obs.sleep_duration_hours
    return AdviceResult(
        message=compose_message(overall_advice(q, c, h), sleep_message(q, h), concentration_message(c, h)),
        category=category_for(q, c, h),
        priority=priority_for(q, c, h),
    )
