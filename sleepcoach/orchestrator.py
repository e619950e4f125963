from __future__ import annotations
import asyncio
import json
from typing import Any, Dict, List, Optional, Sequence
from .models import Output
from .advice import classify, validate_observation
from .trend import analyze_trend
from .coach import CoachProtocol, coach_message
from .errors import InvalidObservation


async def advise_async(payload: Any, coach: Optional[CoachProtocol] = None,
                       history: Optional[Sequence[Any]] = None) -> Output:
    """
    Advice for one new observation. When `history` is given, the trend is
    computed over history plus the new observation appended at the end.
    """
    obs = validate_observation(payload)
    advice = classify(obs)
    message = await coach_message(obs, coach)
    trend = analyze_trend([*history, obs]) if history is not None else None
    return Output(advice=advice, coach_message=message, trend=trend)


def advise(payload: Any, coach: Optional[CoachProtocol] = None) -> Dict[str, Any]:
    return asyncio.run(advise_async(payload, coach)).model_dump()


def analyze_history(entries: Sequence[Any]) -> Dict[str, Any]:
    """Per-entry advice, oldest first, plus the trend over the whole sequence."""
    advice: List[Dict[str, Any]] = []
    for i, entry in enumerate(entries):
        try:
            advice.append(classify(entry).model_dump())
        except InvalidObservation as e:
            raise e.prefixed(f"history[{i}]") from e
    return {"advice": advice, "trend": analyze_trend(entries).model_dump()}


def analyze_from_file(path: str, coach: Optional[CoachProtocol] = None) -> Dict[str, Any]:
    """
    Loads JSON from a file:
    - an object is one observation
    - an array is a history, oldest first
    - an object with a 'history' array is a history as well
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return analyze_data(data, coach)


def analyze_data(data: Any, coach: Optional[CoachProtocol] = None) -> Dict[str, Any]:
    if isinstance(data, list):
        return analyze_history(data)
    if isinstance(data, dict) and isinstance(data.get("history"), list):
        return analyze_history(data["history"])
    if isinstance(data, dict):
        return advise(data, coach)
    raise ValueError("Unsupported JSON: expected an object or an array")
