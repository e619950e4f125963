from .errors import InvalidObservation
from .models import (
    Observation,
    AdviceResult,
    TrendSummary,
    Record,
    Output,
    TrendRequest,
)
from .config import Settings
from .advice import (
    classify,
    validate_observation,
    sleep_message,
    concentration_message,
    overall_advice,
    priority_for,
    category_for,
    compose_message,
)
from .trend import analyze_trend, summarize_trend, TREND_WINDOW, INSUFFICIENT_REPORT
from .coach import CoachProtocol, RuleBasedCoach, LLMClient, default_coach, coach_message
from .history import HistoryStore
from .orchestrator import advise_async, advise, analyze_history, analyze_from_file, analyze_data
