from __future__ import annotations
from typing import Any, Dict, List, Literal, Mapping, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from .errors import InvalidObservation
from .utils import to_dt, is_number


Category = Literal["sleep", "concentration", "overall"]
Priority = Literal["high", "medium", "low"]

SCORE_FIELDS = ("sleep_quality_score", "concentration_score", "sleep_duration_hours")


class Observation(BaseModel):
    """One day's self-report. Accepts the short wire names as well."""
    model_config = ConfigDict(frozen=True)

    sleep_quality_score: int = Field(
        ge=1, le=5, validation_alias=AliasChoices("sleep_quality_score", "sleeping_score"))
    concentration_score: int = Field(
        ge=1, le=5, validation_alias=AliasChoices("concentration_score", "con_score"))
    sleep_duration_hours: float = Field(
        ge=0, le=24, allow_inf_nan=False,
        validation_alias=AliasChoices("sleep_duration_hours", "sleeping_time"))

    @field_validator(*SCORE_FIELDS, mode="before")
    @classmethod
    def _numeric(cls, v: Any) -> Any:
        if not is_number(v):
            raise ValueError("not a number")
        return v

    @classmethod
    def from_payload(cls, data: Any) -> "Observation":
        if isinstance(data, Observation):
            return data
        if not isinstance(data, Mapping):
            raise InvalidObservation.single("observation", data, "expected an object")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise InvalidObservation([
                {"field": ".".join(str(p) for p in err["loc"]) or "observation",
                 "value": err.get("input"),
                 "reason": err["msg"]}
                for err in e.errors()
            ]) from e


class AdviceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = Field(min_length=1)
    category: Category
    priority: Priority


class TrendSummary(BaseModel):
    sufficient: bool
    window: int = 0
    avg_sleep_quality: Optional[float] = None
    avg_concentration: Optional[float] = None
    avg_sleep_duration: Optional[float] = None
    bullets: List[str] = []
    report: str


class Record(BaseModel):
    record_id: int
    user_id: int
    sleep_quality_score: int
    concentration_score: int
    sleep_duration_hours: float
    created_at: str

    @field_validator("created_at")
    @classmethod
    def _iso(cls, v: str) -> str:
        _ = to_dt(v); return v

    def observation(self) -> Observation:
        return Observation(
            sleep_quality_score=self.sleep_quality_score,
            concentration_score=self.concentration_score,
            sleep_duration_hours=self.sleep_duration_hours,
        )


class Output(BaseModel):
    advice: AdviceResult
    coach_message: str
    trend: Optional[TrendSummary] = None


class TrendRequest(BaseModel):
    history: List[Dict[str, Any]] = []
