from __future__ import annotations

from typing import Any, Dict, List, Optional

import logging
import os
from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from sleepcoach import (
    AdviceResult,
    CoachProtocol,
    HistoryStore,
    InvalidObservation,
    Output,
    Record,
    Settings,
    TrendRequest,
    TrendSummary,
    advise_async,
    analyze_trend,
    classify,
    coach_message,
    default_coach,
    validate_observation,
)
from sleepcoach.utils import now_iso, is_number

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_store(request: Request) -> HistoryStore:
    return request.app.state.store


def get_coach(request: Request) -> CoachProtocol:
    return request.app.state.coach


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _user_id(value: Any) -> Optional[int]:
    if not is_number(value) or not float(value).is_integer():
        return None
    return int(value)


def _invalid_user_id() -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "invalid_user_id"})


api = APIRouter(prefix="/api", tags=["Coach"])
records = APIRouter(prefix="/router", tags=["Records"])


@api.get("/hello")
async def hello() -> Dict[str, str]:
    return {"message": "Hello from the sleep coach!"}


@api.get("/health")
async def health(store: HistoryStore = Depends(get_store)) -> Dict[str, Any]:
    return {"ok": True, "now": now_iso(), "records": len(store)}


@api.post("/advice", response_model=AdviceResult)
async def advice_endpoint(payload: Any = Body(...)) -> AdviceResult:
    return classify(payload)


@api.post("/ai")
async def ai_endpoint(payload: Any = Body(...), coach: CoachProtocol = Depends(get_coach)) -> Dict[str, str]:
    return {"message": await coach_message(payload, coach)}


@api.post("/coach", response_model=Output)
async def coach_endpoint(payload: Any = Body(...),
                         coach: CoachProtocol = Depends(get_coach),
                         store: HistoryStore = Depends(get_store)):
    """Advice, coach line and, when `user_id` is present, the trend over the stored history."""
    history = None
    if isinstance(payload, dict) and "user_id" in payload:
        user_id = _user_id(payload["user_id"])
        if user_id is None:
            return _invalid_user_id()
        history = store.observations(user_id)
    return await advise_async(payload, coach, history)


@api.post("/trend", response_model=TrendSummary)
async def trend_endpoint(req: TrendRequest) -> TrendSummary:
    return analyze_trend(req.history)


@api.get("/trend/{user_id}", response_model=TrendSummary)
async def user_trend_endpoint(user_id: int, since: Optional[str] = None,
                              store: HistoryStore = Depends(get_store)):
    try:
        history = store.observations(user_id, since)
    except (ValueError, OverflowError):
        return JSONResponse(status_code=400, content={"error": "invalid_since"})
    return analyze_trend(history)


@api.get("/records", response_model=List[Record])
async def latest_records(store: HistoryStore = Depends(get_store)) -> List[Record]:
    return store.latest(10)


@records.post("/save", status_code=201)
async def save_record(payload: Any = Body(...), store: HistoryStore = Depends(get_store)):
    if not isinstance(payload, dict):
        raise InvalidObservation.single("observation", None, "expected an object")
    user_id = _user_id(payload.get("user_id"))
    if user_id is None:
        return _invalid_user_id()
    rec = store.add(user_id, validate_observation(payload))
    logger.info("Saved record %s for user %s", rec.record_id, user_id)
    return {"message": "Record inserted successfully", "record": rec.model_dump()}


@records.post("/seven", response_model=List[Record])
async def last_seven(payload: Dict[str, Any] = Body(...),
                     store: HistoryStore = Depends(get_store),
                     settings: Settings = Depends(get_settings)):
    user_id = _user_id(payload.get("user_id"))
    if user_id is None:
        return _invalid_user_id()
    return store.recent(user_id, settings.history_limit)


async def invalid_observation_handler(request: Request, exc: InvalidObservation) -> JSONResponse:
    logger.info("Rejected payload on %s: %s", request.url.path, exc)
    details = [{"field": e["field"], "reason": e["reason"]} for e in exc.errors]
    return JSONResponse(status_code=400, content={"error": "invalid_payload", "details": details})


def create_app(store: Optional[HistoryStore] = None, coach: Optional[CoachProtocol] = None,
               settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Sleep Coach", version="1.0.0")
    app.state.settings = settings
    app.state.store = store if store is not None else HistoryStore()
    app.state.coach = coach or default_coach(settings)
    app.add_exception_handler(InvalidObservation, invalid_observation_handler)
    app.include_router(api)
    app.include_router(records)
    return app


def run() -> None:
    """Entry point; `uvicorn --factory server:create_app` works as well."""
    import uvicorn

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(1)
    logging.getLogger().setLevel(settings.log_level)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
