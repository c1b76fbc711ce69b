"""FastAPI application for shiftclock."""

import logging
from functools import lru_cache
from typing import Annotated, Any

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ..clock import ClockAction, ClockEvent, ClockService
from ..errors import SessionNotFoundError, TransitionRejected
from ..models import ShiftclockConfig
from ..notify import Notifier, build_notifier
from ..reports import department_hours, member_hours
from ..store import JsonSessionStore
from ..timeutil import now_ms

logger = logging.getLogger(__name__)

app = FastAPI(title="shiftclock", description="Shift clock-in and hours tracking")

_configured: ShiftclockConfig | None = None


def configure(config: ShiftclockConfig) -> None:
    """Use ``config`` instead of the environment for this process."""
    global _configured
    _configured = config
    get_config.cache_clear()
    get_service.cache_clear()


@lru_cache(maxsize=1)
def get_config() -> ShiftclockConfig:
    """Dependency to get the process configuration."""
    if _configured is not None:
        return _configured
    return ShiftclockConfig.from_env()


@lru_cache(maxsize=1)
def get_service() -> ClockService:
    """Dependency to get the clock service.

    One instance per process so per-member locks are shared by all requests.
    """
    return ClockService(JsonSessionStore(get_config().data_file))


def get_notifier() -> Notifier:
    """Dependency to get the log channel notifier."""
    return build_notifier(get_config().webhook_url)


ConfigDep = Annotated[ShiftclockConfig, Depends(get_config)]
ServiceDep = Annotated[ClockService, Depends(get_service)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]


class EventIn(BaseModel):
    action: ClockAction
    guild_id: str
    user_id: str
    department_id: str
    timestamp: int | None = None
    department_name: str | None = None


@app.get("/", response_class=PlainTextResponse)
def keep_alive() -> str:
    """Liveness probe for uptime monitors."""
    return "Clock-in service is running\n"


@app.post("/events")
def post_event(
    body: EventIn,
    service: ServiceDep,
    notifier: NotifierDep,
    background_tasks: BackgroundTasks,
) -> dict[str, Any]:
    """Apply a clock-in, break, or clock-out event."""
    event = ClockEvent(
        action=body.action,
        guild_id=body.guild_id,
        user_id=body.user_id,
        department_id=body.department_id,
        timestamp=body.timestamp if body.timestamp is not None else now_ms(),
        department_name=body.department_name,
    )
    try:
        result = service.handle(event)
    except TransitionRejected as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SessionNotFoundError as e:
        logger.error("Inconsistent session data for %s: %s", event.key, e)
        raise HTTPException(
            status_code=500, detail="Session data is inconsistent, nothing was recorded."
        )

    # Runs after the response is sent; delivery failures never reach the caller.
    background_tasks.add_task(notifier.send, result.notification)

    return {
        "reply": result.reply,
        "state": result.state.value,
        "session": result.session.to_dict(),
        "notification": result.notification.to_dict(),
    }


@app.get("/guilds/{guild_id}/users/{user_id}/hours")
def get_member_hours(
    guild_id: str, user_id: str, service: ServiceDep, config: ConfigDep
) -> dict[str, Any]:
    """Monthly, weekly, and all-time hours for one member."""
    report = member_hours(
        service.store,
        guild_id,
        user_id,
        now=now_ms(),
        tz=config.tz,
        weeks=config.history_weeks,
    )
    return report.to_dict()


@app.get("/guilds/{guild_id}/departments/{department_id}/hours")
def get_department_hours(
    guild_id: str, department_id: str, service: ServiceDep, config: ConfigDep
) -> dict[str, Any]:
    """Monthly total and this week's per-member hours for a department."""
    report = department_hours(
        service.store, guild_id, department_id, now=now_ms(), tz=config.tz
    )
    return report.to_dict()
