import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from parlight.errors import FixtureError
from parlight.models.colors import list_colors, list_modes
from parlight.models.fixtures import ParLight

from .schemas import (
    ActionResponse,
    ColorRequest,
    CycleRequest,
    DimmerFadeRequest,
    DimmerRequest,
    ErrorResponse,
    FadeRequest,
    HealthResponse,
    LightOnRequest,
    ModeRequest,
    PulseRequest,
    RainbowRequest,
    StatusResponse,
    StrobeAnimationRequest,
    StrobeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_fixture(request: Request) -> ParLight:
    return request.app.state.fixture


def _act(action: Callable[[], object], message: Callable[[], str]):
    """Run a fixture operation; invalid input becomes a 400 with the error message."""
    try:
        action()
    except (FixtureError, ValueError) as exc:
        logger.warning("request rejected: %s", exc)
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())
    return ActionResponse(message=message())


# Light control

@router.post("/light/on")
async def light_on(body: Optional[LightOnRequest] = None, fixture: ParLight = Depends(get_fixture)):
    body = body or LightOnRequest()
    return _act(lambda: fixture.turn_on(body.intensity, body.color), lambda: "Light turned on")


@router.post("/light/off")
async def light_off(fixture: ParLight = Depends(get_fixture)):
    return _act(fixture.turn_off, lambda: "Light turned off")


@router.post("/light/color")
async def light_color(body: ColorRequest, fixture: ParLight = Depends(get_fixture)):
    return _act(lambda: fixture.set_color(body.color, body.intensity), lambda: f"Color set to {body.color}")


@router.post("/light/dimmer")
async def light_dimmer(body: DimmerRequest, fixture: ParLight = Depends(get_fixture)):
    return _act(lambda: fixture.set_master_dimmer(body.value), lambda: f"Dimmer set to {body.value}")


@router.post("/light/strobe")
async def light_strobe(body: Optional[StrobeRequest] = None, fixture: ParLight = Depends(get_fixture)):
    body = body or StrobeRequest()
    return _act(lambda: fixture.set_strobe(body.speed), lambda: f"Strobe set to {fixture.current_state.strobe}")


@router.post("/light/mode")
async def light_mode(body: ModeRequest, fixture: ParLight = Depends(get_fixture)):
    return _act(lambda: fixture.set_mode(body.mode, body.value), lambda: f"Mode set to {body.mode}")


# Animations

@router.post("/animation/fade")
async def animation_fade(body: FadeRequest, fixture: ParLight = Depends(get_fixture)):
    return _act(
        lambda: fixture.fade_to_color(body.color, body.duration, body.easing),
        lambda: f"Fading to {body.color}",
    )


@router.post("/animation/pulse")
async def animation_pulse(body: Optional[PulseRequest] = None, fixture: ParLight = Depends(get_fixture)):
    body = body or PulseRequest()
    return _act(
        lambda: fixture.start_pulse(body.color, body.min_intensity, body.max_intensity, body.duration),
        lambda: "Pulse animation started",
    )


@router.post("/animation/rainbow")
async def animation_rainbow(body: Optional[RainbowRequest] = None, fixture: ParLight = Depends(get_fixture)):
    body = body or RainbowRequest()
    return _act(lambda: fixture.start_rainbow(body.duration, body.steps), lambda: "Rainbow animation started")


@router.post("/animation/strobe")
async def animation_strobe(body: Optional[StrobeAnimationRequest] = None, fixture: ParLight = Depends(get_fixture)):
    body = body or StrobeAnimationRequest()
    return _act(
        lambda: fixture.start_strobe(body.color, body.on_duration, body.off_duration),
        lambda: "Strobe animation started",
    )


@router.post("/animation/cycle")
async def animation_cycle(body: Optional[CycleRequest] = None, fixture: ParLight = Depends(get_fixture)):
    body = body or CycleRequest()
    return _act(lambda: fixture.start_color_cycle(body.colors, body.step_duration), lambda: "Color cycle started")


@router.post("/animation/dimmer")
async def animation_dimmer(body: DimmerFadeRequest, fixture: ParLight = Depends(get_fixture)):
    return _act(
        lambda: fixture.fade_dimmer(body.value, body.duration, body.easing),
        lambda: f"Fading dimmer to {body.value}",
    )


@router.post("/animation/stop")
async def animation_stop(fixture: ParLight = Depends(get_fixture)):
    return _act(fixture.stop_animation, lambda: "Animation stopped")


# Info

@router.get("/colors")
async def colors():
    return {"colors": list_colors()}


@router.get("/modes")
async def modes():
    return {"modes": list_modes()}


@router.get("/status", response_model=StatusResponse)
async def status(fixture: ParLight = Depends(get_fixture)):
    return StatusResponse(isAnimating=fixture.is_animating(), currentState=fixture.snapshot())


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, fixture: ParLight = Depends(get_fixture)):
    settings = request.app.state.settings
    return HealthResponse(
        uptime=time.monotonic() - request.app.state.started_at,
        timestamp=datetime.now(timezone.utc).isoformat(),
        dmx={
            "connected": fixture.is_connected(),
            "device": settings.dmx_device,
            "driver": settings.dmx_driver,
        },
    )
