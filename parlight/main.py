import logging
import time
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parlight.api import router as api_router
from parlight.config import Settings
from parlight.custom_logging import setup_logging
from parlight.models.fixtures import ParLight
from parlight.services.animation_engine import AnimationEngine
from parlight.services.artnet import ArtNetService
from parlight.services.bus import MemoryBus

logger = logging.getLogger(__name__)

DMXOutput = Union[ArtNetService, MemoryBus]


def create_bus(settings: Settings) -> DMXOutput:
    if settings.dmx_driver == "memory":
        return MemoryBus()
    return ArtNetService(
        host=settings.dmx_device,
        port=settings.artnet_port,
        universe=settings.artnet_universe,
        fps=settings.dmx_fps,
        debug=settings.artnet_debug,
        debug_file=settings.artnet_debug_file,
    )


def create_fixture(bus: DMXOutput, settings: Settings) -> ParLight:
    return ParLight(bus, settings.start_channel, engine_factory=lambda: AnimationEngine(fps=settings.dmx_fps))


async def shutdown_fixture(fixture: ParLight, bus: DMXOutput) -> None:
    """Leave the fixture dark: stop any animation, turn it off, then black out and close the output."""
    if fixture.is_animating():
        logger.info("Stopping running animation...")
        fixture.stop_animation()
    logger.info("Turning light off...")
    fixture.turn_off()
    try:
        await bus.blackout()
    except OSError as e:
        logger.error("Error during blackout: %s", e)
    await bus.stop()


def create_app(
    settings: Optional[Settings] = None,
    bus: Optional[DMXOutput] = None,
    fixture: Optional[ParLight] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Initialize services
        dmx = bus or (fixture.universe if fixture is not None else create_bus(settings))
        par_light = fixture or create_fixture(dmx, settings)

        await dmx.start()
        logger.info("DMX output: %s (%s)", settings.dmx_device, settings.dmx_driver)
        logger.info("ParLight patched at channel %s", par_light.start_channel)

        # Make services available to routes
        app.state.settings = settings
        app.state.bus = dmx
        app.state.fixture = par_light
        app.state.started_at = time.monotonic()

        yield

        # Shutdown: stop animations and turn the light off so the fixture goes dark
        await shutdown_fixture(par_light, dmx)
        logger.info("DMX controller stopped")

    app = FastAPI(lifespan=lifespan, title="ParLight DMX Controller")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "ParLight DMX Controller"}

    return app


def run(settings: Optional[Settings] = None) -> None:
    import uvicorn

    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    logger.info("DMX web controller on http://%s:%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
