"""Command line interface for the ParLight controller."""

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError

from .config import Settings
from .custom_logging import setup_logging
from .main import create_bus, create_fixture, run, shutdown_fixture
from .models.colors import list_colors, list_modes
from .services.demo_sequence import run_demo_sequence


app = typer.Typer()


def _settings(**overrides) -> Settings:
    """Environment settings with any command line options that were given on top."""
    settings = Settings.from_env()
    given = {key: value for key, value in overrides.items() if value is not None}
    if "dmx_driver" in given:
        given["dmx_driver"] = given["dmx_driver"].strip().lower()
    if not given:
        return settings
    try:
        return Settings(**{**settings.model_dump(), **given})
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise typer.BadParameter(problems) from None


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, help="HTTP port (default: PORT or 3000)"),
    driver: Optional[str] = typer.Option(None, help="DMX driver: artnet or memory"),
    device: Optional[str] = typer.Option(None, help="Art-Net node address"),
    start_channel: Optional[int] = typer.Option(None, help="DMX start channel of the fixture"),
):
    """Run the HTTP API."""
    run(_settings(host=host, port=port, dmx_driver=driver, dmx_device=device, start_channel=start_channel))


@app.command()
def demo(
    driver: Optional[str] = typer.Option(None, help="DMX driver: artnet or memory"),
    device: Optional[str] = typer.Option(None, help="Art-Net node address"),
    start_channel: Optional[int] = typer.Option(None, help="DMX start channel of the fixture"),
    hold: float = typer.Option(2.0, help="Seconds to hold green before fading"),
    fade: float = typer.Option(2000, help="Fade duration in milliseconds"),
):
    """Run the scripted demo sequence against the fixture, then turn it off."""
    settings = _settings(dmx_driver=driver, dmx_device=device, start_channel=start_channel)
    setup_logging(settings.log_level)

    async def _run():
        bus = create_bus(settings)
        fixture = create_fixture(bus, settings)
        await bus.start()
        try:
            await run_demo_sequence(fixture, hold_seconds=hold, fade_ms=fade)
        finally:
            await shutdown_fixture(fixture, bus)

    asyncio.run(_run())
    typer.echo("Demo complete")


@app.command()
def colors():
    """List the color names the fixture accepts."""
    for name in list_colors():
        typer.echo(name)


@app.command()
def modes():
    """List the fixture's built-in modes."""
    for name in list_modes():
        typer.echo(name)


if __name__ == "__main__":
    app()
