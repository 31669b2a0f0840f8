"""CLI command to start the smart-home simulator server."""

from datetime import datetime
import logging
import click
import uvicorn

from ..config import DEMO_HOME, SimSettings, load_config
from ..simulator import HomeSimulator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=8123,
    type=int,
    help="Port to bind to (default: 8123)",
)
@click.option(
    "--time-rate",
    type=int,
    help="Virtual time multiplier (default: 1 or the configured value)",
)
@click.option(
    "--start-time",
    type=str,
    help="Initial simulation time (ISO format, default: current time)",
)
def main(config, host, port, time_rate, start_time):
    """Start the smart-home simulator server.

    The simulation loop starts immediately; use the REST endpoints under
    /api/simulator/clock to pause, resume, or change the time rate.

    Examples:
        # Start with the demo home
        homesim-serve

        # Run ten times faster than real time
        homesim-serve --time-rate 10

        # Load a home layout
        homesim-serve --config examples/home.yaml
    """
    settings = SimSettings()
    home = DEMO_HOME
    if config:
        click.echo(f"📄 Loading configuration from: {config}")
        try:
            settings, home = load_config(config)
        except Exception as e:
            click.echo(f"❌ Error loading configuration: {e}", err=True)
            logger.exception("Configuration error")
            return

    if start_time:
        try:
            start_dt = datetime.fromisoformat(start_time.replace("Z", "+00:00"))
        except ValueError as e:
            click.echo(f"❌ Error parsing start time: {e}", err=True)
            return
        settings = settings.model_copy(update={"start_time": start_dt})
        click.echo(f"📅 Start time: {start_dt.isoformat()}")

    if time_rate is not None:
        settings = settings.model_copy(update={"time_rate": time_rate})

    simulator = HomeSimulator(settings=settings, home=home)
    stats = simulator.get_stats()
    click.echo(f"✅ Initialized {stats['devices']} devices, time rate {stats['time_rate']}x")

    app = simulator.get_api_app()

    click.echo(f"🌐 Starting API server on http://{host}:{port}")
    click.echo(f"   • Clock:         http://{host}:{port}/api/simulator/clock")
    click.echo(f"   • Devices:       http://{host}:{port}/api/devices")
    click.echo(f"   • Meter:         http://{host}:{port}/api/meter")
    click.echo(f"   • API Docs:      http://{host}:{port}/docs")
    click.echo()

    try:
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        click.echo("\n🛑 Shutting down...")
    finally:
        simulator.stop()
        click.echo("✅ Simulator stopped")


if __name__ == "__main__":
    main()
