"""CLI command to run the simulation headless for a fixed wall-clock time."""

import logging
import time

import click

from ..config import DEMO_HOME, SimSettings, load_config
from ..simulator import HomeSimulator

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", type=click.Path(exists=True), help="Configuration file path")
@click.option("--seconds", default=5.0, type=float, show_default=True, help="Wall-clock run time")
@click.option("--time-rate", type=int, help="Virtual time multiplier")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(config, seconds, time_rate, verbose):
  """Run the demo (or configured) home and report clock and meter readings."""
  logging.basicConfig(
    level=logging.DEBUG if verbose else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
  )
  settings, home = load_config(config) if config else (SimSettings(), DEMO_HOME)
  if time_rate is not None:
    settings = settings.model_copy(update={"time_rate": time_rate})

  simulator = HomeSimulator(settings=settings, home=home)
  start = simulator.clock.now()
  try:
    time.sleep(seconds)
  except KeyboardInterrupt:
    click.echo("Interrupted")
  finally:
    simulator.stop()

  stats = simulator.get_stats()
  meter = stats["meter"]
  click.echo(f"Ticks: {stats['ticks']:,} (faults: {stats['faults']})")
  click.echo(f"Virtual time: {start.isoformat()} -> {stats['current_time']} ({simulator.clock.now() - start})")
  click.echo(f"Global consumption: {meter['global_consumption_w']:.2f} W")
  click.echo(f"Consumed energy: {meter['consumed_energy_wh']:.4f} Wh")
  click.echo(f"Average power: {meter['average_power_w']:.2f} W")


if __name__ == "__main__":
  main()
