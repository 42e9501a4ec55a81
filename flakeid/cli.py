import sys
from typing import Any

import click

from flakeid import __version__
from flakeid.errors import ClockMovedBackwardsError, ConfigError
from flakeid.logging import error
from flakeid.settings import create_worker, worker_options
from flakeid.utils.snowflake import parse_id


@click.group()
@click.version_option(__version__, "-V", "--version", prog_name="flakeid")
def cli() -> None:
    pass


@cli.command()
@click.option("-n", "--count", help="How many ids to generate", default=1, type=int)
@click.option("-w", "--worker", "worker_id", help="Worker id, 0-31", type=int)
@click.option("-d", "--datacenter", "datacenter_id", help="Datacenter id, 0-31", type=int)
@click.option(
    "-env",
    "--environment",
    help="Environment, read the snowflake section of config/conf.{env}.yaml",
    default=None,
)
def gen(count, environment, **config: Any) -> None:
    """Generate ids."""
    try:
        worker = create_worker(environment, **config)
        for id in worker.next_ids(count):
            click.echo(id)
    except (ConfigError, ClockMovedBackwardsError, ValueError) as e:
        error("Error: %s", e)
        click.echo("input `flakeid --help` for more helps.", err=True)
        sys.exit(2)


@cli.command()
@click.argument("ids", nargs=-1, type=int, required=True)
@click.option(
    "-env",
    "--environment",
    help="Environment, read the snowflake section of config/conf.{env}.yaml",
    default=None,
)
def parse(ids, environment) -> None:
    """Decode ids into timestamp, datacenter id, worker id and sequence."""
    try:
        options = worker_options(environment)
        options.pop("worker_id")
        options.pop("datacenter_id")
        for id in ids:
            p = parse_id(id, **options)
            click.echo(
                f"{id} {p.timestamp} {p.datetime.isoformat()} "
                f"{p.datacenter_id} {p.worker_id} {p.sequence}"
            )
    except (ConfigError, ValueError) as e:
        error("Error: %s", e)
        sys.exit(2)


if __name__ == "__main__":
    cli()
