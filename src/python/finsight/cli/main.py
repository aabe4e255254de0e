"""finsight CLI entry point."""

from __future__ import annotations

from pathlib import Path

import click

from finsight.__version__ import __version__
from finsight.cli.budget import budget
from finsight.cli.currency import currency
from finsight.cli.dashboard import dashboard


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="finsight")
@click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    help="Path to the finsight database.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to a JSON config file (defaults to FINSIGHT_CONFIG).",
)
@click.option("--live-rates", is_flag=True, help="Fetch rates from the rate API.")
@click.pass_context
def main(
    ctx: click.Context,
    db_path: Path | None,
    config_path: Path | None,
    live_rates: bool,
) -> None:
    """finsight CLI entry point."""
    ctx.obj = {
        "db_path": db_path,
        "config_path": config_path,
        "live_rates": live_rates,
    }


main.add_command(budget)
main.add_command(currency)
main.add_command(dashboard)


if __name__ == "__main__":
    main()
