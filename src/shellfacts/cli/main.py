"""shellfacts CLI - shellfacts command."""

import click

from shellfacts.cli.extract import extract_command


@click.group()
@click.version_option(version="0.1.0", prog_name="shellfacts")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """shellfacts - semantic facts from shell scripts for convention linting."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


cli.add_command(extract_command, name="extract")


if __name__ == "__main__":
    cli()
