"""shellfacts extract command - print semantic facts for shell scripts."""

import json
from collections.abc import Iterator
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shellfacts.config.loader import load_config
from shellfacts.core.errors import InternalError, ShellFactsError
from shellfacts.core.logging import configure_logging, get_logger, set_run_id
from shellfacts.extraction import FileFacts, FunctionInfo, ShellExtractor, detect_grammar

log = get_logger(__name__)


def iter_script_paths(paths: tuple[Path, ...]) -> Iterator[Path]:
    """Expand directories into the shell scripts they contain (by name only)."""
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and detect_grammar(child) is not None:
                    yield child
        else:
            yield path


def _params_label(fn: FunctionInfo) -> str:
    parts = []
    for p in fn.params:
        if p.rest:
            parts.append(f"{p.name}...")
        elif p.default_value is not None:
            parts.append(f"{p.name}={p.default_value}")
        else:
            parts.append(p.name)
    return ", ".join(parts)


def _make_facts_table(facts: FileFacts) -> Table:
    """Create the per-file function table for text output."""
    title = escape(facts.file) if facts.file else "<stdin>"
    table = Table(title=title, title_justify="left", box=None, pad_edge=False)
    table.add_column("line", style="dim", justify="right")
    table.add_column("function", style="cyan")
    table.add_column("params")
    table.add_column("exported", justify="center")

    for fn in facts.functions:
        table.add_row(
            str(fn.location.line),
            escape(fn.name),
            escape(_params_label(fn)),
            "[green]yes[/green]" if fn.is_exported else "[dim]no[/dim]",
        )
    return table


def _print_text(console: Console, facts: FileFacts) -> None:
    console.print(_make_facts_table(facts))
    for imp in facts.imports:
        if imp.is_resolved:
            target = escape(imp.from_path)
        else:
            target = f"[yellow]<dynamic: {escape(imp.raw)}>[/yellow]"
        console.print(f"  [dim]{imp.location.line:>4}[/dim] source {target}")
    for exp in facts.exports:
        if exp.kind == "variable":
            console.print(f"  [dim]{exp.location.line:>4}[/dim] export {escape(exp.name)}")
    console.print()


@click.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path)
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: .shellfacts.yaml in the current directory)",
)
@click.pass_context
def extract_command(
    ctx: click.Context, paths: tuple[Path, ...], as_json: bool, config_path: Path | None
) -> None:
    """Extract functions, parameters, exports and imports from shell scripts.

    PATHS are script files or directories to scan for *.sh, *.bash, *.zsh
    and shell dotfiles.
    """
    try:
        config = load_config(Path.cwd(), config_path=config_path)
    except ShellFactsError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if ctx.obj and ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    set_run_id()

    extractor = ShellExtractor(config=config.extraction)
    console = Console()
    err_console = Console(stderr=True)

    results: list[dict[str, object]] = []
    failed = 0
    for path in iter_script_paths(paths):
        try:
            facts = extractor.extract_path(path)
        except ShellFactsError as e:
            failed += 1
            log.info("file_skipped", file=str(path), error=e.error_name)
            if as_json:
                results.append({"file": str(path), "error": e.to_dict()})
            else:
                err_console.print(f"[red]skipped[/red] {escape(str(path))}: {escape(e.message)}")
            continue
        except OSError as e:
            failed += 1
            if as_json:
                results.append({"file": str(path), "error": {"message": str(e)}})
            else:
                err_console.print(f"[red]unreadable[/red] {escape(str(path))}: {escape(str(e))}")
            continue
        except Exception as e:
            # Report and move on to the next file
            failed += 1
            error = InternalError.unexpected(str(e), file=str(path), type=type(e).__name__)
            log.exception("extract_failed", file=str(path))
            if as_json:
                results.append({"file": str(path), "error": error.to_dict()})
            else:
                err_console.print(f"[red]failed[/red] {escape(str(path))}: {escape(error.message)}")
            continue

        if as_json:
            results.append(facts.to_dict())
        else:
            _print_text(console, facts)

    if as_json:
        click.echo(json.dumps(results, indent=2))
    if failed:
        ctx.exit(1)
