# src/treelox/cli/main.py
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .. import __version__
from ..config import Config
from ..error_reporter import get_error_reporter
from ..lexer import Lexer
from ..lox_ast import Node
from ..lox_token import EOF, Token
from ..session import (
    Session, compile_source, EXIT_STATIC_ERROR
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(settings):
    if not settings.enable_debug_logs:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _read(file):
    with open(file, 'r', encoding='utf-8') as f:
        return f.read()


def _report(errors, filename):
    reporter = get_error_reporter()
    for error in errors:
        err_console.print(reporter.format(error, filename), markup=False, highlight=False)


def _stats_table(heap):
    stats = heap.stats()
    table = Table(title="Heap")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for key in ("live", "peak_live", "total_allocated", "total_freed", "collections", "next_gc"):
        table.add_row(key, str(stats[key]))
    for kind, count in sorted(stats["live_by_kind"].items()):
        table.add_row(f"live {kind}", str(count))
    table.add_row("gc_time", f"{stats['gc_time'] * 1000:.2f} ms")
    return table


@click.group()
@click.version_option(version=__version__, prog_name="treelox")
def cli():
    """treelox - a tree-walking Lox interpreter with a tracing heap"""
    pass


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--gc-stats', is_flag=True, help="Print heap statistics after the run.")
@click.option('--stress-gc', is_flag=True, help="Collect on every allocation.")
@click.option('--debug', is_flag=True, help="Enable verbose debug logging.")
def run(file, gc_stats, stress_gc, debug):
    """Run a treelox program"""
    source_code = _read(file)

    settings = Config()
    if stress_gc:
        settings.set("gc_stress", True, persist=False)
    if debug:
        settings.set("debug_level", "verbose", persist=False)
    _configure_logging(settings)

    session = Session(config=settings)
    result = session.run(source_code, filename=file)

    if result.static_errors:
        _report(result.static_errors, file)
    elif result.runtime_error is not None:
        _report([result.runtime_error], file)

    if gc_stats:
        err_console.print(_stats_table(session.heap))

    sys.exit(result.exit_code)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def check(file):
    """Check syntax and scoping of a treelox file"""
    source_code = _read(file)
    _, errors = compile_source(source_code, filename=file)

    if errors:
        err_console.print("[bold red]Errors found:[/bold red]")
        _report(errors, file)
        sys.exit(EXIT_STATIC_ERROR)
    console.print("[bold green]No errors.[/bold green]")


def _ast_tree(node, label=None):
    name = type(node).__name__
    tree = Tree(f"[bold]{label}[/bold]: {name}" if label else f"[bold]{name}[/bold]")
    for key, value in vars(node).items():
        if key == "token":
            continue
        if isinstance(value, Node):
            tree.add(_ast_tree(value, key))
        elif isinstance(value, list):
            branch = tree.add(f"[bold]{key}[/bold] ({len(value)})")
            for item in value:
                if isinstance(item, Node):
                    branch.add(_ast_tree(item))
                else:
                    branch.add(repr(item.lexeme if isinstance(item, Token) else item))
        elif isinstance(value, Token):
            tree.add(f"{key} = {value.lexeme}")
        else:
            tree.add(f"{key} = {value!r}")
    return tree


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def ast(file):
    """Show the resolved AST of a treelox file"""
    source_code = _read(file)
    program, errors = compile_source(source_code, filename=file)
    if errors:
        _report(errors, file)
        sys.exit(EXIT_STATIC_ERROR)

    console.print(Panel.fit(
        _ast_tree(program),
        title="[bold blue]Abstract Syntax Tree[/bold blue]",
        border_style="blue"
    ))


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def tokens(file):
    """Show tokens of a treelox file"""
    lexer = Lexer(_read(file), file)

    table = Table(title="Tokens")
    table.add_column("Type", style="cyan")
    table.add_column("Lexeme", style="green")
    table.add_column("Line", style="yellow")
    table.add_column("Column", style="yellow")

    while True:
        token = lexer.next_token()
        if token.type == EOF:
            break
        table.add_row(token.type, token.lexeme, str(token.line), str(token.column))

    console.print(table)
    if lexer.errors:
        _report(lexer.errors, file)
        sys.exit(EXIT_STATIC_ERROR)


@cli.command()
@click.option('--stress-gc', is_flag=True, help="Collect on every allocation.")
def repl(stress_gc):
    """Start the treelox REPL"""
    settings = Config()
    if stress_gc:
        settings.set("gc_stress", True, persist=False)
    _configure_logging(settings)

    session = Session(config=settings)
    console.print(f"[bold green]treelox REPL v{__version__}[/bold green]")
    console.print("Type 'exit' to quit\n")

    while True:
        try:
            code = console.input("[bold blue]> [/bold blue]")
        except (KeyboardInterrupt, EOFError):
            console.print("\nGoodbye!")
            break

        if code.strip() in ['exit', 'quit']:
            break
        if not code.strip():
            continue

        result = session.run(code, filename="<repl>")
        if not result.ok:
            _report(result.errors, "<repl>")


@cli.group(name="config")
def config_group():
    """Show or change persistent settings"""
    pass


@config_group.command(name="show")
def config_show():
    """Show current settings"""
    settings = Config()
    table = Table(title=f"Config ({settings.path})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.as_dict().items():
        table.add_row(key, str(value))
    console.print(table)


@config_group.command(name="set")
@click.argument('key')
@click.argument('value')
def config_set(key, value):
    """Set KEY to VALUE and save"""
    settings = Config()
    try:
        stored = settings.set(key, value)
    except (KeyError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(2)
    console.print(f"[green]{key}[/green] = {stored}")


@config_group.command(name="reset")
def config_reset():
    """Restore default settings"""
    settings = Config()
    settings.reset()
    console.print("[green]Configuration reset to defaults.[/green]")


if __name__ == "__main__":
    cli()
