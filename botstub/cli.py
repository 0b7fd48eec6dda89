import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from botstub.codegen.codegen import Codegen
from botstub.config import get_config
from botstub.exceptions import BotstubError

console = Console()
app = typer.Typer(
    name='botstub',
    help='Generate typed Python stubs from integration and bot definitions',
    no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(message)s',
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    entry_point: Annotated[
        str | None,
        typer.Option('--entry-point', '-e', help='Definition file to generate from'),
    ] = None,
    out_dir: Annotated[
        str | None,
        typer.Option('--out-dir', '-o', help='Directory of the generated package'),
    ] = None,
    work_dir: Annotated[
        str | None,
        typer.Option('--work-dir', '-w', help='Directory other paths are relative to'),
    ] = None,
    no_format: Annotated[
        bool,
        typer.Option('--no-format', help='Do not format the output with black'),
    ] = False,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    """Generate the typed package of a definition.

    If no config file is specified, will look for default config files
    in the current directory or use environment variables.

    Examples:
        botstub generate
        botstub generate --config botstub.yaml
        botstub generate -e bot.definition.py -o generated
    """
    _setup_logging(verbose)

    try:
        project = get_config(config)
        overrides = {
            'entry_point': entry_point,
            'out_dir': out_dir,
            'work_dir': work_dir,
            'format_code': False if no_format else None,
        }
        project = project.model_copy(
            update={key: value for key, value in overrides.items() if value is not None}
        )
        paths = project.resolve_paths()

        with Progress(
            SpinnerColumn(),
            TextColumn('[progress.description]{task.description}'),
            console=console,
        ) as progress:
            task = progress.add_task(
                f'Generating code for {paths.entry_point} in {paths.out_dir}...',
                total=None,
            )
            files = Codegen(project).generate()
            progress.update(task, description='Code generation completed!')

    except BotstubError as e:
        console.print(f'[red]Error:[/red] {e}')
        raise typer.Exit(1)

    console.print('[dim]Generated files:[/dim]')
    for file in files:
        console.print(f'  - {paths.out_dir / file.path}')


@app.command()
def version() -> None:
    """Show the version of botstub."""
    try:
        console.print(f'botstub version: {package_version("botstub")}')
    except PackageNotFoundError:
        console.print('botstub version: unknown')


if __name__ == '__main__':
    app()
