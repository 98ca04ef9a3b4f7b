from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import ESLINT_PRESETS, FRAMEWORKS, PACKAGE_MANAGERS, STATE_MANAGEMENT, find_framework
from .logger import set_verbose
from .prompts import InputError, collect_inputs, get_style_options, load_answers
from .scaffold import ScaffoldError, scaffold_project

app = typer.Typer(help="Create EMD Cloud web projects from templates.")
console = Console()

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    md = "md"


def _json_print(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=True, sort_keys=True))


def _format_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value) or "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def _print_key_value_table(title: str, rows: list[tuple[str, str]]) -> None:
    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)


def _emit_success(
    command: str,
    output_format: OutputFormat,
    data: dict,
    md_renderer: Callable[[dict], str] | None = None,
    table_renderer: Callable[[dict], None] | None = None,
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": True,
                "command": command,
                "exit_code": EXIT_OK,
                "data": data,
            }
        )
        return

    if output_format == OutputFormat.md and md_renderer is not None:
        console.print(md_renderer(data))
        return

    if output_format == OutputFormat.table and table_renderer is not None:
        table_renderer(data)
        return

    if output_format == OutputFormat.md:
        lines = [f"# {command}", ""]
        lines.extend(f"- **{key}**: {_format_value(value)}" for key, value in data.items())
        console.print("\n".join(lines))
    else:
        _print_key_value_table(
            title=command,
            rows=[(str(key), _format_value(value)) for key, value in data.items()],
        )


def _emit_error(
    command: str,
    output_format: OutputFormat,
    exit_code: int,
    code: str,
    message: str,
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": False,
                "command": command,
                "exit_code": exit_code,
                "error": {
                    "code": code,
                    "message": message,
                },
            }
        )
    elif output_format == OutputFormat.md:
        console.print(f"# {command}\n\n- **status**: error\n- **code**: {code}\n- **message**: {message}")
    else:
        console.print(f"[red]✗ Error ({code}):[/red] {message}")

    raise typer.Exit(code=exit_code)


@app.command("new")
def new_project(
    name: Optional[str] = typer.Argument(None, help="Project name (npm package name, may be scoped)."),
    framework: Optional[str] = typer.Option(None, "--framework", help="react or nextjs."),
    variant: Optional[str] = typer.Option(None, "--variant", help="Language variant, e.g. react-ts."),
    style: Optional[str] = typer.Option(None, "--style", help="vanilla, scss, tailwind or shadcn."),
    state_management: Optional[str] = typer.Option(None, "--state", help="none, redux, effector or tanstack-query."),
    package_manager: Optional[str] = typer.Option(None, "--package-manager", "--pm", help="npm, yarn, pnpm or bun."),
    eslint_preset: Optional[str] = typer.Option(None, "--eslint", help="standard, airbnb or none."),
    init_git: Optional[bool] = typer.Option(None, "--git/--no-git", help="Initialize a git repository."),
    app_id: Optional[str] = typer.Option(None, "--app-id", help="EMD Cloud application id written to .env.local."),
    answers_file: Optional[Path] = typer.Option(None, "--answers", help="YAML file with answers."),
    destination: Path = typer.Option(Path("."), "--destination", "-d", help="Directory to create the project in."),
    force: bool = typer.Option(False, "--force", help="Allow writing into an existing directory."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not prompt; use defaults for missing answers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every scaffolding step."),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
):
    """Create a new project, asking for anything not given on the command line."""
    set_verbose(verbose)

    flags = {
        "project_name": name,
        "framework": framework,
        "variant": variant,
        "style": style,
        "state_management": state_management,
        "package_manager": package_manager,
        "eslint_preset": eslint_preset,
        "init_git": init_git,
        "app_id": app_id,
    }
    interactive = not yes and output_format != OutputFormat.json

    try:
        answers = load_answers(answers_file) if answers_file else {}
        answers.update({key: value for key, value in flags.items() if value is not None})
        if interactive:
            console.print("\n[cyan]✨ Creating a new EMD Cloud project...[/cyan]\n")
        inputs = collect_inputs(answers, interactive=interactive)
    except InputError as error:
        _emit_error(
            command="new",
            output_format=output_format,
            exit_code=EXIT_INVALID_INPUT,
            code="invalid_input",
            message=str(error),
        )
        raise
    except typer.Abort:
        _emit_error(
            command="new",
            output_format=output_format,
            exit_code=EXIT_ERROR,
            code="cancelled",
            message="User cancelled",
        )
        raise

    if output_format == OutputFormat.table:
        console.print("\n[cyan]Setting up your project...[/cyan]\n")

    try:
        result = scaffold_project(inputs, destination.resolve(), force=force)
    except ScaffoldError as error:
        _emit_error(
            command="new",
            output_format=output_format,
            exit_code=EXIT_INVALID_INPUT,
            code="scaffold_error",
            message=str(error),
        )
        raise

    data = {
        "path": str(result.path),
        "project_name": inputs.project_name,
        "framework": inputs.framework,
        "variant": inputs.variant,
        "style": inputs.style,
        "state_management": inputs.state_management,
        "package_manager": inputs.package_manager,
        "eslint_preset": inputs.eslint_preset,
        "variants": list(result.variants),
        "git_initialized": result.git_initialized,
        "next_steps": [f"cd {inputs.directory_name}", inputs.install_command, inputs.dev_command],
    }

    def render_md(payload: dict) -> str:
        lines = [f"# Created `{payload['project_name']}`", ""]
        lines.append(f"- **path**: `{payload['path']}`")
        lines.append(f"- **variant**: `{payload['variant']}`")
        lines.append(f"- **style**: `{payload['style']}`")
        lines.append(f"- **state_management**: `{payload['state_management']}`")
        lines.append("\n## Next steps")
        lines.extend(f"- `{step}`" for step in payload["next_steps"])
        return "\n".join(lines)

    def render_table(payload: dict) -> None:
        console.print("[green]✓ Project created successfully![/green]")
        console.print("[yellow]Next steps:[/yellow]")
        for step in payload["next_steps"]:
            console.print(f"  {step}")

    _emit_success(command="new", output_format=output_format, data=data, md_renderer=render_md, table_renderer=render_table)


@app.command("options")
def list_options(
    framework: Optional[str] = typer.Option(None, "--framework", help="Only show one framework."),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
):
    """List the frameworks, variants and features a project can be created with."""
    frameworks = FRAMEWORKS
    if framework:
        entry = find_framework(framework)
        if entry is None:
            _emit_error(
                command="options",
                output_format=output_format,
                exit_code=EXIT_INVALID_INPUT,
                code="unknown_framework",
                message=f"Unknown framework: {framework}",
            )
            raise
        frameworks = (entry,)

    data = {
        "frameworks": [
            {
                "name": item["name"],
                "display": item["display"],
                "variants": [variant["name"] for variant in item["variants"]],
                "styles": [value for value, _ in get_style_options(item["name"], item["variants"][0]["name"])],
            }
            for item in frameworks
        ],
        "state_management": [value for value, _ in STATE_MANAGEMENT],
        "package_managers": [value for value, _ in PACKAGE_MANAGERS],
        "eslint_presets": [value for value, _ in ESLINT_PRESETS],
    }

    def render_md(payload: dict) -> str:
        lines = ["# Options", ""]
        for item in payload["frameworks"]:
            lines.append(f"- **{item['name']}** ({item['display']})")
            lines.append(f"  - variants: {', '.join(item['variants'])}")
            lines.append(f"  - styles: {', '.join(item['styles'])}")
        lines.append(f"- **state_management**: {', '.join(payload['state_management'])}")
        lines.append(f"- **package_managers**: {', '.join(payload['package_managers'])}")
        lines.append(f"- **eslint_presets**: {', '.join(payload['eslint_presets'])}")
        return "\n".join(lines)

    def render_table(payload: dict) -> None:
        table = Table(title="Frameworks")
        table.add_column("Framework")
        table.add_column("Variants")
        table.add_column("Styles")
        for item in payload["frameworks"]:
            table.add_row(f"{item['name']} ({item['display']})", ", ".join(item["variants"]), ", ".join(item["styles"]))
        console.print(table)
        _print_key_value_table(
            title="Features",
            rows=[
                ("state management", ", ".join(payload["state_management"])),
                ("package managers", ", ".join(payload["package_managers"])),
                ("eslint presets", ", ".join(payload["eslint_presets"])),
            ],
        )

    _emit_success(command="options", output_format=output_format, data=data, md_renderer=render_md, table_renderer=render_table)


@app.command("version")
def version(
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
) -> None:
    """Print version."""
    _emit_success(command="version", output_format=output_format, data={"version": __version__})


if __name__ == "__main__":
    app()
