from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import click
import typer
import yaml
from rich.console import Console

from .config import (
    DEFAULT_APP_ID,
    DEFAULT_PROJECT_NAME,
    ESLINT_PRESETS,
    FRAMEWORKS,
    PACKAGE_MANAGERS,
    REACT_FRAMEWORKS,
    STATE_MANAGEMENT,
    STYLES,
    find_framework,
)

PROJECT_NAME_RE = re.compile(r"^(?:@[a-z0-9](?:[a-z0-9-]*[a-z0-9])?/)?[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")
INVALID_NAME_MESSAGE = "Invalid project name. Use only lowercase letters, numbers, and hyphens"

ANSWER_ALIASES = {
    "projectName": "project_name",
    "stateManagement": "state_management",
    "packageManager": "package_manager",
    "initGit": "init_git",
    "eslintPreset": "eslint_preset",
    "appId": "app_id",
}

ANSWER_KEYS = (
    "project_name",
    "framework",
    "variant",
    "style",
    "state_management",
    "package_manager",
    "init_git",
    "eslint_preset",
    "app_id",
)

console = Console()


class InputError(RuntimeError):
    pass


@dataclass(frozen=True)
class UserInputs:
    project_name: str
    framework: str
    variant: str
    style: str = "vanilla"
    state_management: str = "none"
    package_manager: str = "npm"
    init_git: bool = True
    eslint_preset: str = "standard"
    app_id: str = DEFAULT_APP_ID

    @property
    def is_typescript(self) -> bool:
        return "-ts" in self.variant

    @property
    def language(self) -> str:
        return "ts" if self.is_typescript else "js"

    @property
    def template_base(self) -> str:
        # react-swc-ts -> react-swc, nextjs-ts -> nextjs
        return self.variant[: -len("-ts")] if self.variant.endswith("-ts") else self.variant

    @property
    def directory_name(self) -> str:
        return self.project_name.rsplit("/", 1)[-1]

    @property
    def install_command(self) -> str:
        return get_package_manager_command(self.package_manager, "install")

    @property
    def dev_command(self) -> str:
        return get_package_manager_command(self.package_manager, "dev")


def is_valid_project_name(name: str) -> bool:
    return PROJECT_NAME_RE.fullmatch(name or "") is not None


def get_variant_options(framework: str) -> list[tuple[str, str]]:
    entry = find_framework(framework)
    if entry is None:
        return []
    return [(variant["name"], variant["display"]) for variant in entry["variants"]]


def get_style_options(framework: str, variant: str) -> list[tuple[str, str]]:
    """Styles offered for a framework; shadcn needs React (JS or TS)."""
    options = [item for item in STYLES if item[0] != "shadcn"]
    if framework in REACT_FRAMEWORKS:
        options.extend(item for item in STYLES if item[0] == "shadcn")
    return options


def get_package_manager_command(pm: str, command: str) -> str:
    if pm == "yarn":
        return "yarn dev" if command == "dev" else "yarn"
    if pm == "pnpm":
        return "pnpm dev" if command == "dev" else "pnpm install"
    if pm == "bun":
        return "bun run dev" if command == "dev" else "bun install"
    return "npm run dev" if command == "dev" else "npm install"


def detect_package_manager() -> str:
    user_agent = os.environ.get("npm_config_user_agent", "")
    if "bun" in user_agent:
        return "bun"
    if "yarn" in user_agent:
        return "yarn"
    if "pnpm" in user_agent:
        return "pnpm"
    return "npm"


def load_answers(path: Path) -> dict[str, Any]:
    """Read an answers file, accepting snake_case or camelCase keys."""
    if not path.exists():
        raise InputError(f"Answers file does not exist: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise InputError(f"Could not read answers file {path}: {error}") from error
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise InputError(f"Could not parse answers file {path}: {error}") from error
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError(f"Answers file must contain a mapping: {path}")
    return normalize_answers(data)


def normalize_answers(answers: dict[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in answers.items():
        name = ANSWER_ALIASES.get(str(key), str(key))
        if name not in ANSWER_KEYS:
            raise InputError(f"Unknown answer: {key}")
        if value is not None:
            normalized[name] = value
    return normalized


def _check_choice(field: str, value: Any, choices: Sequence[tuple[str, str]]) -> str:
    allowed = [item[0] for item in choices]
    if value not in allowed:
        raise InputError(f"Invalid {field}: {value!r}. Expected one of: {', '.join(allowed)}")
    return str(value)


def _check_project_name(value: Any) -> str:
    name = str(value).strip()
    if not name:
        raise InputError("Project name is required")
    if not is_valid_project_name(name):
        raise InputError(f"{INVALID_NAME_MESSAGE}: {name!r}")
    return name


def _check_bool(field: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in {"yes", "y", "true", "1"}:
        return True
    if lowered in {"no", "n", "false", "0"}:
        return False
    raise InputError(f"Invalid {field}: {value!r}. Expected yes or no")


def _ask_name(default: str) -> str:
    while True:
        name = typer.prompt("Project name", default=default).strip()
        if not name:
            console.print("[red]Project name is required[/red]")
        elif not is_valid_project_name(name):
            console.print(f"[red]{INVALID_NAME_MESSAGE}[/red]")
        else:
            return name


def _ask_choice(message: str, choices: Sequence[tuple[str, str]], default: str, colors: dict | None = None) -> str:
    console.print(f"[bold]{message}[/bold]")
    for value, title in choices:
        color = (colors or {}).get(value)
        label = f"[{color}]{title}[/{color}]" if color else title
        console.print(f"  {label} [dim]({value})[/dim]")
    return typer.prompt(
        ">",
        type=click.Choice([value for value, _ in choices]),
        default=default,
        show_choices=False,
    )


def collect_inputs(answers: dict[str, Any] | None = None, interactive: bool = True) -> UserInputs:
    """Resolve every answer, asking only for the ones that are missing.

    Given answers are validated against the option tables. Without
    ``interactive`` the missing ones fall back to their defaults.
    """
    given = normalize_answers(dict(answers or {}))

    if "project_name" in given:
        project_name = _check_project_name(given["project_name"])
    elif interactive:
        project_name = _ask_name(DEFAULT_PROJECT_NAME)
    else:
        project_name = DEFAULT_PROJECT_NAME

    framework_choices = [(item["name"], item["display"]) for item in FRAMEWORKS]
    if "framework" in given:
        framework = _check_choice("framework", given["framework"], framework_choices)
    elif interactive:
        framework = _ask_choice(
            "Select a framework:",
            framework_choices,
            framework_choices[0][0],
            colors={item["name"]: item["color"] for item in FRAMEWORKS},
        )
    else:
        framework = framework_choices[0][0]

    variant_choices = get_variant_options(framework)
    if "variant" in given:
        variant = _check_choice("variant", given["variant"], variant_choices)
    elif interactive:
        entry = find_framework(framework) or {"variants": ()}
        variant = _ask_choice(
            "Select a variant:",
            variant_choices,
            variant_choices[0][0],
            colors={item["name"]: item["color"] for item in entry["variants"]},
        )
    else:
        variant = variant_choices[0][0]

    style_choices = get_style_options(framework, variant)
    if "style" in given:
        style = _check_choice("style", given["style"], style_choices)
    elif interactive:
        style = _ask_choice("Select a styling approach:", style_choices, style_choices[0][0])
    else:
        style = style_choices[0][0]

    if "state_management" in given:
        state_management = _check_choice("state management", given["state_management"], STATE_MANAGEMENT)
    elif interactive:
        state_management = _ask_choice("Select a state management solution:", STATE_MANAGEMENT, STATE_MANAGEMENT[0][0])
    else:
        state_management = STATE_MANAGEMENT[0][0]

    detected = detect_package_manager()
    if "package_manager" in given:
        package_manager = _check_choice("package manager", given["package_manager"], PACKAGE_MANAGERS)
    elif interactive:
        package_manager = _ask_choice("Select a package manager:", PACKAGE_MANAGERS, detected)
    else:
        package_manager = detected

    if "init_git" in given:
        init_git = _check_bool("git option", given["init_git"])
    elif interactive:
        init_git = typer.confirm("Initialize a git repository?", default=True)
    else:
        init_git = True

    if "eslint_preset" in given:
        eslint_preset = _check_choice("ESLint preset", given["eslint_preset"], ESLINT_PRESETS)
    elif interactive:
        eslint_preset = _ask_choice("Select an ESLint preset:", ESLINT_PRESETS, ESLINT_PRESETS[0][0])
    else:
        eslint_preset = ESLINT_PRESETS[0][0]

    app_id = str(given.get("app_id", DEFAULT_APP_ID)).strip() or DEFAULT_APP_ID

    return UserInputs(
        project_name=project_name,
        framework=framework,
        variant=variant,
        style=style,
        state_management=state_management,
        package_manager=package_manager,
        init_git=init_git,
        eslint_preset=eslint_preset,
        app_id=app_id,
    )
