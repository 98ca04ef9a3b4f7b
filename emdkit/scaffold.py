from __future__ import annotations

import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from .config import VITE_FRAMEWORKS, find_framework, templates_root
from .logger import get_logger
from .manifest import (
    create_eslint_config,
    create_prettier_config,
    create_shadcn_components_config,
    get_package_json_config,
    update_package_json,
)
from .patching import PatchError, setup_path_aliases, setup_tailwind_vite_plugin, update_template_files
from .prompts import UserInputs
from .variants import TemplateVariant, find_overlay_dir, get_template_variants

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScaffoldResult:
    path: Path
    variants: tuple[str, ...]
    git_initialized: bool


class ScaffoldError(RuntimeError):
    pass


def get_template_path(variant: str) -> Path:
    return templates_root() / f"template-{variant}"


def _iter_template_files(base: Path) -> Iterable[Path]:
    if not base.exists():
        return []
    return sorted(path for path in base.rglob("*.j2") if path.is_file())


def template_context(inputs: UserInputs) -> dict[str, Any]:
    framework = find_framework(inputs.framework) or {"display": inputs.framework}
    return {
        "project_name": inputs.project_name,
        "directory_name": inputs.directory_name,
        "framework": inputs.framework,
        "framework_display": framework["display"],
        "variant": inputs.variant,
        "is_typescript": inputs.is_typescript,
        "style": inputs.style,
        "state_management": inputs.state_management,
        "package_manager": inputs.package_manager,
        "install_command": inputs.install_command,
        "dev_command": inputs.dev_command,
        "eslint_preset": inputs.eslint_preset,
        "app_id": inputs.app_id,
        "env_prefix": "NEXT_PUBLIC_" if inputs.framework == "nextjs" else "VITE_",
        "year": datetime.now(timezone.utc).year,
    }


def render_templates(project_dir: Path, context: dict[str, Any]) -> list[Path]:
    """Render every ``*.j2`` file in place and drop the suffix."""
    env = Environment(
        loader=FileSystemLoader(str(project_dir)),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )

    written = []
    for template_path in _iter_template_files(project_dir):
        template_name = template_path.relative_to(project_dir).as_posix()
        try:
            rendered = env.get_template(template_name).render(**context)
        except TemplateError as error:
            raise ScaffoldError(f"Failed to render {template_name}: {error}") from error
        destination_file = template_path.with_name(template_path.name[:-3])
        destination_file.write_text(rendered + ("\n" if not rendered.endswith("\n") else ""), encoding="utf-8")
        template_path.unlink()
        written.append(destination_file)
    return written


def apply_variant_overlay(project_dir: Path, variant_name: str, inputs: UserInputs) -> Path | None:
    overlay = find_overlay_dir(variant_name, inputs)
    if overlay is None:
        logger.debug("No overlay for %s (%s/%s)", variant_name, inputs.language, inputs.template_base)
        return None
    shutil.copytree(overlay, project_dir, dirs_exist_ok=True)
    logger.debug("Applied overlay %s", overlay)
    return overlay


def initialize_git(project_dir: Path) -> bool:
    commands = (
        ["git", "init"],
        ["git", "add", "."],
        ["git", "commit", "-m", "Initial commit"],
    )
    try:
        for command in commands:
            subprocess.run(command, cwd=project_dir, capture_output=True, check=True)
    except FileNotFoundError:
        logger.warning("git is not installed; skipping repository initialization")
        return False
    except subprocess.CalledProcessError as error:
        stderr = (error.stderr or b"").decode("utf-8", errors="ignore").strip()
        logger.warning("'%s' failed: %s", " ".join(error.cmd), stderr or f"exit code {error.returncode}")
        return False
    return True


def _build_project(project_dir: Path, template_path: Path, inputs: UserInputs) -> list[TemplateVariant]:
    """Materialize the project into a fresh ``project_dir``."""
    logger.debug("Copying %s to %s", template_path, project_dir)
    shutil.copytree(template_path, project_dir)

    variants = get_template_variants(inputs)
    for variant in variants:
        apply_variant_overlay(project_dir, variant.name, inputs)

    render_templates(project_dir, template_context(inputs))
    update_template_files(project_dir, inputs)
    update_package_json(project_dir, inputs, get_package_json_config(inputs))

    try:
        if inputs.style in ("tailwind", "shadcn") and inputs.framework in VITE_FRAMEWORKS:
            setup_tailwind_vite_plugin(project_dir)
        if inputs.style == "shadcn":
            setup_path_aliases(project_dir)
            create_shadcn_components_config(project_dir, inputs)
    except PatchError as error:
        raise ScaffoldError(str(error)) from error

    if inputs.eslint_preset != "none":
        create_eslint_config(project_dir, inputs)
    create_prettier_config(project_dir)
    return variants


def scaffold_project(inputs: UserInputs, destination_root: Path, force: bool = False) -> ScaffoldResult:
    """Create the project under ``destination_root``.

    The project is built in a staging directory beside the target and copied
    into place after every step succeeded. With ``force`` existing files that
    the template does not provide are left as they are.
    """
    target_dir = destination_root / inputs.directory_name

    if target_dir.exists() and not force:
        raise ScaffoldError(f"Directory {inputs.directory_name} already exists")
    if target_dir.exists() and not target_dir.is_dir():
        raise ScaffoldError(f"{inputs.directory_name} exists and is not a directory")

    template_path = get_template_path(inputs.variant)
    if not template_path.is_dir():
        raise ScaffoldError(f"Template not found: {template_path}")

    try:
        destination_root.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(prefix=".emdkit-", dir=destination_root) as staging:
            staged_dir = Path(staging) / inputs.directory_name
            variants = _build_project(staged_dir, template_path, inputs)
            shutil.copytree(staged_dir, target_dir, dirs_exist_ok=force)
    except OSError as error:
        raise ScaffoldError(f"Could not create {inputs.directory_name}: {error}") from error

    git_initialized = initialize_git(target_dir) if inputs.init_git else False

    return ScaffoldResult(
        path=target_dir,
        variants=tuple(variant.name for variant in variants),
        git_initialized=git_initialized,
    )
