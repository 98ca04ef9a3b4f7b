from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .config import PRETTIER_CONFIG
from .logger import get_logger
from .prompts import UserInputs
from .variants import get_template_variants

logger = get_logger(__name__)

ESLINT_PACKAGES = {
    "standard": {
        "eslint": "^9.39.1",
        "neostandard": "^0.12.2",
    },
    "airbnb": {
        "eslint": "^9.39.1",
        "@eslint/js": "^9.39.1",
        "eslint-config-airbnb-extended": "^2.3.2",
    },
}
PRETTIER_PACKAGES = {"prettier": "^3.6.2"}


def files_root() -> Path:
    return Path(__file__).resolve().parent / "files"


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into a copy of ``target``.

    Only mapping values are merged recursively; lists, scalars and None from
    ``source`` replace whatever ``target`` holds under the same key.
    """
    result = dict(target)
    for key, source_value in source.items():
        target_value = result.get(key)
        if isinstance(source_value, Mapping) and isinstance(target_value, Mapping):
            result[key] = deep_merge(target_value, source_value)
        elif isinstance(source_value, Mapping):
            result[key] = deep_merge({}, source_value)
        else:
            result[key] = source_value
    return result


def get_package_json_config(inputs: UserInputs) -> dict[str, dict[str, str]]:
    config: dict[str, Any] = {"dependencies": {}, "devDependencies": {}}

    for variant in get_template_variants(inputs):
        config = deep_merge(
            config,
            {"dependencies": variant.dependencies, "devDependencies": variant.dev_dependencies},
        )

    if inputs.eslint_preset in ESLINT_PACKAGES:
        config = deep_merge(config, {"devDependencies": ESLINT_PACKAGES[inputs.eslint_preset]})

    config = deep_merge(config, {"devDependencies": PRETTIER_PACKAGES})
    return config


def _write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def update_package_json(project_dir: Path, inputs: UserInputs, config: Mapping[str, Mapping[str, str]]) -> Path:
    package_json_path = project_dir / "package.json"
    package_json = json.loads(package_json_path.read_text(encoding="utf-8"))

    package_json["name"] = inputs.project_name
    package_json["dependencies"] = deep_merge(package_json.get("dependencies") or {}, config.get("dependencies", {}))
    package_json["devDependencies"] = deep_merge(
        package_json.get("devDependencies") or {}, config.get("devDependencies", {})
    )

    scripts = dict(package_json.get("scripts") or {})
    if inputs.is_typescript:
        scripts["type-check"] = "tsc --noEmit"
    if inputs.eslint_preset != "none":
        scripts["lint"] = "eslint ."
    scripts["format"] = "prettier --write ."
    package_json["scripts"] = scripts

    _write_json(package_json_path, package_json)
    logger.debug("Updated %s", package_json_path)
    return package_json_path


def create_eslint_config(project_dir: Path, inputs: UserInputs) -> Path:
    env = Environment(
        loader=FileSystemLoader(str(files_root())),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    rendered = env.get_template("eslint.config.mjs.j2").render(
        preset=inputs.eslint_preset,
        is_typescript=inputs.is_typescript,
        framework=inputs.framework,
    )
    destination = project_dir / "eslint.config.mjs"
    destination.write_text(rendered, encoding="utf-8")
    logger.debug("Wrote %s preset to %s", inputs.eslint_preset, destination)
    return destination


def create_prettier_config(project_dir: Path) -> Path:
    destination = project_dir / ".prettierrc.json"
    _write_json(destination, PRETTIER_CONFIG)
    return destination


def create_shadcn_components_config(project_dir: Path, inputs: UserInputs) -> Path:
    if inputs.framework == "nextjs":
        css_path = "src/app/globals.css"
    else:
        css_path = "src/index.css"

    components = {
        "$schema": "https://ui.shadcn.com/schema.json",
        "style": "new-york",
        "rsc": inputs.framework == "nextjs",
        "tsx": inputs.is_typescript,
        "tailwind": {
            "config": "",
            "css": css_path,
            "baseColor": "neutral",
            "cssVariables": True,
            "prefix": "",
        },
        "aliases": {
            "components": "@/components",
            "utils": "@/lib/utils",
            "ui": "@/components/ui",
            "lib": "@/lib",
            "hooks": "@/hooks",
        },
        "iconLibrary": "lucide",
    }
    destination = project_dir / "components.json"
    _write_json(destination, components)
    return destination
