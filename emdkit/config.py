from __future__ import annotations

import os
from pathlib import Path

DEFAULT_PROJECT_NAME = "emd-app"
DEFAULT_APP_ID = "your-app-id"

FRAMEWORKS = (
    {
        "name": "react",
        "display": "React + Vite",
        "color": "cyan",
        "variants": (
            {"name": "react", "display": "JavaScript", "color": "yellow"},
            {"name": "react-ts", "display": "TypeScript", "color": "blue"},
            {"name": "react-swc", "display": "JavaScript + SWC", "color": "yellow"},
            {"name": "react-swc-ts", "display": "TypeScript + SWC", "color": "blue"},
        ),
    },
    {
        "name": "nextjs",
        "display": "Next.js 16",
        "color": "cyan",
        "variants": (
            {"name": "nextjs", "display": "JavaScript", "color": "yellow"},
            {"name": "nextjs-ts", "display": "TypeScript", "color": "blue"},
        ),
    },
)

# Frameworks that bundle through Vite (vite.config.* is present).
VITE_FRAMEWORKS = ("react",)
REACT_FRAMEWORKS = ("react", "nextjs")

STYLES = (
    ("vanilla", "Vanilla CSS"),
    ("scss", "SCSS"),
    ("tailwind", "Tailwind CSS"),
    ("shadcn", "Tailwind CSS + shadcn/ui"),
)

STATE_MANAGEMENT = (
    ("none", "None"),
    ("redux", "Redux"),
    ("effector", "Effector"),
    ("tanstack-query", "TanStack Query"),
)

PACKAGE_MANAGERS = (
    ("npm", "npm"),
    ("yarn", "yarn"),
    ("pnpm", "pnpm"),
    ("bun", "bun"),
)

ESLINT_PRESETS = (
    ("standard", "Standard"),
    ("airbnb", "Airbnb"),
    ("none", "None"),
)

PRETTIER_CONFIG = {
    "semi": False,
    "singleQuote": True,
    "trailingComma": "es5",
    "printWidth": 100,
    "tabWidth": 2,
}

TEMPLATES_ENV = "EMDKIT_TEMPLATES_DIR"


def templates_root() -> Path:
    override = os.environ.get(TEMPLATES_ENV, "").strip()
    if override:
        return Path(override).expanduser().resolve()
    return Path(__file__).resolve().parent / "templates"


def variants_root() -> Path:
    return templates_root() / "variants"


def find_framework(name: str) -> dict | None:
    for framework in FRAMEWORKS:
        if framework["name"] == name:
            return framework
    return None
