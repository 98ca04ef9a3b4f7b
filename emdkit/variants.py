from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import REACT_FRAMEWORKS, VITE_FRAMEWORKS, variants_root
from .prompts import UserInputs

TAILWIND_VERSION = "^4.1.16"


@dataclass(frozen=True)
class TemplateVariant:
    name: str
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)


def _tailwind_packages(framework: str) -> tuple[dict[str, str], dict[str, str]]:
    dependencies = {"tailwindcss": TAILWIND_VERSION}
    if framework in VITE_FRAMEWORKS:
        dev_dependencies = {"@tailwindcss/vite": TAILWIND_VERSION}
    else:
        # Next.js picks Tailwind up through PostCSS.
        dev_dependencies = {
            "@tailwindcss/postcss": TAILWIND_VERSION,
            "postcss": "^8.4.51",
        }
    return dependencies, dev_dependencies


def get_style_variant(style: str, framework: str) -> TemplateVariant | None:
    if style == "scss":
        return TemplateVariant(name="scss", dev_dependencies={"sass": "^1.69.5"})

    if style == "tailwind":
        dependencies, dev_dependencies = _tailwind_packages(framework)
        return TemplateVariant(name="tailwind", dependencies=dependencies, dev_dependencies=dev_dependencies)

    if style == "shadcn":
        dependencies, dev_dependencies = _tailwind_packages(framework)
        dependencies.update(
            {
                "class-variance-authority": "^0.7.1",
                "clsx": "^2.1.1",
                "tailwind-merge": "^3.3.1",
                "lucide-react": "^0.468.0",
                "tw-animate-css": "^1.0.5",
            }
        )
        return TemplateVariant(name="shadcn", dependencies=dependencies, dev_dependencies=dev_dependencies)

    return None


def get_state_management_variant(state_management: str, framework: str) -> TemplateVariant | None:
    if framework not in REACT_FRAMEWORKS:
        return None

    if state_management == "redux":
        return TemplateVariant(
            name="redux",
            dependencies={"@reduxjs/toolkit": "^2.3.0", "react-redux": "^9.1.2"},
        )
    if state_management == "effector":
        return TemplateVariant(
            name="effector",
            dependencies={"effector": "^23.2.0", "effector-react": "^23.2.0"},
        )
    if state_management == "tanstack-query":
        return TemplateVariant(
            name="tanstack-query",
            dependencies={"@tanstack/react-query": "^5.28.0"},
        )
    return None


def get_template_variants(inputs: UserInputs) -> list[TemplateVariant]:
    variants = []
    style_variant = get_style_variant(inputs.style, inputs.framework)
    if style_variant is not None:
        variants.append(style_variant)
    state_variant = get_state_management_variant(inputs.state_management, inputs.framework)
    if state_variant is not None:
        variants.append(state_variant)
    return variants


def get_overlay_dirs(variant_name: str, inputs: UserInputs) -> list[Path]:
    """Candidate overlay directories, most specific first."""
    language_root = variants_root() / variant_name / inputs.language
    candidates = [language_root / inputs.template_base]
    if inputs.framework != inputs.template_base:
        candidates.append(language_root / inputs.framework)
    return candidates


def find_overlay_dir(variant_name: str, inputs: UserInputs) -> Path | None:
    for candidate in get_overlay_dirs(variant_name, inputs):
        if candidate.is_dir():
            return candidate
    return None
