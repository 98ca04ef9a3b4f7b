from pathlib import Path

import pytest

from emdkit.prompts import UserInputs
from emdkit.variants import (
    find_overlay_dir,
    get_overlay_dirs,
    get_state_management_variant,
    get_style_variant,
    get_template_variants,
)


def _inputs(**overrides) -> UserInputs:
    values = {
        "project_name": "test-app",
        "framework": "react",
        "variant": "react-ts",
        "style": "vanilla",
        "state_management": "none",
        "package_manager": "npm",
        "init_git": False,
        "eslint_preset": "none",
    }
    values.update(overrides)
    return UserInputs(**values)


def test_vanilla_and_unknown_styles_have_no_variant():
    assert get_style_variant("vanilla", "react") is None
    assert get_style_variant("unknown", "nextjs") is None


def test_scss_variant():
    variant = get_style_variant("scss", "react")

    assert variant is not None
    assert variant.name == "scss"
    assert variant.dev_dependencies == {"sass": "^1.69.5"}


def test_tailwind_uses_vite_plugin_for_react():
    variant = get_style_variant("tailwind", "react")

    assert variant.dependencies == {"tailwindcss": "^4.1.16"}
    assert variant.dev_dependencies == {"@tailwindcss/vite": "^4.1.16"}


def test_tailwind_uses_postcss_for_nextjs():
    variant = get_style_variant("tailwind", "nextjs")

    assert variant.dependencies["tailwindcss"] == "^4.1.16"
    assert variant.dev_dependencies["@tailwindcss/postcss"] == "^4.1.16"
    assert variant.dev_dependencies["postcss"] == "^8.4.51"
    assert "@tailwindcss/vite" not in variant.dev_dependencies


def test_shadcn_includes_tailwind_and_ui_packages():
    variant = get_style_variant("shadcn", "nextjs")

    for package in ("tailwindcss", "class-variance-authority", "clsx", "tailwind-merge", "lucide-react"):
        assert package in variant.dependencies
    assert variant.dependencies["tw-animate-css"] == "^1.0.5"
    assert "@tailwindcss/postcss" in variant.dev_dependencies


@pytest.mark.parametrize("framework", ["react", "nextjs"])
def test_state_management_variants(framework: str):
    assert get_state_management_variant("none", framework) is None
    assert set(get_state_management_variant("redux", framework).dependencies) == {"@reduxjs/toolkit", "react-redux"}
    assert get_state_management_variant("effector", framework).dependencies == {
        "effector": "^23.2.0",
        "effector-react": "^23.2.0",
    }
    assert get_state_management_variant("tanstack-query", framework).dependencies == {
        "@tanstack/react-query": "^5.28.0"
    }


def test_state_management_skipped_for_other_frameworks():
    for framework in ("vue", "svelte", "unknown"):
        assert get_state_management_variant("redux", framework) is None
    assert get_state_management_variant("unknown", "react") is None


def test_template_variants_order():
    variants = get_template_variants(_inputs(style="scss", state_management="redux"))
    assert [variant.name for variant in variants] == ["scss", "redux"]


def test_template_variants_empty_for_minimal_project():
    assert get_template_variants(_inputs(variant="react")) == []


def test_shadcn_kept_for_javascript_variants():
    variants = get_template_variants(_inputs(variant="react", style="shadcn"))
    assert [variant.name for variant in variants] == ["shadcn"]


def test_overlay_dirs_fall_back_to_framework():
    dirs = get_overlay_dirs("scss", _inputs(variant="react-swc-ts"))

    assert [Path(*path.parts[-3:]) for path in dirs] == [
        Path("scss", "ts", "react-swc"),
        Path("scss", "ts", "react"),
    ]
    assert find_overlay_dir("scss", _inputs(variant="react-swc-ts")) == dirs[1]


def test_overlay_dir_missing_returns_none():
    assert find_overlay_dir("effector", _inputs(framework="vue", variant="vue-ts")) is None
