from __future__ import annotations

import json
import re
from pathlib import Path

from .logger import get_logger
from .prompts import UserInputs

logger = get_logger(__name__)

TITLE_RE = re.compile(r"<title>.*?</title>", re.DOTALL)
COMPILER_OPTIONS_RE = re.compile(r'"compilerOptions"\s*:\s*\{')
PLUGINS_LINE_RE = re.compile(r"plugins:\s*\[[^\]]*\],")
PLUGINS_ARRAY_RE = re.compile(r"(plugins:\s*\[)([^\]]*)(\])")

VITE_IMPORT = "import { defineConfig } from 'vite'"
PATH_IMPORT = "import path from 'path'"
TAILWIND_IMPORT = "import tailwindcss from '@tailwindcss/vite'"
ALIAS_BLOCK = """
  resolve: {
    alias: {
      '@': path.resolve(__dirname, './src'),
    },
  },"""


class PatchError(RuntimeError):
    pass


def strip_json_comments(text: str) -> str:
    """Drop // and /* */ comments that sit outside of string literals."""
    out = []
    index = 0
    length = len(text)
    in_string = False
    while index < length:
        char = text[index]
        if in_string:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            index += 1
        elif text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = length if end == -1 else end + 2
        else:
            out.append(char)
            index += 1
    return "".join(out)


def _scan_object_body(text: str, start: int) -> tuple[int, int]:
    """Return (closing brace index, last significant char index) of the object
    whose body starts at ``start``. The second value is -1 for an empty body."""
    depth = 0
    index = start
    last_significant = -1
    length = len(text)
    while index < length:
        char = text[index]
        if char == '"':
            index += 1
            while index < length and text[index] != '"':
                index += 2 if text[index] == "\\" else 1
            last_significant = index
            index += 1
            continue
        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline
            continue
        if text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = length if end == -1 else end + 2
            continue
        if char in "{[":
            depth += 1
        elif char in "}]":
            if depth == 0:
                return index, last_significant
            depth -= 1
        if not char.isspace():
            last_significant = index
        index += 1
    raise PatchError("Unterminated compilerOptions object")


def add_compiler_path_aliases(text: str) -> str:
    """Add the missing baseUrl/paths entries to compilerOptions, keeping the
    rest of the file (comments, ordering, indentation) untouched."""
    try:
        parsed = json.loads(strip_json_comments(text))
    except json.JSONDecodeError as error:
        raise PatchError(f"Could not parse compiler config: {error}") from error

    compiler_options = parsed.get("compilerOptions") if isinstance(parsed, dict) else None
    if not isinstance(compiler_options, dict):
        compiler_options = {}

    entries = []
    if not compiler_options.get("baseUrl"):
        entries.append('"baseUrl": "."')
    if not compiler_options.get("paths"):
        entries.append('"paths": {\n      "@/*": ["./src/*"]\n    }')
    if not entries:
        return text

    match = COMPILER_OPTIONS_RE.search(text)
    if match is None:
        return text

    body_start = match.end()
    _, last_significant = _scan_object_body(text, body_start)
    if last_significant == -1:
        insert_at = body_start
        prefix = ""
    else:
        insert_at = last_significant + 1
        prefix = "" if text[last_significant] == "," else ","

    snippet = prefix + ",".join(f"\n    {entry}" for entry in entries)
    return text[:insert_at] + snippet + text[insert_at:]


def add_vite_path_alias(text: str) -> str:
    if "import path from" not in text:
        if VITE_IMPORT in text:
            text = text.replace(VITE_IMPORT, f"{VITE_IMPORT}\n{PATH_IMPORT}", 1)
        else:
            text = f"{PATH_IMPORT}\n{text}"

    if "resolve:" not in text:
        match = PLUGINS_LINE_RE.search(text)
        if match is not None:
            text = text[: match.end()] + ALIAS_BLOCK + text[match.end():]
    return text


def add_vite_tailwind_plugin(text: str) -> str:
    if TAILWIND_IMPORT not in text:
        if VITE_IMPORT in text:
            text = text.replace(VITE_IMPORT, f"{VITE_IMPORT}\n{TAILWIND_IMPORT}", 1)
        else:
            text = f"{TAILWIND_IMPORT}\n{text}"

    match = PLUGINS_ARRAY_RE.search(text)
    if match is not None and "tailwindcss()" not in match.group(2):
        current = match.group(2).strip().rstrip(",")
        plugins = f"{current}, tailwindcss()" if current else "tailwindcss()"
        text = text[: match.start()] + match.group(1) + plugins + match.group(3) + text[match.end():]
    return text


def _first_existing(project_dir: Path, names: tuple[str, ...]) -> Path | None:
    for name in names:
        candidate = project_dir / name
        if candidate.exists():
            return candidate
    return None


def setup_path_aliases(project_dir: Path) -> list[Path]:
    """Wire the ``@/`` import alias used by shadcn/ui components."""
    changed = []

    compiler_config = _first_existing(project_dir, ("tsconfig.json", "jsconfig.json"))
    if compiler_config is not None:
        original = compiler_config.read_text(encoding="utf-8")
        try:
            patched = add_compiler_path_aliases(original)
        except PatchError as error:
            raise PatchError(f"{compiler_config.name}: {error}") from error
        if patched != original:
            compiler_config.write_text(patched, encoding="utf-8")
            changed.append(compiler_config)

    vite_config = _first_existing(project_dir, ("vite.config.ts", "vite.config.js"))
    if vite_config is not None:
        original = vite_config.read_text(encoding="utf-8")
        patched = add_vite_path_alias(original)
        if patched != original:
            vite_config.write_text(patched, encoding="utf-8")
            changed.append(vite_config)

    for path in changed:
        logger.debug("Added path aliases to %s", path)
    return changed


def setup_tailwind_vite_plugin(project_dir: Path) -> Path | None:
    vite_config = _first_existing(project_dir, ("vite.config.ts", "vite.config.js"))
    if vite_config is None:
        return None
    original = vite_config.read_text(encoding="utf-8")
    patched = add_vite_tailwind_plugin(original)
    if patched != original:
        vite_config.write_text(patched, encoding="utf-8")
        logger.debug("Registered @tailwindcss/vite in %s", vite_config)
    return vite_config


def rename_dotfiles(project_dir: Path) -> list[Path]:
    """Rename ``_name`` files to ``.name`` anywhere below ``project_dir``."""
    renamed = []
    for path in sorted(project_dir.rglob("_*")):
        if not path.is_file():
            continue
        target = path.with_name("." + path.name[1:])
        path.replace(target)
        renamed.append(target)
    return renamed


def update_template_files(project_dir: Path, inputs: UserInputs) -> None:
    html_path = project_dir / "index.html"
    if html_path.exists():
        html = html_path.read_text(encoding="utf-8")
        html = TITLE_RE.sub(lambda _: f"<title>{inputs.project_name}</title>", html, count=1)
        html_path.write_text(html, encoding="utf-8")

    for path in rename_dotfiles(project_dir):
        logger.debug("Renamed dotfile %s", path)
