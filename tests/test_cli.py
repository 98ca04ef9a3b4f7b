import json
from pathlib import Path

from typer.testing import CliRunner

from emdkit import __version__
from emdkit.cli import EXIT_ERROR, EXIT_INVALID_INPUT, EXIT_OK, app

runner = CliRunner()


def _parse_json_output(output: str) -> dict:
    lines = [line for line in output.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_new_json_output_schema(tmp_path: Path):
    result = runner.invoke(
        app,
        [
            "new",
            "my-app",
            "--framework",
            "react",
            "--variant",
            "react-ts",
            "--style",
            "tailwind",
            "--state",
            "redux",
            "--pm",
            "pnpm",
            "--eslint",
            "standard",
            "--no-git",
            "--destination",
            str(tmp_path),
            "--format",
            "json",
        ],
    )

    assert result.exit_code == EXIT_OK
    payload = _parse_json_output(result.stdout)
    assert payload["ok"] is True
    assert payload["command"] == "new"
    assert payload["data"]["path"] == str(tmp_path.resolve() / "my-app")
    assert payload["data"]["variants"] == ["tailwind", "redux"]
    assert payload["data"]["next_steps"] == ["cd my-app", "pnpm install", "pnpm dev"]
    assert payload["data"]["git_initialized"] is False
    assert (tmp_path / "my-app" / "eslint.config.mjs").exists()


def test_new_with_answers_file(tmp_path: Path):
    answers = tmp_path / "answers.yml"
    answers.write_text(
        "projectName: docs-site\nframework: nextjs\nvariant: nextjs\nstyle: scss\n"
        "stateManagement: none\npackageManager: yarn\ninitGit: false\neslintPreset: none\n",
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["new", "--answers", str(answers), "-d", str(tmp_path), "--yes", "--format", "json"],
    )

    assert result.exit_code == EXIT_OK
    payload = _parse_json_output(result.stdout)
    assert payload["data"]["variant"] == "nextjs"
    assert payload["data"]["next_steps"] == ["cd docs-site", "yarn", "yarn dev"]
    assert (tmp_path / "docs-site" / "src" / "app" / "globals.scss").exists()


def test_flags_override_answers_file(tmp_path: Path):
    answers = tmp_path / "answers.yml"
    answers.write_text("projectName: from-file\nstyle: scss\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["new", "from-flag", "--answers", str(answers), "--no-git", "-d", str(tmp_path), "--format", "json"],
    )

    assert result.exit_code == EXIT_OK
    payload = _parse_json_output(result.stdout)
    assert payload["data"]["project_name"] == "from-flag"
    assert payload["data"]["style"] == "scss"


def test_new_invalid_name_json_error(tmp_path: Path):
    result = runner.invoke(app, ["new", "My App", "-d", str(tmp_path), "--format", "json"])

    assert result.exit_code == EXIT_INVALID_INPUT
    payload = _parse_json_output(result.stdout)
    assert payload["ok"] is False
    assert payload["error"]["code"] == "invalid_input"


def test_new_existing_directory_error(tmp_path: Path):
    (tmp_path / "my-app").mkdir()

    result = runner.invoke(app, ["new", "my-app", "-y", "--no-git", "-d", str(tmp_path), "--format", "json"])

    assert result.exit_code == EXIT_INVALID_INPUT
    payload = _parse_json_output(result.stdout)
    assert payload["error"]["code"] == "scaffold_error"
    assert "already exists" in payload["error"]["message"]


def test_new_interactive_prompts(tmp_path: Path):
    result = runner.invoke(
        app,
        ["new", "--no-git", "-d", str(tmp_path)],
        input="shop\nnextjs\nnextjs-ts\nshadcn\neffector\nbun\nairbnb\n",
    )

    assert result.exit_code == EXIT_OK, result.stdout
    assert "Project created successfully" in result.stdout
    assert "bun run dev" in result.stdout
    target = tmp_path / "shop"
    assert (target / "src" / "model" / "counter.ts").exists()
    assert (target / "components.json").exists()


def test_new_interactive_reasks_invalid_name(tmp_path: Path):
    result = runner.invoke(
        app,
        ["new", "--framework", "react", "--variant", "react", "--style", "vanilla", "--state", "none",
         "--pm", "npm", "--eslint", "none", "--no-git", "-d", str(tmp_path)],
        input="Bad Name\ngood-name\n",
    )

    assert result.exit_code == EXIT_OK, result.stdout
    assert "Invalid project name" in result.stdout
    assert (tmp_path / "good-name" / "package.json").exists()


def test_new_cancelled(tmp_path: Path):
    result = runner.invoke(app, ["new", "-d", str(tmp_path)], input="")

    assert result.exit_code == EXIT_ERROR
    assert "User cancelled" in result.stdout


def test_options_json(tmp_path: Path):
    result = runner.invoke(app, ["options", "--framework", "nextjs", "--format", "json"])

    assert result.exit_code == EXIT_OK
    payload = _parse_json_output(result.stdout)
    assert payload["data"]["frameworks"] == [
        {
            "name": "nextjs",
            "display": "Next.js 16",
            "variants": ["nextjs", "nextjs-ts"],
            "styles": ["vanilla", "scss", "tailwind", "shadcn"],
        }
    ]
    assert payload["data"]["package_managers"] == ["npm", "yarn", "pnpm", "bun"]


def test_options_unknown_framework():
    result = runner.invoke(app, ["options", "--framework", "vue", "--format", "json"])

    assert result.exit_code == EXIT_INVALID_INPUT
    assert _parse_json_output(result.stdout)["error"]["code"] == "unknown_framework"


def test_options_table():
    result = runner.invoke(app, ["options"])

    assert result.exit_code == EXIT_OK
    assert "react-swc-ts" in result.stdout


def test_version_json():
    result = runner.invoke(app, ["version", "--format", "json"])

    assert result.exit_code == EXIT_OK
    assert _parse_json_output(result.stdout)["data"] == {"version": __version__}


def test_new_interactive_accepts_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("npm_config_user_agent", "yarn/1.22.19 npm/? node/v20.11.0 darwin arm64")
    git_calls = []
    monkeypatch.setattr("emdkit.scaffold.initialize_git", lambda path: git_calls.append(path) or True)

    result = runner.invoke(app, ["new", "-d", str(tmp_path)], input="\n" * 8)

    assert result.exit_code == EXIT_OK, result.stdout
    target = tmp_path / "emd-app"
    assert git_calls == [target.resolve()]
    assert "yarn dev" in result.stdout
    readme = (target / "README.md").read_text(encoding="utf-8")
    assert "cd emd-app\nyarn\nyarn dev" in readme
    assert (target / "eslint.config.mjs").exists()


def test_new_answers_file_unreadable(tmp_path: Path):
    answers = tmp_path / "answers.yml"
    answers.write_bytes(b"projectName: \xff\xfe\n")

    result = runner.invoke(app, ["new", "--answers", str(answers), "-d", str(tmp_path), "--format", "json"])

    assert result.exit_code == EXIT_INVALID_INPUT
    assert _parse_json_output(result.stdout)["error"]["code"] == "invalid_input"


def test_new_force_over_regular_file(tmp_path: Path):
    (tmp_path / "my-app").write_text("x", encoding="utf-8")

    result = runner.invoke(app, ["new", "my-app", "--force", "--no-git", "-d", str(tmp_path), "--format", "json"])

    assert result.exit_code == EXIT_INVALID_INPUT
    payload = _parse_json_output(result.stdout)
    assert payload["error"]["code"] == "scaffold_error"
    assert "not a directory" in payload["error"]["message"]


def test_version_markdown():
    result = runner.invoke(app, ["version", "--format", "md"])

    assert result.exit_code == EXIT_OK
    assert f"- **version**: {__version__}" in result.stdout
