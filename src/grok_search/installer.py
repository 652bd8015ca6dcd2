"""Install the skill into the per-user Claude Code skills directory.

The project checkout is copied to ``~/.claude/skills/grok-web-search`` (minus development-only
files) and the copy is then pip-installed so the host application can run ``grok-search``.
"""

from __future__ import annotations

import fnmatch
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Sequence

import typer

from grok_search.errors import InstallError
from grok_search.logging import get_logger
from grok_search.skill import SKILL_FILE, SKILL_NAME, is_safe_path, read_skill_metadata

logger = get_logger(__name__)

SKILLS_DIR = Path.home() / ".claude" / "skills"
SKILL_INSTALL_DIR = SKILLS_DIR / SKILL_NAME

EXCLUDE_PATTERNS: tuple[str, ...] = (
    # Development environment
    ".git",
    ".idea",
    ".vscode",
    ".venv",
    "venv",
    ".claude",
    # Build output
    "build",
    "dist",
    # Configuration files
    ".gitignore",
    ".env",
    # Project docs not needed by the installed skill
    "CLAUDE.md",
    # Tests
    "tests",
)

# Entry names excluded at any depth
EXCLUDE_NAMES: tuple[str, ...] = (
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    ".DS_Store",
    "*.pyc",
    "*.egg-info",
)


def find_project_dir(start: Path | None = None) -> Path | None:
    """Locate the project checkout this module runs from.

    Walks up from `start` (this file by default) to the first directory holding both
    ``SKILL.md`` and ``pyproject.toml``. A regular site-packages install has none.
    """

    here = (start or Path(__file__)).resolve()
    for parent in here.parents:
        if (parent / SKILL_FILE).is_file() and (parent / "pyproject.toml").is_file():
            return parent
    return None


def _check_paths(source_dir: Path, target_dir: Path) -> None:
    source = source_dir.resolve()
    target = target_dir.resolve()
    if target.is_relative_to(source) or source.is_relative_to(target):
        raise InstallError(
            f"Target {target_dir} overlaps the source checkout {source_dir}; "
            "choose a target outside the project"
        )


def should_exclude(
    relative_path: str,
    patterns: Sequence[str] = EXCLUDE_PATTERNS,
    names: Sequence[str] = EXCLUDE_NAMES,
) -> bool:
    """Check if a path relative to the project root is excluded.

    `patterns` match the exact path or anything beneath it; a pattern containing ``*`` is
    glob-matched against the whole path instead. `names` are glob-matched against every
    component of the path.
    """

    rel = relative_path.replace(os.sep, "/")
    parts = rel.split("/")
    for pattern in patterns:
        if "*" in pattern:
            if fnmatch.fnmatchcase(rel, pattern):
                return True
        elif rel == pattern or rel.startswith(pattern + "/"):
            return True
    return any(fnmatch.fnmatchcase(part, name) for part in parts for name in names)


def copy_tree(
    src: Path,
    dest: Path,
    *,
    base_dir: Path | None = None,
    patterns: Sequence[str] = EXCLUDE_PATTERNS,
) -> list[Path]:
    """Recursively copy `src` into `dest`, skipping excluded entries.

    Returns:
        Copied file paths, relative to `base_dir`.
    """

    base = base_dir or src
    dest.mkdir(parents=True, exist_ok=True)
    dest_resolved = dest.resolve()

    copied: list[Path] = []
    for entry in sorted(src.iterdir()):
        # Never descend into the directory being written
        if entry.resolve() == dest_resolved:
            continue
        rel = entry.relative_to(base)
        if should_exclude(rel.as_posix(), patterns):
            continue
        if not is_safe_path(entry, base):
            logger.warning("skipping %s: resolves outside %s", rel, base)
            continue

        target = dest / entry.name
        if entry.is_dir():
            copied += copy_tree(entry, target, base_dir=base, patterns=patterns)
        else:
            shutil.copy2(entry, target)
            copied.append(rel)
    return copied


def _pip(*args: str, cwd: Path | None = None, quiet: bool = False) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "pip", *args],
        cwd=cwd,
        check=True,
        stdout=subprocess.DEVNULL if quiet else None,
        stderr=subprocess.DEVNULL if quiet else None,
    )


def _check_pip() -> None:
    try:
        _pip("--version", quiet=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise InstallError("pip is not available. Please install pip for this Python first.") from e


def _echo_key_hint() -> None:
    if sys.platform == "win32":
        typer.echo('   $env:XAI_API_KEY="your-api-key"  # PowerShell')
        typer.echo("   set XAI_API_KEY=your-api-key     # CMD")
    else:
        typer.echo('   export XAI_API_KEY="your-api-key"')
        typer.echo("   # Add to ~/.bashrc or ~/.zshrc for persistence")


def install_skill(
    source_dir: Path | None = None,
    target_dir: Path = SKILL_INSTALL_DIR,
    *,
    install_deps: bool = True,
    has_api_key: bool = False,
) -> Path:
    """Install the skill files into `target_dir`.

    Args:
        source_dir: Project checkout to copy from. Located with `find_project_dir` if omitted.
        target_dir: Skill install directory; an existing one is replaced. Must not overlap
            `source_dir`.
        install_deps: Pip-install the copied project afterwards.
        has_api_key: Whether XAI_API_KEY is configured; only affects the printed hints.

    Returns:
        Path to the installed skill directory.

    Raises:
        InstallError: No checkout was found, the target overlaps the source, pip is missing,
            SKILL.md is missing or invalid, or a step failed.
    """

    typer.echo("🚀 Installing Grok WebSearch Skill to Claude Code\n")

    if source_dir is None:
        source_dir = find_project_dir()
        if source_dir is None:
            raise InstallError(
                "Could not locate the grok-web-search checkout; pass --source <project dir>"
            )
    _check_paths(source_dir, target_dir)

    if install_deps:
        _check_pip()

    metadata = read_skill_metadata(source_dir)
    if metadata is None:
        raise InstallError(f"No valid SKILL.md (with name and description) found in {source_dir}")

    if not has_api_key:
        typer.echo("⚠️  Warning: XAI_API_KEY environment variable is not set")
        typer.echo("You'll need to set it before using the Skill:")
        _echo_key_hint()
        typer.echo("")

    try:
        typer.echo("📁 Step 1/3: Preparing installation directory...")
        target_dir.parent.mkdir(parents=True, exist_ok=True)
        typer.echo(f"✅ Skills directory ready: {target_dir.parent}\n")

        if target_dir.exists():
            typer.echo("🗑️  Step 2/3: Removing old version...")
            shutil.rmtree(target_dir)
            typer.echo("✅ Old version removed\n")
        else:
            typer.echo("⏭️  Step 2/3: No old version found, skipping...\n")

        typer.echo("📦 Step 3/3: Copying Skill files...")
        copied = copy_tree(source_dir, target_dir)
        typer.echo(f"✅ {len(copied)} files copied\n")
        logger.info("copied %d files from %s to %s", len(copied), source_dir, target_dir)

        if install_deps:
            typer.echo("Installing runtime dependencies...")
            _pip("install", "--quiet", str(target_dir))
    except (OSError, subprocess.CalledProcessError) as e:
        raise InstallError(str(e)) from e

    typer.echo("\n✅ Installation complete!\n")
    typer.echo("📍 Skill installed at:")
    typer.echo(f"   {target_dir}\n")
    typer.echo("🔧 Next steps:\n")

    if not has_api_key:
        typer.echo("1. Set your xAI API key:")
        _echo_key_hint()
        typer.echo("")

    typer.echo("2. Verify installation:")
    typer.echo('   grok-search search "test query"\n')
    typer.echo("3. Restart Claude Code to load the Skill\n")
    typer.echo("4. Use in conversations:")
    typer.echo("   'Search for the latest AI news'")
    typer.echo(f"   '/{metadata['name']} \"your query\"'\n")
    typer.echo("📖 For more information, see README.md")

    return target_dir
