"""SKILL.md metadata for the installed skill."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TypedDict

SKILL_NAME = "grok-web-search"
SKILL_FILE = "SKILL.md"

# Maximum size for SKILL.md files (10MB)
MAX_SKILL_FILE_SIZE = 10 * 1024 * 1024

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)
_KV_RE = re.compile(r"^(\w+):\s*(.+)$")


class SkillMetadata(TypedDict):
    """Metadata for a skill."""

    name: str
    """Name of the skill."""

    description: str
    """Description of what the skill does."""

    path: str
    """Path to the SKILL.md file."""


def is_safe_path(path: Path, base_dir: Path) -> bool:
    """Check if a path is safely contained within base_dir.

    Args:
        path: The path to validate
        base_dir: The base directory that should contain the path

    Returns:
        True if the path is safely within base_dir, False otherwise
    """
    try:
        path.resolve().relative_to(base_dir.resolve())
        return True
    except (ValueError, OSError, RuntimeError):
        return False


def read_skill_metadata(skill_dir: Path) -> SkillMetadata | None:
    """Parse YAML frontmatter from `skill_dir/SKILL.md`.

    Args:
        skill_dir: Directory containing SKILL.md.

    Returns:
        SkillMetadata or None if the file is missing, too large or lacks name/description.
    """
    skill_md_path = skill_dir / SKILL_FILE
    try:
        if skill_md_path.stat().st_size > MAX_SKILL_FILE_SIZE:
            return None

        content = skill_md_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    match = _FRONTMATTER_RE.match(content)
    if not match:
        return None

    metadata: dict[str, str] = {}
    for line in match.group(1).split("\n"):
        kv_match = _KV_RE.match(line.strip())
        if kv_match:
            key, value = kv_match.groups()
            metadata[key] = value.strip().strip("\"'")

    if "name" not in metadata or "description" not in metadata:
        return None

    return SkillMetadata(
        name=metadata["name"],
        description=metadata["description"],
        path=str(skill_md_path),
    )
