import json
import logging
import os
import re
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .core.errors import ConfigError

# Configure module logger
logger = logging.getLogger("plugin_bridge")


# ANSI colors
class Colors:
    HEADER = "\033[95m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BOLD = "\033[1m"
    ENDC = "\033[0m"


# =============================================================================
# FRONTMATTER
# =============================================================================

_RE_FRONTMATTER = re.compile(r"^---\n(.*?)\n---\n*", re.DOTALL)


def strip_frontmatter(content: str) -> str:
    """Remove YAML frontmatter from markdown content."""
    return _RE_FRONTMATTER.sub("", content)


def extract_yaml_frontmatter(content: str) -> Tuple[Optional[Dict[str, Any]], str]:
    """Extract YAML frontmatter from markdown content."""
    match = _RE_FRONTMATTER.match(content)
    if match:
        try:
            frontmatter = yaml.safe_load(match.group(1))
            body = content[match.end():]
            if isinstance(frontmatter, dict):
                return frontmatter, body
        except yaml.YAMLError as e:
            logger.debug("Ignoring unparsable frontmatter: %s", e)

    return None, content


def format_frontmatter(frontmatter: Dict[str, Any], body: str) -> str:
    """Render a markdown document with YAML frontmatter (no trailing newline)."""
    fm_str = yaml.dump(
        frontmatter,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=1000,
    )
    return f"---\n{fm_str}---\n\n{body}"


# =============================================================================
# FILE UTILITIES
# =============================================================================


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, data: Dict[str, Any]) -> None:
    write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def write_json_atomic(path: Path, data: Dict[str, Any], mode: int = 0o600) -> None:
    """
    Write JSON through a temp file in the same directory, then rename over `path`.
    The final file carries `mode`.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_json_object(path: Path) -> Dict[str, Any]:
    """
    Read a JSON object from `path`.
    A missing file reads as {}; other OS errors propagate.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def backup_file(path: Path) -> Optional[Path]:
    """
    Copy `path` to `<name>.bak.<timestamp>` beside it.
    Returns the backup path, or None when there was nothing to back up.
    """
    if not path.exists():
        return None

    stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    backup = path.with_name(f"{path.name}.bak.{stamp}")
    counter = 1
    while backup.exists():
        backup = path.with_name(f"{path.name}.bak.{stamp}-{counter}")
        counter += 1

    shutil.copy2(path, backup)
    return backup


def copy_dir(src: Path, dest: Path) -> None:
    """Recursively copy a directory tree, merging into `dest` if it exists."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(src, dest, dirs_exist_ok=True)


def force_symlink(source: Path, link: Path) -> None:
    """
    Point `link` at `source`, replacing an existing symlink or file.
    A real directory at `link` is never removed.
    """
    if link.is_symlink() or link.is_file():
        link.unlink()
    elif link.exists():
        raise IsADirectoryError(f"Refusing to replace directory {link} with a symlink")

    link.parent.mkdir(parents=True, exist_ok=True)
    link.symlink_to(source, target_is_directory=True)
