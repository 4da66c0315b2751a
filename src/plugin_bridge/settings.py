"""
User settings for Plugin Bridge.

Stored in: ~/.config/plugin-bridge/config.json
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

from .utils import logger

CONFIG_DIR = Path.home() / ".config" / "plugin-bridge"
CONFIG_FILE = CONFIG_DIR / "config.json"


@dataclass
class BridgeSettings:
    """Defaults applied when the CLI is run without explicit flags."""
    default_target: str = "copilot"
    claude_home: str = "~/.claude"
    output_roots: Dict[str, str] = field(default_factory=dict)  # target -> live sync root

    @property
    def claude_home_path(self) -> Path:
        return Path(self.claude_home).expanduser()

    def output_root_for(self, target: str) -> Optional[Path]:
        root = self.output_roots.get(target.lower())
        return Path(root).expanduser() if root else None


def load_settings(path: Optional[Path] = None) -> BridgeSettings:
    """Load settings from disk, or fall back to defaults."""
    path = path or CONFIG_FILE
    if not path.exists():
        return BridgeSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        known = {f.name for f in fields(BridgeSettings)}
        return BridgeSettings(**{k: v for k, v in data.items() if k in known})
    except (json.JSONDecodeError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return BridgeSettings()


def save_settings(settings: BridgeSettings, path: Optional[Path] = None) -> Path:
    """Persist settings to disk."""
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return path
