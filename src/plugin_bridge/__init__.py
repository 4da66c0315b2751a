"""
Plugin Bridge - Converts Claude Code plugins for other AI coding assistants.

Supported targets:
- GitHub Copilot (.github/)
- Kiro CLI (.kiro/)
"""

__version__ = "0.1.0"

# Trigger target auto-registration on import
from plugin_bridge import converters  # noqa: F401

__all__ = [
    "cli",
    "converters",
    "core",
    "home_sync",
    "parsers",
    "settings",
    "utils",
    "writer",
]
