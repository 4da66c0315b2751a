"""Core abstractions for Plugin Bridge."""

from .errors import BridgeError, ConfigError, PluginParseError, UnknownTargetError, UnsafePathError
from .naming import NameRegistry, flatten_command_name, is_valid_skill_name, normalize_name
from .target import AgentDraft, TargetRules, target_registry
from .types import ConversionResult, ConversionWarning, Plugin, TargetBundle, WarningKind

__all__ = [
    "AgentDraft",
    "BridgeError",
    "ConfigError",
    "ConversionResult",
    "ConversionWarning",
    "NameRegistry",
    "Plugin",
    "PluginParseError",
    "TargetBundle",
    "TargetRules",
    "UnknownTargetError",
    "UnsafePathError",
    "WarningKind",
    "flatten_command_name",
    "is_valid_skill_name",
    "normalize_name",
    "target_registry",
]
