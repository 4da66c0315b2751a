"""
Target rules and the target registry.

A target is described entirely by data: layout, naming and server-config
conventions, plus the rewrite rules and an agent renderer. The generic
converter and writer consume these values.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .errors import UnknownTargetError
from .rewrite import RewriteRule
from .types import TargetAgent


@dataclass
class AgentDraft:
    """Target-neutral agent fields handed to a target's renderer."""
    name: str
    display_name: str
    description: str
    body: str
    model: Optional[str] = None


@dataclass(frozen=True)
class TargetRules:
    name: str
    display_name: str
    directory_name: str                 # e.g. ".github"
    agent_extension: str                # e.g. ".agent.md"
    config_filename: str                # relative to the target directory
    home_dir: str                       # default live-sync root, e.g. "~/.copilot"
    render_agent: Callable[[AgentDraft], TargetAgent]
    rewrite_rules: Tuple[RewriteRule, ...] = ()
    servers_key: str = "mcpServers"
    env_prefix: Optional[str] = None
    body_limit: Optional[int] = None
    warn_body_limit: bool = True
    description_limit: Optional[int] = None
    fallback_description: str = "Converted from Claude agent {name}"
    flatten_command_namespaces: bool = True
    keep_agent_model: bool = True
    local_server_type: Optional[str] = None
    remote_server_type: Optional[str] = None
    supports_remote_servers: bool = True
    server_tools: Optional[Tuple[str, ...]] = None
    merge_existing_config: bool = False
    warn_dropped_command_fields: bool = False


class TargetRegistry:
    """Registry of known targets, looked up by case-insensitive name."""

    def __init__(self):
        self._targets: Dict[str, TargetRules] = {}

    def register(self, rules: TargetRules) -> TargetRules:
        self._targets[rules.name.lower()] = rules
        return rules

    def get(self, name: str) -> Optional[TargetRules]:
        return self._targets.get(name.lower())

    def require(self, name: str) -> TargetRules:
        rules = self.get(name)
        if rules is None:
            known = ", ".join(self.names()) or "none"
            raise UnknownTargetError(f"Unknown target '{name}' (known targets: {known})")
        return rules

    def names(self) -> List[str]:
        return sorted(self._targets)

    def all(self) -> List[TargetRules]:
        return [self._targets[name] for name in self.names()]


target_registry = TargetRegistry()
