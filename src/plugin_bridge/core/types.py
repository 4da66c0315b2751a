"""Shared types and data structures for Plugin Bridge."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


# =============================================================================
# SOURCE PLUGIN
# =============================================================================


@dataclass
class PluginManifest:
    name: str
    version: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Agent:
    """
    A Claude agent definition.
    `name` is a display string and is not guaranteed to be identifier-safe.
    """
    name: str
    body: str = ""
    description: Optional[str] = None
    capabilities: List[str] = field(default_factory=list)
    model: Optional[str] = None
    source_path: Optional[Path] = None


@dataclass
class Command:
    """A slash command. `name` may be namespaced, e.g. "workflows:plan"."""
    name: str
    body: str = ""
    description: Optional[str] = None
    argument_hint: Optional[str] = None
    allowed_tools: List[str] = field(default_factory=list)
    model: Optional[str] = None
    disable_model_invocation: bool = False
    source_path: Optional[Path] = None


@dataclass
class Skill:
    name: str
    source_dir: Path
    description: Optional[str] = None


@dataclass
class CommandServer:
    """MCP server launched as a local process."""
    command: str
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)


@dataclass
class UrlServer:
    """MCP server reached over HTTP/SSE."""
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    env: Dict[str, str] = field(default_factory=dict)


McpServer = Union[CommandServer, UrlServer]


@dataclass
class Plugin:
    root: Path
    manifest: PluginManifest
    agents: List[Agent] = field(default_factory=list)
    commands: List[Command] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    hooks: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    mcp_servers: Dict[str, McpServer] = field(default_factory=dict)

    @property
    def has_hooks(self) -> bool:
        return bool(self.hooks)


@dataclass
class HomeConfig:
    """Personal Claude configuration (~/.claude) used for live sync."""
    skills: List[Skill] = field(default_factory=list)
    mcp_servers: Dict[str, McpServer] = field(default_factory=dict)


# =============================================================================
# TARGET BUNDLE
# =============================================================================


@dataclass
class TargetAgent:
    name: str
    content: str
    prompt_content: Optional[str] = None  # Written beside the agent file when set


@dataclass
class GeneratedSkill:
    name: str
    content: str


@dataclass
class SkillDir:
    name: str
    source_dir: Path


@dataclass
class TargetBundle:
    target: str
    agents: List[TargetAgent] = field(default_factory=list)
    generated_skills: List[GeneratedSkill] = field(default_factory=list)
    skill_dirs: List[SkillDir] = field(default_factory=list)
    mcp_servers: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.agents or self.generated_skills or self.skill_dirs or self.mcp_servers)


# =============================================================================
# DIAGNOSTICS
# =============================================================================


class WarningKind(Enum):
    BODY_TOO_LONG = "body-too-long"
    HOOKS_SKIPPED = "hooks-skipped"
    SERVER_UNSUPPORTED = "server-unsupported"
    INVALID_SKILL_NAME = "invalid-skill-name"
    FIELDS_DROPPED = "fields-dropped"
    LINK_BLOCKED = "link-blocked"


@dataclass
class ConversionWarning:
    kind: WarningKind
    subject: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ConversionResult:
    target: str
    bundle: TargetBundle
    warnings: List[ConversionWarning] = field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        return {
            "agents": len(self.bundle.agents),
            "skills": len(self.bundle.generated_skills) + len(self.bundle.skill_dirs),
            "mcp_servers": len(self.bundle.mcp_servers),
        }
