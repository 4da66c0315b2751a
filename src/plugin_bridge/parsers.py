"""
Reads Claude plugin directories and the personal ~/.claude config into the
entity model.

Plugin layout:
- .claude-plugin/plugin.json (manifest)
- agents/**/*.md
- commands/**/*.md (subdirectories become namespaces: commands/workflows/plan.md -> workflows:plan)
- skills/<name>/SKILL.md
- hooks/hooks.json
- .mcp.json
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .core.errors import PluginParseError
from .core.types import (
    Agent,
    Command,
    CommandServer,
    HomeConfig,
    McpServer,
    Plugin,
    PluginManifest,
    Skill,
    UrlServer,
)
from .utils import extract_yaml_frontmatter, logger

MANIFEST_PATH = Path(".claude-plugin") / "plugin.json"
HOOKS_PATH = Path("hooks") / "hooks.json"
MCP_PATH = Path(".mcp.json")


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PluginParseError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise PluginParseError(f"Expected a JSON object in {path}")
    return data


def _as_list(value: Any) -> List[str]:
    """Accept YAML lists as well as "a, b, c" strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item) for item in value]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _read_markdown(path: Path) -> tuple:
    content = path.read_text(encoding="utf-8")
    frontmatter, body = extract_yaml_frontmatter(content)
    return frontmatter or {}, body


# =============================================================================
# ENTITIES
# =============================================================================


def parse_agent(path: Path) -> Agent:
    meta, body = _read_markdown(path)
    return Agent(
        name=_optional_str(meta.get("name")) or path.stem,
        body=body,
        description=_optional_str(meta.get("description")),
        capabilities=_as_list(meta.get("capabilities")),
        model=_optional_str(meta.get("model")),
        source_path=path,
    )


def parse_command(path: Path, commands_root: Path) -> Command:
    meta, body = _read_markdown(path)
    relative = path.relative_to(commands_root).with_suffix("")
    default_name = ":".join(relative.parts)
    return Command(
        name=_optional_str(meta.get("name")) or default_name,
        body=body,
        description=_optional_str(meta.get("description")),
        argument_hint=_optional_str(meta.get("argument-hint")),
        allowed_tools=_as_list(meta.get("allowed-tools")),
        model=_optional_str(meta.get("model")),
        disable_model_invocation=bool(meta.get("disable-model-invocation", False)),
        source_path=path,
    )


def parse_skill(skill_dir: Path) -> Skill:
    meta, _ = _read_markdown(skill_dir / "SKILL.md")
    return Skill(
        name=skill_dir.name,
        source_dir=skill_dir,
        description=_optional_str(meta.get("description")),
    )


def parse_mcp_server(name: str, data: Any) -> Optional[McpServer]:
    """Classify a raw server entry; entries with neither command nor url are skipped."""
    if not isinstance(data, dict):
        logger.warning("Skipping MCP server %s: expected an object", name)
        return None

    env = {str(k): str(v) for k, v in (data.get("env") or {}).items()}
    if data.get("command"):
        return CommandServer(
            command=str(data["command"]),
            args=[str(arg) for arg in data.get("args") or []],
            env=env,
        )
    if data.get("url"):
        return UrlServer(
            url=str(data["url"]),
            headers={str(k): str(v) for k, v in (data.get("headers") or {}).items()},
            env=env,
        )

    logger.warning("Skipping MCP server %s: neither command nor url is set", name)
    return None


def parse_mcp_servers(raw: Dict[str, Any]) -> Dict[str, McpServer]:
    servers: Dict[str, McpServer] = {}
    for name, data in raw.items():
        server = parse_mcp_server(name, data)
        if server is not None:
            servers[name] = server
    return servers


def _skill_dirs(skills_root: Path) -> List[Path]:
    if not skills_root.is_dir():
        return []
    return sorted(
        entry for entry in skills_root.iterdir()
        if entry.is_dir() and (entry / "SKILL.md").is_file()
    )


# =============================================================================
# PLUGIN
# =============================================================================


def load_plugin(root: Union[str, Path]) -> Plugin:
    """Load a plugin directory into the entity model."""
    root = Path(root).expanduser().resolve()
    if not root.is_dir():
        raise PluginParseError(f"Plugin directory not found: {root}")

    manifest_data: Dict[str, Any] = {}
    if (root / MANIFEST_PATH).is_file():
        manifest_data = _load_json(root / MANIFEST_PATH)

    manifest = PluginManifest(
        name=_optional_str(manifest_data.get("name")) or root.name,
        version=_optional_str(manifest_data.get("version")),
        description=_optional_str(manifest_data.get("description")),
    )

    agents_root = root / "agents"
    agents = [parse_agent(path) for path in sorted(agents_root.rglob("*.md"))] if agents_root.is_dir() else []

    commands_root = root / "commands"
    commands = (
        [parse_command(path, commands_root) for path in sorted(commands_root.rglob("*.md"))]
        if commands_root.is_dir()
        else []
    )

    skills = [parse_skill(path) for path in _skill_dirs(root / "skills")]

    hooks: Dict[str, Any] = {}
    if (root / HOOKS_PATH).is_file():
        hooks = _load_json(root / HOOKS_PATH).get("hooks") or {}
    elif isinstance(manifest_data.get("hooks"), dict):
        hooks = manifest_data["hooks"].get("hooks", manifest_data["hooks"])

    raw_servers: Dict[str, Any] = {}
    if (root / MCP_PATH).is_file():
        mcp_data = _load_json(root / MCP_PATH)
        raw_servers = mcp_data.get("mcpServers", mcp_data)
    elif isinstance(manifest_data.get("mcpServers"), dict):
        raw_servers = manifest_data["mcpServers"]

    plugin = Plugin(
        root=root,
        manifest=manifest,
        agents=agents,
        commands=commands,
        skills=skills,
        hooks=hooks,
        mcp_servers=parse_mcp_servers(raw_servers),
    )
    logger.debug(
        "Loaded plugin %s: %d agents, %d commands, %d skills",
        manifest.name,
        len(agents),
        len(commands),
        len(skills),
    )
    return plugin


def load_home_config(claude_home: Union[str, Path] = "~/.claude") -> HomeConfig:
    """Load personal skills and MCP servers from a ~/.claude directory."""
    claude_home = Path(claude_home).expanduser()

    skills = [parse_skill(path) for path in _skill_dirs(claude_home / "skills")]

    raw_servers: Dict[str, Any] = {}
    settings_path = claude_home / "settings.json"
    if settings_path.is_file():
        raw_servers = _load_json(settings_path).get("mcpServers") or {}

    return HomeConfig(skills=skills, mcp_servers=parse_mcp_servers(raw_servers))
