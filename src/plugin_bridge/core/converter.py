"""
Entity converters and the bundle assembler.

Nothing here touches the filesystem: a conversion is a pure function of the
plugin and the target rules. Non-fatal problems are appended to a warnings
list instead of being printed.
"""

import logging
from typing import Any, Collection, Dict, List, Optional, Union

from ..utils import format_frontmatter
from .naming import NameRegistry, flatten_command_name, normalize_name
from .rewrite import rewrite_content
from .target import AgentDraft, TargetRules, target_registry
from .types import (
    Agent,
    Command,
    CommandServer,
    ConversionResult,
    ConversionWarning,
    GeneratedSkill,
    McpServer,
    Plugin,
    Skill,
    SkillDir,
    TargetAgent,
    TargetBundle,
    WarningKind,
)

logger = logging.getLogger("plugin_bridge")

EMPTY_BODY_TEMPLATE = "Instructions converted from the {name} agent."


def _warn(warnings: List[ConversionWarning], kind: WarningKind, subject: str, message: str) -> None:
    logger.debug("warning [%s] %s", kind.value, message)
    warnings.append(ConversionWarning(kind=kind, subject=subject, message=message))


def _truncate(text: str, limit: Optional[int]) -> str:
    if limit is None or len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


# =============================================================================
# AGENTS
# =============================================================================


def build_agent_body(agent: Agent, rules: TargetRules, known_agents: Collection[str] = ()) -> str:
    body = rewrite_content(agent.body.strip(), rules.rewrite_rules, known_agents)

    if agent.capabilities:
        capabilities = "\n".join(f"- {capability}" for capability in agent.capabilities)
        body = f"## Capabilities\n{capabilities}\n\n{body}".strip()

    if not body.strip():
        body = EMPTY_BODY_TEMPLATE.format(name=agent.name)
    return body


def convert_agent(
    agent: Agent,
    rules: TargetRules,
    registry: NameRegistry,
    known_agents: Collection[str] = (),
    warnings: Optional[List[ConversionWarning]] = None,
) -> TargetAgent:
    """Convert one agent; the identifier is unique within `registry`."""
    warnings = warnings if warnings is not None else []
    name = registry.resolve(normalize_name(agent.name))

    description = agent.description or rules.fallback_description.format(name=agent.name)
    description = _truncate(description, rules.description_limit)

    body = build_agent_body(agent, rules, known_agents)

    # Warn only; the full body is always emitted
    if rules.body_limit is not None and rules.warn_body_limit and len(body) > rules.body_limit:
        _warn(
            warnings,
            WarningKind.BODY_TOO_LONG,
            agent.name,
            f'Agent "{agent.name}" body exceeds {rules.body_limit} characters ({len(body)}). '
            f"{rules.display_name} may truncate it.",
        )

    draft = AgentDraft(
        name=name,
        display_name=agent.name,
        description=description,
        body=body,
        model=agent.model if rules.keep_agent_model else None,
    )
    return rules.render_agent(draft)


# =============================================================================
# COMMANDS & SKILLS
# =============================================================================


def command_identifier(command: Command, rules: TargetRules) -> str:
    if rules.flatten_command_namespaces:
        return flatten_command_name(command.name)
    return normalize_name(command.name)


def convert_command(
    command: Command,
    rules: TargetRules,
    registry: NameRegistry,
    known_agents: Collection[str] = (),
    warnings: Optional[List[ConversionWarning]] = None,
) -> GeneratedSkill:
    """Convert a slash command into a generated SKILL.md."""
    warnings = warnings if warnings is not None else []
    name = registry.resolve(command_identifier(command, rules))

    frontmatter: Dict[str, Any] = {"name": name}
    if command.description:
        frontmatter["description"] = command.description

    sections = []
    if command.argument_hint:
        sections.append(f"## Arguments\n{command.argument_hint}")
    sections.append(rewrite_content(command.body.strip(), rules.rewrite_rules, known_agents))

    body = "\n\n".join(section for section in sections if section).strip()

    if rules.warn_dropped_command_fields:
        dropped = []
        if command.allowed_tools:
            dropped.append("allowed-tools")
        if command.model:
            dropped.append("model")
        if command.disable_model_invocation:
            dropped.append("disable-model-invocation")
        if dropped:
            _warn(
                warnings,
                WarningKind.FIELDS_DROPPED,
                command.name,
                f'Command "{command.name}": {rules.display_name} has no equivalent for '
                f"{', '.join(dropped)}; dropped.",
            )

    return GeneratedSkill(name=name, content=format_frontmatter(frontmatter, body))


def convert_skill(skill: Skill, registry: NameRegistry) -> SkillDir:
    """Pass a skill directory through, keeping its name."""
    registry.reserve(skill.name)
    return SkillDir(name=skill.name, source_dir=skill.source_dir)


# =============================================================================
# MCP SERVERS
# =============================================================================


def prefix_env_vars(env: Dict[str, str], prefix: Optional[str]) -> Dict[str, str]:
    """Prefix every key with `prefix` unless it already starts with it."""
    if not prefix:
        return dict(env)
    return {
        (key if key.startswith(prefix) else f"{prefix}{key}"): value
        for key, value in env.items()
    }


def convert_mcp_server(
    name: str,
    server: McpServer,
    rules: TargetRules,
    warnings: Optional[List[ConversionWarning]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Convert one server definition, or return None when the target cannot
    reach it (a warning is recorded).
    """
    warnings = warnings if warnings is not None else []
    entry: Dict[str, Any] = {}

    if isinstance(server, CommandServer):
        if rules.local_server_type:
            entry["type"] = rules.local_server_type
        entry["command"] = server.command
        if server.args:
            entry["args"] = list(server.args)
    else:
        if not rules.supports_remote_servers:
            _warn(
                warnings,
                WarningKind.SERVER_UNSUPPORTED,
                name,
                f'MCP server "{name}" has no command ({rules.display_name} does not support '
                f"HTTP/SSE servers). Skipped.",
            )
            return None
        if rules.remote_server_type:
            entry["type"] = rules.remote_server_type
        entry["url"] = server.url
        if server.headers:
            entry["headers"] = dict(server.headers)

    if rules.server_tools is not None:
        entry["tools"] = list(rules.server_tools)

    if server.env:
        entry["env"] = prefix_env_vars(server.env, rules.env_prefix)

    return entry


def convert_mcp_servers(
    servers: Dict[str, McpServer],
    rules: TargetRules,
    warnings: Optional[List[ConversionWarning]] = None,
) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for name, server in servers.items():
        entry = convert_mcp_server(name, server, rules, warnings)
        if entry is not None:
            result[name] = entry
    return result


# =============================================================================
# BUNDLE ASSEMBLER
# =============================================================================


def convert_plugin(plugin: Plugin, target: Union[str, TargetRules]) -> ConversionResult:
    """
    Convert a whole plugin into one target bundle.

    Agents get their own namespace. Skills and command-generated skills share
    one; source skills are reserved first so only commands are ever renamed.
    """
    rules = target if isinstance(target, TargetRules) else target_registry.require(target)
    warnings: List[ConversionWarning] = []

    known_agents = {normalize_name(agent.name) for agent in plugin.agents}

    agent_names = NameRegistry()
    agents = [
        convert_agent(agent, rules, agent_names, known_agents, warnings)
        for agent in plugin.agents
    ]

    skill_names = NameRegistry()
    skill_dirs = [convert_skill(skill, skill_names) for skill in plugin.skills]
    generated_skills = [
        convert_command(command, rules, skill_names, known_agents, warnings)
        for command in plugin.commands
    ]

    mcp_servers = convert_mcp_servers(plugin.mcp_servers, rules, warnings)

    if plugin.has_hooks:
        _warn(
            warnings,
            WarningKind.HOOKS_SKIPPED,
            "hooks",
            f"{rules.display_name} does not support hooks. "
            "Hooks were skipped during conversion.",
        )

    bundle = TargetBundle(
        target=rules.name,
        agents=agents,
        generated_skills=generated_skills,
        skill_dirs=skill_dirs,
        mcp_servers=mcp_servers,
    )
    logger.debug(
        "Converted %s to %s: %d agents, %d generated skills, %d skill dirs, %d servers",
        plugin.manifest.name,
        rules.name,
        len(agents),
        len(generated_skills),
        len(skill_dirs),
        len(mcp_servers),
    )
    return ConversionResult(target=rules.name, bundle=bundle, warnings=warnings)
