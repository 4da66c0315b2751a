"""
Kiro CLI target.

Output structure:
- .kiro/agents/<name>.json (agent config)
- .kiro/agents/prompts/<name>.md (agent instructions, referenced by file:// URI)
- .kiro/skills/<name>/SKILL.md
- .kiro/settings/mcp.json (merged into an existing file)

Kiro agents cannot pin a model and Kiro only launches local (stdio) MCP servers.
"""

import json

from ..core.rewrite import (
    delegation_rule,
    home_path_rule,
    mention_rule,
    project_path_rule,
    slash_command_rule,
    tool_name_rule,
)
from ..core.target import AgentDraft, TargetRules, target_registry
from ..core.types import TargetAgent

KIRO_DESCRIPTION_MAX_CHARS = 1024

KIRO_AGENT_RESOURCES = [
    "file://.kiro/steering/**/*.md",
    "skill://.kiro/skills/**/SKILL.md",
]

# Claude tool name -> Kiro built-in tool
KIRO_TOOL_NAMES = {
    "Bash": "shell",
    "Read": "read",
    "Write": "write",
    "Edit": "write",
    "Glob": "glob",
    "Grep": "grep",
    "WebFetch": "web_fetch",
    "WebSearch": "web_search",
}

KIRO_REWRITE_RULES = (
    delegation_rule("Use the use_subagent tool to delegate to the {agent} agent: {args}"),
    slash_command_rule("the {command} skill", flatten=False),
    home_path_rule("~/.kiro/"),
    project_path_rule(".kiro/"),
    mention_rule("the {agent} agent", known_only=True),
    tool_name_rule(KIRO_TOOL_NAMES),
)


def render_kiro_agent(draft: AgentDraft) -> TargetAgent:
    """JSON agent config plus a separate prompt file holding the instructions."""
    config = {
        "name": draft.name,
        "description": draft.description,
        "prompt": f"file://./prompts/{draft.name}.md",
        "tools": ["*"],
        "resources": list(KIRO_AGENT_RESOURCES),
        "includeMcpJson": True,
        "welcomeMessage": f"Switching to the {draft.name} agent. {draft.description}",
    }
    return TargetAgent(
        name=draft.name,
        content=json.dumps(config, indent=2, ensure_ascii=False),
        prompt_content=draft.body,
    )


KIRO = target_registry.register(
    TargetRules(
        name="kiro",
        display_name="Kiro",
        directory_name=".kiro",
        agent_extension=".json",
        config_filename="settings/mcp.json",
        home_dir="~/.kiro",
        render_agent=render_kiro_agent,
        rewrite_rules=KIRO_REWRITE_RULES,
        description_limit=KIRO_DESCRIPTION_MAX_CHARS,
        fallback_description="Use this agent for {name} tasks",
        flatten_command_namespaces=False,
        keep_agent_model=False,
        supports_remote_servers=False,
        merge_existing_config=True,
    )
)
