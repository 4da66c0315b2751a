"""
GitHub Copilot target.

Output structure:
- .github/agents/<name>.agent.md (agent profiles with YAML frontmatter)
- .github/skills/<name>/SKILL.md
- .github/copilot-mcp-config.json

Reference: https://docs.github.com/en/copilot/reference/custom-agents-configuration
"""

from typing import Any, Dict

from ..core.rewrite import (
    delegation_rule,
    home_path_rule,
    mention_rule,
    project_path_rule,
    slash_command_rule,
)
from ..core.target import AgentDraft, TargetRules, target_registry
from ..core.types import TargetAgent
from ..utils import format_frontmatter

# Copilot agent profiles: prompt (body after frontmatter) max 30,000 characters
COPILOT_BODY_CHAR_LIMIT = 30_000
COPILOT_ENV_PREFIX = "COPILOT_MCP_"

COPILOT_REWRITE_RULES = (
    delegation_rule("Use the {agent} skill to: {args}"),
    slash_command_rule("/{command}", flatten=True),
    home_path_rule("~/.copilot/"),
    project_path_rule(".github/"),
    mention_rule("the {agent} agent"),
)


def render_copilot_agent(draft: AgentDraft) -> TargetAgent:
    """Agent profile: frontmatter with unrestricted tools, instructions as body."""
    frontmatter: Dict[str, Any] = {
        "description": draft.description,
        "tools": ["*"],
        "infer": True,
    }
    if draft.model:
        frontmatter["model"] = draft.model

    return TargetAgent(name=draft.name, content=format_frontmatter(frontmatter, draft.body))


COPILOT = target_registry.register(
    TargetRules(
        name="copilot",
        display_name="Copilot",
        directory_name=".github",
        agent_extension=".agent.md",
        config_filename="copilot-mcp-config.json",
        home_dir="~/.copilot",
        render_agent=render_copilot_agent,
        rewrite_rules=COPILOT_REWRITE_RULES,
        env_prefix=COPILOT_ENV_PREFIX,
        body_limit=COPILOT_BODY_CHAR_LIMIT,
        local_server_type="local",
        remote_server_type="sse",
        server_tools=("*",),
    )
)
