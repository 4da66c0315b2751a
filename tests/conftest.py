"""Shared fixtures for tests."""

import json
from pathlib import Path

import pytest

from plugin_bridge.core.types import (
    Agent,
    Command,
    CommandServer,
    Plugin,
    PluginManifest,
    Skill,
)


@pytest.fixture
def skill_source_dir(tmp_path):
    """A standalone skill directory with a nested resource."""
    skill_dir = tmp_path / "fixtures" / "skill-one"
    (skill_dir / "references").mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(
        "---\nname: skill-one\ndescription: Sample skill\n---\n\n# Skill One\n\nDo the thing.\n"
    )
    (skill_dir / "references" / "notes.md").write_text("Extra notes\n")
    return skill_dir


@pytest.fixture
def fixture_plugin():
    """In-memory plugin with one of each entity kind."""
    return Plugin(
        root=Path("/tmp/plugin"),
        manifest=PluginManifest(name="fixture", version="1.0.0"),
        agents=[
            Agent(
                name="Security Reviewer",
                description="Security-focused code review agent",
                capabilities=["Threat modeling", "OWASP"],
                model="claude-sonnet-4-20250514",
                body="Focus on vulnerabilities.",
                source_path=Path("/tmp/plugin/agents/security-reviewer.md"),
            ),
        ],
        commands=[
            Command(
                name="workflows:plan",
                description="Planning command",
                argument_hint="[FOCUS]",
                model="inherit",
                allowed_tools=["Read"],
                body="Plan the work.",
                source_path=Path("/tmp/plugin/commands/workflows/plan.md"),
            ),
        ],
        skills=[
            Skill(
                name="existing-skill",
                description="Existing skill",
                source_dir=Path("/tmp/plugin/skills/existing-skill"),
            ),
        ],
        mcp_servers={"local": CommandServer(command="echo", args=["hello"])},
    )


@pytest.fixture
def plugin_dir(tmp_path):
    """Create a minimal Claude plugin on disk."""
    root = tmp_path / "sample-plugin"
    (root / ".claude-plugin").mkdir(parents=True)
    (root / "agents").mkdir()
    (root / "commands" / "workflows").mkdir(parents=True)
    (root / "skills" / "skill-one").mkdir(parents=True)
    (root / "hooks").mkdir()

    (root / ".claude-plugin" / "plugin.json").write_text(
        json.dumps({"name": "sample-plugin", "version": "1.2.0", "description": "Sample"})
    )

    (root / "agents" / "security-sentinel.md").write_text(
        "---\n"
        "name: security-sentinel\n"
        "description: Finds security issues\n"
        "capabilities:\n"
        "  - Threat modeling\n"
        "  - OWASP\n"
        "model: claude-sonnet-4-20250514\n"
        "---\n\n"
        "Review .claude/settings.json and ask @code-simplicity-reviewer.\n"
    )
    (root / "agents" / "code-simplicity-reviewer.md").write_text(
        "# Simplicity\n\nKeep it simple.\n"
    )

    (root / "commands" / "workflows" / "plan.md").write_text(
        "---\n"
        "description: Plan a feature\n"
        "argument-hint: \"[feature description]\"\n"
        "allowed-tools: Read, Grep\n"
        "---\n\n"
        "Task repo-research-analyst(feature_description)\n\nThen run /workflows:work.\n"
    )
    (root / "commands" / "review.md").write_text("Review the code.\n")

    (root / "skills" / "skill-one" / "SKILL.md").write_text(
        "---\nname: skill-one\ndescription: Sample skill\n---\n\nSkill body.\n"
    )

    (root / "hooks" / "hooks.json").write_text(
        json.dumps({"hooks": {"PreToolUse": [{"matcher": "Bash", "hooks": [{"type": "command", "command": "echo"}]}]}})
    )

    (root / ".mcp.json").write_text(
        json.dumps(
            {
                "mcpServers": {
                    "playwright": {"command": "npx", "args": ["-y", "@playwright/mcp"], "env": {"API_KEY": "x"}},
                    "context7": {"url": "https://mcp.context7.com/mcp"},
                    "broken": {"args": ["nothing"]},
                }
            }
        )
    )
    return root
