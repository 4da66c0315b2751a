"""Tests for Copilot conversion."""

import dataclasses
from pathlib import Path

import yaml

from plugin_bridge.core.converter import convert_plugin
from plugin_bridge.core.types import Agent, Command, CommandServer, Skill, UrlServer, WarningKind


def _split_frontmatter(markdown: str) -> tuple:
    if not markdown.startswith("---\n"):
        raise AssertionError("frontmatter start marker is missing")

    parts = markdown.split("---\n", 2)
    if len(parts) < 3:
        raise AssertionError("invalid frontmatter layout")

    frontmatter = yaml.safe_load(parts[1])
    body = parts[2].lstrip("\n")

    if not isinstance(frontmatter, dict):
        raise AssertionError("frontmatter must be a YAML object")

    return frontmatter, body


def _with(plugin, **changes):
    return dataclasses.replace(plugin, **changes)


def test_converts_agents_with_copilot_frontmatter(fixture_plugin):
    result = convert_plugin(fixture_plugin, "copilot")

    assert len(result.bundle.agents) == 1
    agent = result.bundle.agents[0]
    assert agent.name == "security-reviewer"
    assert agent.prompt_content is None

    frontmatter, body = _split_frontmatter(agent.content)
    assert frontmatter["description"] == "Security-focused code review agent"
    assert frontmatter["tools"] == ["*"]
    assert frontmatter["infer"] is True
    assert frontmatter["model"] == "claude-sonnet-4-20250514"
    assert body.startswith("## Capabilities\n- Threat modeling\n- OWASP\n\nFocus on vulnerabilities.")


def test_agent_description_fallback_uses_display_name(fixture_plugin):
    plugin = _with(fixture_plugin, agents=[Agent(name="basic-agent", body="Do things.")])

    frontmatter, _ = _split_frontmatter(convert_plugin(plugin, "copilot").bundle.agents[0].content)

    assert frontmatter["description"] == "Converted from Claude agent basic-agent"


def test_agent_with_empty_body_gets_default_body(fixture_plugin):
    plugin = _with(fixture_plugin, agents=[Agent(name="empty-agent", description="Empty", body="   ")])

    _, body = _split_frontmatter(convert_plugin(plugin, "copilot").bundle.agents[0].content)

    assert "Instructions converted from the empty-agent agent." in body


def test_agent_without_model_omits_model(fixture_plugin):
    plugin = _with(fixture_plugin, agents=[Agent(name="no-model", description="x", body="Content.")])

    frontmatter, _ = _split_frontmatter(convert_plugin(plugin, "copilot").bundle.agents[0].content)

    assert "model" not in frontmatter


def test_agent_names_are_deduplicated(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        agents=[Agent(name="Reviewer", body="a"), Agent(name="reviewer", body="b"), Agent(name="REVIEWER!", body="c")],
    )

    names = [agent.name for agent in convert_plugin(plugin, "copilot").bundle.agents]

    assert names == ["reviewer", "reviewer-2", "reviewer-3"]


def test_warns_but_does_not_truncate_large_body(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        agents=[Agent(name="large-agent", description="Large", body="x" * 31_000)],
        commands=[],
        skills=[],
    )

    result = convert_plugin(plugin, "copilot")

    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.kind is WarningKind.BODY_TOO_LONG
    assert warning.subject == "large-agent"
    assert "exceeds 30000 characters (31000)" in warning.message
    assert "x" * 31_000 in result.bundle.agents[0].content


def test_converts_commands_to_skills(fixture_plugin):
    skill = convert_plugin(fixture_plugin, "copilot").bundle.generated_skills[0]

    assert skill.name == "plan"
    frontmatter, body = _split_frontmatter(skill.content)
    assert frontmatter == {"name": "plan", "description": "Planning command"}
    assert body.startswith("## Arguments\n[FOCUS]\n\nPlan the work.")


def test_command_without_description_omits_key(fixture_plugin):
    plugin = _with(fixture_plugin, commands=[Command(name="bare", body="Body.")], skills=[])

    frontmatter, _ = _split_frontmatter(convert_plugin(plugin, "copilot").bundle.generated_skills[0].content)

    assert frontmatter == {"name": "bare"}


def test_command_fields_without_equivalent_are_silently_dropped(fixture_plugin):
    result = convert_plugin(fixture_plugin, "copilot")
    content = result.bundle.generated_skills[0].content

    assert "allowedTools" not in content
    assert "allowed-tools" not in content
    assert "inherit" not in content
    assert result.warnings == []


def test_flattened_command_collision_is_deduplicated(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        commands=[Command(name="workflows:plan", body="a"), Command(name="plan", body="b")],
        skills=[],
    )

    names = [skill.name for skill in convert_plugin(plugin, "copilot").bundle.generated_skills]

    assert names == ["plan", "plan-2"]


def test_skill_name_is_reserved_before_commands(fixture_plugin):
    plugin = _with(fixture_plugin, commands=[Command(name="existing-skill", description="Colliding", body="x")])

    bundle = convert_plugin(plugin, "copilot").bundle

    assert bundle.skill_dirs[0].name == "existing-skill"
    assert bundle.skill_dirs[0].source_dir == Path("/tmp/plugin/skills/existing-skill")
    assert bundle.generated_skills[0].name == "existing-skill-2"


def test_converts_mcp_servers_with_env_prefix(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        mcp_servers={
            "playwright": CommandServer(
                command="npx",
                args=["-y", "@anthropic/mcp-playwright"],
                env={"DISPLAY": ":0", "API_KEY": "secret", "COPILOT_MCP_TOKEN": "abc"},
            ),
        },
    )

    server = convert_plugin(plugin, "copilot").bundle.mcp_servers["playwright"]

    assert server == {
        "type": "local",
        "command": "npx",
        "args": ["-y", "@anthropic/mcp-playwright"],
        "tools": ["*"],
        "env": {
            "COPILOT_MCP_DISPLAY": ":0",
            "COPILOT_MCP_API_KEY": "secret",
            "COPILOT_MCP_TOKEN": "abc",
        },
    }


def test_env_prefix_check_is_case_sensitive(fixture_plugin):
    plugin = _with(fixture_plugin, mcp_servers={"s": CommandServer(command="node", env={"copilot_mcp_x": "1"})})

    env = convert_plugin(plugin, "copilot").bundle.mcp_servers["s"]["env"]

    assert env == {"COPILOT_MCP_copilot_mcp_x": "1"}


def test_remote_servers_get_sse_type_and_headers(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        mcp_servers={
            "remote": UrlServer(url="https://mcp.example.com/sse", headers={"Authorization": "Bearer token"}),
            "plain": UrlServer(url="https://mcp.example.com/plain"),
        },
    )

    servers = convert_plugin(plugin, "copilot").bundle.mcp_servers

    assert servers["remote"] == {
        "type": "sse",
        "url": "https://mcp.example.com/sse",
        "headers": {"Authorization": "Bearer token"},
        "tools": ["*"],
    }
    assert "command" not in servers["plain"]
    assert "headers" not in servers["plain"]


def test_command_server_has_no_url_and_no_empty_args(fixture_plugin):
    plugin = _with(fixture_plugin, mcp_servers={"bare": CommandServer(command="run")})

    server = convert_plugin(plugin, "copilot").bundle.mcp_servers["bare"]

    assert "url" not in server
    assert "args" not in server
    assert "env" not in server


def test_hooks_produce_a_single_warning(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        hooks={
            "PreToolUse": [{"matcher": "Bash", "hooks": [{"type": "command", "command": "echo test"}]}],
            "PostToolUse": [{"matcher": "*", "hooks": []}],
        },
    )

    warnings = convert_plugin(plugin, "copilot").warnings

    assert [w.message for w in warnings] == [
        "Copilot does not support hooks. Hooks were skipped during conversion."
    ]


def test_no_warnings_without_hooks(fixture_plugin):
    assert convert_plugin(fixture_plugin, "copilot").warnings == []


def test_plugin_with_only_skills(fixture_plugin):
    plugin = _with(fixture_plugin, agents=[], commands=[], mcp_servers={})

    bundle = convert_plugin(plugin, "copilot").bundle

    assert bundle.agents == []
    assert bundle.generated_skills == []
    assert len(bundle.skill_dirs) == 1
    assert bundle.mcp_servers == {}


def test_body_is_rewritten_for_copilot(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        agents=[Agent(name="a", description="d", body="Read .claude/x then /workflows:work, ask @perf-oracle.")],
    )

    _, body = _split_frontmatter(convert_plugin(plugin, "copilot").bundle.agents[0].content)

    assert body.strip() == "Read .github/x then /work, ask the perf-oracle agent."


def test_conversion_is_deterministic(fixture_plugin):
    first = convert_plugin(fixture_plugin, "copilot")
    second = convert_plugin(fixture_plugin, "copilot")

    assert first.bundle == second.bundle


def test_skills_from_source_are_not_renamed_even_when_duplicated(fixture_plugin):
    plugin = _with(
        fixture_plugin,
        skills=[Skill(name="dup", source_dir=Path("/a")), Skill(name="dup", source_dir=Path("/b"))],
        commands=[Command(name="dup", body="x")],
    )

    bundle = convert_plugin(plugin, "copilot").bundle

    assert [s.name for s in bundle.skill_dirs] == ["dup", "dup"]
    assert bundle.generated_skills[0].name == "dup-2"


def test_hook_event_without_entries_still_warns(fixture_plugin):
    plugin = _with(fixture_plugin, hooks={"PreToolUse": []})

    warnings = convert_plugin(plugin, "copilot").warnings

    assert [w.kind for w in warnings] == [WarningKind.HOOKS_SKIPPED]
    assert not warnings[0].message.startswith("Warning:")
