"""
Bundle writer: materializes a converted bundle on disk.

Layout under the target directory (e.g. .github/):
- agents/<name><ext> (+ agents/prompts/<name>.md when the target splits prompts out)
- skills/<name>/SKILL.md for command-generated skills
- skills/<name>/ copied from source skill directories
- <config file> holding {"<serversKey>": {...}}
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.errors import ConfigError, UnsafePathError
from .core.naming import is_safe_path_component
from .core.target import TargetRules, target_registry
from .core.types import TargetBundle
from .utils import backup_file, copy_dir, logger, read_json_object, write_json, write_text


def resolve_target_dir(output_root: Path, rules: TargetRules) -> Path:
    """Write directly into `output_root` when it already is the target directory."""
    if output_root.name == rules.directory_name:
        return output_root
    return output_root / rules.directory_name


def _check_names(bundle: TargetBundle) -> None:
    """Reject names that would leave their directory before anything is written."""
    entries = (
        [("agent", agent.name) for agent in bundle.agents]
        + [("skill", skill.name) for skill in bundle.generated_skills]
        + [("skill", skill_dir.name) for skill_dir in bundle.skill_dirs]
    )
    for kind, name in entries:
        if not is_safe_path_component(name):
            raise UnsafePathError(f"Refusing to write {kind} to unsafe path: {name!r}")


def write_bundle(
    output_root: Union[str, Path],
    bundle: TargetBundle,
    rules: Optional[TargetRules] = None,
) -> Path:
    """
    Write every artifact of `bundle` and return the target directory.

    Directories are created only when something is written into them, so an
    empty bundle leaves the filesystem untouched.
    """
    rules = rules or target_registry.require(bundle.target)
    base = resolve_target_dir(Path(output_root), rules)
    _check_names(bundle)

    agents_dir = base / "agents"
    for agent in bundle.agents:
        name = agent.name
        write_text(agents_dir / f"{name}{rules.agent_extension}", agent.content + "\n")
        if agent.prompt_content is not None:
            write_text(agents_dir / "prompts" / f"{name}.md", agent.prompt_content + "\n")
        logger.debug("  wrote agent %s", name)

    skills_dir = base / "skills"
    for skill in bundle.generated_skills:
        name = skill.name
        write_text(skills_dir / name / "SKILL.md", skill.content + "\n")
        logger.debug("  wrote skill %s", name)

    for skill_dir in bundle.skill_dirs:
        name = skill_dir.name
        copy_dir(Path(skill_dir.source_dir), skills_dir / name)
        logger.debug("  copied skill %s from %s", name, skill_dir.source_dir)

    if bundle.mcp_servers:
        write_server_config(base / rules.config_filename, bundle.mcp_servers, rules)

    return base


def write_server_config(path: Path, servers: Dict[str, Dict[str, Any]], rules: TargetRules) -> None:
    """
    Back up any existing config, then write the new one.

    Targets with `merge_existing_config` keep unrelated keys and servers from
    the existing file; otherwise the file is replaced outright.
    """
    existing: Dict[str, Any] = {}
    if rules.merge_existing_config:
        existing = read_json_object(path)

    backup = backup_file(path)
    if backup:
        logger.info("Backed up existing %s to %s", path.name, backup)

    if rules.merge_existing_config:
        current = existing.get(rules.servers_key) or {}
        if not isinstance(current, dict):
            raise ConfigError(f'Expected "{rules.servers_key}" to be an object in {path}')
        data = dict(existing)
        data[rules.servers_key] = {**current, **servers}
    else:
        data = {rules.servers_key: servers}

    write_json(path, data)
    logger.info("Wrote %d MCP server(s) to %s", len(servers), path)
