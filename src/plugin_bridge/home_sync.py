"""
Live sync of the personal Claude configuration (~/.claude) into a target's
home directory.

Skills are symlinked rather than copied so edits show up immediately. MCP
servers are merged into the target's existing server config.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

from .core.converter import convert_mcp_servers
from .core.errors import ConfigError
from .core.naming import is_valid_skill_name
from .core.target import TargetRules, target_registry
from .core.types import ConversionWarning, HomeConfig, WarningKind
from .utils import force_symlink, logger, read_json_object, write_json_atomic

CONFIG_FILE_MODE = 0o600


def default_home_root(rules: TargetRules) -> Path:
    return Path(rules.home_dir).expanduser()


def sync_to_target(
    config: HomeConfig,
    output_root: Union[str, Path],
    target: Union[str, TargetRules] = "copilot",
) -> List[ConversionWarning]:
    """
    Link skills and merge MCP servers into `output_root`.

    Invalid skill names are skipped with a warning. When the config has no
    servers the server config file is not touched at all.
    """
    rules = target if isinstance(target, TargetRules) else target_registry.require(target)
    output_root = Path(output_root)
    warnings: List[ConversionWarning] = []

    skills_dir = output_root / "skills"
    for skill in config.skills:
        if not is_valid_skill_name(skill.name):
            warnings.append(
                ConversionWarning(
                    kind=WarningKind.INVALID_SKILL_NAME,
                    subject=skill.name,
                    message=f"Skipping skill with invalid name: {skill.name}",
                )
            )
            continue

        link = skills_dir / skill.name
        if link.is_dir() and not link.is_symlink():
            warnings.append(
                ConversionWarning(
                    kind=WarningKind.LINK_BLOCKED,
                    subject=skill.name,
                    message=f"Skipping skill {skill.name}: {link} is a real directory, not a symlink",
                )
            )
            continue

        force_symlink(Path(skill.source_dir), link)
        logger.debug("  linked %s -> %s", link, skill.source_dir)

    if config.mcp_servers:
        merge_mcp_servers(config, output_root / rules.config_filename, rules, warnings)

    return warnings


def merge_mcp_servers(
    config: HomeConfig,
    path: Path,
    rules: TargetRules,
    warnings: List[ConversionWarning],
) -> None:
    """Read-merge-write of the server config; new entries win by server name."""
    converted = convert_mcp_servers(config.mcp_servers, rules, warnings)
    if not converted:
        return

    existing = read_json_object(path)
    current = existing.get(rules.servers_key) or {}
    if not isinstance(current, dict):
        raise ConfigError(f'Expected "{rules.servers_key}" to be an object in {path}')

    merged: Dict[str, Any] = dict(existing)
    merged[rules.servers_key] = {**current, **converted}

    write_json_atomic(path, merged, mode=CONFIG_FILE_MODE)
    logger.info("Merged %d MCP server(s) into %s", len(converted), path)
