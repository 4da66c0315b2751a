import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import questionary
from questionary import Style

from .core.converter import convert_plugin
from .core.errors import BridgeError
from .core.target import target_registry
from .core.types import ConversionWarning, WarningKind
from .home_sync import default_home_root, sync_to_target
from .parsers import load_home_config, load_plugin
from .settings import load_settings, save_settings
from .utils import Colors
from .writer import resolve_target_dir, write_bundle

CUSTOM_STYLE = Style([
    ("qmark", "fg:#00d4ff bold"),
    ("question", "bold"),
    ("answer", "fg:#00d4ff bold"),
    ("pointer", "fg:#00d4ff bold"),
    ("highlighted", "fg:#00d4ff bold bg:default"),
    ("selected", "fg:#00d4ff bold bg:default"),
])


def _print_warnings(warnings: List[ConversionWarning]) -> None:
    for warning in warnings:
        print(f"{Colors.YELLOW}⚠️  {warning.message}{Colors.ENDC}")


def _count(warnings: List[ConversionWarning], *kinds: WarningKind) -> int:
    return sum(1 for warning in warnings if warning.kind in kinds)


def _confirm(question: str, default: bool = True) -> bool:
    answer = questionary.confirm(question, default=default, style=CUSTOM_STYLE).ask()
    return bool(answer)


def cmd_list(args) -> int:
    print(f"{Colors.BLUE}📂 Supported targets:{Colors.ENDC}")
    for rules in target_registry.all():
        print(
            f"  - {Colors.YELLOW}{rules.name}{Colors.ENDC}: {rules.display_name} "
            f"({rules.directory_name}/, servers in {rules.config_filename})"
        )
    return 0


def cmd_convert(args) -> int:
    rules = target_registry.require(args.to)
    output_root = Path(args.output).expanduser()
    target_dir = resolve_target_dir(output_root, rules)

    if target_dir.exists() and not args.force:
        if not _confirm(f"Found existing '{target_dir}'. Update {rules.display_name} config?"):
            print(f"{Colors.YELLOW}⏭️  Skipping {rules.display_name} update.{Colors.ENDC}")
            return 0

    plugin = load_plugin(args.source)
    print(f"{Colors.HEADER}🏗️  Converting {plugin.manifest.name} to {rules.display_name}...{Colors.ENDC}")

    result = convert_plugin(plugin, rules)
    _print_warnings(result.warnings)

    base = write_bundle(output_root, result.bundle, rules)
    counts = result.counts
    print(
        f"{Colors.GREEN}✅ {rules.display_name} conversion complete: {counts['agents']} agents, "
        f"{counts['skills']} skills, {counts['mcp_servers']} MCP servers -> {base}{Colors.ENDC}"
    )
    return 0


def cmd_sync(args) -> int:
    settings = load_settings()
    rules = target_registry.require(args.to)

    claude_home = Path(args.claude_home).expanduser() if args.claude_home else settings.claude_home_path
    if args.output:
        output_root = Path(args.output).expanduser()
    else:
        output_root = settings.output_root_for(rules.name) or default_home_root(rules)

    config = load_home_config(claude_home)
    print(f"{Colors.HEADER}🔗 Syncing {claude_home} to {output_root} ({rules.display_name})...{Colors.ENDC}")

    warnings = sync_to_target(config, output_root, rules)
    _print_warnings(warnings)

    linked = len(config.skills) - _count(warnings, WarningKind.INVALID_SKILL_NAME, WarningKind.LINK_BLOCKED)
    merged = len(config.mcp_servers) - _count(warnings, WarningKind.SERVER_UNSUPPORTED)
    print(f"{Colors.GREEN}✅ Linked {linked} skills, {merged} MCP servers.{Colors.ENDC}")
    return 0


def cmd_config(args) -> int:
    settings = load_settings()

    if args.config_action == "set-target":
        target_registry.require(args.target)
        settings.default_target = args.target.lower()
    elif args.config_action == "set-home":
        settings.claude_home = args.path
    elif args.config_action == "set-output":
        target_registry.require(args.target)
        settings.output_roots[args.target.lower()] = args.path
    else:
        print(f"  default target: {Colors.CYAN}{settings.default_target}{Colors.ENDC}")
        print(f"  claude home:    {Colors.CYAN}{settings.claude_home}{Colors.ENDC}")
        for target, root in sorted(settings.output_roots.items()):
            print(f"  sync root ({target}): {Colors.CYAN}{root}{Colors.ENDC}")
        return 0

    path = save_settings(settings)
    print(f"{Colors.GREEN}✅ Saved settings to {path}{Colors.ENDC}")
    return 0


def build_parser(default_target: str = "copilot") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plugin-bridge",
        description="Convert Claude Code plugins for other AI coding assistants",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show progress logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("list", help="List supported targets")

    convert_parser = subparsers.add_parser("convert", help="Convert a plugin directory")
    convert_parser.add_argument("source", help="Plugin directory")
    convert_parser.add_argument("--to", "-t", default=default_target, help=f"Target (default: {default_target})")
    convert_parser.add_argument("--output", "-o", default=".", help="Output root (default: current directory)")
    convert_parser.add_argument("--force", "-f", action="store_true", help="Overwrite without prompt")

    sync_parser = subparsers.add_parser("sync", help="Symlink personal skills and merge MCP servers")
    sync_parser.add_argument("--to", "-t", default=default_target, help=f"Target (default: {default_target})")
    sync_parser.add_argument("--output", "-o", default=None, help="Target home (default: e.g. ~/.copilot)")
    sync_parser.add_argument("--claude-home", default=None, help="Claude config directory (default: ~/.claude)")

    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_sub = config_parser.add_subparsers(dest="config_action", help="Config action")
    config_sub.add_parser("show", help="Show current settings")
    target_parser = config_sub.add_parser("set-target", help="Set the default target")
    target_parser.add_argument("target")
    home_parser = config_sub.add_parser("set-home", help="Set the Claude config directory")
    home_parser.add_argument("path")
    output_parser = config_sub.add_parser("set-output", help="Set the live sync root for a target")
    output_parser.add_argument("target")
    output_parser.add_argument("path")

    return parser


COMMANDS = {
    "list": cmd_list,
    "convert": cmd_convert,
    "sync": cmd_sync,
    "config": cmd_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser(load_settings().default_target)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (BridgeError, OSError) as e:
        print(f"{Colors.RED}❌ {e}{Colors.ENDC}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
