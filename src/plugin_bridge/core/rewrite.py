"""
Content rewriting for agent instructions and command bodies.

Each target supplies an ordered tuple of RewriteRule values. Rules run one
after another, each as a single pass over the whole body; later rules rely on
earlier ones having already rewritten paths and names.
"""

import re
from dataclasses import dataclass
from typing import Callable, Collection, Dict, Iterable, Sequence

from .naming import flatten_command_name, normalize_name

# Words that look like slash commands but are usually filesystem roots.
# Approximate: "/users/..." and similar paths are not covered.
FILESYSTEM_ROOTS = frozenset({"dev", "tmp", "etc", "usr", "var", "bin", "home"})

# Mentions ending in one of these are treated as agent references
AGENT_ROLE_SUFFIXES = (
    "agent",
    "reviewer",
    "researcher",
    "analyst",
    "specialist",
    "oracle",
    "sentinel",
    "guardian",
    "strategist",
)

_RE_TASK_CALL = re.compile(r"^(\s*-?\s*)Task\s+([a-z][a-z0-9-]*)\(([^)]+)\)", re.MULTILINE)
_RE_SLASH_COMMAND = re.compile(r"(?<![:\w])/([a-z][a-z0-9_:-]*?)(?=[\s,.\"')\]}`]|$)", re.IGNORECASE)
_RE_ROLE_MENTION = re.compile(
    r"@([a-z][a-z0-9-]*-(?:" + "|".join(AGENT_ROLE_SUFFIXES) + r"))",
    re.IGNORECASE,
)
_RE_ANY_MENTION = re.compile(r"(?<![\w.])@([a-z][a-z0-9-]*)", re.IGNORECASE)

SOURCE_HOME_DIR = "~/.claude/"
SOURCE_PROJECT_DIR = ".claude/"


Replacer = Callable[["re.Match[str]", Collection[str]], str]


@dataclass(frozen=True)
class RewriteRule:
    name: str
    pattern: "re.Pattern[str]"
    replace: Replacer

    def apply(self, text: str, known_agents: Collection[str] = ()) -> str:
        return self.pattern.sub(lambda match: self.replace(match, known_agents), text)


def rewrite_content(body: str, rules: Sequence[RewriteRule], known_agents: Iterable[str] = ()) -> str:
    """Apply every rule to `body` in order."""
    known = frozenset(known_agents)
    result = body
    for rule in rules:
        result = rule.apply(result, known)
    return result


# =============================================================================
# RULE FACTORIES
# =============================================================================


def delegation_rule(template: str) -> RewriteRule:
    """
    `Task some-agent(args)` -> a sentence built from `template`.

    The template receives `agent` (normalized id) and `args` (verbatim, trimmed).
    """

    def replace(match, _known):
        prefix, agent_name, args = match.groups()
        return prefix + template.format(agent=normalize_name(agent_name), args=args.strip())

    return RewriteRule("delegation", _RE_TASK_CALL, replace)


def slash_command_rule(template: str = "/{command}", flatten: bool = True) -> RewriteRule:
    """
    `/namespace:command` -> `template` with the flattened (or fully normalized) name.
    """

    def replace(match, _known):
        command_name = match.group(1)
        if command_name.lower() in FILESYSTEM_ROOTS:
            return match.group(0)
        command = flatten_command_name(command_name) if flatten else normalize_name(command_name)
        return template.format(command=command)

    return RewriteRule("slash-command", _RE_SLASH_COMMAND, replace)


def home_path_rule(target_home: str) -> RewriteRule:
    """`~/.claude/` -> `target_home` (e.g. "~/.copilot/")."""
    return RewriteRule(
        "home-path",
        re.compile(re.escape(SOURCE_HOME_DIR)),
        lambda _match, _known: target_home,
    )


def project_path_rule(target_dir: str) -> RewriteRule:
    """`.claude/` -> `target_dir` (e.g. ".github/")."""
    return RewriteRule(
        "project-path",
        re.compile(re.escape(SOURCE_PROJECT_DIR)),
        lambda _match, _known: target_dir,
    )


def mention_rule(template: str = "the {agent} agent", known_only: bool = False) -> RewriteRule:
    """
    `@agent-name` -> natural language reference.

    With `known_only`, any `@name` that is one of the converted agents matches;
    otherwise only names ending in a role suffix such as "-reviewer" do.
    """
    if known_only:

        def replace_known(match, known):
            agent = normalize_name(match.group(1))
            if agent not in known:
                return match.group(0)
            return template.format(agent=agent)

        return RewriteRule("mention", _RE_ANY_MENTION, replace_known)

    def replace(match, _known):
        return template.format(agent=normalize_name(match.group(1)))

    return RewriteRule("mention", _RE_ROLE_MENTION, replace)


def tool_name_rule(mapping: Dict[str, str]) -> RewriteRule:
    """`Bash tool` / `Read to` -> target tool names, keyed by Claude tool name."""
    names = "|".join(re.escape(name) for name in sorted(mapping, key=len, reverse=True))
    pattern = re.compile(r"\b(" + names + r")(?=\s+(?:tool|to)\b)")

    return RewriteRule("tool-name", pattern, lambda match, _known: mapping[match.group(1)])
