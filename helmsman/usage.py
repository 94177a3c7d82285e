"""
Helmsman usage synthesis.

usage(path) renders one command:

    Usage: app db migrate <target> [options]

    Apply pending migrations.

    Options:
      -d, --dry-run      only print the plan
      -h, --help         show help

listing(path) renders a group: its commands and subgroups with shortcuts and
descriptions, then the shared options visible at that level.

Columns are aligned to the widest identifier of one render (options and
positional parameters together) plus a gutter of three spaces. Hidden options
and hidden children are left out.
"""
from .arguments import Key
from .values import describe

GUTTER = 3


def identifier(option, /):
    """
    "-l, --loudly" for flags; "-m, --message <value>" for keys.

    Short names come first. A key shows its metavar, its choices, or the
    value signature of its type.
    """
    names = ", ".join(sorted(option.names, key=lambda name: (name.startswith("--"), name)))
    if not isinstance(option, Key):
        return names
    if option.metavar:
        return f"{names} <{option.metavar}>"
    if option.choices:
        return "%s {%s}" % (names, ",".join(map(str, option.choices)))
    return f"{names} {describe(option.type)}"


def _table(rows, width):
    return ["  " + (label.ljust(width) + (str(descr) if descr else "")).rstrip() for label, descr in rows]


def usage(path, /):
    """
    Usage text of the command at the end of path (a CommandPath).
    """
    command = path.command
    options = [option for option in path.options if not option.hidden]

    lines = [" ".join(filter(None, (
        "Usage:",
        path.joined(),
        command.signature,
        "[options]" if options else "",
    )))]

    if command.descr:
        lines += ["", str(command.descr)]

    if options:
        rows = [(identifier(option), option.descr) for option in options]
        labels = [label for label, _ in rows] + [f"<{parameter.name}>" for parameter in command.parameters]
        width = max(map(len, labels)) + GUTTER
        lines += ["", "Options:", *_table(rows, width)]

    return "\n".join(lines)


def listing(path, /):
    """
    Help text of the group at the end of path (a GroupPath).
    """
    group = path.group
    options = [option for option in path.shared if not option.hidden]

    def label(child):
        return f"{child.name} ({child.shortcut})" if child.shortcut else child.name

    groups = [(label(child), child.descr) for child in group.groups if not child.hidden]
    commands = [(label(child), child.descr) for child in group.commands if not child.hidden]
    shared = [(identifier(option), option.descr) for option in options]

    lines = [f"Usage: {path.joined()} <command> [options]"]
    if group.descr:
        lines += ["", str(group.descr)]

    if not (labels := [label for label, _ in groups + commands + shared]):
        return "\n".join(lines)
    width = max(map(len, labels)) + GUTTER

    for title, rows in (("Groups:", groups), ("Commands:", commands), ("Options:", shared)):
        if rows:
            lines += ["", title, *_table(rows, width)]

    return "\n".join(lines)


__all__ = (
    "GUTTER",
    "identifier",
    "usage",
    "listing",
)
