"""
Helmsman routing: from raw tokens to one command and its group path.

route(root, tokens) walks the command tree one token at a time. At each level:
1. a global shortcut of the root (e.g. "-h", "-v") selects its command;
2. a child group name or shortcut descends one level;
3. a child command name or shortcut selects that command;
   otherwise a built-in command name of the root (e.g. "help") selects it;
4. anything else (or no token at all) stops at the current group, whose
   default command (inherited from the nearest ancestor) is selected with
   every unconsumed token; the route is then a fallback.

Routing never raises: an unroutable input always degrades to the default
command, which is usually the help command.

Paths are persistent values. appending() links a new node to the existing
one, so every prefix is shared and nothing is mutated.
"""
import logging
from typing import NamedTuple

from .commands import Command, CommandGroup
from .options import OptionRegistry

logger = logging.getLogger(__name__)


class GroupPath:
    """
    Groups from the root application down to the current group.
    """

    __slots__ = ("_group", "_parent")

    def __init__(self, group, parent=None, /):
        if not isinstance(group, CommandGroup):
            raise TypeError("group path nodes must be command groups")
        self._group = group
        self._parent = parent

    def __repr__(self):
        return f"{type(self).__name__}({self.joined()!r})"

    def __eq__(self, other):
        if not isinstance(other, GroupPath) or type(other) is not type(self):
            return NotImplemented
        return self.nodes == other.nodes

    def __hash__(self):
        return hash(self.nodes)

    @property
    def group(self):
        return self._group

    @property
    def parent(self):
        return self._parent

    @property
    def groups(self):
        """
        groups root-first.
        """
        groups = []
        node = self
        while node is not None:
            groups.append(node._group)
            node = node._parent
        return tuple(reversed(groups))

    @property
    def root(self):
        return self.groups[0]

    @property
    def nodes(self):
        return self.groups

    @property
    def names(self):
        return tuple(node.name for node in self.nodes)

    @property
    def shared(self):
        """
        shared options of every group on the path, root first.
        """
        return tuple(option for group in self.groups for option in group.shared)

    @property
    def default(self):
        """
        default command of the nearest group (current first) declaring one.
        """
        for group in reversed(self.groups):
            if group.default is not None:
                return group.default
        return None

    def appending(self, child, /):
        """
        new path one level deeper; a Command yields a CommandPath.
        """
        if isinstance(child, Command):
            return CommandPath(child, self)
        return GroupPath(child, self)

    def joined(self):
        return " ".join(self.names)


class CommandPath(GroupPath):
    """
    A resolved command under its group path.
    """

    __slots__ = ("_command",)

    def __init__(self, command, parent, /):
        if not isinstance(command, Command):
            raise TypeError("command path leaf must be a command")
        if not isinstance(parent, GroupPath) or isinstance(parent, CommandPath):
            raise TypeError("command path parent must be a group path")
        self._command = command
        self._group = parent.group
        self._parent = parent

    @property
    def command(self):
        return self._command

    @property
    def groups(self):
        return self._parent.groups

    @property
    def nodes(self):
        return self.groups + (self._command,)

    @property
    def options(self):
        """
        command options followed by the shared options along the path, root first.
        """
        return self._command.options + self.shared

    def registry(self):
        return OptionRegistry(self.options, groups=self._command.groups)

    def appending(self, child, /):
        raise TypeError("cannot descend below a command")


class Route(NamedTuple):
    command: Command | None
    path: GroupPath
    residual: list
    fallback: bool = False


def route(root, tokens, /):
    """
    Select a command and group path for tokens.

    root is the application group, or a GroupPath to resume routing from.
    Global shortcuts are read from the root group's shortcuts mapping
    (token to command) when it provides one; its builtins mapping (name to
    command) is consulted when no child of the current group matches.
    """
    tokens = list(tokens)
    path = root if isinstance(root, GroupPath) else GroupPath(root)
    shortcuts = getattr(path.root, "shortcuts", None) or {}
    installed = getattr(path.root, "builtins", None) or {}

    for index, token in enumerate(tokens):
        if (command := shortcuts.get(token)) is not None:
            logger.debug("global shortcut %r selected %s", token, command.name)
            return Route(command, path, tokens[index + 1:])
        match path.group.find(token):
            case CommandGroup() as group:
                path = path.appending(group)
            case Command() as command:
                logger.debug("routed %r to %s %s", tokens[:index + 1], path.joined(), command.name)
                return Route(command, path, tokens[index + 1:])
            case None if (command := installed.get(token)) is not None:
                logger.debug("built-in %s reached below %r", command.name, path.joined())
                return Route(command, path, tokens[index + 1:])
            case _:
                residual = tokens[index:]
                break
    else:
        residual = []

    command = path.default
    logger.debug("no route below %r, falling back to %s", path.joined(), getattr(command, "name", None))
    return Route(command, path, residual, True)


__all__ = (
    "GroupPath",
    "CommandPath",
    "Route",
    "route",
)
