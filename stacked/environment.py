"""
Stacked Environment - the port the interpreter uses to reach the game world
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Direction(Enum):
    NONE = 0
    UP = 1
    RIGHT = 2
    DOWN = 3
    LEFT = 4

    @property
    def vector(self):
        return _VECTORS[self]

    @property
    def label(self):
        return self.name.lower()


_VECTORS = {
    Direction.NONE: (0, 0),
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


class Environment:
    """Capability surface the interpreter needs from its host.

    Subclasses implement move, look_at and current_position. The two
    notification hooks are advisory and default to doing nothing.
    """

    def move(self, direction):
        raise NotImplementedError

    def look_at(self, x, y):
        """Return the kind of object at (x, y): 'empty', 'outside', 'block',
        'exit', 'spike', 'push<n>' or any other name"""
        raise NotImplementedError

    def current_position(self):
        raise NotImplementedError

    def on_step(self, count):
        pass

    def on_stack_changed(self, stack):
        pass


class NullEnvironment(Environment):
    """Environment that ignores every move and sees only empty cells"""

    def move(self, direction):
        pass

    def look_at(self, x, y):
        return 'empty'

    def current_position(self):
        return (0, 0)


class ConsoleEnvironment(Environment):
    """Open plane for running programs outside the game.

    cells maps (x, y) to an object kind; blocks stop movement, everything
    else is walked over.
    """

    def __init__(self, cells=None, start=(0, 0), echo=False):
        self.cells = dict(cells or {})
        self.position = start
        self.echo = echo
        self.moves = []

    def move(self, direction):
        dx, dy = direction.vector
        x, y = self.position
        target = (x + dx, y + dy)
        if self.cells.get(target) == 'block':
            logger.info("move %s blocked at %s", direction.label, target)
        else:
            self.position = target
        self.moves.append(direction)
        logger.info("move %s -> %s", direction.label, self.position)
        if self.echo:
            print(f"move {direction.label} -> {self.position}")

    def look_at(self, x, y):
        return self.cells.get((x, y), 'empty')

    def current_position(self):
        return self.position
