"""
Stacked Actions - movement and sensing opcodes
"""

from .core import Category, UnknownObject
from .environment import Direction

LOOK_CODES = {
    'empty': 0,
    'block': 1,
    'exit': 2,
    'spike': 3,
    'outside': -1,
}


class StackedActions:
    """Mixin providing the opcodes that reach the environment"""

    def _register_action_words(self):
        """Register action and sensing opcodes"""
        self._builtin('MOVE', Category.ACTION, 1, self._move,
                      'Pop the top value off the stack and move the player according to '
                      'its value. If 0, rest. Otherwise move one of the 4 cardinal '
                      'directions (1=up, 2=right, 3=down, 4=left) if possible. If the top '
                      'value is not in the range 0-4, do nothing.')
        self._builtin('LEFT', Category.ACTION, 0, self._left, 'Move left, if possible.')
        self._builtin('UP', Category.ACTION, 0, self._up, 'Move up, if possible.')
        self._builtin('RIGHT', Category.ACTION, 0, self._right, 'Move right, if possible.')
        self._builtin('DOWN', Category.ACTION, 0, self._down, 'Move down, if possible.')
        self._builtin('WAIT', Category.ACTION, 0, self._wait, 'Wait for 1 turn.')
        self._builtin('LOOK', Category.SENSING, 1, self._look,
                      'Pop a value off the stack, look at the adjacent cell corresponding '
                      'to that direction (same as the MOVE command) and see what\'s there. '
                      'A value will be pushed to the stack depending on the content of the '
                      'adjacent cell (0 = empty, 1 = block, 2 = exit, 3 = spike, '
                      '-1 = outside the grid limits).')

    def _move(self):
        code = self.stack.pop()
        if 0 <= code <= 4:
            self.environment.move(Direction(code))

    def _left(self):
        self.environment.move(Direction.LEFT)

    def _up(self):
        self.environment.move(Direction.UP)

    def _right(self):
        self.environment.move(Direction.RIGHT)

    def _down(self):
        self.environment.move(Direction.DOWN)

    def _wait(self):
        self.environment.move(Direction.NONE)

    def _look(self):
        code = self.stack.pop()
        if not 1 <= code <= 4:
            return
        dx, dy = Direction(code).vector
        x, y = self.environment.current_position()
        nx, ny = x + dx, y + dy
        kind = self.environment.look_at(nx, ny)
        if isinstance(kind, str) and kind in LOOK_CODES:
            self.stack.append(LOOK_CODES[kind])
        elif isinstance(kind, str) and kind.startswith('push'):
            self.stack.append(0)
        else:
            raise UnknownObject(kind, nx, ny)
