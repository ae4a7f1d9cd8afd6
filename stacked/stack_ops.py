"""
Stacked Stack Operations - Stack manipulation opcodes
"""

from .core import Category, RangeError, UnknownInstruction, is_literal


class StackedStack:
    """Mixin providing stack manipulation operations"""

    def _register_stack_words(self):
        """Register stack opcodes"""
        self._builtin('PUSH', Category.STACK, 0, self._push,
                      'Push a single-digit number onto the stack.', 'PUSH <value>')
        self._builtin('POP', Category.STACK, 1, self._pop,
                      'Pop the top value off the stack.')
        self._builtin('DUP', Category.STACK, 1, self._dup,
                      'Duplicate the value on top of the stack.')
        self._builtin('SWAP', Category.STACK, 2, self._swap,
                      'Swap the 2 values on top of the stack.')
        self._builtin('ROT3', Category.STACK, 3, self._rot3,
                      'Pop the 3rd value on the stack and put it on top.')

    def _push(self):
        term = self.next_token('PUSH')
        if not is_literal(term):
            raise UnknownInstruction(term)
        value = int(term)
        if value < 0 or value > 9:
            raise RangeError(value)
        self.stack.append(value)

    def _pop(self):
        self.stack.pop()

    def _dup(self):
        self.stack.append(self.stack[-1])

    def _swap(self):
        b = self.stack.pop()
        a = self.stack.pop()
        self.stack.extend([b, a])

    def _rot3(self):
        third = self.stack.pop(-3)
        self.stack.append(third)
