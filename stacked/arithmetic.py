"""
Stacked Arithmetic - Mathematical operations
"""

from .core import Category, DivideByZero, InvalidRange


class StackedArithmetic:
    """Mixin providing arithmetic operations"""

    def _register_arithmetic_words(self):
        """Register arithmetic opcodes"""
        self._builtin('ADD', Category.MATHEMATICAL, 2, self._add,
                      'Pop the top 2 values off the stack and push their sum to the top.')
        self._builtin('SUB', Category.MATHEMATICAL, 2, self._sub,
                      'Pop the top 2 values off the stack and push their difference to the top.')
        self._builtin('MUL', Category.MATHEMATICAL, 2, self._mul,
                      'Pop the top 2 values off the stack and push their product to the top.')
        self._builtin('DIV', Category.MATHEMATICAL, 2, self._div,
                      'Pop the top 2 values off the stack and push their quotient '
                      '(floor(a/b)) to the top.')
        self._builtin('MOD', Category.MATHEMATICAL, 2, self._mod,
                      'Pop the top 2 values off the stack and push their modulus '
                      '(a % b) to the top.')
        self._builtin('RAND', Category.MATHEMATICAL, 2, self._rand,
                      'Pop the top 2 values (max, min) off the stack, generate a random '
                      'number x such that min <= x < max, and push it to the stack.')

    def _binary(self, func):
        rhs = self.stack.pop()
        lhs = self.stack.pop()
        self.stack.append(func(lhs, rhs))

    def _add(self):
        self._binary(lambda a, b: a + b)

    def _sub(self):
        self._binary(lambda a, b: a - b)

    def _mul(self):
        self._binary(lambda a, b: a * b)

    def _div(self):
        if self.stack[-1] == 0:
            raise DivideByZero('DIV')
        self._binary(lambda a, b: a // b)

    def _mod(self):
        if self.stack[-1] == 0:
            raise DivideByZero('MOD')
        self._binary(_truncated_mod)

    def _rand(self):
        maximum = self.stack.pop()
        minimum = self.stack.pop()
        if maximum <= minimum:
            raise InvalidRange(minimum, maximum)
        self.stack.append(self.rng.randrange(minimum, maximum))


def _truncated_mod(a, b):
    """Remainder with the sign of the dividend"""
    r = abs(a) % abs(b)
    return -r if a < 0 else r
