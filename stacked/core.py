"""
Stacked Core - Base class with fundamental infrastructure
- Exception classes
- Operation and macro records
- Stack, token stream and opcode table management
- Tokenizer for host programs
"""

import random
import re
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from . import config
from .environment import NullEnvironment


class StackedError(Exception):
    """Base class for every error that aborts a program run"""


class UnknownInstruction(StackedError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"unknown instruction: {token}")


class StackUnderflow(StackedError):
    def __init__(self, name, required, actual):
        self.name = name
        self.required = required
        self.actual = actual
        super().__init__(
            f"tried to call {name} on a stack of size {actual} < {required}")


class RangeError(StackedError):
    def __init__(self, value):
        self.value = value
        super().__init__(
            f"tried to push {value} to the stack, outside the range 0-9")


class DivideByZero(StackedError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"tried to call {name} with zero divisor")


class InvalidRange(StackedError):
    def __init__(self, minimum, maximum):
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"tried to call RAND with max <= min (min={minimum}, max={maximum})")


class UnterminatedBlock(StackedError):
    def __init__(self):
        super().__init__("could not find closing END term")


class ProgramTooLong(StackedError):
    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"maximum program length exceeded ({limit} steps)")


class EmptyStreamUnderflow(StackedError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"{name} expected another term but the program ended")


class UnknownObject(StackedError):
    def __init__(self, kind, x, y):
        self.kind = kind
        self.x = x
        self.y = y
        super().__init__(f"unknown object type at ({x},{y}): {kind}")


class HostError(StackedError):
    """The environment or a host operation raised; the original is the __cause__"""

    def __init__(self, original):
        self.original = original
        super().__init__(f"host failure: {type(original).__name__}: {original}")


class Category(Enum):
    STACK = 'stack'
    MATHEMATICAL = 'mathematical'
    FLOW = 'flow'
    ACTION = 'action'
    SENSING = 'sensing'
    CUSTOM = 'custom'
    SPECIAL = 'special'


@dataclass(frozen=True)
class Operation:
    """Built-in or host-supplied opcode"""
    name: str
    category: Category
    min_depth: int
    effect: Callable
    description: str = ''
    syntax: str = ''


@dataclass(frozen=True)
class Macro:
    """User definition captured by DEF; only the literal terms, never runtime state"""
    name: str
    body: tuple

    category = Category.CUSTOM
    min_depth = 0

    @property
    def description(self):
        return f"Function {self.name} defined by user."

    @property
    def syntax(self):
        return self.name


BLOCK_OPENERS = frozenset(('DEF', 'IF'))

_LITERAL = re.compile(r'[+-]?[0-9]+')
_PAIRED_COMMENT = re.compile(r'#[^#]*#')
_TRAILING_COMMENT = re.compile(r'#.*$')


def is_literal(token):
    return _LITERAL.fullmatch(token) is not None


def tokenize(text):
    """Split program text into terms.

    Anything between a pair of '#' is a comment, even across lines; a
    lone '#' left over comments out the rest of its line.
    """
    text = _PAIRED_COMMENT.sub(' ', text)
    tokens = []
    for line in text.splitlines():
        line = _TRAILING_COMMENT.sub('', line)
        tokens.extend(line.split())
    return tokens


class StackedBase:
    """Base mixin providing core infrastructure"""

    def __init__(self, environment=None, max_steps=None, debug=None, rng=None):
        self.stack = []
        self.tokens = deque()
        self.builtins = {}
        self.operations = {}
        self.macros = {}

        self.environment = environment if environment is not None else NullEnvironment()
        self.max_steps = max_steps if max_steps is not None else config.max_steps()
        self.debug = debug if debug is not None else config.debug_enabled()
        self.rng = rng if rng is not None else random.Random()

        self.steps = 0
        self.error = None

    def _builtin(self, name, category, min_depth, effect, description, syntax=None):
        """Record a built-in operation in the catalogue"""
        self.builtins[name] = Operation(
            name=name,
            category=category,
            min_depth=min_depth,
            effect=effect,
            description=description,
            syntax=syntax or name,
        )

    def lookup(self, name):
        """Return the active operation called name, or None"""
        return self.operations.get(name)

    def resolve(self, name):
        """Return the Macro or Operation a term refers to, or None.

        Macros are checked first so a DEF can shadow a built-in.
        """
        macro = self.macros.get(name)
        if macro is not None:
            return macro
        return self.operations.get(name)

    def next_token(self, name):
        """Consume the next pending term on behalf of operation name"""
        if not self.tokens:
            raise EmptyStreamUnderflow(name)
        return self.tokens.popleft()

    def splice(self, terms):
        """Insert terms at the front of the stream so they run next, in order"""
        self.tokens.extendleft(reversed(list(terms)))
