"""
Stacked REPL - Interactive Read-Eval-Print Loop and DSL interface
"""

import sys
import time

from .core import StackedError, tokenize
from .engine import Interpreter, StepResult
from .environment import ConsoleEnvironment


def format_stack(stack, limit=5):
    """Stack display with at most limit items, the oldest collapsed into '...'"""
    shown = [str(v) for v in stack]
    if len(shown) > limit:
        shown = ['...'] + shown[-(limit - 1):]
    return '[ ' + ', '.join(shown) + ' ]'


class StackedREPL:
    """Mixin providing REPL functionality"""

    delay = 0.0

    def _readline_input(self, prompt):
        """Alternative input using sys.stdin.readline for compatibility"""
        sys.stdout.write(prompt)
        sys.stdout.flush()
        line = sys.stdin.readline()
        if not line:
            raise EOFError()
        return line.rstrip('\n\r')

    def run_paced(self, text, stack=None):
        """Run text, sleeping self.delay seconds after every action"""
        self.load(tokenize(text), stack=stack)
        while self.advance() is StepResult.SUSPEND:
            if self.delay:
                time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.stack

    def _dot_s(self):
        print(format_stack(self.stack))

    def _list_words(self):
        for category, entries in self.categories().items():
            print(f"{category.value}: {' '.join(name for name, _ in entries)}")

    def repl(self, readline_mode=False):
        """Start interactive REPL; the stack and macros carry over between lines"""
        print("Stacked interpreter")
        print("Type 'bye' to quit, 'words' for the opcode list")
        print()

        get_input = self._readline_input if readline_mode else input

        while True:
            try:
                try:
                    line = get_input("OK> ")
                except EOFError:
                    break

                command = line.strip()
                if command.lower() == 'bye':
                    break
                if command.lower() == 'abort':
                    self.stack = []
                    print("Stack cleared")
                    continue
                if command.lower() in ('stack', '.s'):
                    self._dot_s()
                    continue
                if command.lower() == 'words':
                    self._list_words()
                    continue
                if command.lower().startswith('see '):
                    print(self.describe(command.split(None, 1)[1].strip()))
                    continue

                try:
                    self.run_paced(line, stack=self.stack)
                except StackedError as e:
                    print(f"Error: {e}")
                self._dot_s()

            except KeyboardInterrupt:
                print("\n(Ctrl+C) Type 'bye' to quit")

        return self


class InteractiveStacked(Interpreter, StackedREPL):
    """Interpreter with REPL and DSL support"""

    def __init__(self, environment=None, **options):
        if environment is None:
            environment = ConsoleEnvironment(echo=True)
        super().__init__(environment=environment, **options)

    def __call__(self, *values):
        return self.push(*values)

    def push(self, *values):
        self.stack.extend(values)
        return self

    def pop(self):
        return self.stack.pop() if self.stack else None

    def peek(self):
        return self.stack[-1] if self.stack else None

    def run_code(self, code):
        """Run code on top of the current stack"""
        self.execute(code, stack=self.stack)
        return self

    def define_word(self, name, body):
        """Define a macro from source text"""
        self.define(name, tokenize(body))
        return self
