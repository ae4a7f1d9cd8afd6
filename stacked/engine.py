"""
Stacked Engine - the stepping loop combining all mixins
"""

import dataclasses
import functools
import logging
from collections import deque
from enum import Enum

from statemachine import State, StateMachine

from .core import (Category, HostError, Macro, Operation, ProgramTooLong, StackedBase,
                   StackedError, StackUnderflow, UnknownInstruction, tokenize)
from .stack_ops import StackedStack
from .arithmetic import StackedArithmetic
from .control_flow import StackedControlFlow
from .compiler import StackedCompiler
from .actions import StackedActions

logger = logging.getLogger(__name__)


class StepResult(Enum):
    CONTINUE = 'continue'
    SUSPEND = 'suspend'
    DONE = 'done'
    FAILED = 'failed'


class EngineLifecycle(StateMachine):
    """Run state of one program.

    running -> suspended after every action opcode, back to running on the
    next step; completed once the stream drains; failed on any error.
    """

    running = State('Running', value='running', initial=True)
    suspended = State('Suspended', value='suspended')
    completed = State('Completed', value='completed', final=True)
    failed = State('Failed', value='failed', final=True)

    suspend = running.to(suspended)
    resume = suspended.to(running)
    complete = running.to(completed)
    fail = running.to(failed) | suspended.to(failed)


class Interpreter(StackedBase, StackedStack, StackedArithmetic, StackedControlFlow,
                  StackedCompiler, StackedActions):
    """Complete interpreter combining all mixins.

    available restricts the active built-ins to a whitelist of names;
    additional adds host-supplied Operation records on top. Host effects,
    whether passed here or through add_operation, are called with this
    interpreter as their only argument.
    """

    def __init__(self, environment=None, available=None, additional=None,
                 max_steps=None, debug=None, rng=None):
        super().__init__(environment=environment, max_steps=max_steps,
                         debug=debug, rng=rng)
        self._register_all_words()
        self._activate(available)
        for op in additional or ():
            self.operations[op.name] = dataclasses.replace(
                op, effect=functools.partial(op.effect, self))
        self.load(())

    def _register_all_words(self):
        """Register all opcodes from all mixins"""
        self._register_stack_words()
        self._register_arithmetic_words()
        self._register_control_flow_words()
        self._register_compiler_words()
        self._register_action_words()

    def _activate(self, available):
        if available is None:
            self.operations = dict(self.builtins)
            return
        unknown = [name for name in available if name not in self.builtins]
        if unknown:
            raise ValueError(f"unknown built-in opcodes: {', '.join(unknown)}")
        self.operations = {name: self.builtins[name] for name in available}

    def add_operation(self, name, effect, category=Category.SPECIAL, min_depth=0,
                      description='', syntax=None):
        """Add a host operation; effect is called with this interpreter"""
        op = Operation(
            name=name,
            category=category,
            min_depth=min_depth,
            effect=functools.partial(effect, self),
            description=description,
            syntax=syntax or name,
        )
        self.operations[name] = op
        return op

    @property
    def state(self):
        return self.lifecycle.current_state.value

    def load(self, tokens, stack=None):
        """Start a new run over tokens; macros survive between runs"""
        self.tokens = deque(tokens)
        self.stack = list(stack) if stack is not None else []
        self.steps = 0
        self.error = None
        self.lifecycle = EngineLifecycle()
        if self.tokens:
            logger.info("running program of %d terms", len(self.tokens))
        return self

    def step(self):
        """Execute one term and report what the driver should do next"""
        current = self.lifecycle.current_state
        if current == self.lifecycle.completed:
            return StepResult.DONE
        if current == self.lifecycle.failed:
            return StepResult.FAILED
        if current == self.lifecycle.suspended:
            self.lifecycle.resume()

        if not self.tokens:
            self.lifecycle.complete()
            logger.info("program completed after %d steps", self.steps)
            return StepResult.DONE

        try:
            entry = self._dispatch()
        except StackedError as e:
            return self._fail(e)
        except Exception as e:
            error = HostError(e)
            error.__cause__ = e
            return self._fail(error)

        if entry.category == Category.ACTION:
            self.lifecycle.suspend()
            return StepResult.SUSPEND
        return StepResult.CONTINUE

    def _fail(self, error):
        self.error = error
        self.lifecycle.fail()
        logger.warning("program failed after %d steps: %s", self.steps, error)
        return StepResult.FAILED

    def _dispatch(self):
        if self.debug:
            logger.debug("Stack: %s", self.stack)
            logger.debug("Instructions: %s", list(self.tokens))

        name = self.tokens[0]
        entry = self.resolve(name)
        if entry is None:
            raise UnknownInstruction(name)
        if len(self.stack) < entry.min_depth:
            raise StackUnderflow(name, entry.min_depth, len(self.stack))

        self.tokens.popleft()
        if self.debug:
            logger.debug("calling %s", name)
        if isinstance(entry, Macro):
            self.splice(entry.body)
        else:
            entry.effect()

        self.environment.on_stack_changed(self.stack)
        self.steps += 1
        self.environment.on_step(self.steps)
        if self.steps > self.max_steps:
            raise ProgramTooLong(self.max_steps)
        return entry

    def advance(self):
        """Run until the next action opcode has taken effect, or the run ends"""
        result = self.step()
        while result is StepResult.CONTINUE:
            result = self.step()
        return result

    def run(self):
        """Drive the program to completion; raise its error if it failed"""
        while self.advance() is StepResult.SUSPEND:
            pass
        if self.error is not None:
            raise self.error
        return self.stack

    def execute(self, text, stack=None):
        """Tokenize and run program text"""
        self.load(tokenize(text), stack=stack)
        return self.run()
