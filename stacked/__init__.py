"""
Stacked - stack-based instruction interpreter for a grid game
Modular package implementation

Usage:
    from stacked import Interpreter
    vm = Interpreter()
    vm.execute("PUSH 1 PUSH 2 ADD")

The game drives a program one visible move at a time with advance().
"""

from .core import (StackedError, UnknownInstruction, StackUnderflow, RangeError,
                   DivideByZero, InvalidRange, UnterminatedBlock, ProgramTooLong,
                   EmptyStreamUnderflow, UnknownObject, HostError, Category, Operation, Macro,
                   tokenize)
from .control_flow import find_block_end, split_if_clause
from .environment import Direction, Environment, NullEnvironment, ConsoleEnvironment
from .engine import Interpreter, StepResult, EngineLifecycle
from .repl import StackedREPL, InteractiveStacked

__all__ = [
    'Interpreter', 'InteractiveStacked', 'StepResult', 'EngineLifecycle',
    'Environment', 'NullEnvironment', 'ConsoleEnvironment', 'Direction',
    'Operation', 'Macro', 'Category', 'tokenize', 'find_block_end', 'split_if_clause',
    'StackedError', 'UnknownInstruction', 'StackUnderflow', 'RangeError',
    'DivideByZero', 'InvalidRange', 'UnterminatedBlock', 'ProgramTooLong',
    'EmptyStreamUnderflow', 'UnknownObject', 'HostError',
]
__version__ = '1.0.0'
