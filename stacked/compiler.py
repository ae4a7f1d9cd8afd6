"""
Stacked Compiler - DEF, the macro table and the opcode reference
"""

import logging

from .core import Category, Macro
from .control_flow import find_block_end

logger = logging.getLogger(__name__)


class StackedCompiler:
    """Mixin providing macro definition and the opcode reference"""

    def _register_compiler_words(self):
        """Register definition opcodes"""
        self._builtin('DEF', Category.CUSTOM, 0, self._def,
                      'Define a custom function with the given name. Whenever the program '
                      'finds this instruction it will replace it with the given terms.',
                      'DEF <name> <terms> END')

    def _def(self):
        name = self.next_token('DEF')
        end_pos = find_block_end(self.tokens)
        body = tuple(self.tokens.popleft() for _ in range(end_pos))
        self.tokens.popleft()
        self.define(name, body)

    def define(self, name, body):
        """Bind name to a static sequence of terms, replacing any earlier binding"""
        if name in self.macros:
            logger.debug("redefining %s", name)
        self.macros[name] = Macro(name=name, body=tuple(body))
        return self.macros[name]

    def clear_macros(self):
        self.macros.clear()

    def categories(self):
        """Group active operations and macros by category, names sorted"""
        grouped = {}
        entries = [op for name, op in self.operations.items() if name not in self.macros]
        entries.extend(self.macros.values())
        for entry in entries:
            grouped.setdefault(entry.category, []).append((entry.name, entry.description))
        for names in grouped.values():
            names.sort()
        return grouped

    def describe(self, name):
        """Reference text for an operation or macro"""
        entry = self.resolve(name) or self.builtins.get(name)
        if entry is None:
            return f"'{name}' not found"
        if isinstance(entry, Macro):
            return f"DEF {name} {' '.join(entry.body)} END"
        return f"{entry.syntax}\n  {entry.description}"

    def words(self):
        """Names of everything the current program may call"""
        return sorted(set(self.operations) | set(self.macros))
