"""
Stacked Control Flow - block matching and IF / ELSE / END
"""

from itertools import islice

from .core import BLOCK_OPENERS, Category, UnterminatedBlock


def find_block_end(tokens):
    """Index of the END that closes the block already opened before tokens[0]"""
    depth = 1
    for pos, token in enumerate(tokens):
        if token in BLOCK_OPENERS:
            depth += 1
        elif token == 'END':
            depth -= 1
            if depth == 0:
                return pos
    raise UnterminatedBlock()


def split_if_clause(tokens):
    """Split the body of an IF into its two arms.

    Returns (then_terms, else_terms, end_pos). Only an ELSE at the IF's own
    depth separates the arms; nested IF/DEF blocks are kept intact.
    """
    depth = 1
    else_pos = None
    for pos, token in enumerate(tokens):
        if token in BLOCK_OPENERS:
            depth += 1
        elif token == 'ELSE':
            if depth == 1:
                else_pos = pos
        elif token == 'END':
            depth -= 1
            if depth == 0:
                if else_pos is None:
                    return list(islice(tokens, 0, pos)), [], pos
                return (list(islice(tokens, 0, else_pos)),
                        list(islice(tokens, else_pos + 1, pos)),
                        pos)
    raise UnterminatedBlock()


class StackedControlFlow:
    """Mixin providing conditional execution"""

    def _register_control_flow_words(self):
        """Register control flow opcodes"""
        self._builtin('IF', Category.FLOW, 1, self._if,
                      'Pop the top value off the stack. If it is non-zero, insert the '
                      'given instructions at the current location in the program. If not, '
                      'and if an "else" clause is given, insert those commands instead.',
                      'IF <terms> END | IF <terms> ELSE <terms> END')

    def _if(self):
        then_terms, else_terms, end_pos = split_if_clause(self.tokens)
        condition = self.stack.pop()
        for _ in range(end_pos + 1):
            self.tokens.popleft()
        self.splice(then_terms if condition != 0 else else_terms)
