#!/usr/bin/env python3
"""
Stacked - stack-based instruction interpreter

Usage:
1. Interactive REPL: python main.py repl
2. Run a program file: python main.py program.stk
3. Python console with an interpreter as 'vm': python main.py
"""

import logging
import sys

from stacked import InteractiveStacked, StackedError, config
from stacked.repl import format_stack


def create_interpreter():
    """Create a new interpreter on an open console plane"""
    return InteractiveStacked()


def main():
    logging.basicConfig(level=config.log_level())

    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == 'repl':
            vm = create_interpreter()
            vm.delay = 0.2
            vm.repl()
        elif arg.endswith('.stk'):
            vm = create_interpreter()
            with open(arg, 'r') as file:
                code = file.read()
            try:
                vm.run_paced(code)
            except StackedError as e:
                print(f"Error: {e}")
                sys.exit(1)
            print(format_stack(vm.stack))
        else:
            print(f"Unrecognised argument: {arg}")
            print(__doc__)
            sys.exit(2)
    else:
        print("Interpreter created as 'vm'")
        print("  vm.execute('PUSH 2 PUSH 3 ADD')   # [5]")
        print("  vm.repl()                        # interactive REPL")
        print()

        vm = create_interpreter()

        import code
        code.interact(local=locals(), banner="")


if __name__ == "__main__":
    main()
