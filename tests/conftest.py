from __future__ import annotations

import random

import pytest

from stacked import Environment, Interpreter


class RecordingEnvironment(Environment):
    """Environment double: records moves and notifications, serves a fixed map."""

    def __init__(self, cells: dict[tuple[int, int], str] | None = None, position: tuple[int, int] = (5, 5)) -> None:
        self.cells = dict(cells or {})
        self.position = position
        self.moves: list[str] = []
        self.steps: list[int] = []
        self.stacks: list[list[int]] = []

    def move(self, direction) -> None:
        self.moves.append(direction.label)

    def look_at(self, x: int, y: int) -> str:
        return self.cells.get((x, y), "empty")

    def current_position(self) -> tuple[int, int]:
        return self.position

    def on_step(self, count: int) -> None:
        self.steps.append(count)

    def on_stack_changed(self, stack: list[int]) -> None:
        self.stacks.append(list(stack))


@pytest.fixture()
def env() -> RecordingEnvironment:
    return RecordingEnvironment()


@pytest.fixture()
def vm(env: RecordingEnvironment) -> Interpreter:
    return Interpreter(environment=env, max_steps=10_000, debug=False, rng=random.Random(1234))


@pytest.fixture()
def run(vm: Interpreter):
    """Run program text on a fresh stack and return the final stack."""

    def _run(text: str, stack: list[int] | None = None) -> list[int]:
        return vm.execute(text, stack=stack)

    return _run
