from __future__ import annotations

import pytest

from stacked import (Category, DivideByZero, HostError, Interpreter, Operation, ProgramTooLong, StepResult,
                     UnknownInstruction, tokenize)
from stacked import config

from conftest import RecordingEnvironment


def test_empty_program_completes_immediately(vm: Interpreter) -> None:
    assert vm.step() is StepResult.DONE
    assert vm.state == "completed"
    assert vm.run() == []


def test_non_action_terms_continue(vm: Interpreter) -> None:
    vm.load(tokenize("PUSH 1 DUP"))
    assert vm.step() is StepResult.CONTINUE
    assert vm.step() is StepResult.CONTINUE
    assert vm.step() is StepResult.DONE
    assert vm.stack == [1, 1]


def test_actions_suspend_once_each_in_source_order(vm: Interpreter, env: RecordingEnvironment) -> None:
    vm.load(tokenize("LEFT UP RIGHT"))
    assert vm.advance() is StepResult.SUSPEND
    assert env.moves == ["left"]
    assert vm.state == "suspended"
    assert vm.advance() is StepResult.SUSPEND
    assert env.moves == ["left", "up"]
    assert vm.advance() is StepResult.SUSPEND
    assert env.moves == ["left", "up", "right"]
    assert vm.advance() is StepResult.DONE
    assert vm.state == "completed"


def test_advance_runs_bookkeeping_between_actions(vm: Interpreter, env: RecordingEnvironment) -> None:
    vm.load(tokenize("DEF R2 RIGHT RIGHT END PUSH 2 PUSH 1 ADD MOVE R2 PUSH 4"))
    assert vm.advance() is StepResult.SUSPEND
    assert env.moves == ["down"]
    assert vm.stack == []
    assert vm.advance() is StepResult.SUSPEND
    assert vm.advance() is StepResult.SUSPEND
    assert env.moves == ["down", "right", "right"]
    assert vm.advance() is StepResult.DONE
    assert vm.stack == [4]


def test_suspended_engine_holds_its_state(vm: Interpreter) -> None:
    vm.load(tokenize("PUSH 3 WAIT PUSH 4"))
    assert vm.advance() is StepResult.SUSPEND
    assert vm.stack == [3]
    assert list(vm.tokens) == ["PUSH", "4"]
    assert vm.state == "suspended"


def test_failure_is_reported_and_sticky(vm: Interpreter) -> None:
    vm.load(tokenize("PUSH 1 PUSH 0 DIV PUSH 5"))
    assert vm.advance() is StepResult.FAILED
    assert isinstance(vm.error, DivideByZero)
    assert vm.state == "failed"
    assert vm.step() is StepResult.FAILED
    assert list(vm.tokens) == ["PUSH", "5"]
    with pytest.raises(DivideByZero):
        vm.run()


def test_unknown_instruction_names_the_term(vm: Interpreter) -> None:
    with pytest.raises(UnknownInstruction) as exc:
        vm.execute("PUSH 1 FOO PUSH 2")
    assert exc.value.token == "FOO"
    assert "FOO" in str(exc.value)


def test_bare_literal_is_unknown_instruction(run) -> None:
    with pytest.raises(UnknownInstruction):
        run("5")


def test_load_resets_run_state(vm: Interpreter) -> None:
    with pytest.raises(UnknownInstruction):
        vm.execute("PUSH 1 FOO")
    assert vm.execute("PUSH 2", stack=[9]) == [9, 2]
    assert vm.error is None
    assert vm.steps == 1
    assert vm.state == "completed"


def test_runaway_guard_allows_exactly_max_steps() -> None:
    vm = Interpreter(max_steps=3)
    assert vm.execute("PUSH 1 DUP POP") == [1]
    with pytest.raises(ProgramTooLong):
        vm.execute("PUSH 1 DUP POP POP")


def test_runaway_guard_default_ceiling(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STACKED_MAX_STEPS", raising=False)
    assert Interpreter().max_steps == 1_000_000


def test_runaway_guard_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STACKED_MAX_STEPS", "50")
    vm = Interpreter()
    assert vm.max_steps == 50
    with pytest.raises(ProgramTooLong):
        vm.execute("DEF X X END X")


def test_step_notifications(vm: Interpreter, env: RecordingEnvironment) -> None:
    vm.execute("PUSH 1 PUSH 2 ADD")
    assert env.steps == [1, 2, 3]
    assert env.stacks == [[1], [1, 2], [3]]


def test_whitelist_restricts_builtins() -> None:
    vm = Interpreter(available=["PUSH", "RIGHT"])
    assert vm.lookup("RIGHT") is not None
    assert vm.lookup("ADD") is None
    assert "ADD" in vm.builtins
    with pytest.raises(UnknownInstruction):
        vm.execute("PUSH 1 PUSH 2 ADD")


def test_whitelist_rejects_unknown_names() -> None:
    with pytest.raises(ValueError):
        Interpreter(available=["PUSH", "JUMP"])


def test_host_operation_added_at_runtime(env: RecordingEnvironment) -> None:
    vm = Interpreter(environment=env, available=["PUSH", "RIGHT", "MUL"])

    def rightn(interp: Interpreter) -> None:
        n = interp.stack.pop()
        interp.splice(["RIGHT"] * n)

    vm.add_operation("RIGHTN", rightn, min_depth=1,
                     description="Pop the top value off the stack and move right that many times.")
    assert vm.lookup("RIGHTN").category is Category.SPECIAL
    vm.execute("PUSH 2 PUSH 3 MUL RIGHTN")
    assert env.moves == ["right"] * 6


def test_additional_operations_in_constructor(env: RecordingEnvironment) -> None:
    calls: list[int] = []
    op = Operation(name="MARK", category=Category.ACTION, min_depth=0,
                   effect=lambda interp: calls.append(len(interp.stack)), description="Mark the cell.")
    vm = Interpreter(environment=env, available=["PUSH"], additional=[op])
    vm.load(["MARK", "MARK"])
    assert vm.advance() is StepResult.SUSPEND
    assert vm.advance() is StepResult.SUSPEND
    assert vm.advance() is StepResult.DONE
    assert calls == [0, 0]


def test_config_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STACKED_DEBUG", "yes")
    monkeypatch.setenv("STACKED_LOG_LEVEL", " debug ")
    assert config.debug_enabled() is True
    assert config.log_level() == "DEBUG"
    monkeypatch.setenv("STACKED_DEBUG", "0")
    assert config.debug_enabled() is False


def test_debug_trace_logs_each_term(caplog: pytest.LogCaptureFixture) -> None:
    vm = Interpreter(debug=True)
    with caplog.at_level("DEBUG", logger="stacked.engine"):
        vm.execute("PUSH 1 POP")
    assert "calling PUSH" in caplog.text
    assert "calling POP" in caplog.text


class FaultyEnvironment(RecordingEnvironment):
    def move(self, direction) -> None:
        raise RuntimeError("motor jammed")


def test_environment_failure_aborts_the_run() -> None:
    vm = Interpreter(environment=FaultyEnvironment())
    vm.load(tokenize("PUSH 1 RIGHT PUSH 2"))
    assert vm.advance() is StepResult.FAILED
    assert vm.state == "failed"
    assert isinstance(vm.error, HostError)
    assert isinstance(vm.error.__cause__, RuntimeError)
    assert vm.advance() is StepResult.FAILED
    assert vm.stack == [1]
    with pytest.raises(HostError, match="motor jammed"):
        vm.run()


def test_host_operation_failure_aborts_the_run(env: RecordingEnvironment) -> None:
    vm = Interpreter(environment=env)

    def broken(interp: Interpreter) -> None:
        raise KeyError("missing")

    vm.add_operation("BROKEN", broken)
    with pytest.raises(HostError) as exc:
        vm.execute("BROKEN PUSH 1")
    assert isinstance(exc.value.original, KeyError)
    assert list(vm.tokens) == ["PUSH", "1"]


def test_both_host_registration_paths_receive_the_interpreter(env: RecordingEnvironment) -> None:
    seen: list[Interpreter] = []
    op = Operation(name="A", category=Category.SPECIAL, min_depth=0, effect=seen.append)
    vm = Interpreter(environment=env, additional=[op])
    vm.add_operation("B", seen.append)
    vm.execute("A B")
    assert seen == [vm, vm]
