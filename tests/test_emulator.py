"""Tests for fetch, step and the timer cadence."""

import pytest
from chipvm import (
    create_state, load_program, fetch, step, tick_timers, run_frame, run_until_blocked,
    StepStatus, Opcode, MemoryAccessError, ProgramTooLargeError, InputGateway,
    framebuffer_snapshot,
)
from chipvm import emulator
from chipvm.emulator import INSTRUCTION_HANDLERS
from chipvm.state import as_u16
from conftest import load_words


class TestLoading:
    """Test program loading."""

    def test_initial_state(self, fresh_state):
        assert fresh_state.pc == 0x200
        assert fresh_state.sp == 0
        assert fresh_state.I == 0
        assert int(fresh_state.V.sum()) == 0
        assert not fresh_state.is_waiting

    def test_load_program(self, fresh_state):
        state = load_program(fresh_state, b"\x12\x34\xAB")
        assert [int(b) for b in state.memory[0x200:0x203]] == [0x12, 0x34, 0xAB]
        assert state.memory[0x1FF] == 0

    def test_load_program_at_offset(self, fresh_state):
        state = load_program(fresh_state, b"\x01", offset=0x300)
        assert state.memory[0x300] == 1

    def test_load_program_too_large(self, fresh_state):
        with pytest.raises(ProgramTooLargeError):
            load_program(fresh_state, bytes(4096 - 0x200 + 1))

    def test_load_program_fills_memory(self, fresh_state):
        state = load_program(fresh_state, b"\xFF" * (4096 - 0x200))
        assert state.memory[0xFFF] == 0xFF

    def test_load_rom(self, fresh_state, tmp_path):
        from chipvm import load_rom
        rom = tmp_path / "test.ch8"
        rom.write_bytes(b"\x60\x07")
        state = load_rom(fresh_state, str(rom))
        assert state.memory[0x201] == 0x07

    def test_unknown_timer_mode(self):
        with pytest.raises(ValueError):
            create_state(timer_mode="wallclock")


class TestFetch:
    """Test instruction fetch."""

    def test_fetch_big_endian(self, fresh_state):
        state = load_words(fresh_state, [0xA2F0])
        assert fetch(state) == 0xA2F0
        assert state.pc == 0x200

    def test_fetch_past_end_of_memory(self, fresh_state):
        state = fresh_state.replace(pc=as_u16(0xFFF))
        with pytest.raises(MemoryAccessError) as excinfo:
            fetch(state)
        assert excinfo.value.pc == 0xFFF
        assert str(excinfo.value).endswith("(at 0xFFF)")


class TestStep:
    """Test single stepping through loaded programs."""

    def test_step_runs_program(self, fresh_state):
        state = load_words(fresh_state, [0x6005, 0x7003, 0x3008, 0x6001, 0x6102])

        state, status = step(state)
        assert status is StepStatus.RUNNING
        state, _ = step(state)
        assert state.V[0] == 8
        state, _ = step(state)  # skip taken
        assert state.pc == 0x208
        state, _ = step(state)
        assert state.V[1] == 2
        assert state.V[0] == 8

    def test_step_into_subroutine(self, fresh_state):
        state = load_words(fresh_state, [0x2206, 0x6101, 0x1204, 0x600A, 0x00EE])
        state, _ = step(state)  # call 0x206
        assert state.pc == 0x206
        state, _ = step(state)  # 0x206: 0x600A
        state, _ = step(state)  # 0x208: return
        assert state.pc == 0x202
        state, _ = step(state)  # V1 = 1
        assert state.V[0] == 0x0A
        assert state.V[1] == 0x01

    def test_step_reports_wait(self, fresh_state):
        state = load_words(fresh_state, [0xF30A])
        state, status = step(state)
        assert status is StepStatus.WAITING_FOR_KEY
        assert state.waiting_register == 3
        assert state.pc == 0x200

        again, status = step(state)
        assert status is StepStatus.WAITING_FOR_KEY
        assert again is state


class TestTimers:
    """Timers tick toward zero and never go below it."""

    def test_tick_timers(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=fresh_state.delay_timer + 2,
            sound_timer=fresh_state.sound_timer + 1,
        )
        state = tick_timers(state)
        assert state.delay_timer == 1
        assert state.sound_timer == 0
        state = tick_timers(tick_timers(state))
        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_instruction_mode_ticks_every_step(self, instruction_timer_state):
        state = load_words(instruction_timer_state, [0x6003, 0xF015] + [0x7101] * 6)
        state, _ = step(state)
        state, _ = step(state)  # delay = 3, then ticks to 2
        assert state.delay_timer == 2

        for _ in range(6):
            state, _ = step(state)
        assert state.delay_timer == 0

    def test_frame_mode_ticks_once_per_frame(self, fresh_state):
        state = load_words(fresh_state, [0x6005, 0xF015] + [0x7101] * 20)
        state = run_frame(state, instructions_per_frame=2)
        assert state.delay_timer == 4

        state = run_frame(state, instructions_per_frame=10)
        assert state.delay_timer == 3
        assert state.V[1] == 10

    def test_timers_keep_ticking_while_waiting(self, fresh_state):
        state = load_words(fresh_state, [0x6002, 0xF015, 0xF00A])
        state = run_frame(state, InputGateway(), instructions_per_frame=5)
        assert state.is_waiting
        assert state.delay_timer == 1

        for _ in range(5):
            state = run_frame(state, InputGateway(), instructions_per_frame=5)
        assert state.delay_timer == 0


class TestRunFrame:
    """Test the frame loop with the input gateway."""

    def test_frame_stops_at_wait_and_resumes(self, fresh_state):
        state = load_words(fresh_state, [0xF20A, 0x6101, 0x1204])
        gateway = InputGateway()

        state = run_frame(state, gateway, instructions_per_frame=10)
        assert state.is_waiting
        assert state.V[1] == 0

        gateway.press(0xB)
        state = run_frame(state, gateway, instructions_per_frame=2)
        assert not state.is_waiting
        assert state.V[2] == 0xB
        assert state.V[1] == 1

    def test_run_until_blocked(self, fresh_state):
        state = load_words(fresh_state, [0x6001, 0x6102, 0xF50A])
        counted = []
        state, executed, status = run_until_blocked(state, 100, counted.append)
        assert executed == 3
        assert sum(counted) == 3
        assert status is StepStatus.WAITING_FOR_KEY

    def test_run_until_blocked_budget(self, fresh_state):
        state = load_words(fresh_state, [0x1200])
        state, executed, status = run_until_blocked(state, 25)
        assert executed == 25
        assert status is StepStatus.RUNNING

    def test_run_until_blocked_ticks_timers_per_frame(self, fresh_state):
        # Load delay 3, poll FX07 until it reaches zero, then set V2.
        state = load_words(fresh_state, [0x6003, 0xF015, 0xF107, 0x3100, 0x1204, 0x62AA, 0x120C])
        state, executed, status = run_until_blocked(state, 5000, instructions_per_frame=10)
        assert state.V[2] == 0xAA
        assert state.delay_timer == 0
        assert status is StepStatus.RUNNING

    def test_run_until_blocked_instruction_mode(self, instruction_timer_state):
        state = load_words(instruction_timer_state, [0x6005, 0xF015, 0x1204])
        state, executed, _ = run_until_blocked(state, 4, instructions_per_frame=100)
        assert executed == 4
        assert state.delay_timer == 2

    def test_key_delivered_mid_frame_is_seen_by_next_step(self, fresh_state, monkeypatch):
        state = load_words(fresh_state, [0x6005, 0xE09E, 0x6101, 0x6202])
        gateway = InputGateway()
        original_step = emulator.step
        calls = []

        def step_then_press(state):
            result = original_step(state)
            calls.append(1)
            if len(calls) == 1:
                gateway.press(0x5)
            return result

        monkeypatch.setattr(emulator, "step", step_then_press)
        state = run_frame(state, gateway, instructions_per_frame=3)

        assert bool(state.keypad[5])
        assert state.V[1] == 0
        assert state.V[2] == 0x02
        assert gateway.pending() == 0


class TestDispatch:
    """The handler table covers the closed instruction set."""

    def test_every_opcode_has_a_handler(self):
        assert set(INSTRUCTION_HANDLERS) == set(Opcode)

    def test_framebuffer_snapshot_is_read_only(self, fresh_state):
        snapshot = framebuffer_snapshot(fresh_state)
        assert snapshot.shape == (2048,)
        with pytest.raises(ValueError):
            snapshot[0] = 1
