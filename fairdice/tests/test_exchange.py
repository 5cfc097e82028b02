import pytest

from fairdice.commit_reveal.round import RoundState
from fairdice.protocol.exchange import Chosen, RoundAbandoned, RoundCompleted
from fairdice.protocol.messages import ExitRequested, audit_transcript


def test_run_completes_and_publishes_both_lines(make_exchange, make_generator):
    ex = make_exchange("2", gen=make_generator(5))
    out = ex.run(6, "host-roll")
    assert isinstance(out, RoundCompleted)
    assert out.result.combined == (5 + 2) % 6

    sent = ex.port.sent
    assert sent[0].startswith("commitment=")
    assert sent[-1].startswith("key=")
    assert audit_transcript(sent[0], sent[-1], counterpart_value=2)
    assert ex.port.prompts == ["Your number (0..5): "]


def test_commitment_is_sent_before_input_is_requested(make_exchange):
    ex = make_exchange("1")
    observed = []
    orig_receive = ex.port.receive

    def spy(prompt):
        observed.append(list(ex.port.sent))
        return orig_receive(prompt)

    ex.port.receive = spy
    ex.run(2, "first-move")
    assert observed[0] and observed[0][0].startswith("commitment=")


def test_bad_inputs_are_retried(make_exchange):
    ex = make_exchange("abc", "", "9", "-1", "3", max_attempts=5)
    out = ex.run(6, "roll")
    assert isinstance(out, RoundCompleted)
    assert out.result.counterpart_value == 3
    errors = [s for s in ex.port.sent if s.startswith("Invalid input")]
    assert len(errors) == 4
    assert "9 is outside 0..5" in errors[2]


def test_retry_budget_exhausted_cancels_round(make_exchange):
    ex = make_exchange("a", "b", "c", "1", max_attempts=3)
    out = ex.run(6, "roll")
    assert out == RoundAbandoned("no valid input after 3 attempts")
    assert ex.generator.pending is None
    assert not any(s.startswith("key=") for s in ex.port.sent)
    assert ex.port.remaining == 1


def test_help_does_not_consume_attempts(make_exchange):
    ex = make_exchange("?", "?", "?", "0", max_attempts=1)
    out = ex.run(2, "first-move", help_lines=["help line"])
    assert isinstance(out, RoundCompleted)
    assert ex.port.sent.count("help line") == 3


def test_exit_cancels_without_reveal(make_exchange):
    ex = make_exchange("x")
    out = ex.run(6, "roll")
    assert out == ExitRequested()
    assert ex.generator.pending is None
    assert not any(s.startswith("key=") for s in ex.port.sent)


def test_end_of_input_abandons(make_exchange):
    ex = make_exchange()
    out = ex.run(6, "roll")
    assert out == RoundAbandoned("end of input")
    assert ex.generator.pending is None


def test_late_answer_times_out(make_exchange):
    ex = make_exchange("1", contribution_timeout_s=10)
    ticks = iter([100.0, 111.0])
    ex._clock = lambda: next(ticks)
    out = ex.run(2, "first-move")
    assert out == RoundAbandoned("timeout")
    assert "Time is up; this round is cancelled." in ex.port.sent


def test_answer_within_deadline_is_accepted(make_exchange):
    ex = make_exchange("1", contribution_timeout_s=10)
    ticks = iter([100.0, 105.0])
    ex._clock = lambda: next(ticks)
    assert isinstance(ex.run(2, "first-move"), RoundCompleted)


def test_interrupt_cancels_pending_round(make_exchange):
    ex = make_exchange()

    def boom(prompt):
        raise KeyboardInterrupt

    ex.port.receive = boom
    with pytest.raises(KeyboardInterrupt):
        ex.run(6, "roll")
    assert ex.generator.pending is None


def test_sequential_rounds_on_one_exchange(make_exchange):
    ex = make_exchange("0", "1", "2")
    results = [ex.run(6, f"r{i}") for i in range(3)]
    assert all(isinstance(r, RoundCompleted) for r in results)
    ids = [r.result.round_id for r in results]
    assert ids == sorted(set(ids))
    assert all(r.result.verify() for r in results)


def test_choose(make_exchange):
    ex = make_exchange("7", "1", "2")
    out = ex.choose("pick: ", [0, 2])
    assert out == Chosen(2)
    assert any("1 is not one of 0, 2" in s for s in ex.port.sent)
    assert ex.generator.pending is None


def test_choose_exit_and_empty_options(make_exchange):
    ex = make_exchange("exit")
    assert ex.choose("pick: ", [0, 1]) == ExitRequested()
    with pytest.raises(ValueError):
        ex.choose("pick: ", [])


def test_failed_round_state_is_cancelled(make_exchange):
    ex = make_exchange("x")
    seen = []
    orig = ex.generator.generate_range

    def capture(range_size, purpose=""):
        c, rnd = orig(range_size, purpose)
        seen.append(rnd)
        return c, rnd

    ex.generator.generate_range = capture
    ex.run(6, "roll")
    assert seen[0].state is RoundState.CANCELLED


def test_overlong_number_is_retried(make_exchange):
    ex = make_exchange("9" * 5000, "1")
    out = ex.run(6, "roll")
    assert isinstance(out, RoundCompleted)
    assert out.result.counterpart_value == 1
    assert any("too long" in s for s in ex.port.sent)
