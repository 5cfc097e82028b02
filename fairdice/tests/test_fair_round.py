from dataclasses import replace

import pytest

from fairdice.commit_reveal.commit import build_commitment
from fairdice.commit_reveal.keys import KeyGenerator
from fairdice.commit_reveal.round import FairRound, FairValueGenerator, RoundState
from fairdice.entropy.uniform import SecureRandom
from fairdice.errors import (
    EntropyUnavailable,
    InvalidContribution,
    RoundAlreadyFinalized,
    RoundInProgress,
)
from fairdice.tests.conftest import BrokenEntropy, sample_value


def test_round_flow(generator, metrics):
    commitment, rnd = generator.generate_range(6, "host-roll")
    assert rnd.state is RoundState.AWAITING_CONTRIBUTION
    assert rnd.commitment == commitment
    assert generator.pending is rnd

    res = rnd.contribute(4)
    assert rnd.state is RoundState.REVEALED
    assert generator.pending is None
    assert 0 <= res.host_value < 6
    assert res.combined == (res.host_value + 4) % 6
    assert res.commitment == commitment
    assert build_commitment(res.key, res.host_value) == commitment
    assert res.verify()
    assert res.purpose == "host-roll"
    assert sample_value(metrics, "fairdice_protocol_rounds_total", outcome="revealed") == 1


def test_fixed_host_value_combination(make_generator):
    gen = make_generator(5)
    _, rnd = gen.generate_range(6)
    res = rnd.contribute(3)
    assert res.host_value == 5
    assert res.combined == 2


def test_range_of_one(generator):
    _, rnd = generator.generate_range(1)
    res = rnd.contribute(0)
    assert res.host_value == 0
    assert res.combined == 0


@pytest.mark.parametrize("bad", [-1, 6, 100, True, 2.0, "3"])
def test_invalid_contribution_keeps_round_waiting(generator, metrics, bad):
    _, rnd = generator.generate_range(6)
    with pytest.raises(InvalidContribution) as ei:
        rnd.contribute(bad)
    assert ei.value.range_size == 6
    assert rnd.state is RoundState.AWAITING_CONTRIBUTION
    assert rnd.contribute(0).verify()
    name = "fairdice_protocol_contributions_total"
    assert sample_value(metrics, name, outcome="invalid") == 1
    assert sample_value(metrics, name, outcome="accepted") == 1


def test_round_is_one_shot(generator):
    _, rnd = generator.generate_range(6)
    rnd.contribute(1)
    with pytest.raises(RoundAlreadyFinalized):
        rnd.contribute(1)
    with pytest.raises(RoundAlreadyFinalized):
        rnd.cancel()


def test_cancel_discards_without_reveal(generator, metrics):
    _, rnd = generator.generate_range(6, "first-move")
    rnd.cancel()
    assert rnd.state is RoundState.CANCELLED
    assert generator.pending is None
    rnd.cancel()  # idempotent
    with pytest.raises(RoundAlreadyFinalized):
        rnd.contribute(0)
    assert sample_value(metrics, "fairdice_protocol_rounds_total", outcome="cancelled") == 1


def test_one_pending_round_per_generator(generator):
    _, first = generator.generate_range(2)
    with pytest.raises(RoundInProgress) as ei:
        generator.generate_range(2)
    assert ei.value.round_id == first.round_id
    first.cancel()
    _, second = generator.generate_range(2)
    assert second.round_id == first.round_id + 1


def test_every_round_gets_a_new_key(generator):
    keys = set()
    commitments = set()
    for _ in range(20):
        c, rnd = generator.generate_range(6)
        commitments.add(c.hex())
        keys.add(rnd.contribute(0).key.material)
    assert len(keys) == 20
    assert len(commitments) == 20


@pytest.mark.parametrize("bad", [0, -3])
def test_generate_range_rejects_empty_ranges(generator, bad):
    with pytest.raises(ValueError):
        generator.generate_range(bad)
    assert generator.pending is None


def test_generate_range_rejects_non_int(generator):
    with pytest.raises(TypeError):
        generator.generate_range("6")  # type: ignore[arg-type]


def test_rounds_cannot_be_built_directly(generator, metrics):
    with pytest.raises(TypeError):
        FairRound(object(), round_id=1, range_size=2, purpose="", owner=generator, metrics=metrics)


def test_entropy_failure_leaves_no_pending_round(metrics):
    rng = SecureRandom(BrokenEntropy(), metrics=metrics)
    gen = FairValueGenerator(rng, KeyGenerator(BrokenEntropy()), metrics=metrics)
    with pytest.raises(EntropyUnavailable):
        gen.generate_range(6)
    assert gen.pending is None


def test_result_verify_detects_tampering(make_generator):
    gen = make_generator(2)
    _, rnd = gen.generate_range(6)
    res = rnd.contribute(1)
    assert not replace(res, host_value=3).verify()
    assert not replace(res, combined=0).verify()


@pytest.mark.parametrize("range_size", [1, 2, 6, 7, 256])
def test_combined_stays_in_range_for_every_contribution(generator, range_size):
    for c in range(range_size):
        _, rnd = generator.generate_range(range_size)
        res = rnd.contribute(c)
        assert 0 <= res.combined < range_size
        assert res.combined == (res.host_value + c) % range_size
        assert res.verify()
