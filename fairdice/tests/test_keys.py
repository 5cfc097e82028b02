import pytest

from fairdice.commit_reveal.keys import KeyGenerator, SecretKey
from fairdice.errors import EntropyUnavailable
from fairdice.tests.conftest import BrokenEntropy, CounterEntropy, QueuedEntropy


def test_secret_key_length_enforced():
    SecretKey(b"\x01" * 32)
    with pytest.raises(ValueError):
        SecretKey(b"\x01" * 31)
    with pytest.raises(ValueError):
        SecretKey.from_hex("ab" * 33)


def test_secret_key_never_printed():
    k = SecretKey(bytes(range(32)))
    assert k.hex() not in repr(k)
    assert repr(k) == "SecretKey(<redacted>)"
    assert SecretKey.from_hex("0x" + k.hex()) == k


def test_generator_draws_fresh_keys():
    gen = KeyGenerator(CounterEntropy())
    keys = [gen.generate() for _ in range(50)]
    assert len({k.material for k in keys}) == 50


def test_repeated_key_is_refused():
    same = b"\x42" * 32
    gen = KeyGenerator(QueuedEntropy([same, same]))
    gen.generate()
    with pytest.raises(EntropyUnavailable):
        gen.generate()


def test_fingerprint_window_is_bounded():
    a, b = b"\x01" * 32, b"\x02" * 32
    gen = KeyGenerator(QueuedEntropy([a, b, a]), window=1)
    gen.generate()
    gen.generate()
    # `a` has left the one-entry window, so it is no longer detected
    assert gen.generate().material == a
    with pytest.raises(ValueError):
        KeyGenerator(CounterEntropy(), window=0)


def test_broken_source_is_fatal():
    with pytest.raises(EntropyUnavailable):
        KeyGenerator(BrokenEntropy()).generate()
