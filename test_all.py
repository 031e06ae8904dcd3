#!/usr/bin/env python3
"""
Test script for tss-preparams.

Runs tests on all components with toy bit lengths. Functions are
collected by pytest, or run directly through run_all_tests().
"""

import sys
import os
import json
import logging
import pickle
import random
import tempfile
import threading
import time

import pytest
from sympy import isprime, primerange

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tss_preparams import (
    ConfigurationError,
    GenerationError,
    PaillierGenerationError,
    PreparationCancelledError,
    PreparationResult,
    PreparationTimeoutError,
    SafePrimeSearchError,
    generate_preparation_params,
    get_config,
    get_test_config
)
from tss_preparams.config import MIN_SAFE_PRIME_BITS, resolve_concurrency
from tss_preparams.crypto import (
    SafePrime,
    SecureRandom,
    SeededRandom,
    count_safe_primes,
    find_safe_primes,
    generate_keypair,
    generate_ntilde,
    generate_prime,
    is_probable_prime,
    make_random_source,
    miller_rabin_rounds,
    primality_test_count,
    reset_primality_test_count,
    small_primes
)
from tss_preparams.utils import LoggingObserver, TimingRecorder, format_time, setup_logging


def check_preparation_invariants(result: PreparationResult, safe_prime_bits: int):
    """Structural invariants every preparation result must satisfy."""
    assert result.validate() and result.validate_with_proof()
    q1, q2 = result.p, result.q
    p1, p2 = 2 * q1 + 1, 2 * q2 + 1
    for value in (q1, q2, p1, p2):
        assert isprime(value), f"{value} is not prime"
    assert q1.bit_length() == safe_prime_bits and q2.bit_length() == safe_prime_bits
    assert p1 != p2, "safe primes must be distinct"
    assert result.ntilde == p1 * p2, "NTilde must be the product of the safe primes"
    assert 1 <= result.h1 < result.ntilde
    assert 1 <= result.h2 < result.ntilde
    assert pow(result.h1, result.alpha, result.ntilde) == result.h2
    assert result.alpha * result.beta % (q1 * q2) == 1

    sk = result.paillier_sk
    assert isprime(sk.p) and isprime(sk.q) and sk.p != sk.q
    assert sk.n == sk.p * sk.q
    assert {sk.p, sk.q}.isdisjoint({p1, p2})


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


# ---------- Primality ----------

def test_small_primes_sieve():
    """Test the numpy sieve against sympy."""
    assert small_primes(1) == []
    assert small_primes(2) == [2]
    assert small_primes(10000) == list(primerange(2, 10001))


def test_is_probable_prime_matches_sympy():
    """Test primality decisions against an independent oracle."""
    for n in range(-5, 5000):
        assert is_probable_prime(n) == isprime(n), f"mismatch at {n}"

    big_primes = [2**127 - 1, 2**521 - 1, 67280421310721]
    for n in big_primes:
        assert is_probable_prime(n) == isprime(n)

    # Carmichael numbers, a strong pseudoprime to base 2 and a product of large primes
    composites = [561, 41041, 825265, 3215031751, 2**128 + 1, (2**61 - 1) * (2**89 - 1)]
    for n in composites:
        assert not is_probable_prime(n), f"{n} is composite"


def test_miller_rabin_rounds():
    """Test round count for the 2^-128 error bound."""
    assert miller_rabin_rounds() == 64
    assert miller_rabin_rounds(80) == 40
    assert miller_rabin_rounds(1) == 1


def test_generate_prime():
    """Test ordinary prime generation."""
    rng = SeededRandom(5)
    for bits in (8, 32, 128):
        p = generate_prime(bits, rng.child(bits))
        assert isprime(p)
        assert p.bit_length() == bits
        assert p >> (bits - 2) == 3, "top two bits must be set"

    cancel = threading.Event()
    cancel.set()
    with pytest.raises(PreparationCancelledError):
        generate_prime(64, cancel_event=cancel)
    with pytest.raises(PreparationTimeoutError):
        generate_prime(64, deadline=time.monotonic() - 1)


# ---------- Randomness ----------

def test_random_sources():
    """Test seeded reproducibility and stream independence."""
    a = SeededRandom(42).child('x', 3)
    b = SeededRandom(42).child('x', 3)
    assert [a.randbits(200) for _ in range(5)] == [b.randbits(200) for _ in range(5)]

    c = SeededRandom(42).child('x', 4)
    d = SeededRandom(43).child('x', 3)
    first = SeededRandom(42).child('x', 3).randbits(200)
    assert c.randbits(200) != first
    assert d.randbits(200) != first

    rng = SeededRandom(1)
    for _ in range(200):
        assert rng.randbits(13) < 2**13
        assert 0 <= rng.randbelow(1000) < 1000
        assert 5 <= rng.randrange(5, 9) < 9
    assert rng.randbits(0) == 0

    # Pickled streams restart from their seed and path
    restored = pickle.loads(pickle.dumps(SeededRandom(9).child('w')))
    assert restored.randbits(64) == SeededRandom(9).child('w').randbits(64)

    secure = SecureRandom()
    assert secure.child('anything') is secure
    assert 0 <= secure.randbelow(10) < 10
    with pytest.raises(ValueError):
        secure.randrange(5, 5)

    assert isinstance(make_random_source(), SecureRandom)
    assert isinstance(make_random_source(3), SeededRandom)


# ---------- Safe prime search ----------

def test_find_safe_primes_thread_backend():
    """Test safe prime validity and distinctness."""
    for bits in (8, 16, 32):
        primes = find_safe_primes(bits, 2, 2, backend='thread', batch_size=4)
        assert len(primes) == 2
        for sp in primes:
            assert isprime(sp.q) and isprime(sp.p)
            assert sp.p == 2 * sp.q + 1
            assert sp.q.bit_length() == bits
        assert primes[0].p != primes[1].p


def test_find_safe_primes_process_backend():
    """Test the worker process pool."""
    primes = find_safe_primes(64, 2, 2, backend='process', batch_size=8)
    assert len(primes) == 2
    for sp in primes:
        assert isprime(sp.q) and isprime(sp.p)
        assert sp.q.bit_length() == 64
    assert primes[0] != primes[1]


def test_find_safe_primes_deterministic_across_concurrency():
    """Test that a seeded search returns the same primes for any worker count."""
    results = [
        find_safe_primes(16, 2, workers, SeededRandom(42), backend='thread', batch_size=4)
        for workers in (1, 3, 8)
    ]
    assert results[0] == results[1] == results[2]


def test_find_safe_primes_invalid_configuration():
    """Test that invalid arguments fail before any primality test runs."""
    reset_primality_test_count()
    for concurrency in (0, -1, None, 1.5, True, '4'):
        with pytest.raises(ConfigurationError):
            find_safe_primes(16, 2, concurrency, backend='thread')
    with pytest.raises(ConfigurationError):
        find_safe_primes(1, 2, 2, backend='thread')
    with pytest.raises(ConfigurationError):
        find_safe_primes(16, 0, 2, backend='thread')
    with pytest.raises(ConfigurationError):
        find_safe_primes(16, 2, 2, backend='gpu')
    for bits in (2, 3, 4):
        with pytest.raises(ConfigurationError):
            find_safe_primes(bits, 2, 2, backend='thread')
    assert primality_test_count() == 0


def test_find_safe_primes_exhausted_and_duplicates():
    """Test the attempt budget and duplicate rejection."""
    # 3-bit Sophie Germain candidates are 5 and 7; only 5 gives a safe prime
    assert find_safe_primes(3, 1, 1, backend='thread') == [SafePrime(5, 11)]

    assert {sp.q for sp in find_safe_primes(5, 2, 2, SeededRandom(8), backend='thread')} == {23, 29}

    class StuckRandom:
        """Draws the same Sophie Germain prime every time."""
        def randbits(self, k):
            return 23

        def child(self, *labels):
            return self

    recorder = TimingRecorder()
    with pytest.raises(SafePrimeSearchError, match='found 1 of 2'):
        find_safe_primes(5, 2, 2, StuckRandom(), backend='thread', batch_size=1,
                         max_attempts=8, observer=recorder)
    assert recorder.get_events('safe prime search') == []


def test_count_safe_primes():
    """Test the up-front safe prime count for short bit lengths."""
    assert [count_safe_primes(bits) for bits in (2, 3, 4, 5, 6, 7)] == [1, 1, 1, 2, 2, 3]
    for bits in (8, 12):
        low = 1 << (bits - 1)
        expected = sum(1 for q in primerange(low, 2 * low) if isprime(2 * q + 1))
        assert count_safe_primes(bits) == expected
    assert count_safe_primes(64) is None


def test_find_safe_primes_interrupts():
    """Test cancellation and deadline handling."""
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(PreparationCancelledError):
        find_safe_primes(16, 2, 2, backend='thread', cancel_event=cancel)
    with pytest.raises(PreparationTimeoutError):
        find_safe_primes(16, 2, 2, backend='thread', deadline=time.monotonic() - 1)

    cancel = threading.Event()
    timer = threading.Timer(0.2, cancel.set)
    timer.start()
    start = time.monotonic()
    with pytest.raises(PreparationCancelledError):
        find_safe_primes(2048, 2, 2, backend='thread', batch_size=2, cancel_event=cancel)
    timer.join()
    assert time.monotonic() - start < 10


def test_safe_prime_type():
    """Test SafePrime construction and repr."""
    sp = SafePrime(q=131, p=263)
    assert sp.prime == 131 and sp.safe_prime == 263
    assert sp.validate()
    assert '131' not in repr(sp) and '263' not in repr(sp)
    with pytest.raises(ValueError):
        SafePrime(q=131, p=265)


# ---------- Paillier ----------

def test_paillier_keypair_structure():
    """Test Paillier key material."""
    keys = generate_keypair(64, SeededRandom(3))
    sk, pk = keys.private, keys.public
    assert pk.n.bit_length() == 64
    assert isprime(sk.p) and isprime(sk.q) and sk.p != sk.q
    assert sk.n == sk.p * sk.q == pk.n
    assert sk.phi == (sk.p - 1) * (sk.q - 1)
    assert sk.lam * sk.mu % pk.n == 1
    assert pk.g == pk.n + 1
    assert str(sk.p) not in repr(sk)


def test_paillier_round_trip():
    """Test decryption of 100 random plaintexts per key."""
    plaintexts = random.Random(7)
    for bits in (64, 512):
        keys = generate_keypair(bits)
        pk, sk = keys.public, keys.private
        samples = [0, 1, pk.n - 1] + [plaintexts.randrange(pk.n) for _ in range(100)]
        for m in samples:
            assert sk.decrypt(pk.encrypt(m)) == m, f"round trip failed for {m}"


def test_paillier_homomorphism():
    """Test homomorphic addition and scalar multiplication."""
    keys = generate_keypair(128)
    pk, sk = keys.public, keys.private

    m1, m2 = 100, 200
    c1, c2 = pk.encrypt(m1), pk.encrypt(m2)
    assert sk.decrypt(pk.add(c1, c2)) == m1 + m2, "Homomorphic addition failed"

    scalar = 5
    assert sk.decrypt(pk.scalar_mult(c1, scalar)) == m1 * scalar, "Scalar multiplication failed"
    assert sk.decrypt(pk.scalar_mult(c1, -1)) == pk.n - m1

    c, r = pk.encrypt_and_return_randomness(m1)
    assert pk.encrypt(m1, r=r) == c

    with pytest.raises(ValueError):
        pk.encrypt(pk.n)
    with pytest.raises(ValueError):
        pk.encrypt(-1)


def test_paillier_rejects_repeated_prime():
    """Test a rejected prime pair is followed by a fresh draw."""
    class ScriptedRandom:
        """Replays fixed draws; every child stream shares the script."""
        def __init__(self, values):
            self.values = list(values)

        def randbits(self, k):
            return self.values.pop(0)

        def child(self, *labels):
            return self

    rng = ScriptedRandom([193, 193, 193, 197])
    keys = generate_keypair(16, rng)
    assert (keys.private.p, keys.private.q) == (193, 197)
    assert keys.public.n == 193 * 197
    assert rng.values == []

    with pytest.raises(PaillierGenerationError):
        generate_keypair(16, ScriptedRandom([193] * 4), max_attempts=2)


def test_paillier_errors():
    """Test Paillier configuration and interruption errors."""
    for bits in (8, 63):
        with pytest.raises(ConfigurationError):
            generate_keypair(bits)
    with pytest.raises(ConfigurationError):
        generate_keypair(64, max_attempts=0)

    cancel = threading.Event()
    cancel.set()
    with pytest.raises(PreparationCancelledError):
        generate_keypair(64, cancel_event=cancel)


# ---------- Commitment setup ----------

def test_generate_ntilde():
    """Test NTilde, h1, h2 derivation."""
    first, second = SafePrime(131, 263), SafePrime(173, 347)
    setup = generate_ntilde([first, second], SeededRandom(11))
    assert setup.ntilde == 263 * 347
    assert pow(setup.h1, setup.alpha, setup.ntilde) == setup.h2
    assert setup.alpha * setup.beta % (131 * 173) == 1
    assert (setup.p, setup.q) == (131, 173)
    assert str(setup.ntilde) not in repr(setup)

    again = generate_ntilde([first, second], SeededRandom(11))
    assert again == setup


def test_generate_ntilde_errors():
    """Test rejected inputs and bounded resampling."""
    first, second = SafePrime(131, 263), SafePrime(173, 347)
    with pytest.raises(GenerationError):
        generate_ntilde([first])
    with pytest.raises(GenerationError):
        generate_ntilde([first, first])
    with pytest.raises(GenerationError):
        generate_ntilde([first, SafePrime(9, 19)])

    class StuckRandom:
        """Always returns a factor of NTilde."""
        def randrange(self, start, stop):
            return 263

    with pytest.raises(GenerationError):
        generate_ntilde([first, second], StuckRandom(), max_attempts=5)


# ---------- Orchestrator ----------

def test_end_to_end_reproducible():
    """Test a seeded toy run is reproducible and valid."""
    config = get_test_config(safe_prime_bits=8, paillier_modulus_bits=64, seed=1234)
    first = generate_preparation_params(4, config=config)
    second = generate_preparation_params(4, config=get_test_config(seed=1234))
    check_preparation_invariants(first, 8)
    assert first.to_dict() == second.to_dict()


def test_end_to_end_process_backend():
    """Test a toy run on worker processes."""
    config = get_test_config(safe_prime_bits=32, paillier_modulus_bits=128, backend='process')
    result = generate_preparation_params(2, config=config)
    check_preparation_invariants(result, 32)


def test_concurrency_invariance():
    """Test validity does not depend on the worker count."""
    results = []
    for workers in (1, 8):
        config = get_test_config(safe_prime_bits=16, paillier_modulus_bits=64, seed=99)
        result = generate_preparation_params(workers, config=config)
        check_preparation_invariants(result, 16)
        results.append(result.to_dict())
    assert results[0] == results[1]


def test_invalid_concurrency_does_no_work():
    """Test configuration errors are raised before any computation."""
    calls = []

    def keygen(*args, **kwargs):
        calls.append('keygen')

    def prime_search(*args, **kwargs):
        calls.append('prime_search')

    reset_primality_test_count()
    for concurrency in (0, -3, 2.5, False):
        with pytest.raises(ConfigurationError):
            generate_preparation_params(
                concurrency, config=get_test_config(),
                keygen=keygen, prime_search=prime_search
            )
    with pytest.raises(ConfigurationError):
        generate_preparation_params(2, config=get_test_config(backend='gpu'))
    with pytest.raises(ConfigurationError):
        generate_preparation_params(2, config=get_test_config(), timeout=0)
    with pytest.raises(ConfigurationError):
        generate_preparation_params(
            2, config=get_test_config(safe_prime_bits=4),
            keygen=keygen, prime_search=prime_search
        )
    assert calls == []
    assert primality_test_count() == 0


def test_paillier_failure_cancels_safe_prime_search():
    """Test a failing Paillier task stops the search and surfaces its error."""
    observed = []

    def failing_keygen(bits, rng, **kwargs):
        raise PaillierGenerationError("forced failure")

    def observed_search(*args, **kwargs):
        try:
            return find_safe_primes(*args, **kwargs)
        except PreparationCancelledError:
            observed.append('cancelled')
            raise

    # 2048-bit safe primes would take far longer than the test allows
    config = get_test_config(safe_prime_bits=2048, paillier_modulus_bits=64)
    start = time.monotonic()
    with pytest.raises(PaillierGenerationError, match='forced failure'):
        generate_preparation_params(
            2, config=config, keygen=failing_keygen, prime_search=observed_search
        )
    assert time.monotonic() - start < 10
    assert observed == ['cancelled']


def test_safe_prime_failure_cancels_paillier():
    """Test a failing search stops Paillier generation."""
    observed = []

    def failing_search(*args, **kwargs):
        raise SafePrimeSearchError("forced failure")

    def observed_keygen(*args, **kwargs):
        try:
            return generate_keypair(*args, **kwargs)
        except PreparationCancelledError:
            observed.append('cancelled')
            raise

    config = get_test_config(safe_prime_bits=8, paillier_modulus_bits=8192)
    with pytest.raises(SafePrimeSearchError):
        generate_preparation_params(
            2, config=config, keygen=observed_keygen, prime_search=failing_search
        )
    assert observed == ['cancelled']


def test_timeout():
    """Test the overall deadline."""
    config = get_test_config(safe_prime_bits=1024, paillier_modulus_bits=4096)
    start = time.monotonic()
    with pytest.raises(PreparationTimeoutError):
        generate_preparation_params(2, config=config, timeout=0.05)
    assert time.monotonic() - start < 10


def test_preparation_result_serialization():
    """Test dict/JSON round trip, validation and wiping."""
    config = get_test_config(safe_prime_bits=32, paillier_modulus_bits=128, seed=5)
    result = generate_preparation_params(2, config=config)
    data = json.loads(json.dumps(result.to_dict()))
    assert set(data) == {'paillier_sk', 'ntilde', 'h1', 'h2', 'alpha', 'beta', 'p', 'q'}

    restored = PreparationResult.from_dict(data)
    assert restored.to_dict() == result.to_dict()
    assert restored == result
    assert restored.paillier_pk == result.paillier_pk
    m = 12345
    assert restored.paillier_sk.decrypt(result.paillier_pk.encrypt(m)) == m

    text = repr(result)
    for secret in (result.ntilde, result.alpha, result.paillier_sk.p):
        assert str(secret) not in text

    for malformed in (
        {key: value for key, value in data.items() if key != 'paillier_sk'},
        dict(data, ntilde='not a number'),
        dict(data, paillier_sk={'n': data['paillier_sk']['n']}),
    ):
        with pytest.raises(ValueError, match='malformed preparation parameters'):
            PreparationResult.from_dict(malformed)

    data['paillier_sk']['n'] = str(int(data['paillier_sk']['n']) + 2)
    with pytest.raises(ValueError):
        PreparationResult.from_dict(data)

    result.wipe()
    assert not result.validate()
    assert result.paillier_sk is None and result.alpha is None
    with pytest.raises(ValueError):
        result.to_dict()


def test_minimal_result_validation():
    """Test validate() without the retained trapdoor."""
    keys = generate_keypair(64)
    result = PreparationResult(paillier_sk=keys.private, ntilde=263 * 347, h1=4, h2=16)
    assert result.validate()
    assert not result.validate_with_proof()


# ---------- Config and utilities ----------

def test_config():
    """Test configuration helpers."""
    config = get_config()
    assert config.crypto.paillier_modulus_bits == 2048
    assert config.crypto.safe_prime_bits == 1024
    config.validate()

    assert resolve_concurrency(None) == (os.cpu_count() or 1)
    assert resolve_concurrency(3) == 3
    with pytest.raises(ConfigurationError):
        resolve_concurrency(0)

    bad = get_test_config()
    bad.crypto.paillier_modulus_bits = 65
    with pytest.raises(ConfigurationError):
        bad.validate()
    bad = get_test_config()
    bad.search.batch_size = 0
    with pytest.raises(ConfigurationError):
        bad.validate()
    for bits in (3, 4):
        with pytest.raises(ConfigurationError):
            get_test_config(safe_prime_bits=bits).validate()
    get_test_config(safe_prime_bits=MIN_SAFE_PRIME_BITS).validate()


def test_observers():
    """Test timing recorders and the logging observer."""
    recorder = TimingRecorder()
    generate_preparation_params(2, config=get_test_config(seed=8), observer=recorder)
    for name in ('paillier keygen', 'safe primes', 'ntilde'):
        assert recorder.get_latest(name) is not None
        assert recorder.get_total(name) >= 0
    events = recorder.get_events('safe prime search')
    assert len(events) == 1 and events[0]['workers'] == 2

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'timings.json')
        recorder.save(path)
        loaded = TimingRecorder.load(path)
    assert loaded.to_dict() == recorder.to_dict()

    handler = ListHandler()
    logger = logging.getLogger('tss_preparams.test')
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    try:
        observer = LoggingObserver(logger)
        observer.record_duration('paillier keygen', 2.5)
        observer.record_event('safe prime search', candidates=10)
    finally:
        logger.removeHandler(handler)
    messages = [record.getMessage() for record in handler.records]
    assert messages == ['paillier keygen done. took 2s', 'safe prime search: candidates=10']


def test_setup_logging():
    """Test logger configuration with and without a log file."""
    with tempfile.TemporaryDirectory() as tmp:
        logger = setup_logging(log_dir=tmp, log_level=logging.DEBUG, run_name='unit')
        try:
            assert logger.name == 'tss_preparams'
            assert len(logger.handlers) == 2
            assert any(name.startswith('unit_') for name in os.listdir(tmp))
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers = []

    logger = setup_logging(log_dir=None)
    assert len(logger.handlers) == 1
    logger.handlers = []


def test_format_time():
    """Test time formatting."""
    assert format_time(0.25) == '250ms'
    assert format_time(5) == '5s'
    assert format_time(125) == '2m 5s'
    assert format_time(3661) == '1h 1m 1s'


def run_all_tests():
    """Run all tests."""
    print("="*60)
    print("Running tss-preparams Tests")
    print("="*60)

    tests = [
        ("Small Prime Sieve", test_small_primes_sieve),
        ("Primality Oracle", test_is_probable_prime_matches_sympy),
        ("Miller-Rabin Rounds", test_miller_rabin_rounds),
        ("Prime Generation", test_generate_prime),
        ("Random Sources", test_random_sources),
        ("Safe Primes (threads)", test_find_safe_primes_thread_backend),
        ("Safe Primes (processes)", test_find_safe_primes_process_backend),
        ("Safe Primes Determinism", test_find_safe_primes_deterministic_across_concurrency),
        ("Safe Primes Configuration", test_find_safe_primes_invalid_configuration),
        ("Safe Primes Budget", test_find_safe_primes_exhausted_and_duplicates),
        ("Safe Prime Count", test_count_safe_primes),
        ("Safe Primes Interrupts", test_find_safe_primes_interrupts),
        ("SafePrime Type", test_safe_prime_type),
        ("Paillier Keys", test_paillier_keypair_structure),
        ("Paillier Round Trip", test_paillier_round_trip),
        ("Paillier Homomorphism", test_paillier_homomorphism),
        ("Paillier Retry", test_paillier_rejects_repeated_prime),
        ("Paillier Errors", test_paillier_errors),
        ("NTilde Setup", test_generate_ntilde),
        ("NTilde Errors", test_generate_ntilde_errors),
        ("End To End", test_end_to_end_reproducible),
        ("End To End (processes)", test_end_to_end_process_backend),
        ("Concurrency Invariance", test_concurrency_invariance),
        ("Invalid Concurrency", test_invalid_concurrency_does_no_work),
        ("Paillier Failure", test_paillier_failure_cancels_safe_prime_search),
        ("Safe Prime Failure", test_safe_prime_failure_cancels_paillier),
        ("Timeout", test_timeout),
        ("Serialization", test_preparation_result_serialization),
        ("Minimal Result", test_minimal_result_validation),
        ("Config", test_config),
        ("Observers", test_observers),
        ("Logging Setup", test_setup_logging),
        ("Format Time", test_format_time),
    ]

    results = []
    for name, test_fn in tests:
        try:
            test_fn()
            print(f"  {name}: passed")
            results.append((name, True))
        except Exception as e:
            print(f"  ERROR: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("Test Summary")
    print("="*60)

    passed = sum(1 for _, s in results if s)
    total = len(results)

    for name, success in results:
        status = "PASS" if success else "FAIL"
        print(f"  {name}: {status}")

    print(f"\nTotal: {passed}/{total} tests passed")

    return passed == total


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)
