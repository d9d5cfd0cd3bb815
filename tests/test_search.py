import math

import pytest
from sympy import primerange

from wiener.wlib.candidate import Verdict
from wiener.wlib.keygen import get_vulnerable_key, small_d_bound
from wiener.wlib.search import target_m, validate_parameters, wiener_attack

N = 14351   # 127 * 113
PHI = 14112

def test_target_m():
    assert target_m(N) == N
    assert target_m(N, sharpened=True) == N - 239 + 1
    assert target_m(9, sharpened=True) == 4

def test_recovers_small_d():
    result = wiener_attack(N, 5645)
    assert result.found
    assert result.d == 5
    assert {result.p, result.q} == {113, 127}
    assert len(result.trace) == 3
    cand, ev = result.trace[-1].tried[-1]
    assert cand.kind == "mediant"
    assert ev.verdict is Verdict.SUCCESS

def test_recovers_small_d_sharpened():
    result = wiener_attack(N, 5645, sharpened=True)
    assert result.m == 14113
    assert result.d == 5

def test_large_d_exhausts():
    # d = 5645
    assert 5 * 5645 % PHI == 1
    result = wiener_attack(N, 5)
    assert not result.found
    assert result.d is None and result.p is None and result.q is None
    _, ev = result.trace[-1].tried[-1]
    assert ev.verdict is Verdict.ABORT

@pytest.mark.parametrize("n,e", [(9, 1), (9, 8), (N, 1), (N, N - 1), (N, 3 * N + 2)])
def test_edge_exponents_terminate(n, e):
    for sharpened in (False, True):
        result = wiener_attack(n, e, sharpened=sharpened)
        assert not result.found
        assert len(result.trace) <= 2 * n.bit_length() + 2

@pytest.mark.parametrize("n,e", [(8, 3), (1, 1), (N, 0), (N, -7)])
def test_invalid_parameters(n, e):
    with pytest.raises(ValueError):
        validate_parameters(n, e)
    with pytest.raises(ValueError):
        wiener_attack(n, e)

def test_deterministic():
    assert wiener_attack(N, 5645) == wiener_attack(N, 5645)
    assert wiener_attack(N, 5) == wiener_attack(N, 5)

def test_random_keys():
    for _ in range(5):
        n, e, d, p, q = get_vulnerable_key(256)
        phi = (p - 1) * (q - 1)
        for sharpened in (False, True):
            result = wiener_attack(n, e, sharpened=sharpened)
            assert result.found
            assert result.d == d
            assert {result.p, result.q} == {p, q}
            assert result.p * result.q == n
            assert e * result.d % phi == 1
            _, ev = result.trace[-1].tried[-1]
            assert ev.p_plus_q == p + q

def test_sharpened_extends_range():
    # p, q close together, d far above n^0.25 / 3
    plain_failures = 0
    for _ in range(6):
        n, e, d, p, q = get_vulnerable_key(128, d_bits=37, gap_bits=10)
        result = wiener_attack(n, e, sharpened=True)
        assert result.found
        assert result.d == d
        assert {result.p, result.q} == {p, q}
        if not wiener_attack(n, e).found:
            plain_failures += 1
    assert plain_failures > 0

def test_even_convergent_abort_is_skipped():
    # the plain convergent 61/60 at step 2 gives ((p - q)/2)^2 < 0, the mediant after it does not
    result = wiener_attack(N, N - 1, sharpened=True)
    cand, ev = result.trace[2].tried[0]
    assert (cand.kind, cand.k, cand.dg) == ("convergent", 61, 60)
    assert ev.verdict is Verdict.ABORT
    assert len(result.trace[2].tried) == 2
    assert len(result.trace) > 3

@pytest.mark.parametrize("n,e,sharpened", [(1739, 497, False), (1739, 497, True), (35, 11, True)])
def test_coincidental_relation_exhausts(n, e, sharpened):
    result = wiener_attack(n, e, sharpened=sharpened)
    assert not result.found
    assert result.d is None

def test_between_bounds():
    # p = 53, q = 47: d = 25 is far above n^0.25 / 3, and m - phi = 1 when sharpened
    n, e, d = 2491, 2105, 25
    assert d > small_d_bound(n)
    assert e * d % (52 * 46) == 1

    plain = wiener_attack(n, e)
    assert plain.found is False
    assert len(plain.trace) == 5

    result = wiener_attack(n, e, sharpened=True)
    assert result.m == 2393
    assert result.d == d
    assert {result.p, result.q} == {47, 53}
    assert len(result.trace) == 4

def test_small_primes_round_trip():
    primes = list(primerange(3, 50))
    for q in primes:
        for p in primes:
            if not q < p < 2 * q:
                continue
            n, phi = p * q, (p - 1) * (q - 1)
            for e in range(1, phi):
                if math.gcd(e, phi) != 1:
                    continue
                for sharpened in (False, True):
                    result = wiener_attack(n, e, sharpened=sharpened)
                    if result.found:
                        assert e * result.d % phi == 1, (n, e, sharpened)
                        assert {result.p, result.q} == {p, q}
