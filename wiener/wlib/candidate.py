"""
Test a single guess k/dg for the relation

    e*d*g = k*phi(n) + g

and, if it holds, rebuild p and q from phi(n).

Written as a pure function of (n, e, k, dg) so every verdict can be checked on its own.
"""

from dataclasses import dataclass
from enum import Enum

import gmpy2

class Verdict(Enum):
    CONTINUE = "continue"   # this candidate is wrong, try the next one
    ABORT = "abort"         # no later candidate can work either
    SUCCESS = "success"


@dataclass(frozen=True)
class Evaluation:
    verdict: Verdict
    reason: str | None = None
    phi: int | None = None
    g: int | None = None
    p_plus_q: int | None = None
    sq: int | None = None           # candidate ((p - q)/2)^2
    d: int | None = None
    p: int | None = None
    q: int | None = None

    @property
    def success(self) -> bool:
        return self.verdict is Verdict.SUCCESS


def evaluate(n: int, e: int, k: int, dg: int) -> Evaluation:
    """
    Decide whether k/dg leads to the factorization of n.

    :param n: The RSA modulus.
    :param e: The public exponent.
    :param k: Numerator of the candidate.
    :param dg: Denominator of the candidate, a guess for d*g.
    :return: An `Evaluation` with verdict CONTINUE, ABORT or SUCCESS.
    """

    if k == 0:
        return Evaluation(Verdict.ABORT, "k must be nonzero")

    # edg = k(p-1)(q-1) + g with 0 <= g < k, so:
    #   (p-1)(q-1) = edg div k
    #   g = edg mod k
    phi, g = divmod(e * dg, k)
    if g == 0:
        return Evaluation(Verdict.CONTINUE, "g should be a positive integer", phi=phi, g=g)

    # p+q = pq - (p-1)(q-1) + 1
    p_plus_q = n - phi + 1
    if p_plus_q < 0:
        return Evaluation(Verdict.ABORT, "p + q should be positive", phi=phi, g=g, p_plus_q=p_plus_q)
    if gmpy2.is_odd(p_plus_q):
        return Evaluation(Verdict.CONTINUE, "(p + q)/2 should be a positive integer",
                          phi=phi, g=g, p_plus_q=p_plus_q)

    half_p_plus_q = p_plus_q >> 1
    # ((p-q)/2)^2 = ((p+q)/2)^2 - pq
    sq = half_p_plus_q * half_p_plus_q - n
    if sq < 0:
        return Evaluation(Verdict.ABORT, "((p - q)/2)^2 should not be negative",
                          phi=phi, g=g, p_plus_q=p_plus_q, sq=sq)

    half_p_minus_q, rem = gmpy2.isqrt_rem(sq)
    if rem != 0:
        return Evaluation(Verdict.CONTINUE, "(p - q)/2 should be a positive integer",
                          phi=phi, g=g, p_plus_q=p_plus_q, sq=sq)

    half_p_minus_q = int(half_p_minus_q)
    p = half_p_plus_q + half_p_minus_q
    q = half_p_plus_q - half_p_minus_q
    assert p * q == n

    # p and q are right, so phi = (p-1)(q-1). The relation can still hold by
    # coincidence (g not dividing dg, or gcd(g, phi) > 1), so check d itself.
    d = dg // g
    if dg % g != 0 or e * d % phi != 1:
        return Evaluation(Verdict.CONTINUE, "e*d should be 1 mod (p-1)(q-1)",
                          phi=phi, g=g, p_plus_q=p_plus_q, sq=sq)

    return Evaluation(Verdict.SUCCESS, phi=phi, g=g, p_plus_q=p_plus_q, sq=sq, d=d, p=p, q=q)
