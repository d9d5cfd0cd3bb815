"""
Wiener's attack on RSA with a small secret exponent d.

Based on M.J. Wiener, "Cryptanalysis of Short RSA Secret Exponents".

Given n = pq (q < p < 2q) and e with ed = 1 (mod (p-1)(q-1)), let
    edg = k(p-1)(q-1) + g.
Then e/n = (k/dg)(1 - t) with t = 1/p + 1/q + 1/pq, and since t is small, k/dg
shows up among the convergents of e/n (or their mediants) as long as
d < n^0.25 / 3.

Replacing n by m = n - floor(sqrt(4n)) + 1, which is closer to (p-1)(q-1),
extends the range of d that can be recovered ("sharpened" variant).
"""

import logging
from dataclasses import dataclass, field

import gmpy2

from wiener.wlib.candidate import Evaluation, Verdict, evaluate
from wiener.wlib.convergents import Candidate, ContinuedFraction, Step, candidates

logger = logging.getLogger("wiener")

###################################
# Step 1: Approximation of phi(n) #
###################################

def target_m(n: int, sharpened: bool=False) -> int:
    """
    Pick m, an upper approximation of (p-1)(q-1) = pq - p - q + 1:
     - pq, or
     - floor(pq - 2sqrt(pq) + 1) when sharpened.

    :param n: The RSA modulus, at least 9.
    :param sharpened: Use the tighter approximation (valid when q < p < 2q).
    :return: m
    """
    m = n - int(gmpy2.isqrt(4 * n)) + 1 if sharpened else n
    assert m >= 4
    return m

#####################
# Trace and results #
#####################

@dataclass
class StepRecord:
    step: Step
    tried: list[tuple[Candidate, Evaluation]] = field(default_factory=list)


@dataclass
class AttackResult:
    n: int
    e: int
    m: int
    sharpened: bool
    trace: list[StepRecord] = field(default_factory=list)
    d: int | None = None
    p: int | None = None
    q: int | None = None

    @property
    def found(self) -> bool:
        return self.d is not None

##########################
# Step 2: Drive the scan #
##########################

def validate_parameters(n: int, e: int):
    if n < 9:
        raise ValueError(f"modulus must be at least 9, got {n}")
    if e <= 0:
        raise ValueError(f"exponent must be positive, got {e}")


def wiener_attack(n: int, e: int, sharpened: bool=False) -> AttackResult:
    """
    Run Wiener's attack.

    Code structure: generator (convergents) -> evaluator (candidate), one step at a time.

    :param n: The RSA modulus (n >= 9).
    :param e: The public exponent (e > 0).
    :param sharpened: Expand e/m with the sharpened m instead of e/n.
    :return: An `AttackResult`; `found` is False if the secret key could not be recovered.
    """
    validate_parameters(n, e)

    m = target_m(n, sharpened)
    result = AttackResult(n, e, m, sharpened)
    logger.debug("Expanding e/m with m = %d (sharpened: %s)", m, sharpened)

    for step in ContinuedFraction(e, m):
        record = StepRecord(step)
        result.trace.append(record)

        for cand in candidates(step):
            evaluation = evaluate(n, e, cand.k, cand.dg)
            record.tried.append((cand, evaluation))

            if evaluation.verdict is Verdict.SUCCESS:
                logger.debug("Step #%d: k/dg = %d/%d recovers d = %d", step.index, cand.k, cand.dg, evaluation.d)
                result.d, result.p, result.q = evaluation.d, evaluation.p, evaluation.q
                return result

            if evaluation.verdict is Verdict.ABORT:
                if cand.kind == "convergent" and step.index % 2 == 0:
                    # Even convergents lie below e/m, so the candidates tested after them
                    # (all above e/m) can still give a smaller phi. Only skip this one.
                    logger.debug("Step #%d: ignoring abort on even convergent (%s)", step.index, evaluation.reason)
                    continue
                logger.debug("Step #%d: giving up (%s)", step.index, evaluation.reason)
                return result

    logger.debug("Continued fraction of e/m exhausted after %d steps", len(result.trace))
    return result
