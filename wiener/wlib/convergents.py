"""
Continued fraction expansion of e/m, one step at a time.

The expansion is the Euclidean algorithm on (e, m). Every step produces the
next partial quotient Q_i, the remainder fraction left over, and the running
convergent [Q_0; Q_1, ..., Q_i]. Only the two most recent convergents are kept.

Wiener's attack does not test the convergents blindly, see `candidates`.
"""

from typing import Iterator, Literal, NamedTuple

#########################
# Step record & state   #
#########################

class Step(NamedTuple):
    """One step of the expansion of e/m."""
    index: int
    Q: int
    R_num: int      # remainder R = R_num / R_den
    R_den: int
    F_num: int      # convergent F = F_num / F_den
    F_den: int
    F_num_prev: int # previous convergent, needed for the mediant
    F_den_prev: int


class ContinuedFraction:
    """
    Lazy expansion of the rational number e/m.

    Call `step()` repeatedly; it returns a `Step` while partial quotients remain
    and None once the Euclidean remainder has reached zero (exhausted).
    Termination is guaranteed since R_den strictly decreases.

    :param e: Numerator (the public exponent).
    :param m: Denominator (n, or the sharpened approximation of phi(n)).
    """

    def __init__(self, e: int, m: int):
        if m <= 0:
            raise ValueError("m must be a positive integer")
        self.e = e
        self.m = m
        self.index = 0
        self.R_num, self.R_den = e, m   # before step 0 the "remainder" is e/m itself
        # num_{-1}/den_{-1} = 1/0 and num_{-2}/den_{-2} = 0/1
        self.F_num, self.F_den = 1, 0
        self.F_num_prev, self.F_den_prev = 0, 1
        self.exhausted = False

    def step(self) -> Step | None:
        if self.exhausted:
            return None

        if self.index == 0:
            Q, R_num = divmod(self.e, self.m)
            R_den = self.m
        else:
            if self.R_num == 0:
                self.exhausted = True
                return None
            # the remainder is inverted: 1/R = R_den/R_num
            Q, R_num = divmod(self.R_den, self.R_num)
            R_den = self.R_num

        F_num = Q * self.F_num + self.F_num_prev
        F_den = Q * self.F_den + self.F_den_prev

        self.F_num_prev, self.F_den_prev = self.F_num, self.F_den
        self.F_num, self.F_den = F_num, F_den
        self.R_num, self.R_den = R_num, R_den

        result = Step(self.index, Q, R_num, R_den, F_num, F_den, self.F_num_prev, self.F_den_prev)
        self.index += 1
        return result

    def __iter__(self) -> Iterator[Step]:
        while (s := self.step()) is not None:
            yield s


def convergents(e: int, m: int) -> Iterator[Step]:
    """Generate all steps of the continued fraction expansion of e/m."""
    return iter(ContinuedFraction(e, m))

#############################
# Candidates for (k, dg)    #
#############################

CandidateKind = Literal["start", "convergent", "mediant"]

class Candidate(NamedTuple):
    kind: CandidateKind
    k: int
    dg: int


def candidates(step: Step) -> list[Candidate]:
    """
    Candidate guesses for k/dg taken from one step of the expansion.

    Since e/n = (k/dg)(1 - t) for a small positive t, the true k/dg lies just
    above e/n. The odd convergents approach e/m from above, the even ones from
    below. At even steps Wiener's proof needs [Q_0; ..., Q_i + 1] as well, which
    is the mediant of the current and the previous convergent.

    Step 0 always proposes 1/1 and never Q_0 itself.

    :param step: A `Step` from `ContinuedFraction.step`.
    :return: List of `Candidate`, in the order they should be tested.
    """
    if step.index == 0:
        return [Candidate("start", 1, 1)]

    found = [Candidate("convergent", step.F_num, step.F_den)]
    if step.index % 2 == 0:
        found.append(Candidate("mediant", step.F_num + step.F_num_prev, step.F_den + step.F_den_prev))
    return found
