#!/usr/bin/env python3
"""
Command line interface for Wiener's attack on RSA.

Given
1. a modulus n = pq, with p, q prime and q < p < 2q,
2. an exponent e, invertible modulo (p-1)(q-1),
recover d = e^-1 (mod (p-1)(q-1)) and p, q, provided d < n^0.25 / 3.
With -s the bound is relaxed (see wiener.wlib.search).

You can interact with the attack...
- in Python
>  from wiener.wlib.search import wiener_attack
- in command line
>  wiener [-v] [-s] <n> <e>
>  python run.py [-v] [-s] <n> <e>

Verbosity:
>   (none)  partial quotients of e/m and the result
>   -v      full state of every step, and p, q on success
>   -vv     also explain why each candidate was rejected
>   -vvv    also library debug logging on stderr
"""

import logging
import sys

from wiener.wlib.candidate import Verdict
from wiener.wlib.search import AttackResult, wiener_attack

VERBOSE = 0 # default, can be changed by argument
SHARPENED = False # default, can be changed by argument

def print_result(result: AttackResult, verbose: int=VERBOSE, file=None):
    """Print the trace of an attack and its outcome, at the given verbosity."""
    file = file or sys.stdout

    for record in result.trace:
        step = record.step
        if verbose:
            print(f">>> Step #{step.index}", file=file)
            print(f"Q = {step.Q}", file=file)
            print(f"R = {step.R_num} / {step.R_den}", file=file)
            print(f"F = {step.F_num} / {step.F_den}", file=file)
        else:
            print(step.Q, end=" ", file=file, flush=True)

        if not verbose:
            continue
        for cand, evaluation in record.tried:
            print(f"k / dg = {cand.k} / {cand.dg}" + (" (mediant)" if cand.kind == "mediant" else ""), file=file)
            if evaluation.phi is not None:
                print(f"phi(n) = {evaluation.phi}", file=file)
                print(f"g = {evaluation.g}", file=file)
            if evaluation.p_plus_q is not None and evaluation.p_plus_q >= 0:
                print(f"p + q = {evaluation.p_plus_q}", file=file)
            if evaluation.sq is not None and evaluation.sq >= 0:
                print(f"((p - q)/2)^2 = {evaluation.sq}", file=file)
            if verbose > 1 and evaluation.verdict is not Verdict.SUCCESS:
                print(f">>> Failure: {evaluation.reason}", file=file)

    if result.found:
        if verbose:
            print(">>> Secret key has been found!", end="", file=file)
        print(file=file)
        print(f"d = {result.d}", file=file)
        if verbose:
            print(f"p = {result.p}", file=file)
            print(f"q = {result.q}", file=file)
        print(file=file)
    else:
        print(file=file)
        print(">>> The secret key could not be found", file=file)
        print(file=file)


def _main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(prog="wiener",
                                     description="Wiener's attack: recover a small RSA secret exponent d from (n, e).")
    parser.add_argument("n", type=int,
                        help="Modulus n = pq.")
    parser.add_argument("e", type=int,
                        help="Public exponent e.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Print the state of every step. Repeat for the reason each candidate failed.")
    parser.add_argument("-s", "--sharpened", action="store_true",
                        help="Approximate (p-1)(q-1) by n - sqrt(4n) + 1 instead of n. Requires q < p < 2q.")
    args = parser.parse_args(argv)

    global VERBOSE, SHARPENED
    VERBOSE = args.verbose
    SHARPENED = args.sharpened

    logging.basicConfig(level=logging.DEBUG if VERBOSE > 2 else logging.WARNING,
                        format='[%(asctime)s] %(levelname)s: %(message)s')

    try:
        result = wiener_attack(args.n, args.e, sharpened=SHARPENED)
    except ValueError as err:
        print(f"Invalid parameters: {err}", file=sys.stderr)
        sys.exit(1)

    print(f"n = {args.n}")
    print(f"e = {args.e}")
    print_result(result, VERBOSE)
    sys.exit(0 if result.found else 1)


if __name__ == "__main__":
    _main()
