"""
Generate RSA keys with a deliberately small secret exponent.

Run with `wiener-keygen -h` (or `python -m wiener.wlib.keygen -h`) for help.
"""

import math
import sys

import gmpy2
from Crypto.Random import random
from Crypto.Util import number
from sympy import isprime, nextprime


def small_d_bound(n: int) -> int:
    """Largest d covered by Wiener's theorem for e/n: d < n^0.25 / 3."""
    return int(gmpy2.iroot(n, 4)[0]) // 3


def get_primes(bits: int, gap_bits: int=None) -> tuple[int, int]:
    """
    Two distinct primes p > q with q < p < 2q and pq of about `bits` bits.

    :param bits: Size of the modulus.
    :param gap_bits: If given, p is the first prime after q + q/2^gap_bits,
        so p and q are close and (p-1)(q-1) is very near n - 2sqrt(n) + 1.
    :return: (p, q)
    """
    q = number.getPrime(bits // 2)
    if gap_bits is None:
        # both primes have their top bit set, so p < 2q
        p = q
        while p == q:
            p = number.getPrime(bits // 2)
    else:
        p = int(nextprime(q + (q >> gap_bits)))
    if p < q:
        p, q = q, p
    assert isprime(p) and isprime(q) and q < p < 2 * q
    return p, q


def get_vulnerable_key(bits: int=256, d_bits: int=None, gap_bits: int=None) -> tuple[int, int, int, int, int]:
    """
    Generate (n, e, d, p, q) with ed = 1 (mod (p-1)(q-1)) and a small d.

    :param bits: Size of the modulus n.
    :param d_bits: Exact bit length of d. Defaults to a d just under n^0.25 / 3.
    :param gap_bits: Passed on to `get_primes`.
    :return: (n, e, d, p, q)
    """
    _validate_bits(bits)
    if d_bits is not None and d_bits < 2:
        raise ValueError("Error: --d-bits must be at least 2.")

    while True:
        p, q = get_primes(bits, gap_bits)
        n = p * q
        phi = (p - 1) * (q - 1)

        if d_bits is None:
            bound = small_d_bound(n)
            low, high = bound // 2, bound
        else:
            low, high = 1 << (d_bits - 1), 1 << d_bits

        for _ in range(100):
            d = random.randrange(low, high)
            if math.gcd(d, phi) != 1:
                continue
            e = int(gmpy2.invert(d, phi))
            # k = (ed - 1)/phi must exceed g = 1, otherwise edg mod k vanishes
            if (e * d - 1) // phi >= 2:
                return n, e, d, p, q


def _validate_bits(bits: int):
    if bits < 16:
        raise ValueError("Error: --bits must be at least 16.")
    elif bits > 4096:
        print(f"Warning! {bits} bits are a lot. Prime generation may take a while.", file=sys.stderr)


def _main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Generate an RSA public key (n, e) with a small secret exponent d.")
    parser.add_argument("-b", "--bits", type=int, default=256,
                        help="Number of bits of the modulus n (default: 256).")
    parser.add_argument("-d", "--d-bits", type=int, default=None,
                        help="Bit length of d (default: just below n^0.25 / 3).")
    parser.add_argument("-g", "--gap-bits", type=int, default=None,
                        help="Make p and q close: p is the next prime after q + q/2^GAP_BITS.")
    args = parser.parse_args(argv)

    try:
        n, e, d, p, q = get_vulnerable_key(args.bits, args.d_bits, args.gap_bits)
    except ValueError as err:
        print(err, file=sys.stderr)
        sys.exit(1)

    print(f"Generated {n.bit_length()}-bit / {len(str(n))}-digit modulus with {d.bit_length()}-bit d")
    print(f"n = {n}")
    print(f"e = {e}")
    print(f"d = {d}")
    print(f"p = {p}")
    print(f"q = {q}")


if __name__ == "__main__":
    _main()
