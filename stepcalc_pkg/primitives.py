"""Exact-integer primitives shared by the domain modules.

Everything here works on Python ints end to end, so operands of any size
stay exact. Callers validate their inputs first; these helpers assume
positive integers where noted and do not re-check.
"""

from __future__ import annotations

from math import isqrt
from typing import Iterator


def gcd(a: int, b: int) -> int:
    """Greatest common divisor by the Euclidean algorithm, gcd(a, 0) == a."""
    while b:
        a, b = b, a % b
    return a


def euclid_reductions(a: int, b: int) -> Iterator[tuple[int, int, int]]:
    """Yield each ``(a, b, a mod b)`` reduction of the Euclidean algorithm."""
    while b:
        remainder = a % b
        yield a, b, remainder
        a, b = b, remainder


def lcm(a: int, b: int) -> int:
    return abs(a * b) // gcd(a, b)


def is_prime(n: int) -> bool:
    """Trial division up to isqrt(n), skipping even candidates past 2."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    for candidate in range(3, isqrt(n) + 1, 2):
        if n % candidate == 0:
            return False
    return True


def prime_factors(n: int) -> list[int]:
    """Prime factors of n in non-decreasing order (empty for n == 1)."""
    factors: list[int] = []
    divisor = 2
    while divisor * divisor <= n:
        while n % divisor == 0:
            factors.append(divisor)
            n //= divisor
        divisor += 1 if divisor == 2 else 2
    if n > 1:
        factors.append(n)
    return factors


def factor_exponents(n: int) -> list[tuple[int, int]]:
    """Prime factorization of n as ``(prime, exponent)`` pairs."""
    pairs: list[tuple[int, int]] = []
    for p in prime_factors(n):
        if pairs and pairs[-1][0] == p:
            pairs[-1] = (p, pairs[-1][1] + 1)
        else:
            pairs.append((p, 1))
    return pairs


def factorial(n: int) -> int:
    """Arbitrary-precision n!, with 0! == 1! == 1."""
    result = 1
    for k in range(2, n + 1):
        result *= k
    return result


def falling_factorial(n: int, r: int) -> int:
    """n·(n−1)···(n−r+1), i.e. n!/(n−r)! without forming n!."""
    result = 1
    for k in range(n - r + 1, n + 1):
        result *= k
    return result


def sieve(limit: int) -> list[int]:
    """Primes p with 2 <= p <= limit by the Sieve of Eratosthenes."""
    if limit < 2:
        return []
    marks = bytearray([1]) * (limit + 1)
    marks[0] = marks[1] = 0
    for i in range(2, isqrt(limit) + 1):
        if marks[i]:
            marks[i * i :: i] = bytearray(len(range(i * i, limit + 1, i)))
    return [i for i, flag in enumerate(marks) if flag]


def is_perfect_square(n: int) -> bool:
    return n >= 0 and isqrt(n) ** 2 == n
