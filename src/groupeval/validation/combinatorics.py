"""Binomial bound used to cap how many distinct group subsets are requested."""


def binomial_coefficient(n: int, k: int) -> int:
    """
    Number of distinct k-element subsets of an n-element set.

    Computed as the running product of (n + 1 - i) / i for i = 1..k. Every
    partial product is itself C(n, i), so the integer division is exact and
    no floating point rounding is involved.
    """
    if n < 0 or k < 0:
        raise ValueError(f"binomial_coefficient needs n >= 0 and k >= 0, got n={n}, k={k}")
    result = 1
    for i in range(1, k + 1):
        result = result * (n + 1 - i) // i
    return result
