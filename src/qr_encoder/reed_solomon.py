"""Reed-Solomon error correction over GF(2^8/0x11D) with generator base 0x02."""

from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidArgumentError, check


class ReedSolomonGenerator:
    """Divisor polynomial of a given degree and the matching remainder computation."""

    def __init__(self, degree: int):
        if degree <= 0 or degree > 255:
            raise InvalidArgumentError("Degree out of range")
        # Highest power first; the leading coefficient is always 1.
        self.coefficients = [1]
        root = 1
        for _ in range(degree):
            self.coefficients = self._multiply(self.coefficients, [1, root])
            root = gf_multiply(root, 0x02)

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    @property
    def divisor(self) -> List[int]:
        """Coefficients without the implicit leading 1."""
        return self.coefficients[1:]

    @staticmethod
    def _multiply(p: Sequence[int], q: Sequence[int]) -> List[int]:
        result = [0] * (len(p) + len(q) - 1)
        for i, a in enumerate(p):
            for j, b in enumerate(q):
                result[i + j] ^= gf_multiply(a, b)
        return result

    def remainder(self, data: Sequence[int]) -> List[int]:
        divisor = self.divisor
        result = [0] * len(divisor)
        for byte in data:
            check(0 <= byte <= 0xFF, "byte out of range")
            factor = byte ^ result[0]
            result = result[1:] + [0]
            for i, coef in enumerate(divisor):
                result[i] ^= gf_multiply(coef, factor)
        return result


def gf_multiply(x: int, y: int) -> int:
    """Product of two field elements modulo x^8 + x^4 + x^3 + x^2 + 1."""
    check(x >> 8 == 0 and y >> 8 == 0, "byte out of range")
    z = 0
    for _ in range(8):
        if y & 1:
            z ^= x
        carry = x & 0x80
        x = (x << 1) & 0xFF
        if carry:
            x ^= 0x1D
        y >>= 1
    check(z >> 8 == 0)
    return z
