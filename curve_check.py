"""Ed25519 point validity for 32-byte addresses.

An address that does not decompress to a curve point is a program-derived
address: no private key exists for it, so it can never sign on its own.
"""

from solders.pubkey import Pubkey

# Field prime p = 2^255 - 19
P = 2**255 - 19
# Curve constant d = -121665/121666 (mod p)
D = (-121665 * pow(121666, P - 2, P)) % P


def legendre_symbol(a: int, p: int = P) -> int:
    """Euler's criterion: 1 for a non-zero residue, p-1 for a non-residue, 0 for zero."""
    return pow(a % p, (p - 1) // 2, p)


def sqrt_mod(a: int, p: int = P) -> int | None:
    """Square root of a modulo an odd prime p, or None when a is not a residue."""
    a %= p
    if a == 0:
        return 0
    if legendre_symbol(a, p) != 1:
        return None
    if p % 4 == 3:
        return pow(a, (p + 1) // 4, p)

    # Tonelli-Shanks: p - 1 = q * 2^s with q odd
    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1
    z = 2
    while legendre_symbol(z, p) != p - 1:
        z += 1

    m = s
    c = pow(z, q, p)
    t = pow(a, q, p)
    r = pow(a, (q + 1) // 2, p)
    while t != 1:
        i, t2 = 0, t
        while t2 != 1:
            t2 = t2 * t2 % p
            i += 1
        b = pow(c, 1 << (m - i - 1), p)
        m = i
        c = b * b % p
        t = t * c % p
        r = r * b % p
    return r


def _on_curve(x: int, y: int) -> bool:
    # -x^2 + y^2 = 1 + d x^2 y^2
    xx, yy = x * x % P, y * y % P
    return (yy - xx - 1 - D * xx * yy) % P == 0


def is_on_curve(address: bytes | Pubkey) -> bool:
    data = bytes(address)
    if len(data) != 32:
        return False

    encoded = int.from_bytes(data, "little")
    sign = encoded >> 255
    y = (encoded & ((1 << 255) - 1)) % P

    yy = y * y % P
    x2 = (yy - 1) * pow(D * yy + 1, P - 2, P) % P
    x = sqrt_mod(x2)
    if x is None:
        return False
    # x = 0 decompresses regardless of the sign bit, as the validator does
    if x != 0 and (x & 1) != sign:
        x = P - x
    return _on_curve(x, y) and (x == 0 or (x & 1) == sign)


def is_pda(address: bytes | Pubkey) -> bool:
    return not is_on_curve(address)
