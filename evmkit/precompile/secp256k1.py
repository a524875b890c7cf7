"""The ECRECOVER precompile: public key recovery on secp256k1."""

from __future__ import annotations

from typing import Optional, Tuple

from evmkit.bits import B256
from evmkit.errors import PrecompileError, PrecompileErrorKind, PrecompileResult
from evmkit.utilities import keccak256

ECRECOVER_BASE = 3_000

_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_G = (
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)

_Point = Optional[Tuple[int, int]]


def _add(a: _Point, b: _Point) -> _Point:
    if a is None:
        return b
    if b is None:
        return a
    x1, y1 = a
    x2, y2 = b
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        lam = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, _P) % _P
    x3 = (lam * lam - x1 - x2) % _P
    y3 = (lam * (x1 - x3) - y1) % _P
    return x3, y3


def _multiply(point: _Point, scalar: int) -> _Point:
    result: _Point = None
    addend = point
    while scalar:
        if scalar & 1:
            result = _add(result, addend)
        addend = _add(addend, addend)
        scalar >>= 1
    return result


def _lift_x(x: int, odd: bool) -> Tuple[int, int]:
    rhs = (pow(x, 3, _P) + 7) % _P
    y = pow(rhs, (_P + 1) // 4, _P)
    if y * y % _P != rhs:
        raise ValueError("signature r is not the x coordinate of a curve point")
    if (y & 1) != odd:
        y = _P - y
    return x, y


def ecrecover(sig: bytes, msg: bytes) -> B256:
    """Recover the signer's address, zero-padded to 32 bytes.

    ``sig`` is r, s and a recovery id 0-3; ``msg`` is the 32-byte prehash.
    Raises ValueError if no key can be recovered.
    """
    sig = bytes(sig)
    msg = bytes(msg)
    if len(sig) != 65:
        raise ValueError("signature must be 65 bytes")
    if len(msg) != 32:
        raise ValueError("message hash must be 32 bytes")
    recid = sig[64]
    if recid > 3:
        raise ValueError(f"invalid recovery id {recid}")
    r = int.from_bytes(sig[:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    if not (0 < r < _N and 0 < s < _N):
        raise ValueError("signature scalar out of range")

    x = r + _N if recid & 2 else r
    if x >= _P:
        raise ValueError("signature r is out of the field")
    big_r = _lift_x(x, bool(recid & 1))

    z = int.from_bytes(msg, "big") % _N
    r_inv = pow(r, -1, _N)
    u1 = (-z * r_inv) % _N
    u2 = (s * r_inv) % _N
    public = _add(_multiply(_G, u1), _multiply(big_r, u2))
    if public is None:
        raise ValueError("recovered key is the point at infinity")

    encoded = public[0].to_bytes(32, "big") + public[1].to_bytes(32, "big")
    digest = keccak256(encoded)
    return B256(bytes(12) + digest[12:])


def ec_recover_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """ECRECOVER: hash, v, r, s in 128 bytes; returns the address or nothing."""
    if ECRECOVER_BASE > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    padded = bytes(data[:128]).ljust(128, b"\x00")
    msg = padded[:32]
    v_word = padded[32:64]
    if any(v_word[:31]) or v_word[31] not in (27, 28):
        return ECRECOVER_BASE, b""
    sig = padded[64:128] + bytes([v_word[31] - 27])
    try:
        out = bytes(ecrecover(sig, msg))
    except ValueError:
        out = b""
    return ECRECOVER_BASE, out