"""Precompiles for the alt_bn128 curve: addition, scalar multiplication and
the optimal ate pairing check (EIP-196, EIP-197, EIP-1108)."""

from __future__ import annotations

from typing import List, Optional, Tuple

from evmkit.errors import PrecompileError, PrecompileErrorKind, PrecompileResult

FIELD_MODULUS = (
    21888242871839275222246405745257275088696311157297823662689037894645226208583
)
CURVE_ORDER = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

ADD_INPUT_LEN = 128
MUL_INPUT_LEN = 128
PAIR_ELEMENT_LEN = 192

ISTANBUL_ADD_GAS = 150
BYZANTIUM_ADD_GAS = 500
ISTANBUL_MUL_GAS = 6_000
BYZANTIUM_MUL_GAS = 40_000
ISTANBUL_PAIR_PER_POINT = 34_000
ISTANBUL_PAIR_BASE = 45_000
BYZANTIUM_PAIR_PER_POINT = 80_000
BYZANTIUM_PAIR_BASE = 100_000

_P = FIELD_MODULUS
_ATE_LOOP_COUNT = 29793968203157093288
_LOG_ATE_LOOP_COUNT = 63
_FINAL_EXPONENT = (_P**12 - 1) // CURVE_ORDER

Fq2 = Tuple[int, int]
G1Point = Optional[Tuple[int, int]]
G2Point = Optional[Tuple[Fq2, Fq2]]
Fq12 = List[int]


# --- Fq2 = Fq[i] / (i^2 + 1) -------------------------------------------------

def _f2_add(a: Fq2, b: Fq2) -> Fq2:
    return (a[0] + b[0]) % _P, (a[1] + b[1]) % _P


def _f2_sub(a: Fq2, b: Fq2) -> Fq2:
    return (a[0] - b[0]) % _P, (a[1] - b[1]) % _P


def _f2_mul(a: Fq2, b: Fq2) -> Fq2:
    return (a[0] * b[0] - a[1] * b[1]) % _P, (a[0] * b[1] + a[1] * b[0]) % _P


def _f2_scale(a: Fq2, k: int) -> Fq2:
    return a[0] * k % _P, a[1] * k % _P


def _f2_neg(a: Fq2) -> Fq2:
    return -a[0] % _P, -a[1] % _P


def _f2_conj(a: Fq2) -> Fq2:
    return a[0], -a[1] % _P


def _f2_inv(a: Fq2) -> Fq2:
    norm_inv = pow(a[0] * a[0] + a[1] * a[1], -1, _P)
    return a[0] * norm_inv % _P, -a[1] * norm_inv % _P


def _f2_pow(a: Fq2, exponent: int) -> Fq2:
    result: Fq2 = (1, 0)
    while exponent:
        if exponent & 1:
            result = _f2_mul(result, a)
        a = _f2_mul(a, a)
        exponent >>= 1
    return result


_XI: Fq2 = (9, 1)
_B2: Fq2 = _f2_mul((3, 0), _f2_inv(_XI))
_FROB_X = _f2_pow(_XI, (_P - 1) // 3)
_FROB_Y = _f2_pow(_XI, (_P - 1) // 2)


# --- G1: y^2 = x^3 + 3 over Fq ------------------------------------------------

def _g1_on_curve(x: int, y: int) -> bool:
    return (y * y - x * x * x - 3) % _P == 0


def _g1_add(a: G1Point, b: G1Point) -> G1Point:
    if a is None:
        return b
    if b is None:
        return a
    x1, y1 = a
    x2, y2 = b
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        slope = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        slope = (y2 - y1) * pow(x2 - x1, -1, _P) % _P
    x3 = (slope * slope - x1 - x2) % _P
    return x3, (slope * (x1 - x3) - y1) % _P


def _g1_mul(point: G1Point, scalar: int) -> G1Point:
    result: G1Point = None
    while scalar:
        if scalar & 1:
            result = _g1_add(result, point)
        point = _g1_add(point, point)
        scalar >>= 1
    return result


# --- G2 on the twist: y^2 = x^3 + 3 / (9 + i) over Fq2 ------------------------

def _g2_on_curve(x: Fq2, y: Fq2) -> bool:
    rhs = _f2_add(_f2_mul(_f2_mul(x, x), x), _B2)
    return _f2_mul(y, y) == rhs


def _g2_slope(a: Tuple[Fq2, Fq2], b: Tuple[Fq2, Fq2]) -> Optional[Fq2]:
    """Slope of the line through a and b, or None for a vertical line."""
    (x1, y1), (x2, y2) = a, b
    if x1 != x2:
        return _f2_mul(_f2_sub(y2, y1), _f2_inv(_f2_sub(x2, x1)))
    if y1 == y2 and y1 != (0, 0):
        return _f2_mul(_f2_scale(_f2_mul(x1, x1), 3), _f2_inv(_f2_scale(y1, 2)))
    return None


def _g2_add(a: G2Point, b: G2Point) -> G2Point:
    if a is None:
        return b
    if b is None:
        return a
    slope = _g2_slope(a, b)
    if slope is None:
        return None
    (x1, y1), (x2, _) = a, b
    x3 = _f2_sub(_f2_sub(_f2_mul(slope, slope), x1), x2)
    y3 = _f2_sub(_f2_mul(slope, _f2_sub(x1, x3)), y1)
    return x3, y3


def _g2_mul(point: G2Point, scalar: int) -> G2Point:
    result: G2Point = None
    while scalar:
        if scalar & 1:
            result = _g2_add(result, point)
        point = _g2_add(point, point)
        scalar >>= 1
    return result


def _g2_frobenius(point: Tuple[Fq2, Fq2]) -> Tuple[Fq2, Fq2]:
    x, y = point
    return _f2_mul(_f2_conj(x), _FROB_X), _f2_mul(_f2_conj(y), _FROB_Y)


# --- Fq12 = Fq[w] / (w^12 - 18 w^6 + 82), with w^6 = 9 + i --------------------

def _f12_one() -> Fq12:
    return [1] + [0] * 11


def _f12_mul(a: Fq12, b: Fq12) -> Fq12:
    product = [0] * 23
    for i, x in enumerate(a):
        if x:
            for j, y in enumerate(b):
                product[i + j] += x * y
    for degree in range(22, 11, -1):
        coeff = product[degree]
        if coeff:
            product[degree - 6] += 18 * coeff
            product[degree - 12] -= 82 * coeff
    return [c % _P for c in product[:12]]


def _f12_pow(base: Fq12, exponent: int) -> Fq12:
    result = _f12_one()
    for bit in bin(exponent)[2:]:
        result = _f12_mul(result, result)
        if bit == "1":
            result = _f12_mul(result, base)
    return result


def _line(a: Tuple[Fq2, Fq2], b: Tuple[Fq2, Fq2], t: Tuple[int, int]) -> Fq12:
    """Line through twisted points a and b, evaluated at the G1 point t."""
    xt, yt = t
    out = [0] * 12
    slope = _g2_slope(a, b)
    x1, y1 = a
    if slope is None:
        out[0] = xt
        out[2] = -(x1[0] - 9 * x1[1]) % _P
        out[8] = -x1[1] % _P
        return out
    k = _f2_sub(y1, _f2_mul(slope, x1))
    out[0] = -yt % _P
    out[1] = xt * (slope[0] - 9 * slope[1]) % _P
    out[7] = xt * slope[1] % _P
    out[3] = (k[0] - 9 * k[1]) % _P
    out[9] = k[1]
    return out


def _miller_loop(q: Tuple[Fq2, Fq2], p: Tuple[int, int]) -> Fq12:
    acc: G2Point = q
    f = _f12_one()
    for i in range(_LOG_ATE_LOOP_COUNT, -1, -1):
        f = _f12_mul(_f12_mul(f, f), _line(acc, acc, p))
        acc = _g2_add(acc, acc)
        if _ATE_LOOP_COUNT & (1 << i):
            f = _f12_mul(f, _line(acc, q, p))
            acc = _g2_add(acc, q)
    q1 = _g2_frobenius(q)
    q2x, q2y = _g2_frobenius(q1)
    neg_q2 = (q2x, _f2_neg(q2y))
    f = _f12_mul(f, _line(acc, q1, p))
    acc = _g2_add(acc, q1)
    return _f12_mul(f, _line(acc, neg_q2, p))


# --- input decoding ------------------------------------------------------------

def _read_fq(data: bytes, pos: int) -> int:
    value = int.from_bytes(data[pos : pos + 32], "big")
    if value >= _P:
        raise PrecompileError(PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER)
    return value


def _g1_from_coords(x: int, y: int) -> G1Point:
    if x == 0 and y == 0:
        return None
    if not _g1_on_curve(x, y):
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    return x, y


def _read_point(data: bytes, pos: int) -> G1Point:
    x = _read_fq(data, pos)
    y = _read_fq(data, pos + 32)
    return _g1_from_coords(x, y)


def _g2_from_coords(x: Fq2, y: Fq2) -> G2Point:
    if x == (0, 0) and y == (0, 0):
        return None
    point = (x, y)
    if not _g2_on_curve(x, y) or _g2_mul(point, CURVE_ORDER) is not None:
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    return point


def _encode_g1(point: G1Point) -> bytes:
    if point is None:
        return bytes(64)
    return point[0].to_bytes(32, "big") + point[1].to_bytes(32, "big")


# --- operations ----------------------------------------------------------------

def run_add(data: bytes) -> bytes:
    """Add two G1 points given as 128 bytes (zero-padded or truncated)."""
    padded = bytes(data[:ADD_INPUT_LEN]).ljust(ADD_INPUT_LEN, b"\x00")
    first = _read_point(padded, 0)
    second = _read_point(padded, 64)
    return _encode_g1(_g1_add(first, second))


def run_mul(data: bytes) -> bytes:
    """Multiply a G1 point by a 32-byte scalar (input zero-padded or truncated)."""
    padded = bytes(data[:MUL_INPUT_LEN]).ljust(MUL_INPUT_LEN, b"\x00")
    point = _read_point(padded, 0)
    scalar = int.from_bytes(padded[64:96], "big") % CURVE_ORDER
    return _encode_g1(_g1_mul(point, scalar))


def run_pair(
    data: bytes, pair_per_point_cost: int, pair_base_cost: int, gas_limit: int
) -> PrecompileResult:
    """Check that the product of pairings of the given (G1, G2) pairs is one."""
    data = bytes(data)
    gas_used = pair_per_point_cost * len(data) // PAIR_ELEMENT_LEN + pair_base_cost
    if gas_used > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    if len(data) % PAIR_ELEMENT_LEN != 0:
        raise PrecompileError(PrecompileErrorKind.BN128_PAIR_LENGTH)

    pairs = []
    for start in range(0, len(data), PAIR_ELEMENT_LEN):
        ax, ay, bay, bax, bby, bbx = (
            _read_fq(data, start + offset) for offset in range(0, 192, 32)
        )
        a = _g1_from_coords(ax, ay)
        b = _g2_from_coords((bax, bay), (bbx, bby))
        pairs.append((a, b))

    product = _f12_one()
    for a, b in pairs:
        if a is not None and b is not None:
            product = _f12_mul(product, _miller_loop(b, a))
    success = _f12_pow(product, _FINAL_EXPONENT) == _f12_one()
    return gas_used, (1 if success else 0).to_bytes(32, "big")


def _charged(gas: int, gas_limit: int) -> None:
    if gas > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)


def add_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """G1 addition with Istanbul pricing."""
    _charged(ISTANBUL_ADD_GAS, gas_limit)
    return ISTANBUL_ADD_GAS, run_add(data)


def add_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """G1 addition with Byzantium pricing."""
    _charged(BYZANTIUM_ADD_GAS, gas_limit)
    return BYZANTIUM_ADD_GAS, run_add(data)


def mul_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """G1 scalar multiplication with Istanbul pricing."""
    _charged(ISTANBUL_MUL_GAS, gas_limit)
    return ISTANBUL_MUL_GAS, run_mul(data)


def mul_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """G1 scalar multiplication with Byzantium pricing."""
    _charged(BYZANTIUM_MUL_GAS, gas_limit)
    return BYZANTIUM_MUL_GAS, run_mul(data)


def pair_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Pairing check with Istanbul pricing."""
    return run_pair(data, ISTANBUL_PAIR_PER_POINT, ISTANBUL_PAIR_BASE, gas_limit)


def pair_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Pairing check with Byzantium pricing."""
    return run_pair(data, BYZANTIUM_PAIR_PER_POINT, BYZANTIUM_PAIR_BASE, gas_limit)