import pytest

from evmkit.errors import PrecompileError, PrecompileErrorKind
from evmkit.precompile.secp256k1 import ec_recover_run, ecrecover

# secp256k1 generator x coordinate and group order.
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# Address of the key whose public point is the generator.
GENERATOR_ADDRESS = bytes.fromhex("7e5f4552091a69125d5dfcb7b8c2659029395bdf")

KNOWN_INPUT = bytes.fromhex(
    "38d18acb67d25c8bb9942764b62f18e17054f66a817bd4295423adf9ed98873e"
    "000000000000000000000000000000000000000000000000000000000000001b"
    "38d18acb67d25c8bb9942764b62f18e17054f66a817bd4295423adf9ed98873e"
    "789d1dd423d25f0772d2748d60f7e4b81bb14d086eba8e8e8efb6dcff8a4ae02"
)


def _generator_signature(msg: bytes, v: int) -> bytes:
    # With key 1 and nonce 1, r = Gx and s = z + r (mod n).
    z = int.from_bytes(msg, "big")
    s = (z + GX) % N
    return (
        msg
        + v.to_bytes(32, "big")
        + GX.to_bytes(32, "big")
        + s.to_bytes(32, "big")
    )


def test_known_vector():
    gas, out = ec_recover_run(KNOWN_INPUT, 3000)
    assert gas == 3000
    assert out == bytes(12) + bytes.fromhex("ceaccac640adf55b2028469bd36ba501f28b699d")


@pytest.mark.parametrize("fill", [0x01, 0x10, 0x2A])
def test_recovers_generator_key(fill):
    msg = bytes([fill]) * 32
    _, out = ec_recover_run(_generator_signature(msg, 27), 3000)
    assert out == bytes(12) + GENERATOR_ADDRESS


def test_other_parity_gives_other_key():
    msg = bytes([1]) * 32
    _, out = ec_recover_run(_generator_signature(msg, 28), 3000)
    assert len(out) == 32
    assert out[:12] == bytes(12)
    assert out[12:] != GENERATOR_ADDRESS


def test_ecrecover_direct():
    msg = bytes([1]) * 32
    data = _generator_signature(msg, 27)
    sig = data[64:128] + b"\x00"
    assert bytes(ecrecover(sig, msg)) == bytes(12) + GENERATOR_ADDRESS


@pytest.mark.parametrize("v", [0, 1, 26, 29])
def test_bad_v_returns_empty(v):
    data = _generator_signature(bytes([1]) * 32, v)
    assert ec_recover_run(data, 3000) == (3000, b"")


def test_high_bytes_of_v_word_return_empty():
    data = bytearray(_generator_signature(bytes([1]) * 32, 27))
    data[40] = 1
    assert ec_recover_run(bytes(data), 3000) == (3000, b"")


def test_zero_r_returns_empty():
    data = bytes(32) + (27).to_bytes(32, "big") + bytes(32) + (5).to_bytes(32, "big")
    assert ec_recover_run(data, 3000) == (3000, b"")


def test_empty_input_returns_empty():
    assert ec_recover_run(b"", 3000) == (3000, b"")


def test_out_of_gas():
    with pytest.raises(PrecompileError) as info:
        ec_recover_run(KNOWN_INPUT, 2999)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS


def test_ecrecover_rejects_bad_recovery_id():
    msg = bytes([1]) * 32
    sig = _generator_signature(msg, 27)[64:128] + b"\x04"
    with pytest.raises(ValueError):
        ecrecover(sig, msg)


def test_ecrecover_rejects_bad_lengths():
    with pytest.raises(ValueError):
        ecrecover(bytes(64), bytes(32))
    with pytest.raises(ValueError):
        ecrecover(bytes(65), bytes(31))


def test_ecrecover_rejects_s_out_of_range():
    msg = bytes([1]) * 32
    sig = GX.to_bytes(32, "big") + N.to_bytes(32, "big") + b"\x00"
    with pytest.raises(ValueError):
        ecrecover(sig, msg)