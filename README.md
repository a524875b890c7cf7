# evmkit

Building blocks for an Ethereum virtual machine, in pure Python.

## What is inside

- `evmkit.bits` — fixed-size byte types `B160` (addresses) and `B256` (hashes),
  with hex and integer conversion (`from_hex`, `to_hex`, `from_int`, `to_int`,
  `zero`, `random`). Bad hex characters raise `FromHexError`.
- `evmkit.utilities` — `keccak256`, `create_address`, `create2_address`,
  `encode_hex_bytes`, `decode_hex_bytes` and the constant `KECCAK_EMPTY`.
- `evmkit.specification` — `SpecId`, the ordered list of network upgrades,
  with `try_from_u8`, `from_name` and `enabled`.
- `evmkit.errors` — `PrecompileError` and its `PrecompileErrorKind`.
- `evmkit.log` — the `Log` record, with `to_dict` / `from_dict` hex mappings.
- `evmkit.bytecode` — `Bytecode` in raw, checked or analysed state
  (`RawState`, `CheckedState`, `AnalysedState`), and `JumpMap`.
- `evmkit.state` — `AccountInfo`, `Account` and `StorageSlot`.
- `evmkit.env` — configuration, block and transaction environment
  (`CfgEnv`, `BlockEnv`, `TxEnv`, `Env`), `TransactTo` and `CreateScheme`.
- `evmkit.result` — execution results (`SuccessResult`, `RevertResult`,
  `HaltResult`), halt reasons, invalid-transaction details and the `EVMError`
  exceptions.
- `evmkit.db` — abstract `State`, `BlockHash`, `Database` and `DatabaseCommit`
  interfaces, `RefDBWrapper`, and `DatabaseComponents`, which joins a state
  source with a block-hash source and wraps their failures in
  `StateComponentError` or `BlockHashComponentError`.
- `evmkit.precompile` — the precompiled contracts: ecrecover (`secp256k1`),
  SHA-256 and RIPEMD-160 (`hashes`), `identity`, BN128 add/mul/pairing
  (`bn128`), BLAKE2 F (`blake2`), linear gas costs (`cost`), and the
  `Precompiles` registry for each upgrade (`registry`).

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Addresses of new contracts:

```python
from evmkit.bits import B160
from evmkit.utilities import create_address, create2_address, keccak256

caller = B160.from_u64(0x1234)
print(create_address(caller, 0).to_hex())
print(create2_address(caller, keccak256(b""), 0).to_hex())
```

Running a precompile from the registry for a given upgrade:

```python
from evmkit.bits import B160
from evmkit.errors import PrecompileError
from evmkit.precompile.registry import Precompiles, PrecompileSpecId

precompiles = Precompiles.new(PrecompileSpecId.BERLIN)
sha256 = precompiles.get(B160.from_u64(2))

try:
    gas_used, output = sha256(b"hello", 100)
except PrecompileError as err:
    print("failed:", err.kind)
else:
    print(gas_used, output.hex())
```

A precompile raises `PrecompileError` when the gas limit is too low or the
input is malformed; `err.kind` is a `PrecompileErrorKind` such as
`OUT_OF_GAS` or `BLAKE2_WRONG_LENGTH`.

Gas for the linear-cost precompiles:

```python
from evmkit.precompile.cost import calc_linear_cost_u32

calc_linear_cost_u32(33, 60, 12)  # 84
```

## What it does not do

- There is no interpreter: the package describes bytecode, state, environment
  and results, but does not execute opcodes or run transactions.
- The modular exponentiation precompile (address 5) is not provided, so the
  Byzantium and Berlin sets in `Precompiles` hold no contract at that address,
  and the Berlin set has the same contracts as the Istanbul set.
- `evmkit.db` defines interfaces only; there is no ready-made in-memory or
  on-disk database.