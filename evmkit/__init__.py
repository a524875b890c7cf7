"""Ethereum virtual machine primitives: byte types, bytecode, state, environment,
results, database interfaces and precompiled contracts."""

__version__ = "0.1.0"