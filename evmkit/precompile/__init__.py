"""Precompiled contracts and the registry of them for each network upgrade."""