"""
svcpack - Service pack generator

Builds self-contained, offline-installable archives ("service packs")
holding a package and its runtime dependency closure, minus the packages
the target system is assumed to already have.

It does NOT:
- Install anything
- Solve versions or conflicts (the package-management service does that)

It DOES:
- Resolve fuzzy package references to one package id
- Collect and filter the dependency closure
- Download every artifact and assemble the pack
"""

__version__ = "1.0.0"
