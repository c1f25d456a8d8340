"""CLI argument builder modules.

The top-level :mod:`gencheck_cli` is kept thin; groups of flags are registered
by small "arg builder" functions housed here:

- :func:`cli.args.base.add_base_args`
- :func:`cli.args.reference.add_reference_args`
- :func:`cli.args.compat.add_compat_args`
"""

from __future__ import annotations

__all__ = [
    "base",
    "reference",
    "compat",
]
