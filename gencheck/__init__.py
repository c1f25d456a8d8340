"""gencheck

Core package namespace for the code-generation verification harness.

Why this exists
---------------
The harness exercises an *external* generator: it feeds it API description
documents, collects the diagnostics it emits and judges the artifacts it
renders. Several layers need to agree on the same vocabulary for that:

* domain types (documents, generator modes and configuration, rendered
  outputs, diagnostics, the error taxonomy)
* IO/layout rules (scratch workspaces, atomic writers, exact comparison)

Keeping those contracts here means ``tools`` (side-effect adapters) and
``harness`` (orchestration) can both depend on them without depending on each
other's internals.
"""

from __future__ import annotations
