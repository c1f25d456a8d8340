"""harness.settings

Environment-driven settings for verification runs.

Read once at startup by the composition root (:mod:`harness.wiring`) and passed
explicitly afterwards; nothing in the harness reads ``os.environ`` mid-run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from tools.generator_cli import DEFAULT_GENERATOR_BIN

ENV_ENABLE = "GENCHECK_COMPATIBILITY_TEST_ENABLE"
ENV_SKIP_BUILD = "GENCHECK_COMPATIBILITY_TEST_SKIP_BUILD"
ENV_PARALLEL_CODEGEN = "GENCHECK_COMPATIBILITY_TEST_PARALLEL_CODEGEN"
ENV_NUM_BUILD_JOBS = "GENCHECK_COMPATIBILITY_TEST_NUM_BUILD_JOBS"
ENV_SCENARIO_TIMEOUT = "GENCHECK_SCENARIO_TIMEOUT_SECONDS"
ENV_FETCH_RETRIES = "GENCHECK_FETCH_RETRIES"
ENV_GENERATOR_BIN = "GENCHECK_GENERATOR_BIN"
ENV_VERBOSE_DIAGNOSTICS = "GENCHECK_VERBOSE_DIAGNOSTICS"

_TRUTHY = frozenset({"true", "y", "yes", "on", "1"})


def get_bool_env(key: str, environ: Optional[Mapping[str, str]] = None) -> Optional[bool]:
    """``None`` when unset; otherwise True only for the usual truthy spellings."""
    env = os.environ if environ is None else environ
    value = env.get(key)
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY


def get_int_env(key: str, environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    env = os.environ if environ is None else environ
    value = env.get(key)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class HarnessSettings:
    compatibility_enabled: bool = False
    skip_build: bool = False
    parallel_codegen: bool = False
    num_build_jobs: Optional[int] = None
    scenario_timeout_seconds: int = 0
    fetch_retries: int = 0
    generator_bin: str = DEFAULT_GENERATOR_BIN
    verbose_diagnostics: bool = False

    def __post_init__(self) -> None:
        if self.num_build_jobs is not None and self.num_build_jobs < 1:
            raise ValueError(f"num_build_jobs must be >= 1, got {self.num_build_jobs}")
        if self.scenario_timeout_seconds < 0:
            raise ValueError(f"scenario_timeout_seconds must be >= 0, got {self.scenario_timeout_seconds}")
        if self.fetch_retries < 0:
            raise ValueError(f"fetch_retries must be >= 0, got {self.fetch_retries}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HarnessSettings":
        env = os.environ if environ is None else environ
        jobs = get_int_env(ENV_NUM_BUILD_JOBS, env)
        return cls(
            compatibility_enabled=bool(get_bool_env(ENV_ENABLE, env)),
            skip_build=bool(get_bool_env(ENV_SKIP_BUILD, env)),
            parallel_codegen=bool(get_bool_env(ENV_PARALLEL_CODEGEN, env)),
            # A non-positive job count means "let the toolchain decide".
            num_build_jobs=jobs if jobs and jobs > 0 else None,
            scenario_timeout_seconds=max(0, get_int_env(ENV_SCENARIO_TIMEOUT, env) or 0),
            fetch_retries=max(0, get_int_env(ENV_FETCH_RETRIES, env) or 0),
            generator_bin=(env.get(ENV_GENERATOR_BIN) or "").strip() or DEFAULT_GENERATOR_BIN,
            verbose_diagnostics=bool(get_bool_env(ENV_VERBOSE_DIAGNOSTICS, env)),
        )
