"""harness.invoker

One call into the generator for one (document, mode, configuration) tuple.

The generator is injected as a factory, a narrow capability with a single entry
point:

    factory(config, diagnostics) -> pipeline
    pipeline(document) -> RenderedOutput

so the harness can be driven by the real generator (see
:mod:`tools.generator_cli`) or by an in-process fake in tests.

The invoker never swallows generator failures. Anything the generator raises
is re-raised as :class:`PipelineError` tagged with the document and the mode,
so a multi-mode run attributes failures precisely even when modes run
concurrently. Oracle failures and timeouts already carry their own context
and propagate unchanged.

A scenario deadline bounds all modes together. It is made current while each
pipeline runs, so the command-line adapter kills its subprocess when the
deadline passes. After a parallel timeout the workers are joined before
:class:`ScenarioTimeout` is raised, so nothing a worker started outlives the
verdict.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, Optional, Sequence

from gencheck.domain.deadline import Deadline
from gencheck.domain.errors import OracleMismatch, PipelineError, ScenarioTimeout
from gencheck.domain.models import Document, GeneratorConfig, GeneratorMode, RenderedOutput

from harness.collectors import DiagnosticCollector

logger = logging.getLogger(__name__)

GeneratorPipeline = Callable[[Document], RenderedOutput]
PipelineFactory = Callable[[GeneratorConfig, DiagnosticCollector], GeneratorPipeline]

# How long a timed-out parallel run waits for its workers to wind down.
CANCEL_GRACE_SECONDS = 5.0


class PipelineInvoker:
    def __init__(self, factory: PipelineFactory) -> None:
        self.factory = factory

    def run(
        self,
        document: Document,
        mode: GeneratorMode,
        config: GeneratorConfig,
        collector: DiagnosticCollector,
        *,
        deadline: Optional[Deadline] = None,
    ) -> RenderedOutput:
        """Run one mode.

        With a *deadline*, the run does not start once it has passed, and the
        deadline is current (:func:`current_deadline`) while the pipeline runs
        so subprocess-backed pipelines are killed when it passes.
        """
        mode = GeneratorMode.parse(mode)
        mode_config = config.with_mode(mode)
        if deadline is None:
            deadline = Deadline()
        what = f"generating {mode.value} code for {document.path}"
        deadline.remaining(what)
        try:
            with deadline.applied():
                pipeline = self.factory(mode_config, collector)
                output = pipeline(document)
        except (OracleMismatch, ScenarioTimeout, PipelineError):
            raise
        except Exception as e:
            raise PipelineError(document.path, mode, e) from e

        if not isinstance(output, RenderedOutput):
            raise PipelineError(
                document.path,
                mode,
                TypeError(f"pipeline returned {type(output).__name__}, expected RenderedOutput"),
            )
        if not output.base_name:
            raise PipelineError(document.path, mode, ValueError("rendered output has an empty base name"))
        # An in-process pipeline may ignore the deadline; its late result does not count.
        deadline.remaining(what)
        return output

    def run_modes(
        self,
        document: Document,
        modes: Sequence[GeneratorMode],
        config: GeneratorConfig,
        collector: DiagnosticCollector,
        *,
        parallel: bool = False,
        timeout_seconds: Optional[float] = None,
        deadline: Optional[Deadline] = None,
    ) -> Dict[GeneratorMode, RenderedOutput]:
        """Run every mode against the same document and collector.

        Results are keyed by mode and ordered like *modes*, whichever strategy
        ran them. *deadline* (or a fresh one from *timeout_seconds*) bounds all
        modes together.
        """
        ordered = [GeneratorMode.parse(m) for m in modes]
        if len(set(ordered)) != len(ordered):
            raise ValueError(f"Duplicate modes requested: {[m.value for m in ordered]}")
        if not ordered:
            return {}
        if deadline is None:
            deadline = Deadline(timeout_seconds)

        logger.debug(
            "Generating %s for %s (%s)",
            ", ".join(m.value for m in ordered),
            document.path,
            "parallel" if parallel else "sequential",
        )
        if parallel:
            return self._run_parallel(document, ordered, config, collector, deadline)
        return {mode: self.run(document, mode, config, collector, deadline=deadline) for mode in ordered}

    def _run_parallel(
        self,
        document: Document,
        modes: Sequence[GeneratorMode],
        config: GeneratorConfig,
        collector: DiagnosticCollector,
        deadline: Deadline,
    ) -> Dict[GeneratorMode, RenderedOutput]:
        what = f"generating code for {document.path}"
        executor = ThreadPoolExecutor(max_workers=len(modes), thread_name_prefix="gencheck-mode")
        futures: Dict[GeneratorMode, Future] = {}
        try:
            for mode in modes:
                futures[mode] = executor.submit(self.run, document, mode, config, collector, deadline=deadline)

            _, not_done = wait(list(futures.values()), timeout=deadline.time_left())
            if not_done:
                # Workers see the same deadline, so their subprocesses are
                # being killed right now. Join them before reporting.
                for f in not_done:
                    f.cancel()
                _, stragglers = wait(not_done, timeout=CANCEL_GRACE_SECONDS)
                if stragglers:
                    logger.warning(
                        "%d mode run(s) for %s ignored the deadline and are still running",
                        len(stragglers),
                        document.path,
                    )
                raise ScenarioTimeout(what, deadline.timeout_seconds)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        # Re-raise in mode order so the reported failure does not depend on
        # thread scheduling.
        outputs: Dict[GeneratorMode, RenderedOutput] = {}
        for mode in modes:
            outputs[mode] = futures[mode].result()
        return outputs
