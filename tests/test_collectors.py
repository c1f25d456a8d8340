import tempfile
import threading
import unittest
from pathlib import Path

import yaml

from gencheck.domain.diagnostics import Diagnostic
from gencheck.domain.errors import DiagnosticSetMismatch, UnexpectedDiagnosticError
from harness.collectors import (
    RecordingDiagnosticCollector,
    StrictDiagnosticCollector,
    assert_diagnostic_set,
)


class TestRecordingCollector(unittest.TestCase):
    def test_concurrent_emits_are_all_recorded(self) -> None:
        collector = RecordingDiagnosticCollector()
        per_thread = 200

        def worker(i: int) -> None:
            for j in range(per_thread):
                collector.emit(Diagnostic.warning(f"t{i}-{j % 5}"))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(8 * per_thread, len(collector))
        self.assertEqual({f"t{i}-{k}" for i in range(8) for k in range(5)}, collector.snapshot())

    def test_write_yaml_sorts_by_description(self) -> None:
        collector = RecordingDiagnosticCollector()
        collector.emit(Diagnostic.warning("b"))
        collector.emit(Diagnostic.note("a"))
        collector.emit(Diagnostic.warning("b"))

        with tempfile.TemporaryDirectory() as td:
            path = collector.write_yaml(Path(td) / "out" / "diagnostics.yaml")
            data = yaml.safe_load(path.read_text(encoding="utf-8"))

        self.assertEqual(["a", "b"], data["uniqueMessages"])
        self.assertEqual(["note", "warning", "warning"], [d["severity"] for d in data["diagnostics"]])

    def test_verbose_logs_each_diagnostic(self) -> None:
        collector = RecordingDiagnosticCollector(verbose=True, scenario="box")
        with self.assertLogs("harness.collectors", level="INFO") as logs:
            collector.emit(Diagnostic.warning("hello"))
        self.assertIn("box Collected diagnostic: warning: hello", logs.output[0])


class TestStrictCollector(unittest.TestCase):
    def test_notes_are_recorded_and_do_not_fail(self) -> None:
        collector = StrictDiagnosticCollector()
        collector.emit(Diagnostic.note("fyi"))
        self.assertEqual(["fyi"], [d.message for d in collector.diagnostics])

    def test_warning_fails_immediately(self) -> None:
        collector = StrictDiagnosticCollector(scenario="petstore:types")
        with self.assertRaises(UnexpectedDiagnosticError) as ctx:
            collector.emit(Diagnostic.warning("typo"))
        self.assertIn("[petstore:types]", str(ctx.exception))
        self.assertIn("warning: typo", str(ctx.exception))

    def test_ignored_messages_are_dropped(self) -> None:
        collector = StrictDiagnosticCollector(ignored_messages=["typo"])
        collector.emit(Diagnostic.error("typo"))
        self.assertEqual(0, len(collector))


class TestDiagnosticSetAssertion(unittest.TestCase):
    def test_equal_sets_pass(self) -> None:
        assert_diagnostic_set({"A"}, {"A"})
        assert_diagnostic_set(set(), set())

    def test_extra_and_missing_both_fail(self) -> None:
        with self.assertRaises(DiagnosticSetMismatch) as extra:
            assert_diagnostic_set({"A"}, {"A", "B"})
        self.assertEqual(["B"], extra.exception.unexpected)
        self.assertEqual([], extra.exception.missing)

        with self.assertRaises(DiagnosticSetMismatch) as missing:
            assert_diagnostic_set({"A"}, set())
        self.assertEqual(["A"], missing.exception.missing)
        self.assertEqual([], missing.exception.unexpected)


if __name__ == "__main__":
    unittest.main()
