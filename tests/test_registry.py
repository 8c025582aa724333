from __future__ import annotations

import os
import threading
import unittest
from unittest import mock

from svn_scm.svn.errors import SvnError, SvnErrorCode
from svn_scm.svn.registry import RepositoryRegistry, is_descendant, normalize_path
from tests.helpers import FakeSvn, RecordingOutput

BASE = os.path.abspath("svn-scm-fixture")


def p(*parts: str) -> str:
    return os.path.join(BASE, *parts)


class RegistrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.svn = FakeSvn()
        self.registry = RepositoryRegistry(self.svn, output=RecordingOutput())

    def test_register_is_idempotent_on_normalized_root(self) -> None:
        first = self.registry.register(p("a"))
        again = self.registry.register(p("a") + os.sep)
        dotted = self.registry.register(os.path.join(p("a"), "sub", ".."))

        self.assertIs(first, again)
        self.assertIs(first, dotted)
        self.assertEqual(len(self.registry), 1)

    def test_register_is_thread_safe(self) -> None:
        results = []
        barrier = threading.Barrier(8)

        def _register() -> None:
            barrier.wait(timeout=5)
            results.append(self.registry.register(p("shared")))

        threads = [threading.Thread(target=_register) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(len(results), 8)
        self.assertEqual(len({id(item) for item in results}), 1)

    def test_close_removes_the_repository(self) -> None:
        repository = self.registry.register(p("a"))

        self.assertTrue(self.registry.close(repository))
        self.assertFalse(self.registry.close(repository))
        self.assertNotIn(p("a"), self.registry)
        self.assertIsNone(self.registry.resolve(p("a", "file.txt")))

    def test_stored_credentials_are_loaded(self) -> None:
        credentials = mock.Mock()
        credentials.get.return_value = ("alice", "s3cret")
        registry = RepositoryRegistry(self.svn, credentials=credentials)

        repository = registry.register(p("a"))

        credentials.get.assert_called_once_with(normalize_path(p("a")))
        self.assertEqual((repository.username, repository.password), ("alice", "s3cret"))

    def test_discover_registers_working_copy_root(self) -> None:
        self.svn.repository_roots[p("a", "src")] = p("a")

        repository = self.registry.discover(p("a", "src"))

        self.assertIsNotNone(repository)
        self.assertEqual(repository.root, normalize_path(p("a")))
        self.assertEqual(repository.workspace_root, normalize_path(p("a", "src")))

    def test_discover_outside_working_copy_returns_none(self) -> None:
        self.svn.repository_roots[p("plain")] = SvnError("x", error_code=SvnErrorCode.NOT_A_SVN_REPOSITORY)
        self.assertIsNone(self.registry.discover(p("plain")))

    def test_discover_propagates_other_errors(self) -> None:
        self.svn.repository_roots[p("locked")] = SvnError("x", error_code=SvnErrorCode.REPOSITORY_IS_LOCKED)
        with self.assertRaises(SvnError):
            self.registry.discover(p("locked"))


class ResolutionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.output = RecordingOutput()
        self.registry = RepositoryRegistry(FakeSvn(), output=self.output)
        self.outer = self.registry.register(p("a"))
        self.inner = self.registry.register(p("a", "b"))
        self.other = self.registry.register(p("z"))

    def test_longest_root_wins(self) -> None:
        self.assertIs(self.registry.resolve(p("a", "b", "c.txt")), self.inner)
        self.assertIs(self.registry.resolve(p("a", "x.txt")), self.outer)
        self.assertIs(self.registry.resolve(p("a", "b")), self.inner)

    def test_prefix_must_match_whole_components(self) -> None:
        self.assertIs(self.registry.resolve(p("a", "bc", "file.txt")), self.outer)
        self.assertIsNone(self.registry.resolve(p("ab", "file.txt")))
        self.assertFalse(is_descendant(normalize_path(p("a", "b")), normalize_path(p("a", "bc"))))

    def test_sole_repository(self) -> None:
        self.assertIsNone(self.registry.sole())
        registry = RepositoryRegistry(FakeSvn())
        only = registry.register(p("only"))
        self.assertIs(registry.sole(), only)

    def test_grouping_keeps_first_seen_order(self) -> None:
        paths = [p("z", "1"), p("a", "1"), p("z", "2"), p("a", "b", "1"), p("a", "2")]

        groups = self.registry.group_by_repository(paths)

        self.assertEqual([group.repository for group in groups], [self.other, self.outer, self.inner])
        self.assertEqual(groups[0].paths, [p("z", "1"), p("z", "2")])
        self.assertEqual(groups[1].paths, [p("a", "1"), p("a", "2")])
        self.assertEqual(groups[2].paths, [p("a", "b", "1")])

    def test_unresolved_paths_are_dropped_with_a_warning(self) -> None:
        stray = p("nowhere", "file.txt")

        groups = self.registry.group_by_repository([stray, p("a", "1")])

        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].paths, [p("a", "1")])
        self.assertEqual(self.output.lines, [f"[warning] Could not find Svn repository for {stray}\n"])

    def test_duplicate_paths_collapse(self) -> None:
        groups = self.registry.group_by_repository([p("a", "1"), p("a", "1")])
        self.assertEqual(groups[0].paths, [p("a", "1")])

    def test_spellings_of_one_path_collapse(self) -> None:
        dotted = os.path.join(p("a"), ".", "1")
        detour = os.path.join(p("a", "b"), "..", "1")

        groups = self.registry.group_by_repository([p("a", "1"), dotted, detour])

        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].paths, [p("a", "1")])


class DispatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = RepositoryRegistry(FakeSvn(), output=RecordingOutput())
        self.first = self.registry.register(p("one"))
        self.second = self.registry.register(p("two"))

    def test_groups_run_concurrently(self) -> None:
        barrier = threading.Barrier(2, timeout=5)

        def _op(repository, paths):
            barrier.wait()
            return (repository.root, len(paths))

        outcomes = self.registry.dispatch([p("one", "x"), p("two", "y"), p("one", "z")], _op)

        self.assertTrue(all(outcome.ok for outcome in outcomes))
        self.assertEqual([outcome.result for outcome in outcomes], [(self.first.root, 2), (self.second.root, 1)])

    def test_every_group_runs_at_the_same_time(self) -> None:
        names = ["three", "four", "five", "six", "seven"]
        for name in names:
            self.registry.register(p(name))
        barrier = threading.Barrier(len(names) + 2, timeout=5)

        def _op(repository, paths):
            barrier.wait()
            return repository.root

        paths = [p(name, "f") for name in ["one", "two", *names]]
        outcomes = self.registry.dispatch(paths, _op)

        self.assertEqual([outcome.error for outcome in outcomes], [None] * len(paths))
        self.assertEqual(len({outcome.result for outcome in outcomes}), len(paths))

    def test_failure_in_one_group_does_not_cancel_others(self) -> None:
        def _op(repository, paths):
            if repository is self.first:
                raise SvnError("Failed to execute svn", stderr="svn: E155004: locked")
            return "done"

        outcomes = self.registry.dispatch([p("one", "x"), p("two", "y")], _op)

        self.assertEqual([outcome.repository for outcome in outcomes], [self.first, self.second])
        self.assertFalse(outcomes[0].ok)
        self.assertIsInstance(outcomes[0].error, SvnError)
        self.assertTrue(outcomes[1].ok)
        self.assertEqual(outcomes[1].result, "done")

    def test_nothing_to_dispatch(self) -> None:
        op = mock.Mock()
        self.assertEqual(self.registry.dispatch([], op), [])
        op.assert_not_called()


if __name__ == "__main__":
    unittest.main()
