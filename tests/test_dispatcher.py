import unittest
from unittest.mock import MagicMock

from support import ManualExecutor, solution

from fnclient.core.constants import ApplyPolicy, DispatchState
from fnclient.core.exceptions import DispatchError, MalformedResponseError, NetworkError
from fnclient.core.models import Board, LettersQuery
from fnclient.engine.dispatcher import GenerateDispatcher, RequestDispatcher, SolveDispatcher
from fnclient.engine.events import EventLoop
from fnclient.io.api_client import FnApiClient
from fnclient.state.board_store import BoardStore
from fnclient.state.query_store import WordResultStore


class SolveDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = MagicMock(spec=FnApiClient)
        self.store = BoardStore()
        self.loop = EventLoop()
        self.executor = ManualExecutor()

    def dispatcher(self, policy=ApplyPolicy.LAST_ARRIVAL) -> SolveDispatcher:
        return SolveDispatcher(self.store, self.client, self.loop, self.executor, policy)

    def test_submit_is_non_blocking_and_pending(self) -> None:
        dispatcher = self.dispatcher()
        record = dispatcher.submit(self.store.get())
        self.assertEqual(dispatcher.state, DispatchState.PENDING)
        self.assertEqual(record.state, DispatchState.PENDING)
        self.client.solve_sudoku.assert_not_called()

    def test_sends_wire_string_and_applies_solution(self) -> None:
        self.store.set_cell(0, "5")
        dispatcher = self.dispatcher()
        self.client.solve_sudoku.return_value = solution("5")
        record = dispatcher.submit(self.store.get())
        self.executor.run(0)
        self.client.solve_sudoku.assert_called_once_with("5" + "0" * 80)
        # Completion is posted, not applied, until the loop drains.
        self.assertEqual(dispatcher.state, DispatchState.PENDING)
        self.loop.run_pending()
        self.assertEqual(self.store.get(), Board.from_wire("5" + "0" * 80))
        self.assertEqual(record.state, DispatchState.RESOLVED)
        self.assertEqual(dispatcher.state, DispatchState.IDLE)

    def test_snapshot_is_isolated_from_later_edits(self) -> None:
        dispatcher = self.dispatcher()
        dispatcher.submit(self.store.get())
        self.store.set_cell(10, "3")
        self.client.solve_sudoku.return_value = solution()
        self.executor.run(0)
        self.client.solve_sudoku.assert_called_once_with("0" * 81)

    def test_malformed_solution_leaves_board_unchanged(self) -> None:
        dispatcher = self.dispatcher()
        record = dispatcher.submit(self.store.get())
        self.executor.resolve(0, {"solution": "1" * 79})
        self.loop.run_pending()
        self.assertEqual(self.store.get(), Board.empty())
        self.assertEqual(record.state, DispatchState.FAILED)
        self.assertIsInstance(dispatcher.last_error, MalformedResponseError)
        self.assertEqual(dispatcher.state, DispatchState.IDLE)

    def test_network_error_leaves_board_unchanged(self) -> None:
        self.store.set_cell(4, "4")
        before = self.store.get()
        dispatcher = self.dispatcher()
        failures = []
        dispatcher.on_failure(lambda record, exc: failures.append(exc))
        record = dispatcher.submit(before)
        self.executor.fail(0, NetworkError("connection refused"))
        with self.assertLogs("fnclient.engine.dispatcher", level="ERROR"):
            self.loop.run_pending()
        self.assertEqual(self.store.get(), before)
        self.assertEqual(record.history, [DispatchState.PENDING, DispatchState.FAILED])
        self.assertIn("connection refused", record.error)
        self.assertEqual(len(failures), 1)

    def test_overlapping_requests_last_arrival_wins(self) -> None:
        dispatcher = self.dispatcher()
        first = dispatcher.submit(self.store.get())
        self.store.set_cell(0, "1")
        second = dispatcher.submit(self.store.get())
        self.assertEqual(dispatcher.in_flight, 2)
        self.executor.resolve(1, solution("2"))
        self.executor.resolve(0, solution("1"))
        self.loop.run_pending()
        self.assertEqual(self.store.get()[0], "1")
        self.assertEqual(first.state, DispatchState.RESOLVED)
        self.assertEqual(second.state, DispatchState.RESOLVED)

    def test_overlapping_requests_last_issued_wins(self) -> None:
        dispatcher = self.dispatcher(ApplyPolicy.LAST_ISSUED)
        first = dispatcher.submit(self.store.get())
        dispatcher.submit(self.store.get())
        self.executor.resolve(1, solution("2"))
        self.executor.resolve(0, solution("1"))
        with self.assertLogs("fnclient.engine.dispatcher", level="WARNING"):
            self.loop.run_pending()
        self.assertEqual(self.store.get()[0], "2")
        self.assertEqual(first.state, DispatchState.DISCARDED)
        self.assertEqual(dispatcher.state, DispatchState.IDLE)

    def test_echoed_original_mismatch_is_logged(self) -> None:
        dispatcher = self.dispatcher()
        dispatcher.submit(self.store.get())
        self.executor.resolve(0, {"original": "9" * 81, "solution": "1" * 81})
        with self.assertLogs("fnclient.engine.dispatcher", level="WARNING"):
            self.loop.run_pending()
        self.assertEqual(self.store.get().to_wire(), "1" * 81)

    def test_unexpected_worker_error_fails_request(self) -> None:
        self.store.set_cell(0, "8")
        before = self.store.get()
        dispatcher = self.dispatcher()
        record = dispatcher.submit(before)
        self.executor.fail(0, RuntimeError("boom"))
        with self.assertLogs("fnclient.engine.dispatcher", level="ERROR"):
            self.loop.run_pending()
        self.assertEqual(self.store.get(), before)
        self.assertEqual(record.state, DispatchState.FAILED)
        self.assertIsInstance(dispatcher.last_error, DispatchError)
        self.assertIsInstance(dispatcher.last_error.__cause__, RuntimeError)
        self.assertIn("boom", record.error)
        self.assertEqual(dispatcher.state, DispatchState.IDLE)

    def test_cancelled_request_fails_and_goes_idle(self) -> None:
        dispatcher = self.dispatcher()
        record = dispatcher.submit(self.store.get())
        self.executor.calls[0][3].cancel()
        with self.assertLogs("fnclient.engine.dispatcher", level="ERROR"):
            self.loop.run_pending()
        self.assertEqual(record.state, DispatchState.FAILED)
        self.assertEqual(dispatcher.in_flight, 0)

    def test_sequence_numbers_increase(self) -> None:
        dispatcher = self.dispatcher()
        numbers = [dispatcher.submit(self.store.get()).sequence for _ in range(3)]
        self.assertEqual(numbers, [1, 2, 3])


class GenerateDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = MagicMock(spec=FnApiClient)
        self.results = WordResultStore()
        self.loop = EventLoop()
        self.executor = ManualExecutor()
        self.dispatcher = GenerateDispatcher(self.results, self.client, self.loop, self.executor)

    def test_words_replace_result(self) -> None:
        self.client.letters_to_words.return_value = ["act", "cat"]
        self.dispatcher.submit(LettersQuery("act", 3))
        self.executor.run(0)
        self.loop.run_pending()
        self.client.letters_to_words.assert_called_once_with("act", 3)
        self.assertEqual(self.results.get().word_set, {"act", "cat"})

    def test_second_response_replaces_not_merges(self) -> None:
        self.dispatcher.submit(LettersQuery("act", 3))
        self.dispatcher.submit(LettersQuery("tea", 3))
        self.executor.resolve(0, ["act", "cat"])
        self.executor.resolve(1, ["eat", "tea"])
        self.loop.run_pending()
        self.assertEqual(self.results.get().word_set, {"eat", "tea"})

    def test_failure_keeps_previous_words(self) -> None:
        self.results.replace(["act"])
        record = self.dispatcher.submit(LettersQuery("act", 4))
        self.executor.resolve(0, {"unexpected": True})
        self.loop.run_pending()
        self.assertEqual(self.results.get().word_set, {"act"})
        self.assertEqual(record.state, DispatchState.FAILED)

    def test_empty_list_clears_words(self) -> None:
        self.results.replace(["act"])
        self.dispatcher.submit(LettersQuery("qq", 3))
        self.executor.resolve(0, [])
        self.loop.run_pending()
        self.assertEqual(len(self.results.get()), 0)


class RequestDispatcherBaseTests(unittest.TestCase):
    def test_base_class_cannot_be_instantiated(self) -> None:
        with self.assertRaises(TypeError):
            RequestDispatcher(EventLoop(), ManualExecutor())

    def test_subclass_missing_apply_cannot_be_instantiated(self) -> None:
        class Partial(RequestDispatcher):
            def _call(self, snapshot):
                return snapshot

            def _reconcile(self, snapshot, response):
                return response

        with self.assertRaises(TypeError):
            Partial(EventLoop(), ManualExecutor())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
