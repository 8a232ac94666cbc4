"""Session-level behavior tests.

Drive the same operations the key dispatcher uses against a real temporary
directory tree, covering delete/undo, expand/collapse, search, and cd.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from flatlist.errors import SpawnError
from flatlist.file_tree_model import Entry, EntryKind, TreeStore, list_directory
from flatlist.session import MANUAL_ORDER_NOTICE, Session
from flatlist.undo import UndoManager
from flatlist.viewport import Viewport


def _without_parent_links(path: str) -> list[Entry]:
    return [entry for entry in list_directory(path) if entry.name != ".."]


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "dirA").mkdir()
        (self.root / "dirA" / "f1").write_bytes(b"first file")
        (self.root / "dirA" / "f2").write_bytes(b"second file")
        (self.root / "fileB").write_bytes(b"b")
        self._backup_tmp = tempfile.TemporaryDirectory()
        self.backup_root = Path(self._backup_tmp.name)
        self.session = Session(
            store=TreeStore(lister=_without_parent_links),
            viewport=Viewport(height=10),
            undo_manager=UndoManager(str(self.backup_root)),
        )
        self.session.store.add_directory(str(self.root))

    def tearDown(self) -> None:
        self._tmp.cleanup()
        self._backup_tmp.cleanup()

    def paths(self) -> list[str]:
        base = str(self.root)
        return [entry.full_path[len(base) + 1 :] for entry in self.session.store]

    def open_dir_a(self) -> None:
        self.session.viewport.select(0, len(self.session.store))
        self.session.activate_selected()


class DeleteUndoScenarioTests(SessionTestCase):
    def test_delete_and_undo_scenario(self) -> None:
        self.open_dir_a()
        self.assertEqual(self.paths(), ["dirA", "dirA/f1", "dirA/f2", "fileB"])
        self.session.viewport.select(1, len(self.session.store))

        self.assertTrue(self.session.delete_selected())

        live_path = os.path.abspath(f"{self.root}/dirA/f1")
        self.assertEqual(self.paths(), ["dirA", "dirA/f2", "fileB"])
        self.assertEqual(self.session.viewport.selected_index, 1)
        self.assertEqual(self.session.selected_entry().name, "f2")
        self.assertFalse(os.path.exists(live_path))
        backup = Path(self.session.undo_manager.backup_path_for(live_path))
        self.assertEqual(backup.read_bytes(), b"first file")

        self.assertTrue(self.session.undo())

        self.assertEqual(Path(live_path).read_bytes(), b"first file")
        self.assertEqual(self.paths(), ["dirA", "dirA/f1", "dirA/f2", "fileB"])

    def test_relative_listing_is_mirrored_under_backup_root(self) -> None:
        previous = os.getcwd()
        session = Session(
            store=TreeStore(lister=_without_parent_links),
            viewport=Viewport(height=10),
            undo_manager=UndoManager(str(self.backup_root)),
        )
        try:
            os.chdir(self.root)
            session.populate()
            self.assertEqual(
                [entry.full_path for entry in session.store], ["./dirA", "./fileB"]
            )
            session.viewport.select(0, len(session.store))
            session.activate_selected()
            session.viewport.select(1, len(session.store))

            self.assertTrue(session.delete_selected())
        finally:
            os.chdir(previous)

        self.assertEqual((self.backup_root / "dirA" / "f1").read_bytes(), b"first file")
        self.assertFalse((self.root / "dirA" / "f1").exists())

        self.assertTrue(session.undo())
        self.assertEqual((self.root / "dirA" / "f1").read_bytes(), b"first file")

    def test_deleting_last_row_moves_selection_up(self) -> None:
        self.session.viewport.select(1, len(self.session.store))
        self.assertEqual(self.session.selected_entry().name, "fileB")

        self.session.delete_selected()

        self.assertEqual(self.session.viewport.selected_index, 0)

    def test_undo_order_is_lifo(self) -> None:
        self.open_dir_a()
        self.session.viewport.select(1, len(self.session.store))
        self.session.delete_selected()
        self.session.delete_selected()
        self.assertEqual(self.paths(), ["dirA", "fileB"])

        self.session.undo()
        self.assertEqual(self.paths(), ["dirA", "dirA/f2", "fileB"])
        self.session.undo()
        self.assertEqual(self.paths(), ["dirA", "dirA/f1", "dirA/f2", "fileB"])
        self.assertFalse(self.session.undo())

    def test_undo_reinserts_even_when_directory_is_collapsed(self) -> None:
        self.open_dir_a()
        self.session.viewport.select(1, len(self.session.store))
        self.session.delete_selected()
        self.open_dir_a()
        self.assertEqual(self.paths(), ["dirA", "fileB"])

        self.session.undo()

        self.assertEqual(self.paths(), ["dirA", "dirA/f1", "fileB"])

    def test_delete_failure_reports_and_keeps_state(self) -> None:
        self.session.viewport.select(0, len(self.session.store))
        before = self.session.store.entries

        with self.assertLogs("flatlist", level="ERROR"):
            self.assertFalse(self.session.delete_selected())

        self.assertEqual(self.session.store.entries, before)
        self.assertEqual(len(self.session.undo_manager), 0)
        self.assertIn("Delete failed", self.session.status_message)

    def test_delete_disabled(self) -> None:
        self.session.allow_delete = False
        self.session.viewport.select(1, len(self.session.store))

        self.assertFalse(self.session.delete_selected())
        self.assertTrue((self.root / "fileB").exists())


class NavigationTests(SessionTestCase):
    def test_activate_toggles_directory(self) -> None:
        self.open_dir_a()
        self.assertEqual(len(self.session.store), 4)
        self.open_dir_a()
        self.assertEqual(self.paths(), ["dirA", "fileB"])

    def test_activate_file_uses_opener(self) -> None:
        opener = mock.Mock()
        self.session.opener = opener
        self.session.viewport.select(1, len(self.session.store))

        self.session.activate_selected()

        opener.open.assert_called_once_with(f"{self.root}/fileB")

    def test_spawn_error_is_reported(self) -> None:
        opener = mock.Mock()
        opener.open.side_effect = SpawnError("Failed to launch vim: boom")
        self.session.opener = opener
        self.session.viewport.select(1, len(self.session.store))

        with self.assertLogs("flatlist", level="ERROR"):
            self.session.activate_selected()

        self.assertIn("Failed to launch", self.session.status_message)

    def test_move_entry_and_sort(self) -> None:
        self.session.viewport.select(0, len(self.session.store))
        self.session.move_entry(1)
        self.assertEqual(self.paths(), ["fileB", "dirA"])
        self.assertEqual(self.session.viewport.selected_index, 1)
        self.assertTrue(self.session.ordering_dirty)

        self.session.sort()

        self.assertEqual(self.paths(), ["dirA", "fileB"])
        self.assertFalse(self.session.ordering_dirty)

    def test_manual_order_is_flagged_in_status_row(self) -> None:
        surface = mock.Mock()
        self.session.viewport.select(0, len(self.session.store))
        self.session.move_entry(1)

        self.session.render(surface)
        status = surface.write_screen.call_args.args[0][-1]
        self.assertIn(MANUAL_ORDER_NOTICE, status)

        self.session.sort()
        self.session.render(surface)
        self.assertNotIn(MANUAL_ORDER_NOTICE, "".join(surface.write_screen.call_args.args[0]))

    def test_expand_failure_is_reported(self) -> None:
        shutil.rmtree(self.root / "dirA")
        before = self.session.store.entries

        with self.assertLogs("flatlist", level="ERROR"):
            self.open_dir_a()

        self.assertEqual(self.session.store.entries, before)
        self.assertEqual(self.session.status_message, f"Can not open dir {self.root}/dirA")

    def test_search_selects_match_and_reports_bad_pattern(self) -> None:
        self.open_dir_a()
        self.session.viewport.select(2, len(self.session.store))

        self.assertEqual(self.session.search("F1$"), 1)
        self.assertEqual(self.session.viewport.selected_index, 1)
        self.assertIsNone(self.session.search("nothing-here"))
        self.assertEqual(self.session.viewport.selected_index, 1)

        with self.assertLogs("flatlist", level="ERROR"):
            self.assertIsNone(self.session.search("("))
        self.assertEqual(self.session.viewport.selected_index, 1)

    def test_change_directory_relists_working_directory(self) -> None:
        previous = os.getcwd()
        try:
            self.session.viewport.select(0, len(self.session.store))
            self.assertTrue(self.session.change_directory())
            self.assertEqual(os.path.realpath(os.getcwd()), os.path.realpath(self.root / "dirA"))
        finally:
            os.chdir(previous)

        self.assertEqual([entry.full_path for entry in self.session.store], ["./f1", "./f2"])
        self.assertEqual(self.session.viewport.selected_index, 1)

    def test_change_directory_into_file_is_refused(self) -> None:
        self.session.viewport.select(1, len(self.session.store))
        with self.assertLogs("flatlist", level="WARNING"):
            self.assertFalse(self.session.change_directory())

    def test_operations_on_empty_store_do_not_fail(self) -> None:
        session = Session(
            store=TreeStore(lister=lambda path: []),
            viewport=Viewport(height=5),
            undo_manager=UndoManager(str(self.backup_root)),
        )
        session.move_selection(1)
        session.move_selection(-3)
        session.move_entry(1)
        session.select_last()
        session.activate_selected()

        self.assertFalse(session.delete_selected())
        self.assertFalse(session.undo())
        self.assertIsNone(session.search("x"))
        self.assertFalse(session.change_directory())
        self.assertIsNone(session.viewport.selected_index)


class PopulateTests(unittest.TestCase):
    def test_populate_lists_paths_then_working_directory(self) -> None:
        listed: list[str] = []

        def lister(path: str) -> list[Entry]:
            listed.append(path)
            return [Entry(f"{len(listed)}", EntryKind.FILE, path)]

        session = Session(store=TreeStore(lister=lister), viewport=Viewport(height=5), undo_manager=UndoManager("/nonexistent"))
        session.populate(["extra"])

        self.assertEqual(listed, ["extra", "."])
        self.assertEqual([entry.full_path for entry in session.store], ["./2", "extra/1"])
        self.assertEqual(session.viewport.selected_index, 1)


if __name__ == "__main__":
    unittest.main()
