import os
import pathlib
import sys
import tempfile
import unittest


class TestLocalResourceStore(unittest.TestCase):
    def setUp(self):
        repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        src_path = os.path.join(repo_root, "src")
        if src_path not in sys.path:
            sys.path.insert(0, src_path)
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = pathlib.Path(self.tmpdir.name)
        (self.root / "docs").mkdir()
        self.file = self.root / "docs" / "a.txt"
        self.file.write_bytes(b"hello")
        os.utime(self.file, (1_600_000_000, 1_600_000_000))

    def tearDown(self):
        self.tmpdir.cleanup()

    def store(self):
        from filelink.resources.local import LocalResourceStore

        return LocalResourceStore(name="manual", root=self.tmpdir.name)

    def test_file_metadata(self):
        with self.store().get_resource("/docs/a.txt").open() as conn:
            self.assertTrue(conn.exists())
            self.assertEqual(conn.last_modified(), 1_600_000_000_000)
            self.assertEqual(conn.length(), 5)
            self.assertEqual(conn.local_file(), self.file)

    def test_directory_metadata(self):
        with self.store().get_resource("/docs/").open() as conn:
            self.assertTrue(conn.exists())
            self.assertEqual(conn.length(), -1)
            self.assertTrue(conn.local_file().is_dir())

    def test_missing_file(self):
        with self.store().get_resource("/docs/missing.txt").open() as conn:
            self.assertFalse(conn.exists())
            self.assertEqual(conn.last_modified(), 0)
            self.assertEqual(conn.length(), -1)
            with self.assertRaises(FileNotFoundError):
                conn.local_file()

    def test_closed_connection_reports_not_existing(self):
        conn = self.store().get_resource("/docs/a.txt").open()
        self.assertTrue(conn.exists())
        conn.close()
        self.assertFalse(conn.exists())
        self.assertEqual(conn.last_modified(), 0)
        self.assertEqual(conn.length(), -1)
        with self.assertRaises(FileNotFoundError):
            conn.local_file()

    def test_vanished_after_exists(self):
        conn = self.store().get_resource("/docs/a.txt").open()
        self.assertTrue(conn.exists())
        self.file.unlink()
        with self.assertRaises(FileNotFoundError):
            conn.local_file()
        conn.close()

    def test_path_escape_is_rejected(self):
        from filelink.core.errors import ConfigError

        with self.assertRaises(ConfigError):
            self.store().get_resource("/../outside.txt").open()

    def test_build_store_from_config(self):
        from filelink.config.models import LocalStore
        from filelink.resources import build_store
        from filelink.resources.local import LocalResourceStore

        store = build_store(LocalStore(type="local", root=self.tmpdir.name), name="book")
        self.assertIsInstance(store, LocalResourceStore)
        self.assertEqual(store.name, "book")
        store = build_store({"type": "local", "root": self.tmpdir.name})
        self.assertEqual(store.name, "local")
        with self.assertRaises(ValueError):
            build_store({"type": "ftp"})


if __name__ == "__main__":
    unittest.main()
