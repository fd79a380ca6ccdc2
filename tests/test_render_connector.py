import os
import pathlib
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(__file__))

from fakes import FakeConnection, FakeStore, ref  # noqa: E402
from filelink.core.errors import ConfigError  # noqa: E402


class TestResolve(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = pathlib.Path(self.tmpdir.name)
        (self.root / "sub").mkdir()
        (self.root / "a.txt").write_bytes(b"hello")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_no_store_infers_directory_from_trailing_slash(self):
        from filelink.render.connector import resolve

        with resolve(None, ref("/other/dir/")) as resolved:
            self.assertIsNone(resolved.connection)
            self.assertIsNone(resolved.local_file)
            self.assertTrue(resolved.is_directory)
        with resolve(None, ref("/other/file.txt")) as resolved:
            self.assertFalse(resolved.is_directory)

    def test_missing_resource_has_no_connection(self):
        from filelink.render.connector import resolve

        store = FakeStore(missing=True)
        with resolve(store, ref("/x/")) as resolved:
            self.assertIsNone(resolved.connection)
            self.assertTrue(resolved.is_directory)
        self.assertEqual(store.lookups, ["/x/"])

    def test_not_existing_connection_uses_suffix(self):
        from filelink.render.connector import resolve

        conn = FakeConnection(exists=False, local_file=self.root / "a.txt")
        with resolve(FakeStore(conn), ref("/gone/")) as resolved:
            self.assertIs(resolved.connection, conn)
            self.assertIsNone(resolved.local_file)
            self.assertTrue(resolved.is_directory)
        self.assertEqual(conn.close_calls, 1)

    def test_vanished_file_degrades_to_no_local_file(self):
        from filelink.render.connector import resolve

        conn = FakeConnection(vanish=True)
        with resolve(FakeStore(conn), ref("/a.txt")) as resolved:
            self.assertIsNone(resolved.local_file)
            self.assertFalse(resolved.is_directory)
        self.assertEqual(conn.close_calls, 1)

    def test_local_file_attributes_decide_directory(self):
        from filelink.render.connector import resolve

        conn = FakeConnection(local_file=self.root / "sub")
        with resolve(FakeStore(conn), ref("/sub/")) as resolved:
            self.assertEqual(resolved.local_file, self.root / "sub")
            self.assertTrue(resolved.is_directory)
        self.assertEqual(conn.close_calls, 1)

    def test_directory_without_slash_fails_and_closes(self):
        from filelink.render.connector import resolve

        conn = FakeConnection(local_file=self.root / "sub")
        with self.assertRaises(ConfigError) as ctx:
            with resolve(FakeStore(conn), ref("/sub")):
                self.fail("body must not run")
        self.assertIn("must end in slash", str(ctx.exception))
        self.assertEqual(conn.close_calls, 1)

    def test_file_with_slash_fails(self):
        from filelink.render.connector import resolve

        conn = FakeConnection(local_file=self.root / "a.txt")
        with self.assertRaises(ConfigError):
            with resolve(FakeStore(conn), ref("/a.txt/")):
                pass
        self.assertEqual(conn.close_calls, 1)

    def test_error_in_body_still_closes_once(self):
        from filelink.render.connector import resolve

        conn = FakeConnection(local_file=self.root / "a.txt")
        with self.assertRaises(RuntimeError):
            with resolve(FakeStore(conn), ref("/a.txt")):
                raise RuntimeError("boom")
        self.assertEqual(conn.close_calls, 1)

    def test_open_error_propagates(self):
        from filelink.render.connector import resolve

        with self.assertRaises(PermissionError):
            with resolve(FakeStore(error=PermissionError("denied")), ref("/a.txt")):
                pass


if __name__ == "__main__":
    unittest.main()
