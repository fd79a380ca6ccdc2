import datetime as dt
import io
import os
import sys
import types
import unittest


class _ClientError(Exception):
    def __init__(self, code, status):
        super().__init__(code)
        self.response = {"Error": {"Code": code}, "ResponseMetadata": {"HTTPStatusCode": status}}


class TestS3ResourceStore(unittest.TestCase):
    def setUp(self):
        repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        src_path = os.path.join(repo_root, "src")
        if src_path not in sys.path:
            sys.path.insert(0, src_path)
        tests_path = os.path.dirname(__file__)
        if tests_path not in sys.path:
            sys.path.insert(0, tests_path)
        self._saved_boto3 = sys.modules.get("boto3")

        # Mock boto3 client
        boto3 = types.ModuleType("boto3")
        self.calls = []
        calls = self.calls

        class FakeS3:
            objects = {
                "docs-bucket": {
                    "manual/docs/report.pdf": (
                        4300,
                        dt.datetime(2023, 11, 14, 22, 13, 20, tzinfo=dt.timezone.utc),
                    ),
                }
            }

            def head_object(self, **kwargs):
                calls.append(("head_object", kwargs["Key"]))
                if kwargs["Key"] == "manual/denied.pdf":
                    raise _ClientError("AccessDenied", 403)
                try:
                    size, modified = self.objects[kwargs["Bucket"]][kwargs["Key"]]
                except KeyError:
                    raise _ClientError("404", 404)
                return {"ContentLength": size, "LastModified": modified}

            def list_objects_v2(self, **kwargs):
                calls.append(("list_objects_v2", kwargs["Prefix"]))
                keys = [k for k in self.objects[kwargs["Bucket"]] if k.startswith(kwargs["Prefix"])]
                keys = keys[: kwargs.get("MaxKeys", 1000)]
                return {"KeyCount": len(keys), "Contents": [{"Key": k} for k in keys]}

        def client(service, region_name=None):
            assert service == "s3"
            return FakeS3()

        boto3.client = client
        sys.modules["boto3"] = boto3

    def tearDown(self):
        if self._saved_boto3 is not None:
            sys.modules["boto3"] = self._saved_boto3
        else:
            sys.modules.pop("boto3", None)

    def store(self):
        from filelink.resources.s3 import S3ResourceStore

        return S3ResourceStore(name="manual", bucket="docs-bucket", prefix="manual")

    def test_object_metadata_fetched_once(self):
        with self.store().get_resource("/docs/report.pdf").open() as conn:
            self.assertTrue(conn.exists())
            self.assertEqual(conn.length(), 4300)
            self.assertEqual(conn.last_modified(), 1_700_000_000_000)
            self.assertIsNone(conn.local_file())
        self.assertEqual(self.calls, [("head_object", "manual/docs/report.pdf")])

    def test_missing_object(self):
        with self.store().get_resource("/docs/missing.pdf").open() as conn:
            self.assertFalse(conn.exists())
            self.assertEqual(conn.last_modified(), 0)
            self.assertEqual(conn.length(), -1)

    def test_other_errors_raise_store_error(self):
        from filelink.core.errors import StoreError

        conn = self.store().get_resource("/denied.pdf").open()
        with self.assertRaises(StoreError):
            conn.exists()
        conn.close()

    def test_directory_prefix_lookup(self):
        with self.store().get_resource("/docs/").open() as conn:
            self.assertTrue(conn.exists())
            self.assertEqual(conn.length(), -1)
        with self.store().get_resource("/empty/").open() as conn:
            self.assertFalse(conn.exists())
        self.assertEqual(
            self.calls,
            [("list_objects_v2", "manual/docs/"), ("list_objects_v2", "manual/empty/")],
        )

    def test_rendered_links_never_open_locally(self):
        from fakes import StaticProvider, ref
        from filelink.pages import FileElement
        from filelink.render import LinkMode, OpenFileGate, RenderEnv, render_file_link

        out = io.StringIO()
        env = RenderEnv(gate=OpenFileGate(lambda: StaticProvider(True)))
        element = FileElement(resource=(self.store(), ref("/docs/report.pdf")))
        link = render_file_link(element, env, out)
        self.assertIs(link.mode, LinkMode.LAST_MODIFIED)
        self.assertEqual(
            out.getvalue(),
            '<a href="/manual/docs/report.pdf?lastModified=1il7s80">report.pdf</a> (4.2 KiB)',
        )


if __name__ == "__main__":
    unittest.main()
