import os
import sys
import tempfile
import textwrap
import unittest


class TestConfigLoader(unittest.TestCase):
    def setUp(self):
        repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        src_path = os.path.join(repo_root, "src")
        if src_path not in sys.path:
            sys.path.insert(0, src_path)
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write_yaml(self, text):
        path = os.path.join(self.tmpdir.name, "filelink.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write(textwrap.dedent(text))
        return path

    def sample(self):
        return self.write_yaml(
            """
            project: docs-site
            books:
              - domain: localhost
                path: /manual
                store:
                  type: local
                  root: ./manual
              - path: /archive
                store:
                  type: s3
                  bucket: docs
                  prefix: archive
            render:
              context_path: /site
            profiles:
              export:
                render:
                  context_path: ""
            """
        )

    def test_load_yaml(self):
        from filelink.config.loader import load_config
        from filelink.config.models import LocalStore, S3Store

        cfg = load_config(self.sample(), env={})
        self.assertEqual(cfg.project, "docs-site")
        self.assertIsInstance(cfg.books[0].store, LocalStore)
        self.assertIsInstance(cfg.books[1].store, S3Store)
        self.assertEqual(cfg.books[1].domain, "localhost")
        self.assertEqual(cfg.render.context_path, "/site")
        self.assertEqual(cfg.render.last_modified_param, "lastModified")
        self.assertEqual(cfg.render.open_file_module, "filelink_openfile")

    def test_env_overrides_reach_list_items(self):
        from filelink.config.loader import load_config

        env = {
            "FILELINK_BOOKS__0__STORE__ROOT": "/srv/manual",
            "FILELINK_RENDER__CONTEXT_PATH": "/docs",
            "UNRELATED": "x",
        }
        cfg = load_config(self.sample(), env=env)
        self.assertEqual(cfg.books[0].store.root, "/srv/manual")
        self.assertEqual(cfg.render.context_path, "/docs")

    def test_set_overrides_win(self):
        from filelink.config.loader import load_config

        cfg = load_config(
            self.sample(),
            env={"FILELINK_RENDER__CONTEXT_PATH": "/docs"},
            set_overrides=["render.context_path=/cli", "render.link_css_class=file"],
        )
        self.assertEqual(cfg.render.context_path, "/cli")
        self.assertEqual(cfg.render.link_css_class, "file")

    def test_profile_overlay(self):
        from filelink.config.loader import load_config

        cfg = load_config(self.sample(), env={"FILELINK_PROFILE": "export"})
        self.assertEqual(cfg.render.context_path, "")

    def test_no_file(self):
        from filelink.config.loader import load_config

        cfg = load_config(None, env={}, overrides={"books": [{"path": "/"}]})
        self.assertEqual(cfg.books[0].path, "/")
        self.assertIsNone(cfg.books[0].store)

    def test_invalid_config_is_config_error(self):
        from filelink.config.loader import load_config
        from filelink.core.errors import ConfigError, get_exit_code

        bad_store = self.write_yaml(
            """
            books:
              - path: /manual
                store:
                  type: ftp
            """
        )
        with self.assertRaises(ConfigError) as ctx:
            load_config(bad_store, env={})
        self.assertEqual(get_exit_code(ctx.exception), 2)
        bad_path = self.write_yaml(
            """
            books:
              - path: manual
            """
        )
        with self.assertRaises(ConfigError):
            load_config(bad_path, env={})
        with self.assertRaises(ConfigError):
            load_config(None, env={}, set_overrides=["render.context_path"])

    def test_parse_set_overrides(self):
        from filelink.config.loader import parse_set_overrides

        result = parse_set_overrides(["render.link_css_class=file", "books.0.accessible=false"])
        self.assertEqual(result, {"render": {"link_css_class": "file"}, "books": [{"accessible": False}]})


if __name__ == "__main__":
    unittest.main()
