import contextlib
import io
import json
import os
import shutil
import socket
import subprocess
import sys
import tempfile
import unittest
from unittest import mock

from talks import cli
from talks.errors import ListenError
from talks.router import Router
from talks.server import TalksHTTPServer, create_server, parse_listen

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class CliTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp(prefix="talks-cli-")
        self.html = os.path.join(self.tmp, "html")
        os.makedirs(self.html)

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _write_conf(self, content) -> str:
        path = os.path.join(self.tmp, "talks.conf")
        with open(path, "w", encoding="utf-8") as f:
            f.write(content if isinstance(content, str) else json.dumps(content))
        return path

    def _main(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(argv)
        return ctx.exception.code, out.getvalue(), err.getvalue()

    def test_version(self):
        for flag in ("-v", "-version", "--version"):
            code, out, err = self._main([flag])
            self.assertEqual(code, 0)
            self.assertEqual(err, "Version 0.0.1\n")
            self.assertEqual(out, "")

    def test_missing_conf_prints_usage(self):
        code, out, _ = self._main([])
        self.assertEqual(code, -1)
        self.assertIn("Talks of Talks/0.0.1 system", out)
        self.assertIn("-conf", out)

    def test_unknown_flag(self):
        code, _, err = self._main(["-bogus"])
        self.assertEqual(code, -1)
        self.assertIn("error", err)

    def test_help(self):
        code, out, _ = self._main(["-h"])
        self.assertEqual(code, 0)
        self.assertIn("usage:", out)
        self.assertIn("-conf", out)

    def test_interrupt_closes_listener(self):
        conf = self._write_conf({"listen": "127.0.0.1:0", "html": self.html})
        real_close = TalksHTTPServer.server_close
        with mock.patch.object(TalksHTTPServer, "serve_forever", side_effect=KeyboardInterrupt), \
                mock.patch.object(TalksHTTPServer, "server_close", autospec=True, side_effect=real_close) as close:
            with self.assertLogs("talks", level="INFO") as logs, contextlib.redirect_stdout(io.StringIO()):
                self.assertEqual(cli.main(["-conf", conf]), 0)
        close.assert_called_once()
        self.assertTrue(any("Shutting down..." in line for line in logs.output))

    @mock.patch("talks.cli.run_server")
    def test_deeply_nested_config(self, run_server):
        conf = self._write_conf("[" * 100000 + "]" * 100000)
        with self.assertLogs("talks", level="ERROR") as logs:
            code, _, _ = self._main(["-c", conf])
        self.assertEqual(code, -1)
        self.assertIn("run err parse", logs.output[0])
        run_server.assert_not_called()

    @mock.patch("talks.cli.run_server")
    def test_serves_with_resolved_root(self, run_server):
        conf = self._write_conf({"listen": "127.0.0.1:0", "html": self.html})
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertEqual(cli.main(["-conf", conf, "-product", "talks"]), 0)
        run_server.assert_called_once()
        listen, root, router = run_server.call_args[0]
        self.assertEqual(listen, "127.0.0.1:0")
        self.assertEqual(root, self.html)
        self.assertIsInstance(router, Router)

    @mock.patch("talks.cli.run_server")
    def test_malformed_config_never_listens(self, run_server):
        conf = self._write_conf('{"listen": ":8080", "html": ')
        with self.assertLogs("talks", level="ERROR") as logs:
            code, _, _ = self._main(["-c", conf])
        self.assertEqual(code, -1)
        self.assertIn("run err parse", logs.output[0])
        run_server.assert_not_called()

    @mock.patch("talks.cli.run_server")
    def test_missing_config_file(self, run_server):
        with self.assertLogs("talks", level="ERROR") as logs:
            code, _, _ = self._main(["-c", os.path.join(self.tmp, "nope.conf")])
        self.assertEqual(code, -1)
        self.assertIn("run err open", logs.output[0])
        run_server.assert_not_called()

    @mock.patch("talks.cli.run_server")
    def test_missing_root(self, run_server):
        conf = self._write_conf({"listen": ":8080", "html": os.path.join(self.tmp, "missing")})
        with self.assertLogs("talks", level="ERROR") as logs:
            code, _, _ = self._main(["-conf", conf])
        self.assertEqual(code, -1)
        self.assertIn("run err guess", logs.output[0])
        run_server.assert_not_called()

    def test_bad_listen_address(self):
        conf = self._write_conf({"listen": "localhost", "html": self.html})
        with self.assertLogs("talks", level="ERROR") as logs:
            code, _, _ = self._main(["-conf", conf])
        self.assertEqual(code, -1)
        self.assertIn("run err listen", logs.output[0])

    def test_launcher_prints_version(self):
        proc = subprocess.run(
            [sys.executable, os.path.join(REPO_ROOT, "main.py"), "-v"],
            cwd=REPO_ROOT,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        self.assertEqual(proc.returncode, 0)
        self.assertEqual(proc.stderr.strip(), "Version 0.0.1")


class ListenTest(unittest.TestCase):
    def test_parse_listen(self):
        self.assertEqual(parse_listen(":8080"), ("", 8080))
        self.assertEqual(parse_listen("127.0.0.1:1985"), ("127.0.0.1", 1985))
        self.assertEqual(parse_listen("[::1]:8080"), ("::1", 8080))
        for bad in ("8080", "host:port", "127.0.0.1:70000", ""):
            with self.assertRaises(ListenError, msg=bad):
                parse_listen(bad)

    def test_port_in_use(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]
            with self.assertRaises(ListenError):
                create_server(f"127.0.0.1:{port}", ".", Router())


if __name__ == "__main__":
    unittest.main()
