"""Tests for console interception and dispatch."""
import io
import logging
import os

import pytest
from loguru import logger

from consolelog import dbug
from consolelog.config import config
from consolelog.console import METHOD_NAMES, Console, console
from consolelog.interceptor import ConsoleInterceptor, intercepted
from consolelog.log import TRACE

HERE = os.path.dirname(os.path.abspath(__file__))
NAME = "tests.test_interceptor"


@pytest.fixture
def con():
    return Console(stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def interceptor(con, registry):
    icp = ConsoleInterceptor(target=con, get_logger=registry)
    yield icp
    icp.restore()


class TestDispatch:
    def test_log_routes_to_caller_logger(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=False)
        con.log("hello %s", "world")
        assert registry.loggers[NAME].records == [(logging.DEBUG, "hello world")]
        assert con.stdout.getvalue() == ""

    def test_severity_methods(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=False)
        con.trace("t")
        con.debug("d")
        con.info("i")
        con.warn("w")
        con.error("e")
        assert registry.loggers[NAME].records == [
            (TRACE, "t"),
            (logging.DEBUG, "d"),
            (logging.INFO, "i"),
            (logging.WARNING, "w"),
            (logging.ERROR, "e"),
        ]

    def test_dir_is_formatted(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=False)
        con.dir({"a": [1, 2]})
        assert registry.loggers[NAME].records == [(logging.DEBUG, "{'a': [1, 2]}")]


class TestIgnore:
    def test_ignored_prefix_uses_original(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=["tests.test_int"], debug=False)
        con.log("plain", 1)
        con.warn("warned")
        assert con.stdout.getvalue() == "plain 1\n"
        assert con.stderr.getvalue() == "warned\n"
        assert registry.calls == []

    def test_prefix_is_not_segment_aware(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=["tes"], debug=False)
        con.log("x")
        assert registry.calls == []

    def test_ignored_dir_prints_formatted(self, con, interceptor):
        interceptor.install(root=HERE, ignore=["tests"], debug=False)
        con.dir({"a": 1})
        assert con.stdout.getvalue() == "{'a': 1}\n"

    def test_ignored_dir_uses_original_dir(self, con, registry):
        seen = []
        con.set_method("dir", seen.append)
        icp = ConsoleInterceptor(target=con, get_logger=registry)
        icp.install(root=HERE, ignore=["tests"], debug=False)
        con.dir({"a": 1})
        icp.restore()
        assert seen == [{"a": 1}]
        assert con.stdout.getvalue() == ""
        assert registry.calls == []

    def test_ignored_gets_unparsed_arguments(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=["tests"], debug=True)
        line = "  \x1b[94mapp:server\x1b[90m listening"
        con.log(line)
        assert con.stdout.getvalue() == line + "\n"

    def test_registry_normalized_name(self, con, registry_factory):
        upper = registry_factory(normalize=str.upper)
        icp = ConsoleInterceptor(target=con, get_logger=upper)
        icp.install(root=HERE, ignore=["TESTS."], debug=False)
        con.log("x")
        icp.restore()
        assert con.stdout.getvalue() == "x\n"
        assert upper.loggers["TESTS.TEST_INTERCEPTOR"].records == []

    def test_trace_reenters_through_error(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=["tests"], debug=False)
        con.trace("boom")
        assert con.stderr.getvalue().startswith("Trace: boom\n")
        assert registry.calls == []


class TestDebugParsing:
    def test_colored_line(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=True)
        con.log("  \u001b[94mapp:server\u001b[90m listening on port 3000")
        assert registry.loggers[f"{NAME}.app.server"].records == [
            (logging.DEBUG, "listening on port 3000")
        ]

    def test_level_from_namespace(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=True)
        con.error("Sat, 17 Oct 2026 12:00:00 GMT app:server:warn slow request")
        assert registry.loggers[f"{NAME}.app.server"].records == [
            (logging.WARNING, "slow request")
        ]

    def test_disabled_leaves_text_alone(self, con, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=False)
        line = "  \x1b[94mapp:server\x1b[90m listening"
        con.log(line)
        assert registry.loggers[NAME].records == [(logging.DEBUG, line)]

    def test_debug_true_sets_env(self, interceptor):
        interceptor.install(root=HERE, ignore=[], debug=True)
        assert os.environ["DEBUG"] == "*"

    def test_debug_pattern_appends(self, monkeypatch, interceptor):
        monkeypatch.setenv("DEBUG", "db:*")
        interceptor.install(root=HERE, ignore=[], debug="app:*")
        assert os.environ["DEBUG"] == "db:*,app:*"

    def test_debug_false_leaves_env(self, interceptor):
        interceptor.install(root=HERE, ignore=[], debug=False)
        assert "DEBUG" not in os.environ


class TestDebugHook:
    def test_hook_routes_debugger_calls(self, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=True)
        dbug.dbug("app:db").info("connected to %s", "db1")
        assert registry.loggers[f"{NAME}.app.db"].records == [
            (logging.INFO, "connected to db1")
        ]

    def test_hook_caches_logger(self, interceptor, registry):
        interceptor.install(root=HERE, ignore=[], debug=True)
        log = dbug.dbug("app:db")
        log("one")
        log("two")
        assert registry.calls == [f"{NAME}.app.db"]
        assert len(registry.loggers[f"{NAME}.app.db"].records) == 2

    def test_restore_puts_hook_back(self, interceptor):
        before = dbug.get_hook()
        interceptor.install(root=HERE, ignore=[], debug=True)
        assert dbug.get_hook() == interceptor.debug_hook
        interceptor.restore()
        assert dbug.get_hook() is before


class TestLifecycle:
    def test_round_trip_identity(self, con, interceptor):
        before = {name: con.get_method(name) for name in METHOD_NAMES}
        interceptor.install(root=HERE, ignore=[], debug=False)
        assert all(con.get_method(n) is not before[n] for n in METHOD_NAMES)
        interceptor.restore()
        assert all(con.get_method(n) is before[n] for n in METHOD_NAMES)

    def test_double_install_keeps_originals(self, con, interceptor):
        before = {name: con.get_method(name) for name in METHOD_NAMES}
        interceptor.install(root=HERE, ignore=[], debug=False)
        interceptor.install(root=HERE, ignore=["x"], debug=False)
        assert interceptor.session.ignore == ("x",)
        interceptor.restore()
        assert all(con.get_method(n) is before[n] for n in METHOD_NAMES)
        con.log("back")
        assert con.stdout.getvalue() == "back\n"

    def test_restore_when_not_installed(self, interceptor):
        interceptor.restore()
        interceptor.restore()
        assert not interceptor.installed

    def test_root_defaults_to_caller_dir(self, monkeypatch, interceptor):
        monkeypatch.setattr(config, "root", None)
        session = interceptor.install(ignore=[], debug=False)
        assert session.root == HERE

    def test_config_defaults(self, monkeypatch, con, interceptor, registry):
        monkeypatch.setattr(config, "root", HERE)
        monkeypatch.setattr(config, "ignore", ["tests"])
        monkeypatch.setattr(config, "debug", False)
        session = interceptor.install()
        assert session.root == HERE
        assert session.ignore == ("tests",)
        assert not session.debugging


class TestDefaultConsole:
    def test_intercepted_block(self, monkeypatch, caplog):
        monkeypatch.setattr(config, "root", None)
        caplog.set_level(logging.DEBUG)
        original = console.get_method("log")
        with intercepted(ignore=[], debug=False) as session:
            assert session.root == HERE
            console.info("via default console")
        assert console.get_method("log") is original
        record = [r for r in caplog.records if r.name == NAME][0]
        assert record.getMessage() == "via default console"
        assert record.levelno == logging.INFO


class TestHostLogging:
    def test_routing_keeps_host_sinks(self):
        seen = []
        sink = logger.add(seen.append, format="{message}")
        try:
            with intercepted(root=HERE, ignore=[], debug=False):
                console.log("routed")
            logger.info("app message after console.log")
        finally:
            logger.remove(sink)
        assert any("app message after" in m for m in seen)

    def test_install_and_restore_are_quiet(self, interceptor):
        seen = []
        sink = logger.add(seen.append, level="TRACE", format="{name}|{message}")
        try:
            interceptor.install(root=HERE, ignore=[], debug=False)
            interceptor.restore()
        finally:
            logger.remove(sink)
        assert not any(m.startswith("consolelog") for m in seen)
