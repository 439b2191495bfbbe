"""Tests for the test logging helpers."""

import logging

import pytest

import citf.log as testlog
from citf.exceptions import CitfError


class RecordingReporter:
    def __init__(self):
        self.messages = []
        self.errors = []

    def log(self, *args):
        self.messages.append(" ".join(str(a) for a in args))

    def logf(self, fmt, *args):
        self.messages.append(fmt % args)

    def error(self, *args):
        self.errors.append(" ".join(str(a) for a in args))

    def errorf(self, fmt, *args):
        self.errors.append(fmt % args)


def test_messages_go_to_reporter():
    """Test that log and logf are routed to the reporter."""
    reporter = RecordingReporter()
    log = testlog.TestLogger(reporter)

    log.log("pods", 3)
    log.logf("node %s is %s", "minikube", "Ready")

    assert reporter.messages == ["pods 3", "node minikube is Ready"]


def test_debug_only_when_verbose():
    """Test that debug messages need verbose mode."""
    reporter = RecordingReporter()

    testlog.TestLogger(reporter).debug("hidden %d", 1)
    testlog.TestLogger(reporter, verbose=True).debug("shown %d", 2)

    assert reporter.messages == ["shown 2"]


def test_log_error_and_non_error(caplog):
    """Test that error helpers only log for the matching outcome."""
    log = testlog.TestLogger()

    with caplog.at_level(logging.INFO, logger="citf"):
        log.log_error(None, "should not appear")
        log.log_error(RuntimeError("boom"), "deleting pod ")
        log.log_non_error(RuntimeError("boom"), "should not appear either")
        log.log_non_error(None, "pod deleted")

    assert "deleting pod: boom" in caplog.text
    assert "pod deleted" in caplog.text
    assert "should not appear" not in caplog.text


def test_log_fatal_raises():
    """Test that a fatal error is raised with the uniform message."""
    with pytest.raises(CitfError, match="starting minikube: boom"):
        testlog.TestLogger().log_fatal(RuntimeError("boom"), "starting minikube")

    testlog.TestLogger().log_fatal(None, "nothing happens")


def test_test_error_reports_or_raises():
    """Test that test errors fail the test through the reporter, or raise without one."""
    reporter = RecordingReporter()
    testlog.TestLogger(reporter).log_test_error(RuntimeError("timeout"), "waiting for pod")

    assert reporter.errors == ["waiting for pod: timeout"]
    with pytest.raises(CitfError):
        testlog.TestLogger().log_test_error(RuntimeError("timeout"), "waiting for pod")


def test_logging_reporter(caplog):
    """Test the standard logging adapter."""
    reporter = testlog.LoggingReporter(logging.getLogger("citf.tests"))

    with caplog.at_level(logging.INFO, logger="citf.tests"):
        reporter.logf("%s ready", "node")
        reporter.error("pod", "failed")

    assert "node ready" in caplog.text
    assert "pod failed" in caplog.text


def test_console_reporter_does_not_fail():
    """Test the rich console adapter with markup-like text."""
    reporter = testlog.ConsoleReporter()

    reporter.log("plain", 1)
    reporter.logf("%s%%", 50)
    reporter.error("failed")
    reporter.errorf("pod %s failed", "web-1")


def test_test_non_error_logs_only_on_success():
    reporter = RecordingReporter()
    log = testlog.TestLogger(reporter)

    log.log_test_non_error(RuntimeError("boom"), "not logged")
    log.log_test_non_error(None, "pod", "ready")

    assert reporter.messages == ["pod ready"]
