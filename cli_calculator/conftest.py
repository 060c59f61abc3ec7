import logging
import os

import pytest

CALC_ENV_VARS = ('CALC_LOG_LEVEL', 'CALC_LOG_FILE')


@pytest.fixture
def clean_env(monkeypatch):
    """Runs the test without calculator settings; also drops any that a .env file loaded."""
    for name in CALC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    for name in CALC_ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def restore_logging():
    """main() reconfigures the root logger with force=True; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
