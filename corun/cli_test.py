from threading import Thread
from time import sleep

import pytest
from typer.testing import CliRunner

from .__main__ import app
from .callback import run_callback_style
from .futurize import resolved

runner = CliRunner()
greeted = []
finished = []


def greeting(name="World"):
    return f"Hello, {(yield resolved(name))}!"


def remember(name):
    greeted.append((yield lambda continuation: continuation(None, name)))


def later(value, continuation):
    def fire():
        sleep(0.2)
        continuation(None, value)

    Thread(target=fire).start()


def inner():
    return "inner"
    yield


def outer():
    run_callback_style(inner)
    finished.append((yield lambda continuation: later("outer", continuation)))


@pytest.fixture(autouse=True)
def stub_journal(monkeypatch):
    monkeypatch.setenv("CORUN_JOURNAL", "stub:")


@pytest.mark.timeout(5)
def test_run_prints_future_style_result():
    result = runner.invoke(app, ["run", "corun.cli_test:greeting", "corun"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Hello, corun!"


@pytest.mark.timeout(5)
def test_run_callback_style():
    result = runner.invoke(
        app, ["run", "corun.cli_test:remember", "callback", "--style", "callback"]
    )
    assert result.exit_code == 0, result.output
    assert result.output == ""
    assert greeted == ["callback"]


def test_run_rejects_malformed_target():
    result = runner.invoke(app, ["run", "corun.cli_test"])
    assert result.exit_code != 0


@pytest.mark.timeout(5)
def test_run_callback_style_waits_for_its_own_computation():
    finished.clear()
    result = runner.invoke(app, ["run", "corun.cli_test:outer", "--style", "callback"])
    assert result.exit_code == 0, result.output
    assert finished == ["outer"]
