"""
Tests for the schedule printing script.
"""

import importlib.util
import os

import pytest

SCRIPT = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "scripts",
    "print_schedule.py",
)


@pytest.fixture
def print_schedule():
    spec = importlib.util.spec_from_file_location("print_schedule", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_prints_french_table(print_schedule, capsys):
    assert print_schedule.main(["50000", "12", "2", "12"]) == 0
    out = capsys.readouterr().out
    assert "Installments:   24" in out
    assert "2,353.67" in out


def test_prints_german_table(print_schedule, capsys):
    assert print_schedule.main(["12000", "10", "1", "4", "german"]) == 0
    out = capsys.readouterr().out
    assert "Total interest: 750.00" in out


def test_reports_invalid_input(print_schedule, capsys):
    assert print_schedule.main(["0", "12", "2", "12"]) == 1
    assert "principal must be greater than 0" in capsys.readouterr().out


def test_usage(print_schedule, capsys):
    assert print_schedule.main([]) == 2
    assert "Usage" in capsys.readouterr().out
