"""
Pytest configuration for treelox tests.
"""
import io
import sys
import os

import pytest

# Ensure `import treelox...` works from a plain checkout (src/ on sys.path)
_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
_SRC_DIR = os.path.join(_ROOT, 'src')

for _p in (_ROOT, _SRC_DIR):
	if _p not in sys.path:
		sys.path.insert(0, _p)

from treelox.config import Config
from treelox.error_reporter import reset_error_reporter
from treelox.session import run_source


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
	"""Keep every test away from the real ~/.treelox/config.json."""
	monkeypatch.setenv("TREELOX_CONFIG", str(tmp_path / "config.json"))
	monkeypatch.delenv("TREELOX_DEBUG", raising=False)
	monkeypatch.delenv("TREELOX_GC_STRESS", raising=False)
	reset_error_reporter()
	yield


def _make_config(**overrides):
	settings = Config(load=False)
	for key, value in overrides.items():
		settings.set(key, value, persist=False)
	return settings


@pytest.fixture
def run_lox():
	"""Run a program; returns (printed output, RunResult)."""
	def _run(source, **overrides):
		out = io.StringIO()
		result = run_source(source, output=out, config=_make_config(**overrides))
		return out.getvalue(), result
	return _run


@pytest.fixture
def make_config():
	"""Factory for throwaway Config objects that never touch disk."""
	return _make_config
