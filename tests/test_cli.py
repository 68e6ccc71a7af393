"""Tests for the params2model CLI."""

import json
import logging

import pytest
import structlog
from click.testing import CliRunner

from params2model.cli import cli
from params2model.config import settings


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI configures logging globally; undo it after each test."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    log_level = settings.log_level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    settings.log_level = log_level
    structlog.reset_defaults()


@pytest.fixture
def runner():
    return CliRunner()


def test_parse_pairs(runner):
    result = runner.invoke(cli, ["parse", "sample_schemas:Person", "name=Ada", "age=36", "tags[]=a"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"name": "Ada", "age": 36, "address": None, "tags": ["a"]}


def test_parse_query_then_pairs(runner):
    result = runner.invoke(
        cli,
        ["parse", "sample_schemas:Person", "--query", "?name=Ada&tags[]=a", "tags[]=b"],
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout)["tags"] == ["a", "b"]


def test_parse_failure_prints_errors(runner):
    result = runner.invoke(cli, ["parse", "sample_schemas:Person", "age=old"])
    assert result.exit_code == 1
    assert set(json.loads(result.stdout)) == {"name", "age"}


def test_parse_schema_error(runner):
    result = runner.invoke(cli, ["parse", "sample_schemas:Color", "red=1"])
    assert result.exit_code == 2
    assert "Could not find shape" in result.output


def test_bad_pair(runner):
    result = runner.invoke(cli, ["parse", "sample_schemas:Person", "name"])
    assert result.exit_code == 2
    assert "expected key=value" in result.output


def test_bad_schema_path(runner):
    result = runner.invoke(cli, ["parse", "sample_schemas:Nope"])
    assert result.exit_code == 2
    assert "has no attribute" in result.output


def test_props(runner):
    result = runner.invoke(cli, ["props", "sample_schemas:Order", "quantity"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"name": "quantity", "type": "number", "required": True}


def test_props_unknown_field(runner):
    result = runner.invoke(cli, ["props", "sample_schemas:Order", "nope"])
    assert result.exit_code == 2
    assert "no such key" in result.output


def test_verbose_sets_debug(runner):
    result = runner.invoke(cli, ["-v", "props", "sample_schemas:Order", "gift"])
    assert result.exit_code == 0
    assert settings.log_level == "DEBUG"
