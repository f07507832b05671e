"""Fixtures for unit tests."""

from collections.abc import Mapping
from typing import Any

import pytest

from sqlsnip.adapters import GenericAdapter
from sqlsnip.result import ResultSet


class RecordingStatement:
    """Prepared statement that records every execution."""

    def __init__(self, sql: str) -> None:
        self.sql = sql
        self.executions: list[dict[str, Any]] = []

    def execute(self, parameters: Mapping[str, Any]) -> ResultSet:
        self.executions.append(dict(parameters))
        return ResultSet(rows=[{"sql": self.sql}], column_names=["sql"], metadata={"parameters": dict(parameters)})


class RecordingAdapter(GenericAdapter):
    """Generic renderer that can prepare statements without a database."""

    def __init__(self) -> None:
        self.prepared: list[RecordingStatement] = []

    def get_statement(self, sql: str) -> RecordingStatement:
        statement = RecordingStatement(sql)
        self.prepared.append(statement)
        return statement


@pytest.fixture
def recording_adapter() -> RecordingAdapter:
    return RecordingAdapter()
