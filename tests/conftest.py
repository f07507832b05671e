from __future__ import annotations

import pytest

from sqlsnip import Statement


@pytest.fixture
def joined_select() -> Statement:
    """A SELECT over one base table and one join of every kind."""
    return (
        Statement()
        .select()
        .add_table("schema.tblA", "tblA")
        .join("schema.tblB", "b")
        .left_join("schema.tblC", "c", "tblA.index = c.index")
        .right_join("schema.tbld", "d", "tblA.index = d.index")
        .inner_join("schema.tblE", "e", "tblA.index = e.index")
        .outer_join("schema.tblF", "f", "tblA.index = f.index")
    )


@pytest.fixture
def three_columns() -> Statement:
    """A SELECT with two aliased columns and one unaliased column."""
    return (
        Statement()
        .select()
        .add_column("table.colA", "colA", "bob", "param")
        .add_column("table.colB", "colB", "steve")
        .add_column("table.colC", None, "dave")
    )
