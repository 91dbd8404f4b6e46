"""Shared fixtures for the DataGear test suite."""

from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import Column, Float, Integer, LargeBinary, MetaData, String, Table, Text, insert

from datagear.analysis.html.plugin import HtmlChartPlugin, JsChartRenderer
from datagear.analysis.label import Label
from datagear.analysis.render_context import HtmlRenderContext
from datagear.dataexchange.connection import ConnectionFactory

RENDERER_CODE = "{ render: function(chart){} }"


@pytest.fixture
def html_plugin() -> HtmlChartPlugin:
    """A bar chart plugin with a trivial renderer."""

    return HtmlChartPlugin(
        "bar",
        name_label=Label(value="Bar"),
        chart_renderer=JsChartRenderer(RENDERER_CODE),
    )


@pytest.fixture
def html_context() -> HtmlRenderContext:
    """A render context writing into a string buffer."""

    return HtmlRenderContext(io.StringIO())


def create_tables(metadata: MetaData) -> tuple[Table, Table]:
    products = Table(
        "products",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String(50)),
        Column("price", Float),
        Column("photo", LargeBinary),
        Column("note", Text),
    )
    orders = Table(
        "orders",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("product_id", Integer),
        Column("quantity", Integer),
    )
    return products, orders


@pytest.fixture
def empty_db(tmp_path: Path) -> Iterator[ConnectionFactory]:
    """A SQLite database with empty products and orders tables."""

    factory = ConnectionFactory.for_sqlite(str(tmp_path / "empty.db"))
    metadata = MetaData()
    create_tables(metadata)
    metadata.create_all(factory.engine)
    yield factory
    factory.close()


@pytest.fixture
def sample_db(tmp_path: Path) -> Iterator[ConnectionFactory]:
    """A SQLite database with a few products and orders."""

    factory = ConnectionFactory.for_sqlite(str(tmp_path / "sample.db"))
    metadata = MetaData()
    products, orders = create_tables(metadata)
    metadata.create_all(factory.engine)

    with factory.engine.begin() as conn:
        conn.execute(insert(products), [
            {"id": 1, "name": "Apple", "price": 1.5, "photo": b"\x01\x02", "note": "fresh"},
            {"id": 2, "name": "Pear", "price": 2.0, "photo": None, "note": None},
        ])
        conn.execute(insert(orders), [
            {"id": 1, "product_id": 1, "quantity": 3},
            {"id": 2, "product_id": 2, "quantity": 5},
            {"id": 3, "product_id": 1, "quantity": 1},
        ])

    yield factory
    factory.close()
