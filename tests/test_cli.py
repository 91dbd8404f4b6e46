"""The datagear command line."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from click.testing import CliRunner
from sqlalchemy import text

from datagear.main import cli

WIDGETS = """
widgets:
  - id: sales
    name: Sales
    plugin: bar
"""


def make_project(tmp_path: Path) -> tuple[Path, Path]:
    plugin_dir = tmp_path / "plugins" / "bar"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "plugin.json").write_text(json.dumps({"id": "bar"}), encoding="utf-8")
    (plugin_dir / "renderer.js").write_text("{ render: function(c){} }", encoding="utf-8")
    definition = tmp_path / "widgets.yml"
    definition.write_text(WIDGETS, encoding="utf-8")
    return tmp_path / "plugins", definition


def test_render_fragment_to_stdout(tmp_path: Path) -> None:
    plugins, definition = make_project(tmp_path)

    result = CliRunner().invoke(cli, ["render", str(definition), "-P", str(plugins), "--fragment"])

    assert result.exit_code == 0, result.output
    assert '<script type="text/javascript">' in result.output
    assert ".chartRender.render(" in result.output
    assert "<html>" not in result.output


def test_render_page_to_file(tmp_path: Path) -> None:
    """A full page is written to the output file."""

    plugins, definition = make_project(tmp_path)
    output = tmp_path / "dashboard.html"

    result = CliRunner().invoke(cli, [
        "render", str(definition), "-P", str(plugins), "-o", str(output), "-s", "lib/echarts.js",
    ])

    assert result.exit_code == 0, result.output
    html = output.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert 'src="lib/echarts.js"' in html
    assert '"name": "Sales"' in html


def test_render_unknown_plugin_fails(tmp_path: Path) -> None:
    _, definition = make_project(tmp_path)

    result = CliRunner().invoke(cli, ["render", str(definition), "-P", str(tmp_path / "nothing")])

    assert result.exit_code == 1


def test_export_then_import(sample_db, empty_db, tmp_path: Path) -> None:
    """Exported CSV files import into another database."""

    export_dir = tmp_path / "export"

    exported = CliRunner().invoke(cli, [
        "export", "-t", "sqlite", "-p", str(tmp_path / "sample.db"), "-o", str(export_dir), "-w", "2",
    ])
    assert exported.exit_code == 0, exported.output
    assert sorted(p.name for p in export_dir.iterdir()) == ["orders.csv", "products.csv"]

    imported = CliRunner().invoke(cli, [
        "import", "-t", "sqlite", "-p", str(tmp_path / "empty.db"), "-i", str(export_dir),
    ])
    assert imported.exit_code == 0, imported.output

    with empty_db.get_connection() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM products")).scalar() == 2
        assert conn.execute(text("SELECT SUM(quantity) FROM orders")).scalar() == 9


def test_import_failure_exits_with_error(empty_db, tmp_path: Path) -> None:
    """A bad row aborts the import with a non-zero exit code."""

    input_dir = tmp_path / "input"
    input_dir.mkdir()
    (input_dir / "orders.csv").write_text("id,product_id,quantity\n1,1,many\n", encoding="utf-8")

    result = CliRunner().invoke(cli, [
        "import", "-t", "sqlite", "-p", str(tmp_path / "empty.db"), "-i", str(input_dir),
    ])

    assert result.exit_code == 1


def test_export_requires_database() -> None:
    result = CliRunner().invoke(cli, ["export"])

    assert result.exit_code == 2


def test_version() -> None:
    assert CliRunner().invoke(cli, ["version"]).exit_code == 0
    assert "1.0.0" in CliRunner().invoke(cli, ["--version"]).output


def test_render_uses_configured_element_tag(tmp_path: Path) -> None:
    """render: element_tag_name in the config file sets the chart element tag."""

    plugins, definition = make_project(tmp_path)
    config = tmp_path / "datagear.yml"
    config.write_text("render:\n  element_tag_name: section\n", encoding="utf-8")

    result = CliRunner().invoke(cli, [
        "render", str(definition), "-P", str(plugins), "--fragment", "-c", str(config),
    ])

    assert result.exit_code == 0, result.output
    assert result.output.startswith('<section id="')
    assert "<div" not in result.output


def test_verbose_from_config_file(tmp_path: Path) -> None:
    """verbose: true in the config file switches logging to DEBUG."""

    plugins, definition = make_project(tmp_path)
    config = tmp_path / "datagear.yml"
    config.write_text("verbose: true\n", encoding="utf-8")
    root = logging.getLogger()
    level = root.level

    try:
        root.setLevel(logging.INFO)
        result = CliRunner().invoke(cli, [
            "render", str(definition), "-P", str(plugins), "--fragment", "-c", str(config),
        ])
        assert result.exit_code == 0, result.output
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(level)
