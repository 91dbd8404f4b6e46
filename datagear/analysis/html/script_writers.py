"""
Script Object Writers

Write the plugin, render context and chart of an HTML chart as JavaScript
variable declarations. Plain values are JSON encoded; references to other
script variables and renderer code are written verbatim.
"""

from typing import Any, List, Tuple, TextIO
from datetime import date, datetime
from decimal import Decimal
import json

import numpy as np

from datagear.analysis.render_context import RenderContext, HtmlRenderAttributes


class ScriptJSONEncoder(json.JSONEncoder):
    """JSON encoder for values written into chart scripts."""

    def default(self, obj):
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return float(obj)
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        return super().default(obj)


def to_json(value: Any) -> str:
    """Encode a value as JSON that is safe inside a ``<script>`` element."""
    text = json.dumps(value, cls=ScriptJSONEncoder, ensure_ascii=False)
    return text.replace("</", "<\\/")


def js_object(fields: List[Tuple[str, str]]) -> str:
    """Build a JavaScript object literal from (key, raw script) pairs."""
    return "{ " + ", ".join(f"{key}: {value}" for key, value in fields) + " }"


def write_var(out: TextIO, var_name: str, value_script: str, new_line: str):
    out.write(f"var {var_name}={value_script};")
    out.write(new_line)


class HtmlChartPluginScriptObjectWriter:
    """Writes ``var <pluginVar>={ id, nameLabel, descLabel, order, chartRender };``."""

    def write(self, out: TextIO, plugin, var_name: str, new_line: str = "\n"):
        renderer = plugin.chart_renderer
        fields = [
            ("id", to_json(plugin.id)),
            ("nameLabel", to_json(plugin.name_label)),
            ("descLabel", to_json(plugin.desc_label)),
            ("order", to_json(plugin.order)),
            ("chartRender", renderer.code if renderer is not None else "null"),
        ]
        write_var(out, var_name, js_object(fields), new_line)


class HtmlRenderContextScriptObjectWriter:
    """Writes ``var <contextVar>={ attributes: {...} };`` with internal attributes left out."""

    def write(self, out: TextIO, render_context: RenderContext, var_name: str, new_line: str = "\n"):
        attributes = {
            name: value
            for name, value in render_context.attributes.items()
            if not HtmlRenderAttributes.is_internal(name)
        }
        write_var(out, var_name, js_object([("attributes", to_json(attributes))]), new_line)


class HtmlChartScriptObjectWriter:
    """Writes the chart variable, referencing the plugin and render context variables."""

    def write(
        self,
        out: TextIO,
        chart,
        render_context_var_name: str,
        plugin_var_name: str,
        new_line: str = "\n",
    ):
        fields = [
            ("id", to_json(chart.id)),
            ("elementId", to_json(chart.element_id)),
            ("varName", to_json(chart.var_name)),
            ("plugin", plugin_var_name),
            ("renderContext", render_context_var_name),
            ("propertyValues", to_json(chart.property_values)),
            ("chartDataSets", to_json(chart.chart_data_sets)),
        ]
        write_var(out, chart.var_name, js_object(fields), new_line)
