"""HTML/JavaScript chart rendering."""

from datagear.analysis.html.html_chart import HtmlChart
from datagear.analysis.html.render_option import HtmlChartPluginRenderOption
from datagear.analysis.html.plugin import HtmlChartPlugin, JsChartRenderer
from datagear.analysis.html.loader import HtmlChartPluginLoader, load_plugins
from datagear.analysis.html.page import render_widgets, render_page

__all__ = [
    "HtmlChart",
    "HtmlChartPluginRenderOption",
    "HtmlChartPlugin",
    "JsChartRenderer",
    "HtmlChartPluginLoader",
    "load_plugins",
    "render_widgets",
    "render_page",
]
