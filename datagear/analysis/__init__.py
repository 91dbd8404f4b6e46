"""Chart analysis: widgets, plugins and render contexts."""

from datagear.analysis.exceptions import RenderException, ChartPluginException
from datagear.analysis.label import Label
from datagear.analysis.data_set import DataSet, DataSetProperty, ChartDataSet
from datagear.analysis.render_context import RenderContext, HtmlRenderContext, HtmlRenderAttributes
from datagear.analysis.chart import Chart, ChartPlugin, AbstractChartPlugin, ChartPluginManager
from datagear.analysis.widget import ChartWidget

__all__ = [
    "RenderException",
    "ChartPluginException",
    "Label",
    "DataSet",
    "DataSetProperty",
    "ChartDataSet",
    "RenderContext",
    "HtmlRenderContext",
    "HtmlRenderAttributes",
    "Chart",
    "ChartPlugin",
    "AbstractChartPlugin",
    "ChartPluginManager",
    "ChartWidget",
]
