"""HTML chart value object."""

from typing import Dict, List, Any

from datagear.analysis.chart import Chart, ChartPlugin
from datagear.analysis.data_set import ChartDataSet
from datagear.analysis.render_context import RenderContext


class HtmlChart(Chart):
    """A chart rendered as an HTML element bound to a script variable."""

    def __init__(
        self,
        id: str,
        render_context: RenderContext,
        plugin: ChartPlugin,
        property_values: Dict[str, Any],
        chart_data_sets: List[ChartDataSet],
        element_id: str,
        var_name: str,
    ):
        super().__init__(
            id=id,
            render_context=render_context,
            plugin=plugin,
            property_values=property_values,
            chart_data_sets=chart_data_sets,
        )
        self.element_id = element_id
        self.var_name = var_name
