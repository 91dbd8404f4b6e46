"""
Chart Widget

A chart widget is a configured chart: a plugin, the data sets it draws
and the property values it is rendered with.
"""

from typing import Dict, List, Any, Optional
import logging

from datagear.analysis.chart import Chart, ChartPlugin, ChartPluginManager
from datagear.analysis.data_set import ChartDataSet
from datagear.analysis.exceptions import RenderException
from datagear.analysis.render_context import RenderContext

logger = logging.getLogger(__name__)


class ChartWidget:
    """
    Renders the chart it describes in a render context.

    The widget is configured once and rendered many times. Rendering never
    modifies the widget: each call builds its own property snapshot.
    """

    CHART_PROPERTY_VALUE_NAME = "name"
    CHART_PROPERTY_VALUE_UPDATE_INTERVAL = "updateInterval"

    def __init__(
        self,
        id: str = "",
        name: str = "",
        chart_plugin: Optional[ChartPlugin] = None,
        chart_data_sets: Optional[List[ChartDataSet]] = None,
        chart_property_values: Optional[Dict[str, Any]] = None,
        update_interval: int = -1,
    ):
        """
        Args:
            id: Widget identity
            name: Chart name
            chart_plugin: Plugin used to render the chart
            chart_data_sets: Data sets the chart draws
            chart_property_values: Base chart property values
            update_interval: <0 no auto update, 0 realtime, >0 milliseconds
        """
        self.id = id
        self.name = name
        self.chart_plugin = chart_plugin
        self.chart_data_sets: List[ChartDataSet] = list(chart_data_sets or [])
        self.chart_property_values: Dict[str, Any] = dict(chart_property_values or {})
        self.update_interval = update_interval

    def add_chart_property_value(self, name: str, value: Any):
        self.chart_property_values[name] = value

    def set_chart_plugin_from_manager(self, manager: ChartPluginManager, plugin_id: str):
        """Look up and set the chart plugin from a ChartPluginManager."""
        self.chart_plugin = manager.get(plugin_id)
        if self.chart_plugin is None:
            logger.warning(f"Chart plugin not found for widget {self.id}: {plugin_id}")

    def get_chart_property_values_for_render(self) -> Dict[str, Any]:
        """Build the property values of one render: base values plus the built-ins."""
        values = dict(self.chart_property_values)
        values[self.CHART_PROPERTY_VALUE_NAME] = self.name
        values[self.CHART_PROPERTY_VALUE_UPDATE_INTERVAL] = self.update_interval
        return values

    def render(self, render_context: RenderContext) -> Chart:
        """
        Render the chart.

        Args:
            render_context: Context to render in

        Returns:
            The chart produced by the plugin

        Raises:
            RenderException: If no plugin is set or the plugin fails
        """
        if self.chart_plugin is None:
            raise RenderException(f"Chart widget [{self.id}] has no chart plugin")

        return self.chart_plugin.render_chart(
            render_context,
            self.get_chart_property_values_for_render(),
            list(self.chart_data_sets),
        )

    def __repr__(self) -> str:
        return f"ChartWidget(id={self.id!r}, name={self.name!r})"
