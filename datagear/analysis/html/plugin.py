"""
HTML Chart Plugin

Writes chart code (HTML and JavaScript) to HtmlRenderContext.writer.

Output format::

    <div id="[element id]"></div>
    <script type="text/javascript">
    var [plugin var]={ id: "...", nameLabel: {...}, ..., chartRender: {...} };
    var [context var]={ attributes: {...} };
    var [chart var]={ id: "...", elementId: "...", varName: "[chart var]",
        plugin: [plugin var], renderContext: [context var],
        propertyValues: {...}, chartDataSets: [...] };
    [chart script]
    [plugin var].chartRender.render([chart var]);
    </script>

Every part except the chart variable can be switched off with
HtmlChartPluginRenderOption. The chart script is optional plugin code in
which ``$CHART`` stands for the chart variable, e.g.::

    $CHART.render = function(){ ... };
    $CHART.update = function(dataSetResults){ ... };
"""

from typing import Dict, List, Any, Optional, TextIO
import logging
import uuid

from datagear.analysis.chart import AbstractChartPlugin
from datagear.analysis.data_set import ChartDataSet
from datagear.analysis.exceptions import RenderException
from datagear.analysis.html.html_chart import HtmlChart
from datagear.analysis.html.render_option import HtmlChartPluginRenderOption
from datagear.analysis.html.script_writers import (
    HtmlChartPluginScriptObjectWriter,
    HtmlRenderContextScriptObjectWriter,
    HtmlChartScriptObjectWriter,
)
from datagear.analysis.label import Label
from datagear.analysis.render_context import HtmlRenderContext, HtmlRenderAttributes

logger = logging.getLogger(__name__)


class JsChartRenderer:
    """JavaScript source of the object that renders and updates charts in the browser."""

    RENDER_FUNCTION_NAME = "render"
    UPDATE_FUNCTION_NAME = "update"

    def __init__(self, code: str):
        self.code = code.strip()

    def __repr__(self) -> str:
        return f"JsChartRenderer({len(self.code)} chars)"


class HtmlChartPlugin(AbstractChartPlugin):
    """Chart plugin writing HTML and inline JavaScript."""

    PROPERTY_CHART_RENDER = "chartRender"
    HTML_NEW_LINE = "\n"
    DEFAULT_SCRIPT_CHART_REF_PLACEHOLDER = "$CHART"

    HTML_CHART_PLUGIN_SCRIPT_OBJECT_WRITER = HtmlChartPluginScriptObjectWriter()
    HTML_RENDER_CONTEXT_SCRIPT_OBJECT_WRITER = HtmlRenderContextScriptObjectWriter()
    HTML_CHART_SCRIPT_OBJECT_WRITER = HtmlChartScriptObjectWriter()

    def __init__(
        self,
        id: str,
        name_label: Optional[Label] = None,
        chart_renderer: Optional[JsChartRenderer] = None,
        chart_script: Optional[str] = None,
        element_tag_name: str = "div",
        new_line: str = HTML_NEW_LINE,
        desc_label: Optional[Label] = None,
        order: int = 0,
    ):
        """
        Args:
            id: Plugin id
            name_label: Display name
            chart_renderer: Browser-side renderer object code
            chart_script: Optional per-chart script, ``$CHART`` is replaced by
                the chart variable name
            element_tag_name: Tag name of the chart element
            new_line: Line separator used in the output
        """
        super().__init__(id, name_label, desc_label, order)
        self.chart_renderer = chart_renderer
        self.chart_script = chart_script
        self.element_tag_name = element_tag_name
        self.new_line = new_line

    def render_chart(
        self,
        render_context: HtmlRenderContext,
        chart_property_values: Dict[str, Any],
        chart_data_sets: List[ChartDataSet],
    ) -> HtmlChart:
        option = self.get_option_initialized(render_context)

        chart = HtmlChart(
            uuid.uuid4().hex,
            render_context,
            self,
            chart_property_values,
            list(chart_data_sets),
            option.chart_element_id,
            option.chart_var_name,
        )

        try:
            self.write_chart_element(render_context, option)
            self.write_script(render_context, chart, option)
        except OSError as e:
            raise RenderException(f"Failed to write chart [{self.id}]: {e}") from e
        except (TypeError, ValueError) as e:
            raise RenderException(f"Chart [{self.id}] has values that cannot be written to script: {e}") from e

        logger.debug(f"Rendered chart {chart.var_name} with plugin {self.id}")
        return chart

    def write_chart_element(self, render_context: HtmlRenderContext, option: HtmlChartPluginRenderOption) -> bool:
        if option.not_write_chart_element:
            return False

        out = render_context.writer
        out.write(f'<{self.element_tag_name} id="{option.chart_element_id}">')
        out.write(f"</{self.element_tag_name}>")
        self.write_new_line(out)
        return True

    def write_script(self, render_context: HtmlRenderContext, chart: HtmlChart, option: HtmlChartPluginRenderOption):
        out = render_context.writer

        if not option.not_write_script_tag:
            self.write_script_start_tag(render_context)
            self.write_new_line(out)

        self.write_plugin_js_object(render_context, chart, option)
        self.write_render_context_js_object(render_context, chart, option)
        self.write_chart_js_object(render_context, chart, option)

        if not option.not_write_script_tag:
            self.write_script_end_tag(render_context)
            self.write_new_line(out)

    def write_plugin_js_object(
        self, render_context: HtmlRenderContext, chart: HtmlChart, option: HtmlChartPluginRenderOption
    ) -> bool:
        if option.not_write_plugin_object:
            return False

        self.HTML_CHART_PLUGIN_SCRIPT_OBJECT_WRITER.write(
            render_context.writer, chart.plugin, option.plugin_var_name, self.new_line
        )
        return True

    def write_render_context_js_object(
        self, render_context: HtmlRenderContext, chart: HtmlChart, option: HtmlChartPluginRenderOption
    ) -> bool:
        if option.not_write_render_context_object:
            return False

        self.HTML_RENDER_CONTEXT_SCRIPT_OBJECT_WRITER.write(
            render_context.writer, render_context, option.render_context_var_name, self.new_line
        )
        return True

    def write_chart_js_object(
        self, render_context: HtmlRenderContext, chart: HtmlChart, option: HtmlChartPluginRenderOption
    ):
        out = render_context.writer

        self.HTML_CHART_SCRIPT_OBJECT_WRITER.write(
            out, chart, option.render_context_var_name, option.plugin_var_name, self.new_line
        )

        if self.chart_script:
            out.write(self.chart_script.replace(self.DEFAULT_SCRIPT_CHART_REF_PLACEHOLDER, chart.var_name))
            self.write_new_line(out)

        if not option.not_write_invoke:
            out.write(
                f"{option.plugin_var_name}.{self.PROPERTY_CHART_RENDER}."
                f"{JsChartRenderer.RENDER_FUNCTION_NAME}({chart.var_name});"
            )
            self.write_new_line(out)

    def write_script_start_tag(self, render_context: HtmlRenderContext):
        render_context.writer.write('<script type="text/javascript">')

    def write_script_end_tag(self, render_context: HtmlRenderContext):
        render_context.writer.write("</script>")

    def write_new_line(self, out: TextIO):
        out.write(self.new_line)

    def get_option_initialized(self, render_context: HtmlRenderContext) -> HtmlChartPluginRenderOption:
        """
        Get the render option of a context with every name filled in.

        A new option is created and attached to the context if it has none.

        Raises:
            RenderException: If the chart element is not written and no
                element id is set
        """
        option = HtmlChartPluginRenderOption.get_option(render_context)
        if option is None:
            option = HtmlChartPluginRenderOption()
            HtmlChartPluginRenderOption.set_option(render_context, option)

        if option.not_write_chart_element and not option.chart_element_id:
            raise RenderException(f"[{HtmlChartPluginRenderOption.__name__}.chart_element_id] must be set")

        if not option.chart_element_id:
            option.chart_element_id = HtmlRenderAttributes.generate_chart_element_id(render_context)

        if not option.plugin_var_name:
            option.plugin_var_name = HtmlRenderAttributes.generate_chart_plugin_var_name(render_context)

        if not option.render_context_var_name:
            option.render_context_var_name = HtmlRenderAttributes.generate_render_context_var_name(render_context)

        if not option.chart_var_name:
            option.chart_var_name = HtmlRenderAttributes.generate_chart_var_name(render_context)

        return option
