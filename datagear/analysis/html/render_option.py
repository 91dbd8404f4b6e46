"""Per-context options controlling what HtmlChartPlugin writes."""

from dataclasses import dataclass
from typing import Optional

from datagear.analysis.render_context import RenderContext, HtmlRenderAttributes


@dataclass
class HtmlChartPluginRenderOption:
    """
    Output switches and names for rendering charts in one render context.

    Names left empty are generated on first render and stored back on the
    option, so later renders in the same context reuse them.
    """
    chart_element_id: Optional[str] = None
    plugin_var_name: Optional[str] = None
    render_context_var_name: Optional[str] = None
    chart_var_name: Optional[str] = None

    not_write_chart_element: bool = False
    not_write_plugin_object: bool = False
    not_write_render_context_object: bool = False
    not_write_script_tag: bool = False
    not_write_invoke: bool = False

    ATTR_NAME = HtmlRenderAttributes.INTERNAL_PREFIX + "HTML_CHART_PLUGIN_RENDER_OPTION"

    @classmethod
    def get_option(cls, render_context: RenderContext) -> Optional["HtmlChartPluginRenderOption"]:
        return render_context.get_attribute(cls.ATTR_NAME)

    @classmethod
    def set_option(cls, render_context: RenderContext, option: "HtmlChartPluginRenderOption"):
        render_context.set_attribute(cls.ATTR_NAME, option)

    @classmethod
    def remove_option(cls, render_context: RenderContext) -> Optional["HtmlChartPluginRenderOption"]:
        return render_context.remove_attribute(cls.ATTR_NAME)
