"""Standalone HTML pages of rendered chart widgets."""

from typing import List, Optional, Sequence
import io
import logging

from jinja2 import Environment, PackageLoader
from markupsafe import Markup

from datagear.analysis.render_context import HtmlRenderContext
from datagear.analysis.widget import ChartWidget

logger = logging.getLogger(__name__)

_env = Environment(loader=PackageLoader("datagear", "templates"), autoescape=True)


def render_widgets(widgets: Sequence[ChartWidget]) -> str:
    """
    Render widgets into one HTML fragment.

    Each widget gets its own render context over a shared writer, so every
    chart gets its own element id and variable names.
    """
    out = io.StringIO()
    for widget in widgets:
        widget.render(HtmlRenderContext(out))
    return out.getvalue()


def render_page(
    widgets: Sequence[ChartWidget],
    title: str = "DataGear",
    scripts: Optional[List[str]] = None,
) -> str:
    """Render widgets into a complete HTML page."""
    template = _env.get_template("chart_page.html.jinja2")
    html = template.render(
        title=title,
        scripts=scripts or [],
        charts_html=Markup(render_widgets(widgets)),
    )
    logger.debug(f"Rendered page with {len(widgets)} charts")
    return html
