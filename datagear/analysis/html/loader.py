"""
HTML Chart Plugin Loader

Loads HtmlChartPlugin instances from plugin directories. A plugin directory
contains:

- plugin.json: {"id", "nameLabel", "descLabel", "order", "elementTagName"}
- renderer.js: the JsChartRenderer object code (required)
- chart.js: optional chart script using the $CHART placeholder
"""

from typing import Dict, List, Any, Optional
from pathlib import Path
import json
import logging

from datagear.analysis.chart import ChartPluginManager
from datagear.analysis.exceptions import ChartPluginException
from datagear.analysis.html.plugin import HtmlChartPlugin, JsChartRenderer
from datagear.analysis.label import Label

logger = logging.getLogger(__name__)


class HtmlChartPluginLoader:
    """Loads HTML chart plugins from the file system."""

    PLUGIN_FILE = "plugin.json"
    RENDERER_FILE = "renderer.js"
    CHART_SCRIPT_FILE = "chart.js"

    def __init__(
        self,
        encoding: str = "utf-8",
        new_line: str = HtmlChartPlugin.HTML_NEW_LINE,
        element_tag_name: str = "div",
    ):
        """
        Args:
            encoding: Encoding of the plugin files
            new_line: Line separator of the rendered output
            element_tag_name: Chart element tag for plugins whose plugin.json sets none
        """
        self.encoding = encoding
        self.new_line = new_line
        self.element_tag_name = element_tag_name

    def load(self, directory: str) -> HtmlChartPlugin:
        """
        Load one plugin directory.

        Args:
            directory: Plugin directory

        Returns:
            The loaded plugin

        Raises:
            ChartPluginException: If the directory is not a valid plugin
        """
        path = Path(directory)
        plugin_file = path / self.PLUGIN_FILE
        renderer_file = path / self.RENDERER_FILE

        if not plugin_file.is_file():
            raise ChartPluginException(f"Missing {self.PLUGIN_FILE} in {path}")
        if not renderer_file.is_file():
            raise ChartPluginException(f"Missing {self.RENDERER_FILE} in {path}")

        try:
            with open(plugin_file, "r", encoding=self.encoding) as f:
                meta = json.load(f)
            renderer_code = renderer_file.read_text(encoding=self.encoding)
            chart_script_file = path / self.CHART_SCRIPT_FILE
            chart_script = (
                chart_script_file.read_text(encoding=self.encoding)
                if chart_script_file.is_file() else None
            )
        except (OSError, ValueError) as e:
            raise ChartPluginException(f"Cannot read chart plugin in {path}: {e}") from e

        return self._create_plugin(meta, renderer_code, chart_script, path)

    def load_all(self, root: str, manager: Optional[ChartPluginManager] = None) -> ChartPluginManager:
        """
        Load every plugin directory under a root directory.

        Directories that fail to load are logged and skipped.
        """
        manager = manager or ChartPluginManager()
        root_path = Path(root)

        if not root_path.is_dir():
            logger.warning(f"Chart plugin directory does not exist: {root_path}")
            return manager

        for child in sorted(root_path.iterdir()):
            if not child.is_dir():
                continue
            try:
                manager.register(self.load(str(child)))
            except ChartPluginException as e:
                logger.error(f"Skipping chart plugin {child.name}: {e}")

        logger.info(f"Loaded {len(manager)} chart plugins from {root_path}")
        return manager

    def _create_plugin(
        self,
        meta: Dict[str, Any],
        renderer_code: str,
        chart_script: Optional[str],
        path: Path,
    ) -> HtmlChartPlugin:
        if not isinstance(meta, dict) or not meta.get("id"):
            raise ChartPluginException(f"[id] is required in {path / self.PLUGIN_FILE}")

        desc = meta.get("descLabel")

        try:
            order = int(meta.get("order", 0))
        except (TypeError, ValueError) as e:
            raise ChartPluginException(f"[order] must be an integer in {path / self.PLUGIN_FILE}") from e

        return HtmlChartPlugin(
            id=meta["id"],
            name_label=Label.from_value(meta.get("nameLabel", meta["id"])),
            desc_label=Label.from_value(desc) if desc is not None else None,
            order=order,
            chart_renderer=JsChartRenderer(renderer_code),
            chart_script=chart_script.strip() if chart_script else None,
            element_tag_name=meta.get("elementTagName", self.element_tag_name),
            new_line=self.new_line,
        )


def load_plugins(
    dirs: List[str],
    new_line: str = HtmlChartPlugin.HTML_NEW_LINE,
    element_tag_name: str = "div",
) -> ChartPluginManager:
    """Load plugins from several root directories into one manager."""
    loader = HtmlChartPluginLoader(new_line=new_line, element_tag_name=element_tag_name)
    manager = ChartPluginManager()
    for root in dirs:
        loader.load_all(root, manager)
    return manager
