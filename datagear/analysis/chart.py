"""
Charts and Chart Plugins

A chart plugin knows how to render a chart for one rendering target.
Plugins are registered in a ChartPluginManager and looked up by id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
import logging
import threading

from datagear.analysis.data_set import ChartDataSet
from datagear.analysis.label import Label
from datagear.analysis.render_context import RenderContext

logger = logging.getLogger(__name__)


@dataclass
class Chart:
    """The result of rendering a chart in a render context."""
    id: str
    render_context: RenderContext
    plugin: "ChartPlugin"
    property_values: Dict[str, Any] = field(default_factory=dict)
    chart_data_sets: List[ChartDataSet] = field(default_factory=list)


class ChartPlugin(ABC):
    """Interface of chart plugins."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique, stable plugin identifier."""

    @property
    @abstractmethod
    def name_label(self) -> Label:
        """Display name."""

    @property
    def desc_label(self) -> Optional[Label]:
        return None

    @property
    def order(self) -> int:
        return 0

    @abstractmethod
    def render_chart(
        self,
        render_context: RenderContext,
        chart_property_values: Dict[str, Any],
        chart_data_sets: List[ChartDataSet],
    ) -> Chart:
        """
        Render a chart.

        Raises:
            RenderException: If rendering fails
        """


class AbstractChartPlugin(ChartPlugin):
    """Base class holding the common plugin attributes."""

    def __init__(
        self,
        id: str,
        name_label: Optional[Label] = None,
        desc_label: Optional[Label] = None,
        order: int = 0,
    ):
        self._id = id
        self._name_label = name_label or Label(value=id)
        self._desc_label = desc_label
        self._order = order

    @property
    def id(self) -> str:
        return self._id

    @property
    def name_label(self) -> Label:
        return self._name_label

    @property
    def desc_label(self) -> Optional[Label]:
        return self._desc_label

    @property
    def order(self) -> int:
        return self._order

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r})"


class ChartPluginManager:
    """Thread-safe registry of chart plugins keyed by id."""

    def __init__(self):
        self._plugins: Dict[str, ChartPlugin] = {}
        self._lock = threading.RLock()

    def register(self, plugin: ChartPlugin) -> Optional[ChartPlugin]:
        """
        Register a plugin, replacing any plugin with the same id.

        Returns:
            The replaced plugin, or None
        """
        with self._lock:
            old = self._plugins.get(plugin.id)
            self._plugins[plugin.id] = plugin

        if old is not None:
            logger.info(f"Replaced chart plugin: {plugin.id}")
        else:
            logger.debug(f"Registered chart plugin: {plugin.id}")
        return old

    def remove(self, plugin_id: str) -> Optional[ChartPlugin]:
        with self._lock:
            return self._plugins.pop(plugin_id, None)

    def get(self, plugin_id: str) -> Optional[ChartPlugin]:
        with self._lock:
            return self._plugins.get(plugin_id)

    def get_all(self) -> List[ChartPlugin]:
        """Get all plugins ordered by (order, id)."""
        with self._lock:
            plugins = list(self._plugins.values())
        return sorted(plugins, key=lambda p: (p.order, p.id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._plugins)
