"""
Chart widget definitions.

Builds ChartWidget instances from YAML documents of the form::

    widgets:
      - id: sales
        name: Sales
        plugin: bar
        update_interval: 5000
        properties: {title: Monthly sales}
        data_sets:
          - id: monthly_sales
            name: Monthly sales
            properties:
              - {name: month, type: STRING}
              - {name: amount, type: NUMBER}
            property_signs: {month: [x], amount: [y]}
            params: {}
"""

from typing import Dict, List, Any
import logging

import yaml

from datagear.analysis.chart import ChartPluginManager
from datagear.analysis.data_set import DataSet, DataSetProperty, ChartDataSet
from datagear.analysis.exceptions import ChartPluginException
from datagear.analysis.label import Label
from datagear.analysis.widget import ChartWidget

logger = logging.getLogger(__name__)


def load_widgets(path: str, manager: ChartPluginManager) -> List[ChartWidget]:
    """Load widget definitions from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return widgets_from_dict(data, manager)


def widgets_from_dict(data: Dict[str, Any], manager: ChartPluginManager) -> List[ChartWidget]:
    """
    Build widgets from a parsed definition document.

    Raises:
        ChartPluginException: If a widget names a plugin the manager does not have
    """
    widgets = []
    for index, item in enumerate(data.get("widgets", [])):
        widget_id = str(item.get("id", f"widget{index}"))
        plugin_id = item.get("plugin")

        plugin = manager.get(plugin_id) if plugin_id else None
        if plugin is None:
            raise ChartPluginException(f"Chart plugin [{plugin_id}] of widget [{widget_id}] not found")

        widgets.append(ChartWidget(
            id=widget_id,
            name=item.get("name", ""),
            chart_plugin=plugin,
            chart_data_sets=[_chart_data_set(ds) for ds in item.get("data_sets", [])],
            chart_property_values=dict(item.get("properties", {})),
            update_interval=int(item.get("update_interval", -1)),
        ))

    logger.info(f"Loaded {len(widgets)} chart widgets")
    return widgets


def _chart_data_set(data: Dict[str, Any]) -> ChartDataSet:
    properties = [
        DataSetProperty(
            name=p["name"],
            type=p.get("type", "STRING"),
            label=Label.from_value(p["label"]) if "label" in p else None,
        )
        for p in data.get("properties", [])
    ]
    data_set = DataSet(id=str(data["id"]), name=data.get("name", ""), properties=properties)
    return ChartDataSet(
        data_set=data_set,
        property_signs={k: list(v) for k, v in data.get("property_signs", {}).items()},
        params=dict(data.get("params", {})),
    )
