"""
Data Set Model

Describes the data a chart is bound to. Only the metadata is written to
chart scripts; the browser-side runtime fetches results separately.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from datagear.analysis.label import Label


@dataclass
class DataSetProperty:
    """A single output column of a data set."""
    name: str
    type: str = "STRING"
    label: Optional[Label] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "label": self.label.to_dict() if self.label else None,
        }


@dataclass
class DataSet:
    """A named source of tabular data, e.g. a SQL query."""
    id: str
    name: str = ""
    properties: List[DataSetProperty] = field(default_factory=list)

    def get_property(self, name: str) -> Optional[DataSetProperty]:
        """Get a property by name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "properties": [p.to_dict() for p in self.properties],
        }


@dataclass
class ChartDataSet:
    """
    A data set as used by one chart.

    property_signs maps data set property names to the chart-specific
    roles they play (e.g. "x", "y", "category").
    """
    data_set: DataSet
    property_signs: Dict[str, List[str]] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dataSet": self.data_set.to_dict(),
            "propertySigns": {k: list(v) for k, v in self.property_signs.items()},
            "params": dict(self.params),
        }
