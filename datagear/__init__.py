"""
DataGear - Data Analysis and Visualization Toolkit

Renders chart widgets as HTML/JavaScript for browser-side chart libraries
and runs batch data import/export between databases and files.
"""

__version__ = "1.0.0"
__author__ = "DataGear Team"

from datagear.config import DataGearConfig
from datagear.analysis.widget import ChartWidget
from datagear.analysis.html.plugin import HtmlChartPlugin

__all__ = ["DataGearConfig", "ChartWidget", "HtmlChartPlugin", "__version__"]
