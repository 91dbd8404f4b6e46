"""
Render Contexts

A render context carries the attributes shared by all charts rendered
during one request, and for HTML rendering, the output sink charts are
written to.
"""

from typing import Dict, Any, Optional, TextIO
import threading
import uuid


class RenderContext:
    """Attribute container passed to chart plugins."""

    def __init__(self, attributes: Optional[Dict[str, Any]] = None):
        self._attributes: Dict[str, Any] = dict(attributes) if attributes else {}

    @property
    def attributes(self) -> Dict[str, Any]:
        return self._attributes

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: Any):
        self._attributes[name] = value

    def remove_attribute(self, name: str) -> Any:
        return self._attributes.pop(name, None)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes


class HtmlRenderContext(RenderContext):
    """
    Render context for HTML output.

    Args:
        writer: Output sink, any object with a ``write(str)`` method
        attributes: Initial attributes
    """

    def __init__(self, writer: TextIO, attributes: Optional[Dict[str, Any]] = None):
        super().__init__(attributes)
        self.writer = writer


class HtmlRenderAttributes:
    """
    Generates element ids and script variable names unique within a page.

    Every context gets a random prefix on first use plus a sequence counter,
    both stored as context attributes, so independent contexts writing into
    one page never produce the same name.
    """

    # Attributes with this prefix are internal and never written to scripts
    INTERNAL_PREFIX = "DG_"

    ATTR_NAME_PREFIX = INTERNAL_PREFIX + "NAME_PREFIX"
    ATTR_NAME_SEQUENCE = INTERNAL_PREFIX + "NAME_SEQUENCE"

    _lock = threading.Lock()

    @classmethod
    def is_internal(cls, name: str) -> bool:
        return name.startswith(cls.INTERNAL_PREFIX)

    @classmethod
    def generate_chart_element_id(cls, context: RenderContext) -> str:
        return cls._generate(context, "dataGearChartElement")

    @classmethod
    def generate_chart_plugin_var_name(cls, context: RenderContext) -> str:
        return cls._generate(context, "dataGearChartPlugin")

    @classmethod
    def generate_render_context_var_name(cls, context: RenderContext) -> str:
        return cls._generate(context, "dataGearRenderContext")

    @classmethod
    def generate_chart_var_name(cls, context: RenderContext) -> str:
        return cls._generate(context, "dataGearChart")

    @classmethod
    def _generate(cls, context: RenderContext, name: str) -> str:
        with cls._lock:
            prefix = context.get_attribute(cls.ATTR_NAME_PREFIX)
            if prefix is None:
                prefix = uuid.uuid4().hex[:8]
                context.set_attribute(cls.ATTR_NAME_PREFIX, prefix)

            sequence = context.get_attribute(cls.ATTR_NAME_SEQUENCE, 0)
            context.set_attribute(cls.ATTR_NAME_SEQUENCE, sequence + 1)

        return f"{name}{prefix}{sequence}"
