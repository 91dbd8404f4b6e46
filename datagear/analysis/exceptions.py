"""Exceptions raised while rendering charts."""


class RenderException(Exception):
    """Raised when a chart cannot be rendered."""
    pass


class ChartPluginException(Exception):
    """Raised when a chart plugin cannot be loaded or registered."""
    pass
