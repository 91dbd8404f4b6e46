"""Localized display labels."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any


@dataclass
class Label:
    """A display value with optional per-locale variants."""
    value: str = ""
    locale_values: Dict[str, str] = field(default_factory=dict)

    def get_value(self, locale: Optional[str] = None) -> str:
        """Get the value for a locale, falling back to the default value."""
        if locale and locale in self.locale_values:
            return self.locale_values[locale]
        if locale and "_" in locale:
            language = locale.split("_", 1)[0]
            if language in self.locale_values:
                return self.locale_values[language]
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "localeValues": dict(self.locale_values)}

    @classmethod
    def from_value(cls, data: Any) -> "Label":
        """Build a label from a plain string or a ``{"value", "localeValues"}`` dict."""
        if data is None:
            return cls()
        if isinstance(data, Label):
            return data
        if isinstance(data, dict):
            return cls(
                value=data.get("value", ""),
                locale_values=dict(data.get("localeValues", {})),
            )
        return cls(value=str(data))
