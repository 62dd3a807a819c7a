from dataclasses import dataclass, field
from typing import Tuple

from common.config.env import get_env_list, get_env_str


@dataclass(frozen=True)
class DocumentConfig:
    """Locale settings for the document service."""

    default_locale: str = "en"
    locales: Tuple[str, ...] = field(default_factory=lambda: ("en",))

    def __post_init__(self):
        if self.default_locale not in self.locales:
            object.__setattr__(self, "locales", (self.default_locale, *self.locales))

    @classmethod
    def from_env(cls) -> "DocumentConfig":
        """Load document config from environment variables."""
        default_locale = get_env_str("CMS_DEFAULT_LOCALE", "en")
        locales = get_env_list("CMS_LOCALES", [default_locale])
        return cls(default_locale=default_locale, locales=tuple(locales))
