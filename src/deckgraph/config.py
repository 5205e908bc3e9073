"""Library settings and their YAML persistence."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from deckgraph.errors import InvalidArgumentError

DEFAULT_FONT_DIRS = [
    "/usr/share/fonts",
    "/usr/local/share/fonts",
    "~/.fonts",
    "/Library/Fonts",
    "/System/Library/Fonts/Supplemental",
    "C:/Windows/Fonts",
]


@dataclass
class Settings:
    """Knobs for text measurement, auto-fit and font defaults."""
    font_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_FONT_DIRS))
    fallback_font: str | None = "DejaVuSans"
    default_font_size_pt: float = 18.0
    autofit_enabled: bool = True

    def to_dict(self) -> dict:
        return {
            "font_dirs": list(self.font_dirs),
            "fallback_font": self.fallback_font,
            "default_font_size_pt": self.default_font_size_pt,
            "autofit_enabled": self.autofit_enabled,
        }

    @classmethod
    def from_dict(cls, d: dict | None) -> "Settings":
        d = d or {}
        unknown = set(d) - {"font_dirs", "fallback_font", "default_font_size_pt", "autofit_enabled"}
        if unknown:
            raise InvalidArgumentError(f"unknown setting(s): {', '.join(sorted(unknown))}")
        size = float(d.get("default_font_size_pt", 18.0))
        if size <= 0:
            raise InvalidArgumentError(f"default_font_size_pt must be positive, got {size}")
        return cls(
            font_dirs=list(d.get("font_dirs", DEFAULT_FONT_DIRS)),
            fallback_font=d.get("fallback_font", "DejaVuSans"),
            default_font_size_pt=size,
            autofit_enabled=bool(d.get("autofit_enabled", True)),
        )


def save_settings(settings: Settings, path: str | Path) -> None:
    """Write settings to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(settings.to_dict(), f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def load_settings(path: str | Path) -> Settings:
    """Read settings from a YAML file; an empty file gives the defaults."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise InvalidArgumentError(f"{path}: expected a mapping of settings")
    return Settings.from_dict(data)
