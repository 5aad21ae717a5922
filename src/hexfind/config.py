"""User defaults for hexfind, read from a small YAML file."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml
from rich.errors import StyleSyntaxError
from rich.style import Style

from hexfind.core.dump import DEFAULT_LINE_WIDTH, MAX_CONTEXT
from hexfind.core.endian import normalize_endian
from hexfind.core.search import DEFAULT_CHUNK_SIZE
from hexfind.ui.palette import PALETTE

log = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


class ConfigError(ValueError):
    """Raised for an unreadable config file or an out-of-range setting."""


@dataclass(frozen=True)
class Settings:
    line_width: int = DEFAULT_LINE_WIDTH
    context: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    endian: str = "big"
    highlight_style: str = PALETTE.match_style
    color: bool = True

    def __post_init__(self) -> None:
        for name in ("line_width", "context", "chunk_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if self.line_width < 1:
            raise ConfigError(f"line_width must be >= 1, got {self.line_width}")
        if not 0 <= self.context <= MAX_CONTEXT:
            raise ConfigError(f"context must be between 0 and {MAX_CONTEXT}, got {self.context}")
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be >= 1, got {self.chunk_size}")
        try:
            object.__setattr__(self, "endian", normalize_endian(self.endian))
        except (ValueError, AttributeError) as exc:
            raise ConfigError(str(exc)) from None
        if not isinstance(self.color, bool):
            raise ConfigError(f"color must be true or false, got {self.color!r}")
        if not isinstance(self.highlight_style, str) or not self.highlight_style.strip():
            raise ConfigError("highlight_style must be a non-empty style string")
        try:
            Style.parse(self.highlight_style)
        except StyleSyntaxError as exc:
            raise ConfigError(f"highlight_style {self.highlight_style!r}: {exc}") from None

    def merged(self, **overrides: Any) -> Settings:
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_user_config_path() -> Path:
    """Platform-appropriate location of the user config file."""
    if os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
        return Path(base) / "hexfind" / CONFIG_FILENAME
    else:  # macOS, Linux
        return Path.home() / ".config" / "hexfind" / CONFIG_FILENAME


def parse_settings(text: str, *, source: str = "<config>") -> Settings:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{source}: invalid YAML: {exc}") from None
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at top level")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"{source}: unknown setting(s): {', '.join(unknown)}")
    try:
        return Settings(**data)
    except ConfigError as exc:
        raise ConfigError(f"{source}: {exc}") from None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from `path`, or from the user config file when present.

    An explicit path must exist; the default location is optional.
    """
    explicit = path is not None
    cfg = Path(path) if explicit else get_user_config_path()
    if not cfg.exists():
        if explicit:
            raise ConfigError(f"config file not found: {cfg}")
        return Settings()

    log.debug("loading settings from %s", cfg)
    try:
        text = cfg.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read {cfg}: {exc}") from None
    return parse_settings(text, source=str(cfg))
