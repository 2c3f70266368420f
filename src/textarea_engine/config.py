"""Editor configuration and validation."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping

from textarea_engine.buffer.undo import HISTORY_LIMIT, HISTORY_TIME_GAP_MS
from textarea_engine.keymaps.models import DEFAULT_WRAP_PAIRS, PlatformClass, WrapPair

# Host-facing option names accepted by ``EditorConfig.from_options``.
OPTION_ALIASES = {
    "tabSize": "tab_size",
    "insertSpaces": "insert_spaces",
    "shouldInsertSpaces": "insert_spaces",
    "ignoreTabKey": "ignore_tab_key",
    "shouldIgnoreTabKey": "ignore_tab_key",
    "wrapPairs": "wrap_pairs",
    "platformClass": "platform",
    "historyLimit": "history_limit",
    "historyTimeGap": "history_time_gap_ms",
}


class ConfigurationError(ValueError):
    """Raised when editor options cannot produce a usable configuration."""

    def __init__(self, message: str, *, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


@dataclass(frozen=True, slots=True)
class EditorConfig:
    tab_size: int = 2
    insert_spaces: bool = True
    ignore_tab_key: bool = False
    wrap_pairs: tuple[WrapPair, ...] = DEFAULT_WRAP_PAIRS
    platform: PlatformClass = PlatformClass.OTHER
    history_limit: int = HISTORY_LIMIT
    history_time_gap_ms: float = HISTORY_TIME_GAP_MS

    def __post_init__(self) -> None:
        if isinstance(self.tab_size, bool) or not isinstance(self.tab_size, int):
            raise ConfigurationError("tab_size must be an integer", option="tab_size")
        if self.tab_size < 1:
            raise ConfigurationError(
                f"tab_size must be >= 1, got {self.tab_size}", option="tab_size"
            )
        if self.history_limit < 1:
            raise ConfigurationError(
                f"history_limit must be >= 1, got {self.history_limit}",
                option="history_limit",
            )
        if self.history_time_gap_ms < 0:
            raise ConfigurationError(
                "history_time_gap_ms cannot be negative",
                option="history_time_gap_ms",
            )
        object.__setattr__(self, "wrap_pairs", _coerce_pairs(self.wrap_pairs))
        try:
            object.__setattr__(self, "platform", PlatformClass(self.platform))
        except ValueError as exc:
            raise ConfigurationError(
                f"unknown platform {self.platform!r}", option="platform"
            ) from exc

    @property
    def tab_character(self) -> str:
        return (" " if self.insert_spaces else "\t") * self.tab_size

    def pair_for(self, trigger: str) -> WrapPair | None:
        for pair in self.wrap_pairs:
            if pair.start == trigger:
                return pair
        return None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "EditorConfig":
        """Build a config from host options (``tabSize`` or ``tab_size`` style)."""

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"unknown option {key!r}", option=key)
            kwargs[name] = value
        return cls(**kwargs)


def _coerce_pairs(pairs: Iterable[Any]) -> tuple[WrapPair, ...]:
    result: list[WrapPair] = []
    seen: set[str] = set()
    for item in pairs:
        try:
            pair = WrapPair.coerce(item)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc), option="wrap_pairs") from exc
        if pair.start in seen:
            raise ConfigurationError(
                f"duplicate wrap trigger {pair.start!r}", option="wrap_pairs"
            )
        seen.add(pair.start)
        result.append(pair)
    return tuple(result)


__all__ = ["ConfigurationError", "EditorConfig", "OPTION_ALIASES"]
