"""Keymap registry responsible for storing chord bindings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional, Sequence

from textarea_engine.runtime.telemetry import span

from .models import Binding, PlatformClass

_ALL_PLATFORMS = "*"


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    binding_count: int
    platforms: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding conflicts with existing entries."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


def _platform_key(platform: Optional[PlatformClass]) -> str:
    return _ALL_PLATFORMS if platform is None else platform.value


class KeymapRegistry:
    """Owns binding metadata, indexed by platform and chord signature."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._platform_index: Dict[str, Dict[str, set[str]]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def __contains__(self, binding_id: object) -> bool:
        return binding_id in self._bindings

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "command": binding.command.value},
        ) as handle:
            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)

            if replace:
                for conflict in conflicts:
                    self._remove_binding(conflict)
                    self._bindings.pop(conflict.id, None)
                existing = self._bindings.pop(binding.id, None)
                if existing:
                    self._remove_binding(existing)
            elif binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            self._bindings[binding.id] = binding
            self._index_binding(binding)
            self._touch_bindings()
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if not binding:
            return None
        self._remove_binding(binding)
        self._touch_bindings()
        return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        with span(
            "keymaps::update_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ) as handle:
            if binding_id not in self._bindings:
                handle.fail("missing_binding")
                raise KeyError(f"Binding '{binding_id}' not found")

            current = self._bindings[binding_id]
            updated = replace(current, **changes)
            conflicts = self.detect_conflicts(updated, ignore=(binding_id,))
            if conflicts:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(updated, conflicts)

            self._remove_binding(current)
            self._bindings[binding_id] = updated
            self._index_binding(updated)
            self._touch_bindings()
            return updated

    def iter_bindings(
        self, platform: Optional[PlatformClass] = None
    ) -> Iterator[Binding]:
        """Yield every binding, or only those active on ``platform``."""

        if platform is None:
            yield from self._bindings.values()
            return
        for key in (_ALL_PLATFORMS, platform.value):
            for bucket in self._platform_index.get(key, {}).values():
                for binding_id in bucket:
                    yield self._bindings[binding_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            binding_count=len(self._bindings),
            platforms=tuple(sorted(self._platform_index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        """Bindings that would fire for the same chord, platform and context."""

        ignored = set(ignore or ())
        if binding.platform is None:
            keys = [_ALL_PLATFORMS] + [p.value for p in PlatformClass]
        else:
            keys = [_ALL_PLATFORMS, binding.platform.value]

        conflicts: list[Binding] = []
        for key in keys:
            bucket = self._platform_index.get(key, {}).get(binding.key_signature, ())
            for match_id in bucket:
                if match_id in ignored:
                    continue
                existing = self._bindings[match_id]
                if _contexts_overlap(binding, existing):
                    conflicts.append(existing)
        return conflicts

    def _index_binding(self, binding: Binding) -> None:
        by_signature = self._platform_index.setdefault(
            _platform_key(binding.platform), {}
        )
        by_signature.setdefault(binding.key_signature, set()).add(binding.id)

    def _remove_binding(self, binding: Binding) -> None:
        platform_bucket = self._platform_index.get(_platform_key(binding.platform))
        if not platform_bucket:
            return
        signatures = platform_bucket.get(binding.key_signature)
        if not signatures:
            return
        signatures.discard(binding.id)
        if not signatures:
            platform_bucket.pop(binding.key_signature, None)
        if not platform_bucket:
            self._platform_index.pop(_platform_key(binding.platform), None)

    def _touch_bindings(self) -> None:
        self._revision += 1


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    left_map = left.when_map
    right_map = right.when_map

    if not left.when and not right.when:
        return True

    for flag, expected in left_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False

    if not left.when or not right.when:
        return False

    return left_map == right_map


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
