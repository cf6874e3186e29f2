"""Explicit registry of node kinds."""
from .base import (
    DEFAULT_DURATIONS_MS,
    FALLBACK_DURATION_MS,
    KindDescriptor,
    NodeKind,
)


class KindRegistry:
    """Singleton registry mapping kind keys to KindDescriptor records.

    Lifecycle: populated once at process start (see ``flowsim.nodes``),
    then frozen by the application before the first request. Registering
    after ``freeze()`` raises.

    Usage:
        KindRegistry.register(KindDescriptor(
            key="timer", display_name="Timer", base_kind=NodeKind.CUSTOM,
        ))
    """

    _kinds: dict[str, KindDescriptor] = {}
    _frozen: bool = False

    @classmethod
    def register(cls, descriptor: KindDescriptor) -> KindDescriptor:
        if cls._frozen:
            raise RuntimeError(
                f"Kind registry is frozen; cannot register '{descriptor.key}'"
            )
        cls._kinds[descriptor.key] = descriptor
        return descriptor

    @classmethod
    def get(cls, kind: str) -> KindDescriptor:
        if kind not in cls._kinds:
            raise KeyError(f"Unknown node kind: {kind}")
        return cls._kinds[kind]

    @classmethod
    def find(cls, kind: str) -> KindDescriptor | None:
        return cls._kinds.get(kind)

    @classmethod
    def all_descriptors(cls) -> dict[str, KindDescriptor]:
        return dict(cls._kinds)

    @classmethod
    def default_duration(cls, kind: str) -> int:
        descriptor = cls._kinds.get(kind)
        if descriptor is not None:
            return descriptor.duration_ms
        return DEFAULT_DURATIONS_MS.get(kind, FALLBACK_DURATION_MS)

    @classmethod
    def is_entry_kind(cls, kind: str) -> bool:
        """Entry kinds seed a run: Input, or an extra kind built on Input."""
        if kind == NodeKind.INPUT.value:
            return True
        descriptor = cls._kinds.get(kind)
        return descriptor is not None and descriptor.base_kind == NodeKind.INPUT

    @classmethod
    def freeze(cls) -> None:
        cls._frozen = True

    @classmethod
    def is_frozen(cls) -> bool:
        return cls._frozen

    @classmethod
    def clear(cls) -> None:
        cls._kinds.clear()
        cls._frozen = False
