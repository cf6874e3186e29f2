"""Node kind, status and port type definitions."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class NodeKind(str, Enum):
    INPUT = "input"
    PROCESS = "process"
    TRANSFORM = "transform"
    FILTER = "filter"
    CUSTOM = "custom"
    OUTPUT = "output"


class PortType(str, Enum):
    """Labeled port types. A port without a type is untyped (a wildcard)."""
    A = "A"
    B = "B"
    C = "C"


# Simulated processing time per built-in kind
DEFAULT_DURATIONS_MS: dict[str, int] = {
    NodeKind.INPUT.value: 1500,
    NodeKind.PROCESS.value: 2500,
    NodeKind.TRANSFORM.value: 3000,
    NodeKind.FILTER.value: 2000,
    NodeKind.CUSTOM.value: 2800,
    NodeKind.OUTPUT.value: 1000,
}
FALLBACK_DURATION_MS = 2000


@dataclass(frozen=True)
class KindDescriptor:
    """Capability record for a node kind, served to the editor palette."""
    key: str
    display_name: str
    base_kind: NodeKind
    display_class: str = ""
    default_inputs: int = 1
    default_outputs: int = 1
    typed_ports: bool = False
    input_types: tuple[PortType, ...] = ()
    output_types: tuple[PortType, ...] = ()
    default_duration_ms: int | None = None
    default_attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> int:
        if self.default_duration_ms is not None:
            return self.default_duration_ms
        return DEFAULT_DURATIONS_MS.get(self.base_kind.value, FALLBACK_DURATION_MS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.key,
            "label": self.display_name,
            "class": self.display_class or f"{self.key}-node",
            "base_kind": self.base_kind.value,
            "inputs": len(self.input_types) if self.typed_ports else self.default_inputs,
            "outputs": len(self.output_types) if self.typed_ports else self.default_outputs,
            "typed_ports": self.typed_ports,
            "duration_ms": self.duration_ms,
        }
