"""Built-in node kinds and the example extra kinds shipped with the editor."""
from .base import KindDescriptor, NodeKind, PortType
from .registry import KindRegistry

BUILTIN_KINDS: tuple[KindDescriptor, ...] = (
    KindDescriptor(
        key=NodeKind.INPUT.value, display_name="Input", base_kind=NodeKind.INPUT,
        display_class="input-node", default_inputs=0, default_outputs=1,
    ),
    KindDescriptor(
        key=NodeKind.PROCESS.value, display_name="Process", base_kind=NodeKind.PROCESS,
        display_class="process-node",
    ),
    KindDescriptor(
        key=NodeKind.TRANSFORM.value, display_name="Transform", base_kind=NodeKind.TRANSFORM,
        display_class="transform-node",
    ),
    KindDescriptor(
        key=NodeKind.FILTER.value, display_name="Filter", base_kind=NodeKind.FILTER,
        display_class="filter-node",
    ),
    KindDescriptor(
        key=NodeKind.CUSTOM.value, display_name="Custom", base_kind=NodeKind.CUSTOM,
        display_class="custom-node",
    ),
    KindDescriptor(
        key=NodeKind.OUTPUT.value, display_name="Output", base_kind=NodeKind.OUTPUT,
        display_class="output-node", default_inputs=1, default_outputs=0,
    ),
)

EXTRA_KINDS: tuple[KindDescriptor, ...] = (
    KindDescriptor(
        key="timer", display_name="Timer", base_kind=NodeKind.CUSTOM,
        display_class="custom-node", default_inputs=1, default_outputs=2,
        default_duration_ms=1500,
        default_attributes={"delay": 1000, "repeat": False},
    ),
    KindDescriptor(
        key="database", display_name="Database", base_kind=NodeKind.CUSTOM,
        display_class="database-node", typed_ports=True,
        input_types=(PortType.A,), output_types=(PortType.B, PortType.C),
        default_attributes={"db_type": "SQL", "query": ""},
    ),
)


def register_builtin_kinds() -> None:
    """Register the built-in and example extra kinds (idempotent until frozen)."""
    for descriptor in BUILTIN_KINDS + EXTRA_KINDS:
        if KindRegistry.find(descriptor.key) is None:
            KindRegistry.register(descriptor)
