"""Connection validation: port direction and port type compatibility."""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping

from ..config import settings
from ..nodes.base import PortType
from .graph import NodeInstance, Port

logger = logging.getLogger(__name__)

ShowMessage = Callable[[str], None]
HideMessage = Callable[[], None]


class RejectReason(str, Enum):
    DIRECTION = "direction"
    TYPE_MISMATCH = "type-mismatch"


@dataclass(frozen=True)
class ConnectionCandidate:
    """A proposed edge, as drawn in the editor."""
    source: str
    target: str
    source_port: str | None = None
    target_port: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    accepted: bool
    reason: RejectReason | None = None
    message: str | None = None
    source_type: PortType | None = None
    target_type: PortType | None = None

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "source_type": self.source_type.value if self.source_type else None,
            "target_type": self.target_type.value if self.target_type else None,
        }


ACCEPTED = ValidationResult(accepted=True)
UNRESOLVED = ValidationResult(accepted=False)

DIRECTION_MESSAGE = "Connection failed: only an output port can connect to an input port"


class _Resolution(Enum):
    DEFAULT = "default"
    RESOLVED = "resolved"
    WRONG_DIRECTION = "wrong_direction"
    MISSING = "missing"


def _resolve(
    node: NodeInstance, port_id: str | None, want_output: bool,
) -> tuple[_Resolution, Port | None]:
    if port_id is None:
        # The default port works in either direction and is untyped
        return _Resolution.DEFAULT, None
    wanted, opposite = (
        (node.outputs, node.inputs) if want_output else (node.inputs, node.outputs)
    )
    port = next((p for p in wanted if p.id == port_id), None)
    if port is not None:
        return _Resolution.RESOLVED, port
    if any(p.id == port_id for p in opposite):
        return _Resolution.WRONG_DIRECTION, None
    return _Resolution.MISSING, None


def validate_connection(
    candidate: ConnectionCandidate, nodes: Mapping[str, NodeInstance],
) -> ValidationResult:
    """Decide whether a candidate edge may enter the graph.

    Unresolvable candidates (unknown node or port, e.g. mid-drag) are
    rejected without a reason. Cycles, duplicates and port arity are not
    checked.
    """
    source_node = nodes.get(candidate.source)
    target_node = nodes.get(candidate.target)
    if source_node is None or target_node is None:
        return UNRESOLVED

    src_res, src_port = _resolve(source_node, candidate.source_port, want_output=True)
    tgt_res, tgt_port = _resolve(target_node, candidate.target_port, want_output=False)

    if _Resolution.WRONG_DIRECTION in (src_res, tgt_res):
        return ValidationResult(
            accepted=False, reason=RejectReason.DIRECTION, message=DIRECTION_MESSAGE,
        )
    if _Resolution.MISSING in (src_res, tgt_res):
        return UNRESOLVED

    src_type = src_port.type if src_port else None
    tgt_type = tgt_port.type if tgt_port else None
    if src_type is not None and tgt_type is not None and src_type != tgt_type:
        return ValidationResult(
            accepted=False,
            reason=RejectReason.TYPE_MISMATCH,
            message=(
                f"Connection failed: {src_type.value} output ≠ "
                f"{tgt_type.value} input (types must match)"
            ),
            source_type=src_type,
            target_type=tgt_type,
        )
    return ACCEPTED


class ConnectionValidator:
    """Validates candidates and surfaces rejections as transient messages.

    Holds at most one dismissal timer; a new rejection replaces it.
    """

    def __init__(
        self,
        show_message: ShowMessage | None = None,
        hide_message: HideMessage | None = None,
        dismiss_after_ms: int | None = None,
    ):
        self._show = show_message
        self._hide = hide_message
        if dismiss_after_ms is None:
            dismiss_after_ms = settings.message_dismiss_ms
        self.dismiss_after_ms = dismiss_after_ms
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def has_pending_dismissal(self) -> bool:
        with self._lock:
            return self._timer is not None

    def validate(
        self, candidate: ConnectionCandidate, nodes: Mapping[str, NodeInstance],
    ) -> ValidationResult:
        result = validate_connection(candidate, nodes)
        if not result.accepted and result.message:
            logger.info(
                "Rejected connection %s -> %s: %s",
                candidate.source, candidate.target, result.reason.value,
            )
            self._notify(result.message)
        return result

    def clear_validation(self) -> None:
        """Cancel any pending dismissal and hide the current message."""
        with self._lock:
            self._cancel_timer()
        if self._hide:
            self._hide()

    def _notify(self, message: str) -> None:
        if self._show is None:
            return
        # The old timer must be dead before the new message appears
        with self._lock:
            self._cancel_timer()
        self._show(message)
        with self._lock:
            self._cancel_timer()
            timer = threading.Timer(self.dismiss_after_ms / 1000, self._dismiss)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _dismiss(self) -> None:
        with self._lock:
            # A replaced timer that already fired must not clear its successor
            if self._timer is not threading.current_thread():
                return
            self._timer = None
        if self._hide:
            self._hide()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
