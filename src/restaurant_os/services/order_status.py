"""
POS order lifecycle.

    pending_approval -> new -> preparing -> ready -> completed
    pending_approval / new / preparing -> cancelled

completed and cancelled are terminal.
"""
import enum

from restaurant_os.exceptions import InvalidTransitionError
from restaurant_os.models.order import OrderStatusEnum


class OrderActionEnum(str, enum.Enum):
    approve = "approve"
    reject = "reject"
    start_preparing = "start_preparing"
    mark_ready = "mark_ready"
    mark_completed = "mark_completed"
    cancel = "cancel"


INITIAL_STATUS = OrderStatusEnum.pending_approval

TERMINAL_STATUSES = frozenset({OrderStatusEnum.completed, OrderStatusEnum.cancelled})

# (current status, action) -> next status
TRANSITIONS: dict[tuple[OrderStatusEnum, OrderActionEnum], OrderStatusEnum] = {
    (OrderStatusEnum.pending_approval, OrderActionEnum.approve): OrderStatusEnum.new,
    (OrderStatusEnum.pending_approval, OrderActionEnum.reject): OrderStatusEnum.cancelled,
    (OrderStatusEnum.new, OrderActionEnum.start_preparing): OrderStatusEnum.preparing,
    (OrderStatusEnum.new, OrderActionEnum.cancel): OrderStatusEnum.cancelled,
    (OrderStatusEnum.preparing, OrderActionEnum.mark_ready): OrderStatusEnum.ready,
    (OrderStatusEnum.preparing, OrderActionEnum.cancel): OrderStatusEnum.cancelled,
    (OrderStatusEnum.ready, OrderActionEnum.mark_completed): OrderStatusEnum.completed,
}

# timestamp column stamped when an action succeeds
ACTION_TIMESTAMPS = {
    OrderActionEnum.approve: "approved_at",
    OrderActionEnum.start_preparing: "preparation_start_time",
    OrderActionEnum.mark_ready: "ready_time",
    OrderActionEnum.mark_completed: "completion_time",
}


def is_terminal(status: OrderStatusEnum | str) -> bool:
    return OrderStatusEnum(status) in TERMINAL_STATUSES


def allowed_actions(status: OrderStatusEnum | str) -> list[OrderActionEnum]:
    status = OrderStatusEnum(status)
    return [action for (current, action) in TRANSITIONS if current == status]


def next_status(status: OrderStatusEnum | str, action: OrderActionEnum | str) -> OrderStatusEnum:
    """
    Returns the status reached from `status` by `action`.
    Raises InvalidTransitionError for anything not in TRANSITIONS.
    """
    try:
        key = (OrderStatusEnum(status), OrderActionEnum(action))
    except ValueError:
        raise InvalidTransitionError(getattr(status, "value", status), getattr(action, "value", action))

    target = TRANSITIONS.get(key)
    if target is None:
        raise InvalidTransitionError(key[0].value, key[1].value)
    return target


def action_for(current: OrderStatusEnum | str, target: OrderStatusEnum | str) -> OrderActionEnum:
    """Reverse lookup for callers that ask for a target status rather than an action."""
    current, target = OrderStatusEnum(current), OrderStatusEnum(target)
    for (status, action), to in TRANSITIONS.items():
        if status == current and to == target:
            return action
    raise InvalidTransitionError(current.value, target.value)
