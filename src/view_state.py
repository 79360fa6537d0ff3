"""View state machine for the board UI."""

from enum import Enum


class View(str, Enum):
    LIST = "list"
    DETAIL = "detail"
    ADMIN = "admin"


class Action(str, Enum):
    OPEN_THREAD = "open_thread"
    BACK = "back"
    UNLOCK_ADMIN = "unlock_admin"
    RESET = "reset"


class InvalidTransition(ValueError):
    """Raised when an action is not allowed from the current view."""


TRANSITIONS = {
    (View.LIST, Action.OPEN_THREAD): View.DETAIL,
    (View.DETAIL, Action.BACK): View.LIST,
    (View.LIST, Action.UNLOCK_ADMIN): View.ADMIN,
    (View.ADMIN, Action.BACK): View.LIST,
    (View.ADMIN, Action.RESET): View.LIST,
}


def next_view(current, action):
    """Return the view reached by applying ``action`` to ``current``.

    :raises InvalidTransition: If the pair is not in :data:`TRANSITIONS`.
    """
    try:
        return TRANSITIONS[(View(current), Action(action))]
    except (KeyError, ValueError) as exc:
        raise InvalidTransition(f"Cannot {action} from {current} view") from exc
