"""Helpers building document store paths."""

WORKSPACES = "workspaces"
EVENTS = "events"
CATEGORIES = "categories"
EXPENSES = "expenses"


def build_path(*segments: str) -> str:
    """Join path segments with slashes."""
    return "/".join(segments)


def workspace_path(owner_id: str) -> str:
    return build_path(WORKSPACES, owner_id)


def events_collection(owner_id: str) -> str:
    return build_path(WORKSPACES, owner_id, EVENTS)


def event_path(owner_id: str, event_id: str) -> str:
    return build_path(events_collection(owner_id), event_id)


def categories_collection(owner_id: str, event_id: str) -> str:
    return build_path(event_path(owner_id, event_id), CATEGORIES)


def category_path(owner_id: str, event_id: str, category_id: str) -> str:
    return build_path(categories_collection(owner_id, event_id), category_id)


def expenses_collection(owner_id: str, event_id: str) -> str:
    return build_path(event_path(owner_id, event_id), EXPENSES)


def expense_path(owner_id: str, event_id: str, expense_id: str) -> str:
    return build_path(expenses_collection(owner_id, event_id), expense_id)


__all__ = [
    "WORKSPACES",
    "build_path",
    "workspace_path",
    "events_collection",
    "event_path",
    "categories_collection",
    "category_path",
    "expenses_collection",
    "expense_path",
]
