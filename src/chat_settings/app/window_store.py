"""Window properties store — terminal width and settings pane width.

One store is created at app start and handed to whoever needs it; there is
no module-level instance.

// [LAW:no-shared-mutable-globals] The app owns the store; widgets read via accessors.
"""

from snarfx import Store

SCHEMA: dict[str, object] = {
    "width": 80,
    "pane_width": None,  # int|None — None until the settings pane is laid out
}


def create(width: int | None = None) -> Store:
    """Create the window store, seeded with the current terminal width."""
    initial = {"width": width} if width is not None else None
    return Store(SCHEMA, initial=initial)


def set_width(store: Store, width: int) -> None:
    store.set("width", int(width))


def set_pane_width(store: Store, width: int | None) -> None:
    store.set("pane_width", None if width is None else int(width))


def width(store: Store) -> int:
    return store.get("width")


def pane_width(store: Store) -> int | None:
    return store.get("pane_width")
