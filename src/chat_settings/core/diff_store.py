"""Edit-state diff tracker — baseline + touched overrides + minimal changeset.

A DiffStore is built from a default producer: a zero-arg function that reads
external observable state and returns the baseline record for a form. User
edits are layered on top as overrides; values() is what inputs bind to and
diff() is the partial-update body.

// [LAW:one-source-of-truth] Baseline is derived, never copied. Overrides are the only mutable state.
// [LAW:dataflow-not-control-flow] Overrides carry the baseline generation and values they
//   were made against; a stale tag reads as "no overrides", so a baseline change clears
//   edits in the same read that observes the new baseline.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import NamedTuple

from snarfx import Computed, Observable


class Baseline(NamedTuple):
    generation: int
    values: dict[str, object]


class EditState(NamedTuple):
    generation: int
    overrides: dict[str, object]
    # baseline values the overrides were made against
    basis: dict[str, object]


class View(NamedTuple):
    values: dict[str, object]
    diff: dict[str, object]
    touched: frozenset[str]


class DiffStore:
    """Reactive container tracking a baseline, user overrides and their diff.

    Reads inside a snarfx derivation (computed, reaction, autorun) are tracked,
    so UI reactions re-run when values() or diff() change.
    """

    def __init__(self, default_fn: Callable[[], Mapping[str, object]]) -> None:
        self._default_fn = default_fn
        self._generation = 0
        self._baseline: Computed[Baseline] = Computed(self._derive_baseline)
        self._edits: Observable[EditState] = Observable(EditState(0, {}, {}))
        # values and diff come from one Computed so readers never see a mismatched pair.
        self._view: Computed[View] = Computed(self._derive_view)

    # ─── Derivations ──────────────────────────────────────────────────

    def _derive_baseline(self) -> Baseline:
        values = dict(self._default_fn())
        self._generation += 1
        return Baseline(self._generation, values)

    def _derive_view(self) -> View:
        baseline = self._baseline.get()
        base = baseline.values
        overrides = self._overrides_for(baseline)
        return View(
            values={**base, **overrides},
            diff={key: value for key, value in overrides.items() if value != base[key]},
            touched=frozenset(overrides),
        )

    # ─── Reads ────────────────────────────────────────────────────────

    def values(self) -> dict[str, object]:
        """Fully resolved record: override if touched, else baseline."""
        return dict(self._view.get().values)

    def diff(self) -> dict[str, object]:
        """Only the touched fields whose value differs from the baseline."""
        return dict(self._view.get().diff)

    def baseline(self) -> dict[str, object]:
        return dict(self._baseline.get().values)

    def touched(self) -> frozenset[str]:
        return self._view.get().touched

    def has_changes(self) -> bool:
        return bool(self._view.get().diff)

    # ─── Writes ───────────────────────────────────────────────────────

    def _write_target(self) -> Baseline:
        """Baseline that a write made now should be tagged against.

        Inside a snarfx batch a source change has not invalidated the cached
        baseline yet. When the producer already disagrees with the cache, the
        write targets the baseline the flush will derive (the next generation).
        """
        cached = self._baseline.get()
        fresh = dict(self._default_fn())
        if fresh == cached.values:
            return cached
        return Baseline(cached.generation + 1, fresh)

    def _overrides_for(self, target: Baseline) -> dict[str, object]:
        edits = self._edits.get()
        if edits.generation != target.generation or edits.basis != target.values:
            return {}
        return edits.overrides

    def set(self, field: str, value: object) -> None:
        """Mark field touched with value. Unknown fields raise KeyError."""
        target = self._write_target()
        if field not in target.values:
            raise KeyError(field)
        overrides = {**self._overrides_for(target), field: value}
        self._edits.set(EditState(target.generation, overrides, target.values))

    def reset(self, *fields: str) -> None:
        """Drop overrides so fields read the baseline again and leave the diff."""
        target = self._write_target()
        current = self._overrides_for(target)
        overrides = {key: value for key, value in current.items() if key not in fields}
        if len(overrides) != len(current):
            self._edits.set(EditState(target.generation, overrides, target.values))

    def dispose(self) -> None:
        self._view.dispose()
        self._baseline.dispose()
