import inspect
import json
import time
from datetime import UTC, datetime
from functools import wraps

import numpy as np
import polars as pl

from ._GraphDiff import GraphDiff


class History:
    # History and Timeline

    # Mutating methods to wrap. Add here if you add new mutators.
    _MUTATORS = (
        "add_vertex",
        "remove_vertex",
        "set_vertex_value",
        "add_edge",
        "remove_edge",
        "set_edge_weight",
    )

    def _init_history(self):
        self._history_enabled = True
        self._history = []  # list[dict]
        self._version = 0
        self._history_clock0 = time.perf_counter_ns()
        self._snapshots = []
        self._install_history_hooks()

    def _utcnow_iso(self) -> str:
        return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")

    def _jsonify(self, x):
        # Make args/return JSON-safe & compact.
        if x is None or isinstance(x, (bool, int, float, str)):
            return x
        if isinstance(x, (set, frozenset)):
            return sorted(self._jsonify(v) for v in x)
        if isinstance(x, (list, tuple)):
            return [self._jsonify(v) for v in x]
        if isinstance(x, dict):
            return {str(k): self._jsonify(v) for k, v in x.items()}
        # NumPy scalars
        if isinstance(x, np.generic):
            return x.item()
        t = type(x).__name__
        return f"<<{t}>>"

    def _log_event(self, op: str, **fields):
        if not self._history_enabled:
            return
        self._version += 1
        evt = {
            "version": self._version,
            "ts_utc": self._utcnow_iso(),  # ISO-8601 with Z
            "mono_ns": time.perf_counter_ns() - self._history_clock0,
            "op": op,
        }
        for k, v in fields.items():
            evt[k] = self._jsonify(v)
        self._history.append(evt)

    def _log_mutation(self, name=None):
        def deco(fn):
            op = name or fn.__name__
            sig = inspect.signature(fn)

            @wraps(fn)
            def wrapper(*args, **kwargs):
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
                # failing calls raise here and are never recorded
                result = fn(*args, **kwargs)
                payload = dict(bound.arguments)
                payload["result"] = result
                self._log_event(op, **payload)
                return result

            return wrapper

        return deco

    def _install_history_hooks(self):
        for name in self._MUTATORS:
            fn = getattr(self, name, None)
            # Avoid double-wrapping
            if fn is not None and getattr(fn, "__wrapped__", None) is None:
                setattr(self, name, self._log_mutation(name)(fn))

    def _history_frame(self) -> pl.DataFrame:
        # events carry different argument columns per op; scan all rows for the schema
        return pl.DataFrame(self._history, infer_schema_length=None, strict=False)

    def history(self, as_df: bool = False):
        """Return the append-only mutation history.

        Parameters
        --
        as_df : bool, default False
            If True, return a Polars DF [DataFrame]; otherwise return a list of dicts.

        Returns
        ---
        list[dict] or polars.DataFrame
            Each event includes: 'version', 'ts_utc' (UTC ISO-8601), 'mono_ns'
            (monotonic nanoseconds since the graph was created), 'op', the call
            arguments and 'result'.

        Notes
        -
        Only successful calls are recorded. The log is in-memory until exported.

        """
        return self._history_frame() if as_df else list(self._history)

    def export_history(self, path: str):
        """Write the mutation history to disk.

        Parameters
        --
        path : str
            Output path. Supported extensions: '.parquet', '.ndjson' (a.k.a. '.jsonl'),
            '.json', '.csv'. Unknown extensions default to Parquet by appending '.parquet'.

        Returns
        ---
        int
            Number of events written. Returns 0 if the history is empty.

        """
        if not self._history:
            return 0
        df = self._history_frame()
        path = str(path)
        p = path.lower()
        if p.endswith(".parquet"):
            df.write_parquet(path)
        elif p.endswith(".ndjson") or p.endswith(".jsonl"):
            with open(path, "w", encoding="utf-8") as f:
                for r in df.iter_rows(named=True):
                    f.write(json.dumps(r, ensure_ascii=False) + "\n")
        elif p.endswith(".json"):
            with open(path, "w", encoding="utf-8") as f:
                json.dump(df.to_dicts(), f, ensure_ascii=False)
        elif p.endswith(".csv"):
            df.write_csv(path)
        else:
            df.write_parquet(path + ".parquet")
        return len(df)

    def enable_history(self, flag: bool = True):
        """Enable or disable in-memory mutation logging."""
        self._history_enabled = bool(flag)

    def clear_history(self):
        """Clear the in-memory mutation log. Previously exported files are untouched."""
        self._history.clear()

    def mark(self, label: str):
        """Insert a manual marker (``op == 'mark'``) into the mutation history."""
        self._log_event("mark", label=label)

    # Snapshots

    def _state(self):
        edges = {}
        for s, t, w in self.edges():
            key = (s, t) if self.directed else tuple(sorted((s, t)))
            edges[key] = w
        return {
            "vertex_ids": set(self.vertices()),
            "edges": edges,
        }

    def snapshot(self, label=None):
        """Create a named snapshot of the current vertex and edge sets.

        Parameters
        --
        label : str, optional
            Human-readable label (auto-generated if None).

        Returns
        ---
        dict
            Snapshot metadata plus the captured state.

        """
        if label is None:
            label = f"snapshot_{len(self._snapshots)}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        state = self._state()
        snapshot = {
            "label": label,
            "version": self._version,
            "timestamp": datetime.now(UTC).isoformat(),
            "counts": {
                "vertices": len(state["vertex_ids"]),
                "edges": len(state["edges"]),
            },
            **state,
        }
        self._snapshots.append(snapshot)
        return snapshot

    def diff(self, a, b=None):
        """Compare two snapshots, or a snapshot with the current state.

        Parameters
        --
        a : str | dict | Graph
            First snapshot (label, snapshot dict, or graph instance).
        b : str | dict | Graph | None
            Second snapshot. If None, compare with current state.

        Returns
        ---
        GraphDiff

        """
        snap_a = self._resolve_snapshot(a)
        snap_b = self._resolve_snapshot(b) if b is not None else self._current_snapshot()
        return GraphDiff(snap_a, snap_b)

    def _resolve_snapshot(self, ref):
        if isinstance(ref, dict):
            return ref
        if isinstance(ref, str):
            for snap in self._snapshots:
                if snap["label"] == ref:
                    return snap
            raise ValueError(f"Snapshot '{ref}' not found")
        if isinstance(ref, History):
            return {"label": "external", "version": ref._version, **ref._state()}
        raise TypeError(f"Invalid snapshot reference: {type(ref)}")

    def _current_snapshot(self):
        return {"label": "current", "version": self._version, **self._state()}

    def list_snapshots(self):
        """Snapshot metadata (label, timestamp, version, counts), oldest first."""
        return [
            {
                "label": snap["label"],
                "timestamp": snap["timestamp"],
                "version": snap["version"],
                "counts": snap["counts"],
            }
            for snap in self._snapshots
        ]
