"""Overlay statistics data structures and presentation utilities.

Every noding/assembly run can fill an OverlayStats record; the engines log it
at DEBUG level so performance and tolerance problems can be diagnosed without
a profiler.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass
class OverlayStats:
    op: str = ''
    input_edges: int = 0
    nodes: int = 0
    fragments: int = 0
    selected_edges: int = 0
    rings: int = 0
    shells: int = 0
    holes: int = 0
    slivers_dropped: int = 0
    short_circuit: bool = False
    # Timing (seconds)
    time_noding: float = 0.0
    time_assembly: float = 0.0

    @property
    def time_total(self) -> float:
        return self.time_noding + self.time_assembly

    def to_dict(self) -> Dict[str, Any]:  # pragma: no cover - simple mapping
        return {
            'op': self.op,
            'input_edges': self.input_edges,
            'nodes': self.nodes,
            'fragments': self.fragments,
            'selected_edges': self.selected_edges,
            'rings': self.rings,
            'shells': self.shells,
            'holes': self.holes,
            'slivers_dropped': self.slivers_dropped,
            'short_circuit': self.short_circuit,
            'selected_rate': (self.selected_edges / self.fragments) if self.fragments else 0.0,
            'time_noding': self.time_noding,
            'time_assembly': self.time_assembly,
            'time_total': self.time_total,
        }


def format_stats(stats: Mapping[str, Any]) -> str:
    """Return a one-line human readable summary of an OverlayStats dict."""
    if not stats:
        return "<no stats>"
    if stats.get('short_circuit'):
        return f"{stats.get('op', '?')}: short-circuit"
    return (f"{stats.get('op', '?')}: edges={stats['input_edges']} nodes={stats['nodes']} "
            f"fragments={stats['fragments']} selected={stats['selected_edges']} "
            f"rings={stats['rings']} (shells={stats['shells']} holes={stats['holes']} "
            f"slivers={stats['slivers_dropped']}) "
            f"t={stats['time_total'] * 1000.0:.2f}ms")


__all__ = ["OverlayStats", "format_stats"]
