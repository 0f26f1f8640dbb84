"""Planar noding: the augmented graph shared by overlay, buffer and relate.

Every operand is a bag of directed edges whose interior lies on the left
(exteriors counter-clockwise, holes clockwise). ``node_edges`` splits all edges
at their mutual intersections, snaps points closer than the tolerance into a
single node and merges coincident pieces into unique *fragments*. For each
fragment the graph keeps, per operand, the net number of times that operand
runs along it (forward minus backward). Together with one ray cast per
fragment this yields the winding number of every operand on both sides of
every fragment, which is all the engines need to select result boundaries.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Tuple

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components
from scipy.spatial import cKDTree

from .predicates import candidate_pairs, orient_vectorized, project_on_segment

WindingRule = Callable[[np.ndarray], np.ndarray]


def closed_curve_edges(curves: Iterable[np.ndarray]) -> np.ndarray:
    """Stack closed (N,2) coordinate arrays into an (E,2,2) directed edge array."""
    parts = []
    for c in curves:
        c = np.asarray(c, dtype=np.float64)
        if c.shape[0] >= 2:
            parts.append(np.stack([c[:-1], c[1:]], axis=1))
    if not parts:
        return np.zeros((0, 2, 2), dtype=np.float64)
    return np.concatenate(parts)


def polygon_set_edges(pset) -> np.ndarray:
    """Directed edges of every ring of a PolygonSet, interior on the left."""
    curves = []
    for poly in pset.oriented():
        curves.extend(r.coords for r in poly.rings)
    return closed_curve_edges(curves)


@dataclass
class PlanarGraph:
    """Noded arrangement of one or more operands.

    nodes     : (N,2) float64 node coordinates
    fragments : (F,2) node index pairs, fragments[:,0] < fragments[:,1]
    counts    : (F,K) net multiplicity of operand k along fragments[:,0] -> fragments[:,1]
    """

    nodes: np.ndarray
    fragments: np.ndarray
    counts: np.ndarray
    tol: float

    @property
    def n_operands(self) -> int:
        return int(self.counts.shape[1])

    def side_windings(self, chunk: int = 256) -> Tuple[np.ndarray, np.ndarray]:
        """Winding numbers (left, right) of every operand beside every fragment.

        The right-hand value comes from a ray cast from the fragment midpoint
        along its right normal, counting signed crossings of all other
        fragments weighted by their multiplicities. The left-hand value follows
        by adding the fragment's own multiplicity.
        """
        F, K = self.counts.shape
        right = np.zeros((F, K), dtype=np.int64)
        if F == 0:
            return right.copy(), right
        P = self.nodes[self.fragments[:, 0]]
        Q = self.nodes[self.fragments[:, 1]]
        mid = 0.5 * (P + Q)
        d = Q - P
        d = d / np.hypot(d[:, 0], d[:, 1])[:, None]
        normal = np.stack([d[:, 1], -d[:, 0]], axis=1)
        counts = self.counts.astype(np.int64)
        for start in range(0, F, chunk):
            stop = min(F, start + chunk)
            m = mid[start:stop, None, :]
            n_ = normal[start:stop, None, :]
            t_ = d[start:stop, None, :]
            dp = P[None, :, :] - m
            dq = Q[None, :, :] - m
            # frame where the ray is +x and the fragment direction is +y
            px = np.sum(dp * n_, axis=-1); py = np.sum(dp * t_, axis=-1)
            qx = np.sum(dq * n_, axis=-1); qy = np.sum(dq * t_, axis=-1)
            up = (py <= 0.0) & (qy > 0.0)
            down = (qy <= 0.0) & (py > 0.0)
            span = up | down
            denom = np.where(span, qy - py, 1.0)
            xc = px - py * (qx - px) / denom
            hit = span & (xc > 0.0)
            rows = np.arange(stop - start)
            hit[rows, rows + start] = False
            signs = np.where(up, 1, -1) * hit
            right[start:stop] = signs @ counts
        left = right + counts
        return left, right

    def boundary_edges(self, rule: WindingRule) -> np.ndarray:
        """Directed (M,2) node pairs bounding the region where ``rule`` holds,
        oriented with that region on the left."""
        left, right = self.side_windings()
        inside_left = rule(left)
        inside_right = rule(right)
        fwd = inside_left & ~inside_right
        bwd = inside_right & ~inside_left
        return np.concatenate([self.fragments[fwd], self.fragments[bwd][:, ::-1]]).astype(np.intp)


def _intersections(a: np.ndarray, b: np.ndarray, tol: float):
    """Split points (edge index, parameter, point) for all edge pairs."""
    I, J = candidate_pairs(a, b, tol=tol)
    edges, params, points = [], [], []
    if I.size:
        p, q, r, s = a[I], b[I], a[J], b[J]
        o1 = np.sign(orient_vectorized(p, q, r)); o2 = np.sign(orient_vectorized(p, q, s))
        o3 = np.sign(orient_vectorized(r, s, p)); o4 = np.sign(orient_vectorized(r, s, q))
        cross = (o1 * o2 < 0) & (o3 * o4 < 0)
        if np.any(cross):
            pc, rc = p[cross], r[cross]
            d1 = q[cross] - pc
            d2 = s[cross] - rc
            w = rc - pc
            denom = d1[:, 0] * d2[:, 1] - d1[:, 1] * d2[:, 0]
            t = np.clip((w[:, 0] * d2[:, 1] - w[:, 1] * d2[:, 0]) / denom, 0.0, 1.0)
            u = np.clip((w[:, 0] * d1[:, 1] - w[:, 1] * d1[:, 0]) / denom, 0.0, 1.0)
            X = pc + t[:, None] * d1
            edges += [I[cross], J[cross]]
            params += [t, u]
            points += [X, X]
        # endpoints lying on the other segment: T-junctions, touches, colinear overlaps
        for pt, host, sa, sb in ((r, I, p, q), (s, I, p, q), (p, J, r, s), (q, J, r, s)):
            dist, t = project_on_segment(pt, sa, sb)
            near = dist <= tol
            if np.any(near):
                edges.append(host[near])
                params.append(t[near])
                points.append(pt[near])
    if not edges:
        return np.zeros((0,), dtype=np.intp), np.zeros((0,)), np.zeros((0, 2))
    return np.concatenate(edges), np.concatenate(params), np.concatenate(points)


def _snap(points: np.ndarray, tol: float) -> Tuple[np.ndarray, np.ndarray]:
    """Cluster points closer than tol; returns (label per point, node coordinates).

    Each node takes the coordinates of the lowest-index point of its cluster, so
    input vertices (listed first) win over computed intersection points.
    """
    n = points.shape[0]
    pairs = cKDTree(points).query_pairs(r=tol, output_type='ndarray')
    graph = coo_matrix((np.ones(pairs.shape[0], dtype=np.int8), (pairs[:, 0], pairs[:, 1])), shape=(n, n))
    ncomp, comp = connected_components(graph, directed=False)
    rep = np.full(ncomp, n, dtype=np.intp)
    np.minimum.at(rep, comp, np.arange(n, dtype=np.intp))
    order = np.argsort(rep, kind='stable')
    node_of_comp = np.empty(ncomp, dtype=np.intp)
    node_of_comp[order] = np.arange(ncomp, dtype=np.intp)
    return node_of_comp[comp], points[rep[order]]


def node_edges(operands: Sequence[np.ndarray], tol: float) -> PlanarGraph:
    """Build the noded planar graph of a list of (E_k,2,2) directed edge arrays."""
    K = len(operands)
    segs = [np.asarray(op, dtype=np.float64).reshape(-1, 2, 2) for op in operands]
    total = sum(s.shape[0] for s in segs)
    if total == 0:
        return PlanarGraph(np.zeros((0, 2)), np.zeros((0, 2), dtype=np.intp),
                           np.zeros((0, K), dtype=np.int64), tol)
    owner = np.concatenate([np.full(s.shape[0], k, dtype=np.intp) for k, s in enumerate(segs)])
    allsegs = np.concatenate(segs)
    a = allsegs[:, 0]
    b = allsegs[:, 1]
    E = allsegs.shape[0]

    split_edge, split_t, split_pt = _intersections(a, b, tol)

    pts = np.concatenate([a, b, split_pt])
    pt_edge = np.concatenate([np.arange(E), np.arange(E), split_edge])
    pt_t = np.concatenate([np.zeros(E), np.ones(E), split_t])
    labels, nodes = _snap(pts, tol)

    order = np.lexsort((pt_t, pt_edge))
    e_sorted = pt_edge[order]
    l_sorted = labels[order]
    same_edge = e_sorted[:-1] == e_sorted[1:]
    u = l_sorted[:-1][same_edge]
    v = l_sorted[1:][same_edge]
    e = e_sorted[:-1][same_edge]
    keep = u != v
    u, v, e = u[keep], v[keep], e[keep]

    N = nodes.shape[0]
    lo = np.minimum(u, v).astype(np.int64)
    hi = np.maximum(u, v).astype(np.int64)
    sign = np.where(u < v, 1, -1).astype(np.int64)
    keys = lo * N + hi
    uniq, inv = np.unique(keys, return_inverse=True)
    fragments = np.stack([uniq // N, uniq % N], axis=1).astype(np.intp)
    counts = np.zeros((uniq.shape[0], K), dtype=np.int64)
    np.add.at(counts, (inv.ravel(), owner[e]), sign)
    return PlanarGraph(nodes, fragments, counts, tol)


__all__ = [
    'PlanarGraph', 'WindingRule', 'node_edges', 'closed_curve_edges', 'polygon_set_edges',
]
