#!/usr/bin/env python3
"""
polyclip Example: Clipping a Species Range to a Mainland

A rectangular species range is clipped against a concave mainland outline.
The example prints the area of every piece of the overlay, the topological
relation of the inputs and the centroids, then draws the pieces.

What this example shows:
1. Building polygons from coordinate lists
2. Intersection, differences and union with per-operation debug statistics
3. Relations and centroids
4. A coastal buffer around the mainland
5. Visualizing the result
"""

import argparse

import matplotlib.pyplot as plt

from polyclip import (
    Polygon, area, buffer, centroid, configure_logging, difference, intersect, relate, union, within,
)

MAINLAND = Polygon.from_coords([
    (1, 1), (2, 2), (3, 1), (4, 1), (5, 3), (4, 5.5), (3.5, 4), (3, 5), (2, 5), (2, 4), (1, 5), (0, 3),
])
RANGE = Polygon.from_coords([(0, 3), (5, 3), (5, 6), (0, 6)])


def plot_pieces(ax, pset, color, label):
    first = True
    for poly in pset:
        for i, ring in enumerate(poly.rings):
            xy = ring.coords
            ax.fill(xy[:, 0], xy[:, 1], color='white' if i else color, alpha=1.0 if i else 0.5,
                    label=label if first else None)
            ax.plot(xy[:, 0], xy[:, 1], 'k-', linewidth=0.8)
            first = False


def main():
    parser = argparse.ArgumentParser(description='Clip a species range to a mainland outline')
    parser.add_argument('--coast', type=float, default=0.25, help='coastal buffer distance')
    parser.add_argument('--log-level', default='INFO', help='polyclip log level (DEBUG shows overlay stats)')
    parser.add_argument('--out', default='species_range_clip.png', help='output image')
    args = parser.parse_args()
    configure_logging(args.log_level)

    print("=" * 60)
    print(" polyclip: species range on mainland")
    print("=" * 60)

    print("\n[1] Inputs")
    print(f"  mainland area: {area(MAINLAND):.4f}")
    print(f"  range area:    {area(RANGE):.4f}")
    print(f"  relation:      {relate(MAINLAND, RANGE).value}")

    print("\n[2] Overlay")
    on_land = intersect(MAINLAND, RANGE)
    land_only = difference(MAINLAND, RANGE)
    offshore = difference(RANGE, MAINLAND)
    print(f"  range on mainland:   {area(on_land):.4f} ({len(on_land)} part(s))")
    print(f"  mainland outside:    {area(land_only):.4f} ({len(land_only)} part(s))")
    print(f"  range offshore:      {area(offshore):.4f} ({len(offshore)} part(s))")
    print(f"  union:               {area(union(MAINLAND, RANGE)):.4f}")

    print("\n[3] Centroids")
    c_range = centroid(RANGE)
    c_land = centroid(MAINLAND)
    print(f"  range centroid ({c_range.x:.4f}, {c_range.y:.4f}) on mainland: {within(c_range, MAINLAND)}")
    print(f"  mainland centroid ({c_land.x:.4f}, {c_land.y:.4f}) in range: {within(c_land, RANGE)}")

    print(f"\n[4] Coastal strip of width {args.coast}")
    coast = difference(buffer(MAINLAND, args.coast), MAINLAND)
    print(f"  coastal strip area: {area(coast):.4f}")

    print("\n[5] Creating visualization...")
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.set_aspect('equal')
    plot_pieces(ax, coast, 'tab:cyan', 'coastal strip')
    plot_pieces(ax, land_only, 'tab:olive', 'mainland only')
    plot_pieces(ax, on_land, 'tab:green', 'range on mainland')
    plot_pieces(ax, offshore, 'tab:blue', 'range offshore')
    ax.plot([c_range.x], [c_range.y], 'r+', markersize=10, label='range centroid')
    ax.legend(loc='lower right', fontsize=8)
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(args.out, dpi=150, bbox_inches='tight')
    print(f"  Saved visualization to '{args.out}'")

    print("\n" + "=" * 60)
    print(" Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
