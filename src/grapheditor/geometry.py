"""Geometry helpers for hover detection, handle placement and link drawing.

All functions are pure: they take node positions and radii and return
numbers or points, never touching editor state.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from grapheditor.model import Point

if TYPE_CHECKING:
    from grapheditor.model import Node

# Extra clearance left at the arrow end of a link for the marker.
ARROW_CLEARANCE = 5.0

# Link labels sit this far above the midpoint of the link.
LABEL_RAISE = 3.0


def distance(p1: tuple[float, float], p2: tuple[float, float]) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def within_circle(radius: float, center: tuple[float, float], point: tuple[float, float]) -> bool:
    """True if *point* lies inside or on the circle of *radius* around *center*.

    Compares squared distances, so a point exactly on the boundary counts
    as inside.
    """
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return dx * dx + dy * dy <= radius * radius


def trimmed_link_path(
    node_a: Node,
    node_b: Node,
    node_radius: float,
    is_a_to_b: bool,
) -> tuple[Point, Point]:
    """Endpoints of the line drawn for a link between two nodes.

    Each end is pulled in from its node's center along the A→B direction by
    ``node_radius``; the arrow end is pulled in by a further
    ``ARROW_CLEARANCE`` to leave room for the marker.

    Coincident nodes have no direction, so a zero-length segment at the
    shared center is returned.
    """
    delta_x = node_b.x - node_a.x
    delta_y = node_b.y - node_a.y
    dist = math.hypot(delta_x, delta_y)
    if dist == 0:
        center = Point(node_a.x, node_a.y)
        return center, center

    norm_x = delta_x / dist
    norm_y = delta_y / dist
    padding_a = node_radius + (0.0 if is_a_to_b else ARROW_CLEARANCE)
    padding_b = node_radius + (ARROW_CLEARANCE if is_a_to_b else 0.0)
    point_a = Point(node_a.x + padding_a * norm_x, node_a.y + padding_a * norm_y)
    point_b = Point(node_b.x - padding_b * norm_x, node_b.y - padding_b * norm_y)
    return point_a, point_b


def drag_handle_transform(
    center: tuple[float, float],
    mouse: tuple[float, float],
    node_radius: float,
) -> tuple[Point, float]:
    """Place a direction handle on a node's circumference facing the mouse.

    Returns the handle position on the boundary circle and the rotation in
    degrees that points the handle glyph outward along the mouse bearing.

    The bearing comes from the arcsine of the normalized horizontal offset.
    With the mouse below the center the angle is reflected as
    ``90 - angle``; otherwise it becomes ``270 + angle`` and the vertical
    offset is negated so the handle sits on the upper half.
    """
    cx, cy = center
    mx, my = mouse

    y_offset = cy - my
    x_offset = mx - cx
    length = math.hypot(x_offset, y_offset)
    if length == 0:
        # No bearing: park the handle at the top of the node.
        return Point(cx, cy - node_radius), 270.0

    ratio = max(-1.0, min(1.0, x_offset / length))
    angle = math.degrees(math.asin(ratio))
    dx = ratio * node_radius
    dy = math.sqrt(max(node_radius * node_radius - dx * dx, 0.0))

    if y_offset < 0:
        angle = 90 - angle
    else:
        angle = 270 + angle
        dy = -dy

    return Point(cx + dx, cy + dy), angle


def link_label_position(node_a: Node, node_b: Node) -> Point:
    """Midpoint between two node centers, raised slightly for the label text."""
    return Point(
        min(node_a.x, node_b.x) + abs(node_b.x - node_a.x) / 2,
        min(node_a.y, node_b.y) + abs(node_b.y - node_a.y) / 2 - LABEL_RAISE,
    )


def clamp_to_surface(
    x: float,
    y: float,
    node_radius: float,
    width: float,
    height: float,
) -> Point:
    """Keep a node's circle inside a ``width`` x ``height`` surface.

    The far edge is applied first and the near edge last, so on a surface
    narrower than the node the center ends at ``node_radius``.
    """
    if x + node_radius > width:
        x = width - node_radius
    if x - node_radius < 0:
        x = node_radius
    if y + node_radius > height:
        y = height - node_radius
    if y - node_radius < 0:
        y = node_radius
    return Point(x, y)


def distance_to_segment(
    point: tuple[float, float],
    start: tuple[float, float],
    end: tuple[float, float],
) -> float:
    """Shortest distance from *point* to the segment *start*-*end*."""
    seg_x = end[0] - start[0]
    seg_y = end[1] - start[1]
    length_sq = seg_x * seg_x + seg_y * seg_y
    if length_sq == 0:
        return distance(point, start)
    t = ((point[0] - start[0]) * seg_x + (point[1] - start[1]) * seg_y) / length_sq
    t = max(0.0, min(1.0, t))
    return distance(point, (start[0] + t * seg_x, start[1] + t * seg_y))
