"""Small builders and checks shared by the test modules."""

from hierarchy import Edge, Node


def make_nodes(*ids):
    return [Node(id=i, label=i) for i in ids]


def make_edges(*pairs):
    return [Edge.between(s, t) for s, t in pairs]


def overlapping_pairs(positions, heights, cfg):
    """All pairs of boxes that intersect once grown by min_node_spacing."""
    ids = list(positions)
    bad = []
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            pa, pb = positions[a], positions[b]
            ha = heights.get(a, cfg.node_height)
            hb = heights.get(b, cfg.node_height)
            m = cfg.min_node_spacing
            if (
                pa.x < pb.x + cfg.node_width + m
                and pb.x < pa.x + cfg.node_width + m
                and pa.y < pb.y + hb + m
                and pb.y < pa.y + ha + m
            ):
                bad.append((a, b))
    return bad


def has_cycle(edges):
    out = {}
    for e in edges:
        out.setdefault(e.source, []).append(e.target)

    for start in out:
        seen = set()
        stack = list(out[start])
        while stack:
            cur = stack.pop()
            if cur == start:
                return True
            if cur in seen:
                continue
            seen.add(cur)
            stack.extend(out.get(cur, []))
    return False
