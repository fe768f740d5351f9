"""Map marker clustering by zoom level.

Points are projected to Web Mercator pixel space (256 px tiles) at the requested zoom and
grouped greedily: each point joins the nearest cluster whose centre is within
max_cluster_radius pixels, otherwise it starts a new cluster. At or above
disable_clustering_at_zoom every point is returned as an individual marker.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Iterable

TILE_SIZE = 256
MAX_LATITUDE = 85.05112878
MAX_CLUSTER_RADIUS = 50
DISABLE_CLUSTERING_AT_ZOOM = 15
CLUSTER_ICON_SIZE = 46
MARKER_ICON_SIZE = 32


def project(lat: float, lng: float, zoom: int) -> tuple[float, float]:
    """Latitude/longitude to global pixel coordinates at zoom."""
    scale = TILE_SIZE * (2 ** zoom)
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    sin_lat = math.sin(math.radians(lat))
    x = (lng + 180.0) / 360.0 * scale
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale
    return x, y


def size_class(count: int) -> str:
    if count < 10:
        return "small"
    if count < 100:
        return "medium"
    return "large"


@dataclass
class _Cluster:
    px: float
    py: float
    members: list[dict] = field(default_factory=list)
    pixels: list[tuple[float, float]] = field(default_factory=list)

    def add(self, point: dict, x: float, y: float) -> None:
        self.members.append(point)
        self.pixels.append((x, y))
        n = len(self.pixels)
        # Running mean keeps the centre at the members' pixel centroid
        self.px += (x - self.px) / n
        self.py += (y - self.py) / n


def _has_coordinates(point: dict) -> bool:
    return point.get("latitude") is not None and point.get("longitude") is not None


def cluster_points(
    points: Iterable[dict[str, Any]],
    zoom: int,
    *,
    max_cluster_radius: float = MAX_CLUSTER_RADIUS,
    disable_clustering_at_zoom: int = DISABLE_CLUSTERING_AT_ZOOM,
) -> dict[str, list[dict]]:
    """Group marker dicts (must carry id, latitude, longitude) into clusters and single markers.

    Returns {"clusters": [...], "markers": [...]}; markers are the input dicts unchanged.
    """
    located = [p for p in points if _has_coordinates(p)]
    if zoom >= disable_clustering_at_zoom:
        return {"clusters": [], "markers": located}

    clusters: list[_Cluster] = []
    for point in located:
        x, y = project(point["latitude"], point["longitude"], zoom)
        best = None
        best_dist = None
        for c in clusters:
            dist = math.hypot(c.px - x, c.py - y)
            if dist <= max_cluster_radius and (best_dist is None or dist < best_dist):
                best, best_dist = c, dist
        if best is None:
            best = _Cluster(px=x, py=y)
            clusters.append(best)
            best.members.append(point)
            best.pixels.append((x, y))
        else:
            best.add(point, x, y)

    out_clusters: list[dict] = []
    markers: list[dict] = []
    for c in clusters:
        if len(c.members) == 1:
            markers.append(c.members[0])
            continue
        lats = [m["latitude"] for m in c.members]
        lngs = [m["longitude"] for m in c.members]
        count = len(c.members)
        out_clusters.append(
            {
                "id": f"cluster-{zoom}-{len(out_clusters) + 1}",
                "latitude": sum(lats) / count,
                "longitude": sum(lngs) / count,
                "count": count,
                "size": size_class(count),
                "icon_size": CLUSTER_ICON_SIZE,
                "bounds": {
                    "north": max(lats),
                    "south": min(lats),
                    "east": max(lngs),
                    "west": min(lngs),
                },
                "campsite_ids": [m["id"] for m in c.members],
            }
        )
    return {"clusters": out_clusters, "markers": markers}
