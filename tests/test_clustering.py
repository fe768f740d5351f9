import unittest

from campsite_api.services.clustering import TILE_SIZE, cluster_points, project, size_class


def _point(pid, lat, lng):
    return {"id": pid, "latitude": lat, "longitude": lng}


def _lng(px, zoom):
    """Longitude that sits px pixels east of 0 on the equator at zoom."""
    return px * 360.0 / (TILE_SIZE * 2 ** zoom)


class ClusteringTests(unittest.TestCase):
    def test_project_origin(self):
        x, y = project(0, 0, 0)
        self.assertAlmostEqual(x, 128)
        self.assertAlmostEqual(y, 128)

    def test_size_class_boundaries(self):
        self.assertEqual(size_class(2), "small")
        self.assertEqual(size_class(9), "small")
        self.assertEqual(size_class(10), "medium")
        self.assertEqual(size_class(99), "medium")
        self.assertEqual(size_class(100), "large")

    def test_nearby_points_cluster_at_low_zoom(self):
        points = [_point(1, 18.78, 98.98), _point(2, 18.80, 99.00), _point(3, 7.88, 98.39)]
        result = cluster_points(points, zoom=6)
        self.assertEqual(len(result["clusters"]), 1)
        cluster = result["clusters"][0]
        self.assertEqual(cluster["count"], 2)
        self.assertEqual(cluster["size"], "small")
        self.assertEqual(sorted(cluster["campsite_ids"]), [1, 2])
        self.assertEqual(cluster["id"], "cluster-6-1")
        self.assertAlmostEqual(cluster["latitude"], 18.79)
        self.assertEqual(cluster["bounds"]["north"], 18.80)
        self.assertEqual(cluster["bounds"]["west"], 98.98)
        self.assertEqual([m["id"] for m in result["markers"]], [3])

    def test_high_zoom_disables_clustering(self):
        points = [_point(1, 18.78, 98.98), _point(2, 18.7801, 98.9801)]
        result = cluster_points(points, zoom=15)
        self.assertEqual(result["clusters"], [])
        self.assertEqual(len(result["markers"]), 2)

    def test_points_without_coordinates_are_dropped(self):
        result = cluster_points([_point(1, None, 98.0), _point(2, 13.7, 100.5)], zoom=3)
        self.assertEqual(result["clusters"], [])
        self.assertEqual([m["id"] for m in result["markers"]], [2])

    def test_empty_input(self):
        self.assertEqual(cluster_points([], zoom=5), {"clusters": [], "markers": []})

    def test_point_joins_nearest_of_two_clusters_in_range(self):
        zoom = 10
        points = [
            _point(1, 0.0, _lng(0, zoom)),
            _point(2, 0.0, _lng(80, zoom)),
            # 45 px from the first and 35 px from the second
            _point(3, 0.0, _lng(45, zoom)),
        ]
        result = cluster_points(points, zoom=zoom)
        self.assertEqual([c["campsite_ids"] for c in result["clusters"]], [[2, 3]])
        self.assertEqual([m["id"] for m in result["markers"]], [1])

    def test_cluster_centre_moves_to_member_mean(self):
        zoom = 10
        # After the first two the centre sits at 20 px, so 65 px is 45 px away
        points = [
            _point(1, 0.0, _lng(0, zoom)),
            _point(2, 0.0, _lng(40, zoom)),
            _point(3, 0.0, _lng(65, zoom)),
        ]
        result = cluster_points(points, zoom=zoom)
        self.assertEqual(len(result["clusters"]), 1)
        cluster = result["clusters"][0]
        self.assertEqual(cluster["campsite_ids"], [1, 2, 3])
        self.assertAlmostEqual(cluster["longitude"], _lng(35, zoom))
        self.assertEqual(result["markers"], [])

    def test_first_member_alone_does_not_reach_far_point(self):
        zoom = 10
        points = [_point(1, 0.0, _lng(0, zoom)), _point(3, 0.0, _lng(65, zoom))]
        result = cluster_points(points, zoom=zoom)
        self.assertEqual(result["clusters"], [])
        self.assertEqual([m["id"] for m in result["markers"]], [1, 3])

    def test_radius_boundary(self):
        zoom = 12
        inside = cluster_points([_point(1, 0.0, _lng(0, zoom)), _point(2, 0.0, _lng(49.9, zoom))], zoom=zoom)
        self.assertEqual(len(inside["clusters"]), 1)
        self.assertEqual(inside["markers"], [])

        outside = cluster_points([_point(1, 0.0, _lng(0, zoom)), _point(2, 0.0, _lng(50.1, zoom))], zoom=zoom)
        self.assertEqual(outside["clusters"], [])
        self.assertEqual(len(outside["markers"]), 2)

    def test_zoom_14_clusters_and_zoom_15_does_not(self):
        points = [_point(1, 0.0, _lng(0, 14)), _point(2, 0.0, _lng(20, 14))]
        at_14 = cluster_points(points, zoom=14)
        self.assertEqual(len(at_14["clusters"]), 1)
        self.assertEqual(at_14["clusters"][0]["count"], 2)
        self.assertEqual(at_14["markers"], [])

        at_15 = cluster_points(points, zoom=15)
        self.assertEqual(at_15["clusters"], [])
        self.assertEqual([m["id"] for m in at_15["markers"]], [1, 2])


if __name__ == "__main__":
    unittest.main()
