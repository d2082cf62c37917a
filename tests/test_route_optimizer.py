"""
Tests for the round-trip route estimate
"""
import unittest

from fairsplit.matrix import DistanceOracle
from fairsplit.models import Location
from fairsplit.paths import nearest_neighbor_tour, optimal_route, route_points
from tests.fixtures.sample_events import LineDistanceProvider


class TestRouteOptimizer(unittest.TestCase):

    def setUp(self):
        self.oracle = DistanceOracle(LineDistanceProvider())

    def test_single_departure_is_out_and_back(self):
        departure = Location(35.0, 139.0)
        destination = Location(35.0, 139.25)

        self.assertEqual(optimal_route([departure], destination, self.oracle), 50.0)

    def test_no_departures(self):
        self.assertEqual(optimal_route([], Location(35.0, 139.5), self.oracle), 0.0)

    def test_nearest_neighbor_order(self):
        departures = [Location(35.0, 139.0), Location(35.0, 139.3)]
        destination = Location(35.0, 140.0)

        tour = nearest_neighbor_tour(departures, destination, self.oracle)

        self.assertEqual(tour['order_idx'], [0, 1, 2, 0])
        self.assertEqual(tour['legs_km'], [30.0, 70.0, 100.0])
        self.assertAlmostEqual(tour['total_km'], 200.0)
        self.assertAlmostEqual(optimal_route(departures, destination, self.oracle), 200.0)

    def test_ties_go_to_lowest_index(self):
        # second departure and destination are both 50 km from the start
        departures = [Location(35.0, 139.0), Location(35.0, 139.5)]
        destination = Location(35.0, 138.5)

        tour = nearest_neighbor_tour(departures, destination, self.oracle)

        self.assertEqual(tour['order_idx'], [0, 1, 2, 0])
        self.assertAlmostEqual(tour['total_km'], 200.0)

    def test_visits_every_point_once(self):
        departures = [Location(35.0, 139.0), Location(35.2, 139.1), Location(35.1, 139.4)]
        destination = Location(35.5, 139.5)

        tour = nearest_neighbor_tour(departures, destination, self.oracle)

        self.assertEqual(sorted(tour['order_idx'][:-1]), [0, 1, 2, 3])
        self.assertEqual(tour['order_idx'][-1], 0)
        self.assertEqual(len(tour['legs_km']), 4)
        self.assertEqual(len(route_points(departures, destination)), 4)


if __name__ == '__main__':
    unittest.main()
