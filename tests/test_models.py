"""
Tests for the data model and snapshot parsing
"""
import unittest

from fairsplit.models import (
    Location, Member, Payment, SettlementResult, Vehicle, VehicleType,
    event_from_dict, location_from_dict, payment_from_dict, vehicle_from_dict
)
from tests.fixtures.sample_events import TestDataFixtures


class TestMember(unittest.TestCase):

    def test_display_name_precedence(self):
        self.assertEqual(Member(id='m', user_id='u', nickname='N', user_name='U', email='e').display_name, 'N')
        self.assertEqual(Member(id='m', user_id='u', user_name='U', email='e').display_name, 'U')
        self.assertEqual(Member(id='m', user_id='u', email='e').display_name, 'e')
        self.assertEqual(Member(id='m', user_id='u').display_name, 'm')

    def test_departure_overrides_home(self):
        departure = Location(35.0, 139.0)
        home = Location(36.0, 140.0)

        resolved = Member(id='m', user_id='u', departure_location=departure,
                          home_location=home).resolve_location()
        self.assertEqual(resolved.location, departure)
        self.assertEqual(resolved.source, 'departure')

        resolved = Member(id='m', user_id='u', home_location=home).resolve_location()
        self.assertEqual(resolved.location, home)
        self.assertEqual(resolved.source, 'home')

        resolved = Member(id='m', user_id='u').resolve_location()
        self.assertIsNone(resolved.location)
        self.assertIsNone(resolved.source)

    def test_vehicle_classification(self):
        bike_only = Member(id='b', user_id='u', vehicles=[TestDataFixtures.bike()])
        mixed = Member(id='x', user_id='u', vehicles=[TestDataFixtures.bike(), TestDataFixtures.owned_car()])
        rider = Member(id='r', user_id='u')
        rental = Member(id='t', user_id='u', vehicles=[Vehicle(id='v', type=VehicleType.RENTAL)])

        self.assertTrue(bike_only.is_bike_only)
        self.assertFalse(bike_only.is_car_capable)
        self.assertTrue(mixed.is_car_capable)
        self.assertTrue(mixed.is_owned_car_holder)
        self.assertTrue(rider.is_car_capable)
        self.assertFalse(rider.is_owned_car_holder)
        self.assertFalse(rental.is_owned_car_holder)


class TestPayment(unittest.TestCase):

    def test_highway_detection(self):
        self.assertTrue(Payment(id='p', amount=1, payer_id='m', is_transport=True,
                                description='高速料金').is_highway())
        self.assertTrue(Payment(id='p', amount=1, payer_id='m', is_transport=True,
                                description='Highway toll').is_highway())
        self.assertFalse(Payment(id='p', amount=1, payer_id='m', is_transport=True,
                                 description='ガソリン代').is_highway())
        # only transport payments count
        self.assertFalse(Payment(id='p', amount=1, payer_id='m', is_transport=False,
                                 description='高速SA lunch').is_highway())

    def test_custom_keywords(self):
        payment = Payment(id='p', amount=1, payer_id='m', is_transport=True, description='ETC')
        self.assertFalse(payment.is_highway())
        self.assertTrue(payment.is_highway(('ETC',)))


class TestEvent(unittest.TestCase):

    def test_resolve_member_id(self):
        event = TestDataFixtures.sample_event()
        self.assertEqual(event.resolve_member_id('m2'), 'm2')
        self.assertEqual(event.resolve_member_id('u2'), 'm2')
        self.assertIsNone(event.resolve_member_id('nobody'))

    def test_transport_payments(self):
        event = TestDataFixtures.sample_event()
        self.assertEqual([p.id for p in event.transport_payments], ['p1', 'p2', 'p3'])


class TestSnapshotParsing(unittest.TestCase):

    def test_event_from_dict(self):
        event = event_from_dict(TestDataFixtures.sample_snapshot())
        expected = TestDataFixtures.sample_event()

        self.assertEqual(event.id, 'ev-1')
        self.assertEqual(event.gas_price_per_liter, 150.0)
        self.assertEqual(event.destination, expected.destination)
        self.assertEqual([m.display_name for m in event.members], ['Aki', 'Ben', 'chie@example.com'])
        self.assertEqual(event.members[1].home_location, Location(35.0, 139.2))
        self.assertTrue(event.members[2].is_bike_only)
        self.assertEqual(event.payments, expected.payments)

    def test_category_marks_transport(self):
        payment = payment_from_dict({'id': 'p', 'amount': 500, 'payerId': 'm', 'category': 'transport'})
        self.assertTrue(payment.is_transport)
        self.assertEqual(payment.beneficiaries, ())

    def test_snake_case_keys(self):
        event = event_from_dict({
            'gas_price_per_liter': 160,
            'members': [{'id': 'a', 'user_id': 'ua', 'departure_location': {'lat': 1, 'lon': 2}}],
            'payments': [{'id': 'p', 'amount': 10, 'payer_id': 'a', 'is_transport': False,
                          'beneficiaries': ['a']}]
        })
        self.assertIsNone(event.destination)
        self.assertEqual(event.members[0].departure_location, Location(1.0, 2.0))
        self.assertEqual(event.payments[0].payer_id, 'a')

    def test_malformed_snapshots(self):
        with self.assertRaises(ValueError):
            event_from_dict([])
        with self.assertRaises(ValueError):
            event_from_dict({'members': []})
        with self.assertRaises(ValueError):
            location_from_dict({'lat': 95, 'lng': 0})
        with self.assertRaises(ValueError):
            location_from_dict({'lat': 35})
        with self.assertRaises(ValueError):
            vehicle_from_dict({'id': 'v', 'type': 'SPACESHIP'})
        with self.assertRaises(ValueError):
            payment_from_dict({'id': 'p', 'payerId': 'm'})
        with self.assertRaises(ValueError):
            event_from_dict({'gasPricePerLiter': 150, 'members': [{'nickname': 'no id'}]})


class TestSettlementResult(unittest.TestCase):

    def test_degraded_flag(self):
        result = SettlementResult(balances=[], transfers=[], shapley_values=[],
                                  total_amount=0, transport_cost=0, distance_failures=2)
        self.assertTrue(result.degraded)
        self.assertTrue(result.to_dict()['degraded'])
        self.assertEqual(result.to_dict()['distance_failures'], 2)


if __name__ == '__main__':
    unittest.main()
