"""
Tests for settlement exporters
"""
import json
import os
import tempfile
import unittest

import pandas as pd

from fairsplit.export import (
    balances_dataframe, build_summary, export_balances_csv, export_result_json,
    export_summary_report, export_transfers_csv, shapley_dataframe, transfers_dataframe
)
from fairsplit.settlement import calculate_settlement, calculate_simple_settlement
from fairsplit.utils import SettlementConfig
from tests.fixtures.sample_events import LineDistanceProvider, TestDataFixtures


class TestExportWriters(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.result = calculate_settlement(TestDataFixtures.sample_event(), LineDistanceProvider(),
                                          SettlementConfig())

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.output_dir = os.path.join(self.tmpdir.name, 'exports')

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_dataframes(self):
        balances = balances_dataframe(self.result)
        self.assertEqual(list(balances['member_id']), ['m1', 'm2', 'm3'])
        self.assertEqual(balances.loc[balances['member_id'] == 'm2', 'transport_share'].iloc[0], 6980)
        # bike-only members have no Shapley share
        self.assertTrue(pd.isna(balances.loc[balances['member_id'] == 'm3', 'transport_share'].iloc[0]))

        self.assertEqual(len(transfers_dataframe(self.result)), 2)
        self.assertEqual(list(shapley_dataframe(self.result).columns), ['member_id', 'member_name', 'value'])

    def test_empty_result_dataframes(self):
        result = calculate_simple_settlement(TestDataFixtures.two_member_event(amount=0))

        self.assertTrue(transfers_dataframe(result).empty)
        self.assertEqual(list(transfers_dataframe(result).columns),
                         ['from_member_id', 'from_name', 'to_member_id', 'to_name', 'amount'])
        self.assertTrue(shapley_dataframe(result).empty)

    def test_export_balances_csv(self):
        path = export_balances_csv(self.result, self.output_dir, 'balances.csv')

        self.assertEqual(path, os.path.join(self.output_dir, 'balances.csv'))
        df = pd.read_csv(path)
        self.assertEqual(len(df), 3)
        self.assertEqual(int(df['balance'].sum()), 0)

    def test_export_transfers_csv_default_name(self):
        path = export_transfers_csv(self.result, self.output_dir)

        self.assertTrue(os.path.basename(path).startswith('settlement_transfers_'))
        df = pd.read_csv(path)
        self.assertEqual(list(df['amount']), [1980, 2000])

    def test_export_result_json(self):
        path = export_result_json(self.result, self.output_dir, 'result.json')

        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data['method'], 'shapley')
        self.assertFalse(data['degraded'])
        self.assertEqual(len(data['balances']), 3)

    def test_summary_report(self):
        path = export_summary_report(self.result, self.output_dir, 'summary.json')

        with open(path, encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['totals']['transport_cost'], 4300)
        self.assertEqual(summary['totals']['non_transport_cost'], 6000)
        self.assertEqual(summary['totals']['shapley_total'], 4000)
        self.assertEqual(summary['balances_overview']['creditors'], 1)
        self.assertEqual(summary['balances_overview']['debtors'], 2)
        self.assertEqual(summary['transfers_overview']['total_transferred'], 3980)

    def test_build_summary_without_transfers(self):
        summary = build_summary(calculate_simple_settlement(TestDataFixtures.two_member_event(amount=0)))

        self.assertEqual(summary['metadata']['method'], 'even_split')
        self.assertEqual(summary['transfers_overview']['count'], 0)
        self.assertEqual(summary['transfers_overview']['largest_transfer'], 0)
        self.assertIsNone(summary['totals']['effective_fuel_efficiency'])


if __name__ == '__main__':
    unittest.main()
