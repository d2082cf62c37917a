"""
Export module for settlement results
"""

from .writers import (
    balances_dataframe, transfers_dataframe, shapley_dataframe,
    export_balances_csv, export_transfers_csv, export_result_json,
    build_summary, export_summary_report
)

__all__ = [
    'balances_dataframe',
    'transfers_dataframe',
    'shapley_dataframe',
    'export_balances_csv',
    'export_transfers_csv',
    'export_result_json',
    'build_summary',
    'export_summary_report'
]
