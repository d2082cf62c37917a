"""
Settlement Export Writers
Exporters for CSV, JSON and summary reports of a SettlementResult
"""
from typing import Dict, Optional
import json
import os
from datetime import datetime
import pandas as pd

from ..models import SettlementResult
from ..utils import setup_logging

logger = setup_logging()

DEFAULT_OUTPUT_DIR = "settlement_runs/exports"


def _output_path(output_dir: str, prefix: str, extension: str, filename: Optional[str]) -> str:
    os.makedirs(output_dir, exist_ok=True)
    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{prefix}_{timestamp}.{extension}"
    return os.path.join(output_dir, filename)


def balances_dataframe(result: SettlementResult) -> pd.DataFrame:
    """One row per member: paid, owed, balance, Shapley transport share"""
    columns = ['member_id', 'member_name', 'user_id', 'paid', 'owed', 'balance']
    df = pd.DataFrame([vars(b) for b in result.balances], columns=columns)

    shapley = {s.member_id: s.value for s in result.shapley_values}
    df['transport_share'] = df['member_id'].map(shapley)
    return df


def transfers_dataframe(result: SettlementResult) -> pd.DataFrame:
    columns = ['from_member_id', 'from_name', 'to_member_id', 'to_name', 'amount']
    return pd.DataFrame([vars(t) for t in result.transfers], columns=columns)


def shapley_dataframe(result: SettlementResult) -> pd.DataFrame:
    columns = ['member_id', 'member_name', 'value']
    return pd.DataFrame([vars(s) for s in result.shapley_values], columns=columns)


def export_balances_csv(result: SettlementResult, output_dir: str = DEFAULT_OUTPUT_DIR,
                        filename: Optional[str] = None) -> str:
    """
    Export member balances to CSV.

    Args:
        result: Settlement result
        output_dir: Output directory
        filename: File name (timestamped by default)

    Returns:
        Path of the generated CSV

    Format CSV:
        member_id,member_name,user_id,paid,owed,balance,transport_share
    """
    filepath = _output_path(output_dir, "settlement_balances", "csv", filename)
    balances_dataframe(result).to_csv(filepath, index=False, encoding='utf-8')
    logger.info(f"Balances exported: {filepath}")
    return filepath


def export_transfers_csv(result: SettlementResult, output_dir: str = DEFAULT_OUTPUT_DIR,
                         filename: Optional[str] = None) -> str:
    """
    Export transfers to CSV.

    Format CSV:
        from_member_id,from_name,to_member_id,to_name,amount
    """
    filepath = _output_path(output_dir, "settlement_transfers", "csv", filename)
    transfers_dataframe(result).to_csv(filepath, index=False, encoding='utf-8')
    logger.info(f"Transfers exported: {filepath}")
    return filepath


def export_result_json(result: SettlementResult, output_dir: str = DEFAULT_OUTPUT_DIR,
                       filename: Optional[str] = None) -> str:
    """Full result as JSON (same shape as the HTTP API response)"""
    filepath = _output_path(output_dir, "settlement_result", "json", filename)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f"Result exported: {filepath}")
    return filepath


def build_summary(result: SettlementResult) -> Dict:
    """KPIs of a settlement"""
    balances = balances_dataframe(result)
    transfers = transfers_dataframe(result)

    return {
        "metadata": {
            "generated": datetime.now().isoformat(),
            "method": result.method,
            "degraded": result.degraded,
            "distance_failures": result.distance_failures
        },
        "totals": {
            "total_amount": result.total_amount,
            "transport_cost": result.transport_cost,
            "highway_cost": result.highway_cost,
            "non_transport_cost": result.total_amount - result.transport_cost,
            "effective_fuel_efficiency": (round(result.effective_fuel_efficiency, 2)
                                          if result.effective_fuel_efficiency is not None else None),
            "shapley_total": int(sum(s.value for s in result.shapley_values))
        },
        "balances_overview": {
            "members": len(balances),
            "creditors": int((balances['balance'] > 0).sum()),
            "debtors": int((balances['balance'] < 0).sum()),
            "settled": int((balances['balance'] == 0).sum()),
            # non-zero only through per-member rounding
            "rounding_drift": int(balances['balance'].sum())
        },
        "transfers_overview": {
            "count": len(transfers),
            "total_transferred": int(transfers['amount'].sum()) if not transfers.empty else 0,
            "largest_transfer": int(transfers['amount'].max()) if not transfers.empty else 0
        }
    }


def export_summary_report(result: SettlementResult, output_dir: str = DEFAULT_OUTPUT_DIR,
                          filename: Optional[str] = None) -> str:
    """
    Generate a summary report in JSON format.

    Args:
        result: Settlement result
        output_dir: Output directory
        filename: File name (timestamped by default)

    Returns:
        Path of the generated JSON
    """
    filepath = _output_path(output_dir, "settlement_summary", "json", filename)

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(build_summary(result), f, indent=2, ensure_ascii=False)

    logger.info(f"Summary report generated: {filepath}")
    return filepath
