"""
Transfer generation
Greedy first-fit netting of debtors against creditors
"""
from typing import List

from ..models import MemberBalance, Transfer


def minimize_transfers(balances: List[MemberBalance]) -> List[Transfer]:
    """
    Convert balances into point-to-point transfers.

    Debtors are processed in the order given; each walks the creditors in
    their order and pays min(remaining debt, remaining credit) until its
    debt is cleared. Valid netting, not necessarily the fewest transfers.

    Args:
        balances: Member balances (usually sorted by balance, descending)

    Returns:
        Transfers with amount > 0. Input balances are not modified.
    """
    creditors = [[b, b.balance] for b in balances if b.balance > 0]
    debtors = [b for b in balances if b.balance < 0]
    transfers: List[Transfer] = []

    for debtor in debtors:
        remaining = -debtor.balance

        for creditor in creditors:
            if remaining <= 0:
                break
            credit = creditor[1]
            if credit <= 0:
                continue

            amount = min(remaining, credit)
            transfers.append(Transfer(
                from_member_id=debtor.member_id,
                from_name=debtor.member_name,
                to_member_id=creditor[0].member_id,
                to_name=creditor[0].member_name,
                amount=amount
            ))
            remaining -= amount
            creditor[1] = credit - amount

    return transfers


def apply_transfers(balances: List[MemberBalance], transfers: List[Transfer]) -> dict:
    """Balances after every transfer is paid (member_id -> residual)"""
    residual = {b.member_id: b.balance for b in balances}
    for t in transfers:
        residual[t.from_member_id] += t.amount
        residual[t.to_member_id] -= t.amount
    return residual
