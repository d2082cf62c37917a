"""
Balance aggregation
Folds payments and Shapley transport shares into paid / owed / balance per member
"""
import logging
from typing import Dict, List, Mapping, Optional, Set

from ..models import Event, MemberBalance, Payment
from ..utils import round_half_up

logger = logging.getLogger(__name__)


def _empty_ledger(event: Event) -> Dict[str, Dict[str, float]]:
    return {m.id: {'paid': 0.0, 'owed': 0.0} for m in event.members}


def _credit_payer(ledger: Dict[str, Dict[str, float]], event: Event, payment: Payment) -> Optional[str]:
    payer_id = event.resolve_member_id(payment.payer_id)
    if payer_id is None:
        logger.debug(f"Payment {payment.id}: unknown payer {payment.payer_id}, not credited")
        return None
    ledger[payer_id]['paid'] += payment.amount
    return payer_id


def _split_evenly(ledger: Dict[str, Dict[str, float]], payment: Payment) -> None:
    if not payment.beneficiaries:
        logger.debug(f"Payment {payment.id}: no beneficiaries, skipped")
        return

    share = payment.amount / len(payment.beneficiaries)
    for member_id in payment.beneficiaries:
        if member_id in ledger:
            ledger[member_id]['owed'] += share
        else:
            logger.debug(f"Payment {payment.id}: unknown beneficiary {member_id}")


def _to_balances(ledger: Dict[str, Dict[str, float]], event: Event) -> List[MemberBalance]:
    members = event.member_map()
    balances = []

    for member_id, entry in ledger.items():
        member = members[member_id]
        # rounded per member, the total may drift by a unit or two
        paid = round_half_up(entry['paid'])
        owed = round_half_up(entry['owed'])
        balances.append(MemberBalance(
            member_id=member_id,
            member_name=member.display_name,
            user_id=member.user_id,
            paid=paid,
            owed=owed,
            balance=paid - owed
        ))

    # largest creditor first
    balances.sort(key=lambda b: b.balance, reverse=True)
    return balances


def aggregate_balances(event: Event,
                       shapley: Mapping[str, float],
                       bike_member_ids: Set[str]) -> List[MemberBalance]:
    """
    Paid / owed / balance per member with transport allocated by Shapley value.

    - every payment is credited to its payer
    - transport paid by a bike-only member is owed by that member alone
    - transport paid by car-capable members is covered by the Shapley shares
    - other payments are split evenly across their beneficiaries

    Args:
        event: Event snapshot
        shapley: Shapley value per car-capable member
        bike_member_ids: Bike-only members

    Returns:
        Balances sorted by balance, descending
    """
    ledger = _empty_ledger(event)

    for payment in event.payments:
        payer_id = _credit_payer(ledger, event, payment)

        if payment.is_transport:
            if payer_id is not None and payer_id in bike_member_ids:
                ledger[payer_id]['owed'] += payment.amount
        else:
            _split_evenly(ledger, payment)

    for member_id, value in shapley.items():
        if member_id in ledger:
            ledger[member_id]['owed'] += value

    return _to_balances(ledger, event)


def aggregate_even_split(event: Event) -> List[MemberBalance]:
    """Every payment, transport included, split evenly across its beneficiaries"""
    ledger = _empty_ledger(event)

    for payment in event.payments:
        _credit_payer(ledger, event, payment)
        _split_evenly(ledger, payment)

    return _to_balances(ledger, event)
