"""
Module: procurement_engines.ranking
Responsibility:
    Order the offers of one product by a ranking criterion: priority
    (descending, the procurement default) or price (ascending, for
    "cheapest offer" queries).

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Leaf component: the
    planner, recommendation, product matrix and comparison engines build
    on it.

Invariants enforced:
    - Stable: offers with equal keys keep their input relative order.
    - The ranked order depends only on (priority | price) and the input
      order of ties, never on hidden state.
    - No side effects: the input sequence is not mutated.

Failure modes:
    - None.  An empty input yields an empty tuple.
"""

from __future__ import annotations

from collections.abc import Iterable

from procurement_kernel.domain.catalog import Offer, RankingCriterion


def _priority_key(offer: Offer) -> int:
    return -offer.priority


def _price_key(offer: Offer):
    return offer.price


def rank_offers(
    offers: Iterable[Offer],
    criterion: RankingCriterion | str = RankingCriterion.PRIORITY,
) -> tuple[Offer, ...]:
    """
    Rank offers for one product.

    Args:
        offers: Offers to rank (any order).
        criterion: ``RankingCriterion`` or its string value.  Strings other
            than "price"/"priority" fall back to priority.

    Returns:
        Tuple of offers: highest priority first, or lowest price first.
    """
    criterion = RankingCriterion.parse(criterion)
    key = _price_key if criterion is RankingCriterion.PRICE else _priority_key
    # sorted() is stable, so ties keep their input order
    return tuple(sorted(offers, key=key))


def best_offer(
    offers: Iterable[Offer],
    criterion: RankingCriterion | str = RankingCriterion.PRIORITY,
) -> Offer | None:
    """First offer by ``criterion``, or None when there are no offers."""
    ranked = rank_offers(offers, criterion)
    return ranked[0] if ranked else None
