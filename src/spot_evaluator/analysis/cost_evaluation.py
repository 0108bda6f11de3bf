import logging
import threading
from typing import Iterable, List, Optional

from ..core.base import PriceOracle, NodeGroup, GroupEvaluation
from ..core.exceptions import LookupFailure
from .replacements import ReplacementRanker


class InventoryEvaluator:
    """Prices each node group and ranks its replacements"""

    def __init__(self, prices: PriceOracle, ranker: ReplacementRanker, limit: int = 3,
                 timeout: Optional[float] = None):
        self.prices = prices
        self.ranker = ranker
        self.limit = limit
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def evaluate(self, groups: Iterable[NodeGroup],
                 cancel_event: Optional[threading.Event] = None) -> List[GroupEvaluation]:
        """Evaluate groups in order.

        Lookup failures are recorded on the group's evaluation; cancellation
        propagates.
        """
        return [self.evaluate_group(group, cancel_event) for group in groups]

    def evaluate_group(self, group: NodeGroup,
                       cancel_event: Optional[threading.Event] = None) -> GroupEvaluation:
        evaluation = self.price_group(group)

        try:
            evaluation.replacements = self.ranker.find_replacements(
                group, self.limit, cancel_event=cancel_event, timeout=self.timeout
            )
        except LookupFailure as e:
            self.logger.warning(
                f"Failed to find alternatives for {group.instance_type}/{group.availability_zone}: {e}"
            )
            evaluation.replacement_error = str(e)

        return evaluation

    def price_group(self, group: NodeGroup) -> GroupEvaluation:
        """Spot and on-demand pricing without the replacement search"""
        evaluation = GroupEvaluation(group=group)

        errors = []

        try:
            evaluation.spot_price = self.prices.get_spot_price(group.instance_type, group.availability_zone)
        except LookupFailure as e:
            self.logger.warning(f"Failed to get spot price for {group.instance_type}/{group.availability_zone}: {e}")
            errors.append(str(e))

        try:
            evaluation.on_demand_price = self.prices.get_on_demand_price(group.instance_type, group.region)
        except LookupFailure as e:
            self.logger.warning(f"Failed to get on-demand price for {group.instance_type}/{group.region}: {e}")
            errors.append(str(e))

        if errors:
            evaluation.pricing_error = "; ".join(errors)

        return evaluation
