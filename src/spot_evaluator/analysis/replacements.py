"""Replacement ranking for node groups.

For a node group, every instance type offered in the group's availability
zone is checked against the group's current type: it must be capacity
compatible and strictly cheaper on spot. Survivors are ranked by the hourly
savings across the whole group.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_COMPLETED
from typing import List, Optional, Sequence

from ..core.base import (
    CatalogOracle, PriceOracle, NodeGroup, InstanceSpec, ReplacementOption
)
from ..core.exceptions import CancellationError
from ..core.logging import PerformanceLogger, get_performance_logger
from .compatibility import is_compatible


def rank_options(options: Sequence[ReplacementOption]) -> List[ReplacementOption]:
    """Order options by group savings, highest first, then by instance type."""
    return sorted(options, key=lambda o: (-o.savings_per_group_per_hour, o.instance_type))


class ReplacementRanker:
    """Finds cheaper, capacity-compatible spot replacements for a node group"""

    # Seconds between cancellation checks while waiting on candidate lookups
    poll_interval = 0.1

    def __init__(self, catalog: CatalogOracle, prices: PriceOracle, max_workers: int = 8,
                 performance_logger: Optional[PerformanceLogger] = None):
        self.catalog = catalog
        self.prices = prices
        self.max_workers = max_workers
        self.performance = performance_logger or get_performance_logger()
        self.logger = logging.getLogger(__name__)

    def find_replacements(self, group: NodeGroup, limit: int,
                          cancel_event: Optional[threading.Event] = None,
                          timeout: Optional[float] = None) -> List[ReplacementOption]:
        """Return up to ``limit`` replacement options, best first.

        Failing to describe or price the group's own instance type raises
        SpecLookupError or PriceLookupError. Candidates that cannot be
        described or priced are skipped. When ``cancel_event`` is set or
        ``timeout`` seconds elapse before the ranking completes,
        CancellationError is raised and partial results are discarded.
        """
        if limit <= 0:
            return []

        deadline = time.monotonic() + timeout if timeout is not None else None

        with self.performance.timer("find_replacements",
                                    instance_type=group.instance_type,
                                    availability_zone=group.availability_zone):
            self._check_cancelled(group, cancel_event, deadline)
            current_spec = self.catalog.get_spec(group.instance_type, group.availability_zone)

            self._check_cancelled(group, cancel_event, deadline)
            current_price = self.prices.get_spot_price(group.instance_type, group.availability_zone)

            self._check_cancelled(group, cancel_event, deadline)
            offered = self.catalog.list_offered_types(group.availability_zone)
            candidates = sorted(set(offered) - {group.instance_type})

            self.logger.debug(
                f"Evaluating {len(candidates)} candidates for {group.instance_type} "
                f"in {group.availability_zone} (spot ${current_price:.4f})"
            )

            if self.max_workers <= 1 or len(candidates) <= 1:
                options = self._evaluate_sequential(group, current_spec, current_price,
                                                    candidates, cancel_event, deadline)
            else:
                options = self._evaluate_parallel(group, current_spec, current_price,
                                                  candidates, cancel_event, deadline)

        self.performance.log_metric("replacement_candidates", len(candidates),
                                    instance_type=group.instance_type)
        self.performance.log_metric("replacement_options", len(options),
                                    instance_type=group.instance_type)

        return rank_options(options)[:limit]

    def _evaluate_sequential(self, group, current_spec, current_price, candidates,
                             cancel_event, deadline) -> List[ReplacementOption]:
        options = []
        for candidate in candidates:
            self._check_cancelled(group, cancel_event, deadline)
            option = self._evaluate_candidate(group, current_spec, current_price, candidate, cancel_event)
            if option is not None:
                options.append(option)
        self._check_cancelled(group, cancel_event, deadline)
        return options

    def _evaluate_parallel(self, group, current_spec, current_price, candidates,
                           cancel_event, deadline) -> List[ReplacementOption]:
        options = []
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(candidates)),
            thread_name_prefix="replacement"
        )
        try:
            pending = {
                executor.submit(self._evaluate_candidate, group, current_spec,
                                current_price, candidate, cancel_event)
                for candidate in candidates
            }
            while pending:
                self._check_cancelled(group, cancel_event, deadline)
                done, pending = wait(pending, timeout=self._wait_timeout(cancel_event, deadline),
                                     return_when=FIRST_COMPLETED)
                for future in done:
                    option = future.result()
                    if option is not None:
                        options.append(option)
            self._check_cancelled(group, cancel_event, deadline)
        finally:
            # In-flight lookups finish in the background; their results are dropped
            executor.shutdown(wait=False, cancel_futures=True)
        return options

    def _evaluate_candidate(self, group: NodeGroup, current_spec: InstanceSpec, current_price: float,
                            candidate: str,
                            cancel_event: Optional[threading.Event] = None) -> Optional[ReplacementOption]:
        """Build an option for one candidate, or None when it does not qualify."""
        if cancel_event is not None and cancel_event.is_set():
            return None

        try:
            spec = self.catalog.get_spec(candidate, group.availability_zone)
            if not is_compatible(current_spec, spec):
                self.logger.debug(f"Skipping {candidate}: not compatible with {group.instance_type}")
                return None

            candidate_price = self.prices.get_spot_price(candidate, group.availability_zone)
        except Exception as e:
            self.logger.debug(f"Skipping {candidate}: {e}")
            return None

        if candidate_price >= current_price:
            return None

        savings_per_node = current_price - candidate_price
        return ReplacementOption(
            instance_type=candidate,
            spot_price=candidate_price,
            savings_per_node_per_hour=savings_per_node,
            savings_per_group_per_hour=savings_per_node * group.count,
        )

    def _wait_timeout(self, cancel_event, deadline) -> Optional[float]:
        if deadline is not None:
            return max(0.0, min(self.poll_interval, deadline - time.monotonic()))
        if cancel_event is not None:
            return self.poll_interval
        return None

    def _check_cancelled(self, group: NodeGroup, cancel_event, deadline) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise CancellationError(
                f"Replacement search for {group.instance_type} in {group.availability_zone} was cancelled"
            )
        if deadline is not None and time.monotonic() >= deadline:
            raise CancellationError(
                f"Replacement search for {group.instance_type} in {group.availability_zone} timed out"
            )
