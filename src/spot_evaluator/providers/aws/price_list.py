"""Extraction of on-demand prices from AWS Price List documents.

Price List products nest their prices under opaque SKU and offer-term codes,
for example ``terms -> OnDemand -> <sku.term> -> priceDimensions ->
<sku.term.rate> -> pricePerUnit -> USD``. Only the named keys are stable, so
the codes in between are walked generically.
"""

import json
import logging
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from ...core.exceptions import NoPriceFoundError

logger = logging.getLogger(__name__)

RawDocument = Union[str, bytes, Mapping[str, Any]]

MAX_SEARCH_DEPTH = 8


def extract_usd_price(documents: Iterable[RawDocument]) -> float:
    """Return the first on-demand USD unit price found in ``documents``.

    Documents are scanned in order and consumed lazily. Documents that are
    not valid JSON or do not have the expected shape are skipped. Raises
    NoPriceFoundError when no document yields a USD price.
    """
    for index, document in enumerate(documents):
        payload = _decode(document)
        if payload is None:
            logger.debug(f"Skipping undecodable price document #{index}")
            continue

        price = _find_on_demand_usd(payload)
        if price is not None:
            return price

        logger.debug(f"No on-demand USD price in price document #{index}")

    raise NoPriceFoundError()


def _decode(document: RawDocument) -> Optional[Mapping[str, Any]]:
    if isinstance(document, Mapping):
        return document

    if isinstance(document, (str, bytes, bytearray)):
        try:
            payload = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        return payload if isinstance(payload, Mapping) else None

    return None


def _find_on_demand_usd(payload: Mapping[str, Any]) -> Optional[float]:
    terms = payload.get("terms")
    if not isinstance(terms, Mapping):
        return None

    on_demand = terms.get("OnDemand")
    if not isinstance(on_demand, Mapping):
        return None

    for raw in _iter_usd_values(on_demand, depth=0, in_dimensions=False):
        if not isinstance(raw, str) or not raw:
            continue
        try:
            return float(raw)
        except ValueError:
            continue

    return None


def _iter_usd_values(node: Any, depth: int, in_dimensions: bool) -> Iterator[Any]:
    """Depth-first walk yielding ``pricePerUnit.USD`` values under ``priceDimensions``."""
    if depth > MAX_SEARCH_DEPTH or not isinstance(node, Mapping):
        return

    for key, child in node.items():
        if in_dimensions and key == "pricePerUnit":
            if isinstance(child, Mapping) and "USD" in child:
                yield child["USD"]
            continue

        yield from _iter_usd_values(child, depth + 1, in_dimensions or key == "priceDimensions")
