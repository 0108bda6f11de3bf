"""Construction of clients, oracles and evaluators from settings."""

from typing import Optional, Tuple

from ..analysis import ReplacementRanker, InventoryEvaluator
from ..collectors import KubernetesNodeCollector, load_core_api
from ..core.base import CatalogOracle, PriceOracle
from ..core.config import Settings
from ..providers.aws import AWSClient, EC2CatalogOracle, AWSPriceOracle


def build_oracles(settings: Settings) -> Tuple[CatalogOracle, PriceOracle]:
    aws_client = AWSClient.from_config(settings.aws)
    catalog = EC2CatalogOracle(aws_client)
    prices = AWSPriceOracle(
        aws_client,
        pricing_region=settings.aws.pricing_region,
        product_description=settings.aws.product_description
    )
    return catalog, prices


def build_evaluator(settings: Settings, limit: Optional[int] = None, max_workers: Optional[int] = None,
                    timeout: Optional[float] = None) -> InventoryEvaluator:
    catalog, prices = build_oracles(settings)
    recommendation = settings.recommendation
    ranker = ReplacementRanker(
        catalog,
        prices,
        max_workers=max_workers if max_workers is not None else recommendation.max_workers
    )
    return InventoryEvaluator(
        prices,
        ranker,
        limit=limit if limit is not None else recommendation.limit,
        timeout=timeout if timeout is not None else recommendation.timeout
    )


def build_collector(settings: Settings) -> KubernetesNodeCollector:
    k8s = settings.kubernetes
    core_api = load_core_api(k8s.kubeconfig, k8s.context, k8s.in_cluster)
    return KubernetesNodeCollector(core_api, k8s)
