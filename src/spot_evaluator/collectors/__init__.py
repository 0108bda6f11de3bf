from .kubernetes import KubernetesNodeCollector, load_core_api

__all__ = ['KubernetesNodeCollector', 'load_core_api']
