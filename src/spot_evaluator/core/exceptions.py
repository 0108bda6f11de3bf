"""Custom exceptions for Spot Evaluator"""


class SpotEvaluatorError(Exception):
    """Base exception for all Spot Evaluator errors"""
    pass


class AuthenticationError(SpotEvaluatorError):
    """Raised when authentication fails"""
    pass


class ConfigurationError(SpotEvaluatorError):
    """Raised when configuration is invalid"""
    pass


class InventoryError(SpotEvaluatorError):
    """Raised when cluster node inventory cannot be collected"""
    pass


class LookupFailure(SpotEvaluatorError):
    """Base exception for catalog and price oracle failures"""

    def __init__(self, instance_type: str, message: str):
        self.instance_type = instance_type
        super().__init__(f"{instance_type}: {message}" if instance_type else message)


class SpecLookupError(LookupFailure):
    """Raised when an instance type cannot be described by the catalog"""
    pass


class PriceLookupError(LookupFailure):
    """Raised when a spot or on-demand price is unavailable"""

    def __init__(self, instance_type: str, location: str, message: str):
        self.location = location
        if location:
            message = f"[{location}] {message}"
        super().__init__(instance_type, message)


class NoPriceFoundError(PriceLookupError):
    """Raised when no price document yields a USD unit price"""

    def __init__(self, instance_type: str = "", location: str = "",
                 message: str = "could not find on-demand USD price dimension"):
        super().__init__(instance_type, location, message)


class CancellationError(SpotEvaluatorError):
    """Raised when a recommendation is cancelled or times out"""
    pass
