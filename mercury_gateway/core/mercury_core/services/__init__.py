from .mercury_service import TOKEN_SUBSCRIPTION_FAILED, MercuryService

__all__ = ["MercuryService", "TOKEN_SUBSCRIPTION_FAILED"]
