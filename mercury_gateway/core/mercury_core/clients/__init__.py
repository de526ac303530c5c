"""Client wrappers for the Mercury indexing service."""

from .graphql_client import MercuryGraphQLClient
from .subscription_client import MercurySubscriptionClient

__all__ = ["MercuryGraphQLClient", "MercurySubscriptionClient"]
