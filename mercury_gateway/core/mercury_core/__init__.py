"""Mercury Core.

Helpers for talking to the Mercury indexing service: a GraphQL client, the
``newsubscription`` REST client and the :class:`MercuryService` facade used by
the HTTP routes.
"""

__all__ = ["config", "errors", "models", "queries", "topics"]
