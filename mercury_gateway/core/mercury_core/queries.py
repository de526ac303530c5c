"""GraphQL templates for the Mercury indexing service.

Templates are sent verbatim; the server validates them.
"""

# ---- Mutations

AUTHENTICATE = """
mutation Auth($email: String!, $password: String!) {
  authenticate(input: {email: $email, password: $password}) {
    jwtToken
  }
}
"""

NEW_ACCOUNT_SUBSCRIPTION = """
mutation NewAccountSubscription($pubKey: String!) {
  createFullAccountSubscription(
    input: {fullAccountSubscription: {publickey: $pubKey, userId: 1}}
  ) {
    clientMutationId
  }
}
"""

# ---- Queries

SUBSCRIPTION_BY_ID = """
query GetSubById($id: ID!) {
  contractEventById(id: $id) {
    id
    data
    contractId
    ledgerTimestamp
    nodeId
    topic1
    topic2
    topic3
    topic4
  }
}
"""

ALL_SUBSCRIPTIONS = """
query AllSubscriptions {
  allContractEventSubscriptions {
    edges {
      node {
        contractId
      }
    }
  }
}
"""

_PAYMENT_FIELDS = """
        node {
          amount
          assetNative
          accountBySource {
            publickey
          }
          accountByDestination {
            publickey
          }
        }
"""

GET_ACCOUNT_HISTORY = f"""
query GetAccountHistory($publicKeyText: String!) {{
  createAccountByPublicKey(publicKeyText: $publicKeyText) {{
    edges {{
      node
    }}
  }}
  createAccountToPublicKey(publicKeyText: $publicKeyText) {{
    edges {{
      node
    }}
  }}
  paymentsByPublicKey(publicKeyText: $publicKeyText) {{
    edges {{{_PAYMENT_FIELDS}    }}
  }}
  paymentsToPublicKey(publicKeyText: $publicKeyText) {{
    edges {{{_PAYMENT_FIELDS}    }}
  }}
}}
"""

MUTATIONS = {
    "authenticate": AUTHENTICATE,
    "newAccountSubscription": NEW_ACCOUNT_SUBSCRIPTION,
}

QUERIES = {
    "subscriptionById": SUBSCRIPTION_BY_ID,
    "allSubscriptions": ALL_SUBSCRIPTIONS,
    "getAccountHistory": GET_ACCOUNT_HISTORY,
}
