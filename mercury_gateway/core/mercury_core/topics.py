"""Topic filter encoding for Soroban contract events."""

from __future__ import annotations

from stellar_sdk import scval

# Token transfer topics: 1 transfer, 2 from, 3 to, 4 asset name; amount is the data.
TRANSFER = "transfer"
MINT = "mint"


def encode_topic(value: str) -> str:
    """Encode a native string as a base64 ``ScVal`` XDR string."""

    return scval.to_string(value).to_xdr()
