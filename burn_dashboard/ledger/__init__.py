"""
Solana ledger access over JSON-RPC (Helius endpoint).

Fetches token supply, signature pages and jsonParsed transactions with
retry and backoff; failures surface as None so the scan can skip one unit.
"""

from burn_dashboard.ledger.models import SignatureInfo, TokenSupply
from burn_dashboard.ledger.rpc import SolanaRpcClient

__all__ = [
    "SignatureInfo",
    "SolanaRpcClient",
    "TokenSupply",
]
