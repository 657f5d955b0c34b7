"""
govproof - Governance Consensus & Proof Engine

Routes each AI request through a panel of independent model seats,
reconciles their ballots into a single verdict, and issues a signed,
independently re-checkable proof record for every decision.

Operating principles:
- Every request terminates in exactly one verdict
- A seat failure is a status, never a crash
- Proofs are verifiable without trusting the engine
- Contested outcomes are never certified
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
