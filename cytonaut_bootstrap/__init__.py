"""cytonaut environment bootstrap (pixi + R, fail-fast).

Core design goals:
- Ordered steps, strictly sequential
- Idempotent steps (re-running the whole pipeline is safe)
- Fail fast on the first error, no retries, no rollback
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
