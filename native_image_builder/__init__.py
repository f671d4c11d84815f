"""Native image builder for the closure compiler.

Core design goals:
- Linear, fail-fast provisioning pipeline
- Idempotent steps gated on files already on disk
- Pinned toolchain versions
- Centralized logging
"""

__all__ = []
