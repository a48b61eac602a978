"""
Token registry
"""

from x402_exec.tokens.registry import TokenInfo, TokenRegistry, build_requirements

__all__ = ["TokenInfo", "TokenRegistry", "build_requirements"]
