"""
auth: credential primitives.

Provides:
  • ``CredentialHasher``: bcrypt hash / verify
  • ``TokenIssuer``: opaque bearer token generation and rotation
"""

from auth.password import CredentialHasher
from auth.tokens import TokenIssuer

__all__ = ["CredentialHasher", "TokenIssuer"]
