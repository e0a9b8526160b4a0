class InvalidScalar(ValueError):
  """Scalar is zero or out of range where a key or nonce is required"""

class InvalidPoint(ValueError):
  """Coordinates are not on secp256k1, or the point at infinity was given"""

class DivisionByZero(ZeroDivisionError):
  """Zero has no multiplicative inverse"""

class NonceCollision(ValueError):
  """ECDSA nonce produced a degenerate r or s, sign again with another nonce"""

class MalformedDER(ValueError):
  """DER encoded signature is structurally invalid"""
