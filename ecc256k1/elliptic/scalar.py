from __future__ import annotations

from functools import cached_property
from secrets import token_bytes

from ..exceptions import DivisionByZero, InvalidScalar
from .util import jacobi

# Field prime
p = 2**256 - 2**32 - 977

# Precalculate commonly needed parts of the prime
p14 = (p + 1) // 4  # p is congruent to 3 modulo 4

# Group order (the curve has cofactor 1, so this is the number of points)
n = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
n2 = n // 2


class _ModInt:
  """Integer modulo a prime, immutable. Subclasses choose the modulus."""
  modulus: int
  error = ValueError

  def __init__(self, x: int): self.val = x % self.modulus
  def __hash__(self): return hash((type(self), self.val))
  def __repr__(self): return f"{type(self).__name__}({self.val:#x})"
  def __str__(self): return bytes(self).hex()
  def __bytes__(self): return self.val.to_bytes(32, "big")
  def __int__(self): return self.val

  @classmethod
  def from_bytes(cls, b: bytes):
    """Decode 32 bytes big endian, refusing values that are not reduced."""
    if len(b) != 32: raise cls.error(f"{cls.__name__} must be exactly 32 bytes, got {len(b)}")
    val = int.from_bytes(b, "big")
    if val >= cls.modulus: raise cls.error(f"{cls.__name__} out of range")
    return cls(val)

  def __eq__(self, other):
    # Note: if we return NotImplemented, Python does object comparison and returns False
    if type(other) is not type(self): raise TypeError(f"Cannot compare {type(self).__name__} with {other!r}")
    return self.val == other.val

  def __neg__(self): return type(self)(-self.val)

  def __add__(self, o):
    if type(o) is not type(self): return NotImplemented
    return type(self)(self.val + o.val)

  def __sub__(self, o):
    if type(o) is not type(self): return NotImplemented
    return type(self)(self.val - o.val)

  def __mul__(self, o):
    if type(o) is not type(self): return NotImplemented
    return type(self)(self.val * o.val)

  def __truediv__(self, o):
    """Division by modular inverse"""
    if type(o) is not type(self): return NotImplemented
    return type(self)(self.val * o.inv.val)

  def __pow__(self, e: int):
    if e < 0: return self.inv**-e
    return type(self)(pow(self.val, e, self.modulus))

  @property
  def is_zero(self) -> bool: return not self.val

  @cached_property
  def inv(self):
    """Multiplicative inverse. Raises DivisionByZero for zero."""
    if not self.val: raise DivisionByZero(f"{type(self).__name__} zero has no inverse")
    return type(self)(pow(self.val, -1, self.modulus))

  @cached_property
  def sq(self):
    """Squared"""
    return self * self


class FieldElement(_ModInt):
  """A coordinate of secp256k1, modulo p = 2^256 - 2^32 - 977"""
  modulus = p

  @cached_property
  def is_even(self) -> bool: return not self.val & 1

  @cached_property
  def is_square(self) -> bool:
    """Quadratic residue test (zero counts as a square)"""
    return jacobi(self.val, p) >= 0

  @cached_property
  def sqrt(self) -> FieldElement:
    """The even square root. Raises ValueError if there is none."""
    # With p = 3 (mod 4), x^((p+1)/4) is a root whenever one exists
    root = self**p14
    if root.sq != self: raise ValueError("Not a square!")
    return root if root.is_even else -root


class Scalar(_ModInt):
  """An exponent of the secp256k1 group, modulo its order n"""
  modulus = n
  error = InvalidScalar

  @classmethod
  def random(cls) -> Scalar:
    """Uniform in [1, n-1] via rejection sampling."""
    while True:
      c = int.from_bytes(token_bytes(32), "big")
      if 0 < c < n: return cls(c)

  @classmethod
  def from_hash(cls, digest: bytes) -> Scalar:
    """
    Convert a hash digest into a scalar.

    The leftmost 256 bits are read as big endian and reduced mod n. This is the
    bits2int conversion of ECDSA, and for the 32-byte digests used by BIP-340
    it is the plain int(hash) mod n of that specification. The reduction is
    slightly biased, as both standards require.
    """
    val = int.from_bytes(digest, "big")
    excess = 8 * len(digest) - n.bit_length()
    if excess > 0: val >>= excess
    return cls(val)

  @cached_property
  def is_high(self) -> bool:
    """Above n/2, i.e. not the low-S form of an ECDSA s value"""
    return self.val > n2
