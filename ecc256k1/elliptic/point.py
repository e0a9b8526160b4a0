from __future__ import annotations

from functools import cached_property
from typing import Optional, Union

from ..exceptions import InvalidPoint
from .scalar import FieldElement, Scalar, n, p
from .util import tobytes

# Short Weierstrass curve: y2 = x3 + a x + b
# secp256k1 constants (SEC 2 v2, section 2.4.1):
a, b = FieldElement(0), FieldElement(7)

# Points are stored in affine coordinates (x, y). The point at infinity has
# neither coordinate. Nothing here is constant time.

class Point:
  def __init__(self, x: Union[FieldElement, int, None] = None, y: Union[FieldElement, int, None] = None):
    if x is None or y is None:
      if x is not None or y is not None: raise InvalidPoint("Both coordinates are needed")
      self.x: Optional[FieldElement] = None
      self.y: Optional[FieldElement] = None
      return
    self.x = x if isinstance(x, FieldElement) else FieldElement(x)
    self.y = y if isinstance(y, FieldElement) else FieldElement(y)
    if not self.is_on_curve: raise InvalidPoint("Not a curve point on secp256k1")

  @staticmethod
  def from_bytes(b: bytes) -> Point:
    """Read SEC1 compressed (33 bytes) or uncompressed (65 bytes) encoding"""
    b = bytes(b)
    if len(b) == 33 and b[0] in (2, 3):
      P = lift_x(b[1:])
      return -P if b[0] == 3 else P
    if len(b) == 65 and b[0] == 4:
      try:
        x, y = FieldElement.from_bytes(b[1:33]), FieldElement.from_bytes(b[33:])
      except ValueError:
        raise InvalidPoint("Coordinate out of range")
      return Point(x, y)
    raise InvalidPoint(f"Invalid point encoding ({len(b)} bytes)")

  def to_bytes(self, compressed=True) -> bytes:
    if self.is_infinity: raise InvalidPoint("The point at infinity cannot be encoded")
    if compressed: return bytes([3 - self.y.is_even]) + bytes(self.x)
    return b"\x04" + bytes(self.x) + bytes(self.y)

  def __repr__(self): return point_name(self)
  def __str__(self): return self.to_bytes().hex() if self.x is not None else "INF"
  def __bytes__(self): return self.to_bytes()
  def __hash__(self): return hash((self.x, self.y))

  @property
  def is_infinity(self) -> bool: return self.x is None

  @cached_property
  def is_on_curve(self) -> bool:
    """Check the curve equation (the point at infinity is always accepted)"""
    if self.is_infinity: return True
    return self.y.sq == self.x.sq * self.x + a * self.x + b

  def __eq__(self, othr):
    if not isinstance(othr, Point): raise TypeError(f"Points cannot be compared with {type(othr)}")
    if self.is_infinity or othr.is_infinity: return self.is_infinity and othr.is_infinity
    return self.x == othr.x and self.y == othr.y

  def __neg__(self) -> Point:
    if self.is_infinity: return self
    return Point(self.x, -self.y)

  def __add__(self, othr: Point) -> Point:
    if not isinstance(othr, Point): return NotImplemented
    if self.is_infinity: return othr
    if othr.is_infinity: return self
    if self.x == othr.x:
      # Same x means either P + P or P + (-P); y == 0 would be its own negation
      if self.y != othr.y or self.y.is_zero: return INF
      lam = FieldElement(3) * self.x.sq / (self.y + self.y)
    else:
      lam = (othr.y - self.y) / (othr.x - self.x)
    x = lam.sq - self.x - othr.x
    return Point(x, lam * (self.x - x) - self.y)

  def __sub__(self, othr: Point) -> Point:
    return self + -othr

  def __mul__(self, s: Union[Scalar, int]) -> Point:
    """Multiply the point by scalar, using double-and-add from the top bit."""
    if isinstance(s, Scalar): s = s.val
    elif not isinstance(s, int): return NotImplemented
    s %= n
    Q = INF
    for i in reversed(range(s.bit_length())):
      Q += Q
      if s >> i & 1: Q += self
    return Q

  def __rmul__(self, s: Union[Scalar, int]) -> Point:
    return self * s


def scalar_mul(k: Union[Scalar, int], P: Point) -> Point:
  return P * k

def lift_x(x: Union[FieldElement, bytes, int]) -> Point:
  """The point with the given x coordinate and an even y coordinate"""
  if isinstance(x, (bytes, bytearray)):
    if len(x) != 32: raise InvalidPoint("An x coordinate must be exactly 32 bytes")
    x = int.from_bytes(x, "big")
  if isinstance(x, int):
    if not 0 <= x < p: raise InvalidPoint("x coordinate out of range")
    x = FieldElement(x)
  y2 = x.sq * x + a * x + b
  if not y2.is_square: raise InvalidPoint(f"No curve point with x={x}")
  return Point(x, y2.sqrt)

# Neutral element
INF = Point()

# Base point (prime group generator)
G = Point(
  0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
  0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)


def point_name(P: Point) -> str:
  """Return variable names rather than xy coordinates for any constants defined here"""
  for name, val in globals().items():
    if isinstance(val, Point) and P == val:
      return name
  return f"Point({tobytes(P.x.val).hex()}, {tobytes(P.y.val).hex()})"
