from __future__ import annotations

from functools import cached_property
from typing import Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ecc256k1.elliptic import G, Point, Scalar, n
from ecc256k1.exceptions import InvalidPoint, InvalidScalar


class PrivateKey:
  """A secp256k1 secret scalar d with 0 < d < n"""

  def __init__(self, d: Union[PrivateKey, Scalar, int, bytes]):
    if isinstance(d, PrivateKey):
      d = d.d
    elif isinstance(d, (bytes, bytearray)):
      d = Scalar.from_bytes(bytes(d))
    elif isinstance(d, int):
      if not 0 < d < n: raise InvalidScalar("Private key must be in range 1..n-1")
      d = Scalar(d)
    elif not isinstance(d, Scalar):
      raise TypeError(f"Cannot make a private key of {type(d)}")
    if d.is_zero: raise InvalidScalar("Private key cannot be zero")
    self.d: Scalar = d

  @classmethod
  def generate(cls) -> PrivateKey:
    return cls(Scalar.random())

  @cached_property
  def public_key(self) -> PublicKey:
    return PublicKey(self.d * G)

  def __bytes__(self): return bytes(self.d)
  def __repr__(self): return f"Key[{self.public_key.compressed.hex()[:8]}:SK]"

  def __eq__(self, other):
    return isinstance(other, PrivateKey) and self.d == other.d

  def __hash__(self):
    return hash(self.d)

  def to_pem(self) -> bytes:
    """PKCS#8 PEM, readable by OpenSSL"""
    sk = ec.derive_private_key(self.d.val, ec.SECP256K1())
    return sk.private_bytes(
      serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption()
    )

  @classmethod
  def from_pem(cls, data: bytes, password=None) -> PrivateKey:
    sk = serialization.load_pem_private_key(data, password=password)
    if not isinstance(sk, ec.EllipticCurvePrivateKey) or sk.curve.name != "secp256k1":
      raise ValueError("Not a secp256k1 private key")
    return cls(sk.private_numbers().private_value)


class PublicKey:
  """A point Q = d G, never the point at infinity"""

  def __init__(self, point: Point):
    if not isinstance(point, Point): raise TypeError(f"Cannot make a public key of {type(point)}")
    if point.is_infinity: raise InvalidPoint("Public key cannot be the point at infinity")
    if not point.is_on_curve: raise InvalidPoint("Public key is not on secp256k1")
    self.point = point

  @classmethod
  def from_bytes(cls, data: bytes) -> PublicKey:
    """SEC1 compressed or uncompressed encoding"""
    return cls(Point.from_bytes(data))

  @cached_property
  def compressed(self) -> bytes: return self.point.to_bytes(compressed=True)

  @cached_property
  def uncompressed(self) -> bytes: return self.point.to_bytes(compressed=False)

  @cached_property
  def x_only(self) -> bytes:
    """BIP-340 public key (x coordinate only, even y implied)"""
    return bytes(self.point.x)

  def __bytes__(self): return self.compressed
  def __repr__(self): return f"Key[{self.compressed.hex()[:8]}:PK]"

  def __eq__(self, other):
    return isinstance(other, PublicKey) and self.point == other.point

  def __hash__(self):
    return hash(self.point)

  def to_pem(self) -> bytes:
    """SubjectPublicKeyInfo PEM, readable by OpenSSL"""
    pk = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), self.uncompressed)
    return pk.public_bytes(serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo)

  @classmethod
  def from_pem(cls, data: bytes) -> PublicKey:
    pk = serialization.load_pem_public_key(data)
    if not isinstance(pk, ec.EllipticCurvePublicKey) or pk.curve.name != "secp256k1":
      raise ValueError("Not a secp256k1 public key")
    return cls.from_bytes(pk.public_bytes(serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint))


def as_public(key: Union[PublicKey, PrivateKey, Point, bytes]) -> PublicKey:
  """Accept any of the common representations of a public key"""
  if isinstance(key, PublicKey): return key
  if isinstance(key, PrivateKey): return key.public_key
  if isinstance(key, Point): return PublicKey(key)
  return PublicKey.from_bytes(key)
