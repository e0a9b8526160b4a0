from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from ecc256k1 import der
from ecc256k1.elliptic import INF, G, Scalar, n, sha
from ecc256k1.exceptions import InvalidScalar, MalformedDER, NonceCollision
from ecc256k1.keys import PrivateKey, PublicKey, as_public
from ecc256k1.rfc6979 import generate_k

# Standard ECDSA over secp256k1 (SEC 1 v2, section 4.1). Signing always
# produces the low-S form (s <= n/2) and verification by default accepts only
# that form, as Bitcoin does, to prevent signature malleability.


@dataclass(frozen=True)
class Signature:
  r: Scalar
  s: Scalar

  def __post_init__(self):
    if self.r.is_zero or self.s.is_zero: raise InvalidScalar("Signature r and s must be non-zero")

  @classmethod
  def from_ints(cls, r: int, s: int) -> Signature:
    if not 0 < r < n or not 0 < s < n: raise InvalidScalar("Signature r and s must be in range 1..n-1")
    return cls(Scalar(r), Scalar(s))

  @classmethod
  def from_der(cls, data: bytes) -> Signature:
    return cls.from_ints(*der.decode(data))

  def to_der(self) -> bytes:
    return der.encode(self.r.val, self.s.val)

  @classmethod
  def from_compact(cls, data: bytes) -> Signature:
    """64 bytes r || s, big endian"""
    if len(data) != 64: raise ValueError("Invalid signature length")
    return cls(Scalar.from_bytes(data[:32]), Scalar.from_bytes(data[32:]))

  def __bytes__(self): return bytes(self.r) + bytes(self.s)

  @property
  def is_low_s(self) -> bool: return not self.s.is_high

  def normalize_s(self) -> Signature:
    """The equally valid signature with s in the lower half"""
    return self if self.is_low_s else Signature(self.r, -self.s)


NonceFunction = Callable[[PrivateKey, bytes], Scalar]

def deterministic_nonce(key: PrivateKey, msg_hash: bytes) -> Scalar:
  """RFC 6979 nonce with HMAC-SHA256"""
  return Scalar(next(generate_k(key.d.val, msg_hash)))

def random_nonce(key: PrivateKey, msg_hash: bytes) -> Scalar:
  """Fresh random nonce, as good as the system RNG"""
  return Scalar.random()


def sign(key: Union[PrivateKey, int, bytes], msg_hash: bytes, k: Optional[Union[Scalar, int]] = None, *, nonce: NonceFunction = deterministic_nonce) -> Signature:
  """
  Sign a 32-byte message hash.

  The nonce k may be given explicitly, otherwise it is obtained from the nonce
  function (RFC 6979 by default). If the nonce yields r or s of zero,
  NonceCollision is raised and the caller should pick another nonce.
  """
  key = key if isinstance(key, PrivateKey) else PrivateKey(key)
  if len(msg_hash) != 32: raise ValueError("The message hash must be exactly 32 bytes")
  if k is None:
    k = nonce(key, msg_hash)
  elif isinstance(k, int):
    if not 0 < k < n: raise InvalidScalar("Nonce must be in range 1..n-1")
    k = Scalar(k)
  if k.is_zero: raise InvalidScalar("Nonce cannot be zero")
  R = k * G
  if R.is_infinity: raise NonceCollision("Nonce produced the point at infinity")
  r = Scalar(R.x.val)
  if r.is_zero: raise NonceCollision("Nonce produced r = 0")
  z = Scalar.from_hash(msg_hash)
  s = k.inv * (z + r * key.d)
  if s.is_zero: raise NonceCollision("Nonce produced s = 0")
  return Signature(r, -s if s.is_high else s)


def verify(pubkey: Union[PublicKey, PrivateKey, bytes], msg_hash: bytes, sig: Union[Signature, bytes], *, low_s=True) -> bool:
  """
  Verify a signature on a 32-byte message hash. Bytes are read as DER.

  Returns False for any invalid or malformed signature, without raising.
  With low_s=False high-S signatures are also accepted.
  """
  Q = as_public(pubkey).point
  if len(msg_hash) != 32: return False
  if isinstance(sig, Signature):
    r, s = sig.r.val, sig.s.val
  else:
    try:
      r, s = der.decode(sig)
    except MalformedDER:
      return False
  if not 0 < r < n or not 0 < s < n: return False
  if low_s and Scalar(s).is_high: return False
  w = Scalar(s).inv
  z = Scalar.from_hash(msg_hash)
  P = (z * w) * G + (Scalar(r) * w) * Q
  if P == INF: return False
  return P.x.val % n == r


def sign_message(key: Union[PrivateKey, int, bytes], message: bytes, **kwargs) -> Signature:
  """Hash the message with SHA-256 and sign the hash"""
  return sign(key, sha(message), **kwargs)

def verify_message(pubkey: Union[PublicKey, PrivateKey, bytes], message: bytes, sig: Union[Signature, bytes], **kwargs) -> bool:
  return verify(pubkey, sha(message), sig, **kwargs)
