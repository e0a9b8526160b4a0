from __future__ import annotations

from dataclasses import dataclass
from secrets import token_bytes
from typing import Optional, Union

from ecc256k1.elliptic import INF, FieldElement, G, Scalar, lift_x, n, p, tagged_hash, tobytes, xor
from ecc256k1.exceptions import InvalidPoint, NonceCollision
from ecc256k1.keys import PrivateKey, PublicKey

# Implements BIP-340 Schnorr signatures
# https://github.com/bitcoin/bips/blob/master/bip-0340.mediawiki

# Public keys and the nonce point R are x-only: of the two points with that x
# coordinate, the one with an even y is implied. The signer negates its secret
# scalar and nonce as needed so that this holds for the points it uses.


@dataclass(frozen=True)
class SchnorrSignature:
  rx: FieldElement
  s: Scalar

  @classmethod
  def from_bytes(cls, data: bytes) -> SchnorrSignature:
    """64 bytes R.x || s. Raises ValueError if either part is out of range."""
    if len(data) != 64: raise ValueError("Invalid signature length")
    return cls(FieldElement.from_bytes(data[:32]), Scalar.from_bytes(data[32:]))

  def __bytes__(self): return bytes(self.rx) + bytes(self.s)


def challenge(rx: bytes, px: bytes, msg: bytes) -> Scalar:
  return Scalar.from_hash(tagged_hash("BIP0340/challenge", rx + px + msg))


def sign(key: Union[PrivateKey, int, bytes], msg: bytes, aux_rand: Optional[bytes] = None) -> SchnorrSignature:
  """Sign a message of any length, using 32 bytes of auxiliary randomness"""
  key = key if isinstance(key, PrivateKey) else PrivateKey(key)
  if aux_rand is None: aux_rand = token_bytes(32)
  if len(aux_rand) != 32: raise ValueError("aux_rand must be exactly 32 bytes")
  P = key.public_key.point
  d = key.d if P.y.is_even else -key.d
  px = bytes(P.x)
  t = xor(bytes(d), tagged_hash("BIP0340/aux", aux_rand))
  k = Scalar.from_hash(tagged_hash("BIP0340/nonce", t + px + msg))
  if k.is_zero: raise NonceCollision("Nonce is zero")
  R = k * G
  if not R.y.is_even: k = -k
  rx = bytes(R.x)
  e = challenge(rx, px, msg)
  return SchnorrSignature(R.x, k + e * d)


def verify(pubkey: Union[PublicKey, PrivateKey, FieldElement, int, bytes], msg: bytes, sig: Union[SchnorrSignature, bytes]) -> bool:
  """Verify a signature. Returns False for anything invalid or malformed."""
  if isinstance(pubkey, PrivateKey): pubkey = pubkey.public_key
  if isinstance(pubkey, PublicKey): pubkey = pubkey.x_only
  elif isinstance(pubkey, FieldElement): pubkey = bytes(pubkey)
  elif isinstance(pubkey, int):
    if not 0 <= pubkey < p: return False
    pubkey = tobytes(pubkey)
  try:
    P = lift_x(pubkey)
  except InvalidPoint:
    return False
  sig = bytes(sig)
  if len(sig) != 64: return False
  r = int.from_bytes(sig[:32], "big")
  s = int.from_bytes(sig[32:], "big")
  if r >= p or s >= n: return False
  e = challenge(sig[:32], pubkey, msg)
  R = s * G - e * P
  if R == INF or not R.y.is_even: return False
  return R.x.val == r
