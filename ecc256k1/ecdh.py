from typing import Union

from ecc256k1.elliptic import Point
from ecc256k1.exceptions import InvalidPoint
from ecc256k1.keys import PrivateKey, PublicKey

# Raw Diffie-Hellman on secp256k1. The result is not hashed or otherwise
# passed through a key derivation function, which is up to the caller.


def shared_point(key: PrivateKey, remote: Union[PublicKey, Point, bytes]) -> Point:
  """The shared point d_local * Q_remote"""
  if isinstance(remote, PublicKey): Q = remote.point
  elif isinstance(remote, Point): Q = remote
  else: Q = Point.from_bytes(remote)
  if Q.is_infinity or not Q.is_on_curve: raise InvalidPoint("Invalid remote public key")
  S = key.d * Q
  if S.is_infinity: raise InvalidPoint("Shared point is the point at infinity")
  return S


def shared_secret(key: PrivateKey, remote: Union[PublicKey, Point, bytes]) -> bytes:
  """The x coordinate of the shared point, 32 bytes big endian (as in OpenSSL)"""
  return bytes(shared_point(key, remote).x)
