"""
Deterministic nonces for DSA and ECDSA (RFC 6979, section 3.2).

The nonce is derived from the private key and the message hash with an
HMAC_DRBG, so that signing needs no randomness and the same inputs always
produce the same signature. Works for any group order q so that the test
vectors of the RFC itself can be used.
"""
import hashlib
import hmac
from typing import Iterator

from ecc256k1.elliptic import n


def bits2int(b: bytes, qlen: int) -> int:
  """Leftmost qlen bits of b as an integer"""
  v = int.from_bytes(b, "big")
  blen = 8 * len(b)
  return v >> blen - qlen if blen > qlen else v


def int2octets(x: int, rlen: int) -> bytes:
  return x.to_bytes(rlen, "big")


def bits2octets(b: bytes, q: int, rlen: int) -> bytes:
  z = bits2int(b, q.bit_length())
  return int2octets(z % q, rlen)


def generate_k(x: int, h1: bytes, q: int = n, hashfunc=hashlib.sha256, extra: bytes = b"") -> Iterator[int]:
  """
  Yield candidate nonces in the range [1, q-1].

  x is the private key, h1 the message hash. The first value is the nonce of
  RFC 6979; further values are what the RFC prescribes should the first one
  be unusable. Optional extra data is mixed in as in section 3.6.
  """
  qlen = q.bit_length()
  rlen = (qlen + 7) // 8
  hlen = hashfunc().digest_size

  def mac(key, data):
    return hmac.new(key, data, hashfunc).digest()

  seed = int2octets(x, rlen) + bits2octets(h1, q, rlen) + extra
  V = b"\x01" * hlen
  K = b"\x00" * hlen
  K = mac(K, V + b"\x00" + seed)
  V = mac(K, V)
  K = mac(K, V + b"\x01" + seed)
  V = mac(K, V)
  while True:
    T = b""
    while len(T) < rlen:
      V = mac(K, V)
      T += V
    k = bits2int(T[:rlen], qlen)
    if 0 < k < q:
      yield k
    K = mac(K, V + b"\x00")
    V = mac(K, V)
