import hashlib
from functools import lru_cache


def toint(x) -> int:
  if isinstance(x, int): return x
  if len(x) != 32: raise ValueError("Should be exactly 32 bytes")
  return int.from_bytes(x, "big")

def tobytes(x: int) -> bytes:
  return x.to_bytes(32, "big")

def xor(a: bytes, b: bytes) -> bytes:
  assert len(a) == len(b)
  return bytes(x ^ y for x, y in zip(a, b))

def sha(s) -> bytes:
  """Return SHA-256 digest"""
  return hashlib.sha256(s).digest()

@lru_cache(maxsize=None)
def _tagprefix(tag: str) -> bytes:
  t = sha(tag.encode())
  return t + t

def tagged_hash(tag: str, data: bytes) -> bytes:
  """BIP-340 domain separated hash: SHA256(SHA256(tag) || SHA256(tag) || data)"""
  return sha(_tagprefix(tag) + data)


def jacobi(a: int, m: int) -> int:
  """Jacobi symbol (a/m) for odd positive m. Returns 0, 1 or -1."""
  if m <= 0 or not m & 1: raise ValueError("Jacobi symbol needs an odd positive modulus")
  a %= m
  res = 1
  while a:
    # Second supplementary law for the factors of two
    while not a & 1:
      a >>= 1
      if m & 7 in (3, 5): res = -res
    # Quadratic reciprocity
    a, m = m, a
    if a & 3 == 3 and m & 3 == 3: res = -res
    a %= m
  return res if m == 1 else 0
