from typing import Tuple

from ecc256k1.exceptions import MalformedDER

# Only the small subset of DER that ECDSA signatures need:
#   SEQUENCE { INTEGER r, INTEGER s }
SEQUENCE = 0x30
INTEGER = 0x02


def encode_length(l: int) -> bytes:
  if l < 0x80:
    return bytes([l])
  lb = l.to_bytes((l.bit_length() + 7) // 8, "big")
  return bytes([0x80 | len(lb)]) + lb


def encode_int(v: int) -> bytes:
  """Minimal big endian, with a zero byte in front if the high bit would be set."""
  if v < 0: raise ValueError("Only non-negative integers are supported")
  # One byte more than the bits need exactly when the top bit of a byte is in use
  b = v.to_bytes(v.bit_length() // 8 + 1, "big")
  return bytes([INTEGER]) + encode_length(len(b)) + b


def encode(r: int, s: int) -> bytes:
  body = encode_int(r) + encode_int(s)
  return bytes([SEQUENCE]) + encode_length(len(body)) + body


def decode_length(data: bytes, pos: int) -> Tuple[int, int]:
  """Read a length at pos, return the length and the position after it."""
  if pos >= len(data): raise MalformedDER("Truncated before length")
  first = data[pos]
  pos += 1
  if first < 0x80:
    return first, pos
  nbytes = first & 0x7F
  if not nbytes: raise MalformedDER("Indefinite length is not allowed in DER")
  if pos + nbytes > len(data): raise MalformedDER("Truncated length")
  lb = data[pos:pos + nbytes]
  if lb[0] == 0: raise MalformedDER("Non-minimal length encoding")
  l = int.from_bytes(lb, "big")
  if l < 0x80: raise MalformedDER("Long form used for a short length")
  return l, pos + nbytes


def decode_int(data: bytes, pos: int) -> Tuple[int, int]:
  """Read an INTEGER at pos, return its value and the position after it."""
  if pos >= len(data) or data[pos] != INTEGER: raise MalformedDER("Expected an INTEGER")
  l, pos = decode_length(data, pos + 1)
  if not l: raise MalformedDER("Empty INTEGER")
  end = pos + l
  if end > len(data): raise MalformedDER("INTEGER longer than the data")
  b = data[pos:end]
  if b[0] & 0x80: raise MalformedDER("Negative INTEGER")
  if l > 1 and b[0] == 0 and b[1] < 0x80: raise MalformedDER("INTEGER has excessive zero padding")
  return int.from_bytes(b, "big"), end


def decode(data: bytes) -> Tuple[int, int]:
  """Parse a DER signature into its (r, s) integers. Raises MalformedDER."""
  data = bytes(data)
  if not data or data[0] != SEQUENCE: raise MalformedDER("Expected a SEQUENCE")
  l, pos = decode_length(data, 1)
  if pos + l != len(data):
    raise MalformedDER("Trailing data after SEQUENCE" if pos + l < len(data) else "SEQUENCE longer than the data")
  r, pos = decode_int(data, pos)
  s, pos = decode_int(data, pos)
  if pos != len(data): raise MalformedDER("Unexpected data inside SEQUENCE")
  return r, s
