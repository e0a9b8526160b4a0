import os
import sys

from ecc256k1 import ecdh, ecdsa, schnorr
from ecc256k1.keys import PrivateKey, PublicKey


def read_sk(keystr: str) -> PrivateKey:
  """Secret key as hex, or a PEM file"""
  if os.path.isfile(keystr):
    with open(keystr, "rb") as f:
      return PrivateKey.from_pem(f.read())
  try:
    return PrivateKey(bytes.fromhex(keystr))
  except ValueError:
    raise ValueError(f"Unable to parse secret key {keystr[:8]}…")


def read_pk(keystr: str) -> PublicKey:
  """Public key as hex (compressed or uncompressed), or a PEM file"""
  if os.path.isfile(keystr):
    with open(keystr, "rb") as f:
      return PublicKey.from_pem(f.read())
  try:
    return PublicKey.from_bytes(bytes.fromhex(keystr))
  except ValueError:
    raise ValueError(f"Unable to parse public key {keystr[:8]}…")


def read_message(args) -> bytes:
  if args.files:
    return " ".join(args.files).encode()
  return sys.stdin.buffer.read()


def main_keygen(args):
  sk = PrivateKey.generate()
  if args.pem:
    sys.stdout.write(sk.to_pem().decode())
    return
  print(f"secret  {bytes(sk).hex()}")
  print(f"public  {sk.public_key.compressed.hex()}")


def main_pubkey(args):
  if not args.secret: raise ValueError("A secret key is required (-k)")
  pk = read_sk(args.secret).public_key
  if args.xonly:
    print(pk.x_only.hex())
  elif args.uncompressed:
    print(pk.uncompressed.hex())
  else:
    print(pk.compressed.hex())


def main_sign(args):
  if not args.secret: raise ValueError("A secret key is required (-k)")
  sk = read_sk(args.secret)
  message = read_message(args)
  if args.schnorr:
    print(bytes(schnorr.sign(sk, message)).hex())
    return
  sig = ecdsa.sign_message(sk, message)
  print((bytes(sig) if args.compact else sig.to_der()).hex())


def main_verify(args):
  if not args.public or not args.signature: raise ValueError("A public key (-p) and a signature (-s) are required")
  try:
    sig = bytes.fromhex(args.signature)
  except ValueError:
    raise ValueError("Unable to parse signature hex")
  message = read_message(args)
  if args.schnorr:
    # Accept both x-only and full public keys
    if len(args.public) == 64 and not os.path.isfile(args.public):
      try:
        xonly = bytes.fromhex(args.public)
      except ValueError:
        raise ValueError(f"Unable to parse public key {args.public[:8]}…")
    else:
      xonly = read_pk(args.public).x_only
    ok = schnorr.verify(xonly, message, sig)
  else:
    pk = read_pk(args.public)
    if args.compact:
      try:
        sig = ecdsa.Signature.from_compact(sig)
      except ValueError:
        raise ValueError("Signature mismatch")
    ok = ecdsa.verify_message(pk, message, sig)
  if not ok: raise ValueError("Signature mismatch")
  print("Signature OK")


def main_ecdh(args):
  if not args.secret or not args.public: raise ValueError("A secret key (-k) and a public key (-p) are required")
  print(ecdh.shared_secret(read_sk(args.secret), read_pk(args.public)).hex())
