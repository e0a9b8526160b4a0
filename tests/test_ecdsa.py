from secrets import token_bytes

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, utils

from ecc256k1 import der, ecdsa
from ecc256k1.ecdsa import Signature, sign, verify
from ecc256k1.elliptic import Scalar, n, sha, tobytes
from ecc256k1.exceptions import InvalidScalar, NonceCollision
from ecc256k1.keys import PrivateKey

Gx = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798


def openssl_keypair():
  sk = ec.generate_private_key(ec.SECP256K1())
  return sk, PrivateKey(sk.private_numbers().private_value)


def test_fixed_nonce_regression():
  """d = 1, k = 1 and an all-zero hash give R = G and thus r = s = Gx"""
  sig = sign(PrivateKey(1), bytes(32), k=1)
  assert sig.r == Scalar(Gx)
  assert sig.s == Scalar(Gx)
  assert sig.is_low_s
  assert bytes(sig).hex() == 2 * f"{Gx:064x}"
  assert verify(PrivateKey(1).public_key, bytes(32), sig)
  assert sign(1, bytes(32), Scalar(1)) == sig


def test_sign_verify():
  msg1 = sha(b"test message")
  msg2 = sha(b"Test message")
  sk = PrivateKey.generate()
  pk = sk.public_key
  sig1 = sign(sk, msg1)
  sig2 = sign(sk, msg2)
  assert sig1 != sig2
  assert sig1.is_low_s and sig2.is_low_s
  assert verify(pk, msg1, sig1)
  assert verify(pk, msg2, sig2)
  assert not verify(pk, msg2, sig1)
  assert not verify(pk, msg1, sig2)
  assert not verify(PrivateKey.generate().public_key, msg1, sig1)
  # Public key may be given in any form
  assert verify(sk, msg1, sig1)
  assert verify(pk.uncompressed, msg1, sig1)


def test_tampering():
  sk = PrivateKey.generate()
  msg = sha(token_bytes(100))
  sig = sign(sk, msg)
  raw = bytes(sig)
  for i in (0, 17, 31, 32, 50, 63):
    tampered = bytearray(raw)
    tampered[i] ^= 1
    try:
      tsig = Signature.from_compact(bytes(tampered))
    except InvalidScalar:
      continue
    assert not verify(sk.public_key, msg, tsig, low_s=False)
  for i in range(32):
    tampered = bytearray(msg)
    tampered[i] ^= 0x80
    assert not verify(sk.public_key, bytes(tampered), sig)


def test_deterministic():
  sk = PrivateKey.generate()
  msg = sha(b"message")
  assert sign(sk, msg) == sign(sk, msg)
  assert sign(sk, msg, nonce=ecdsa.deterministic_nonce) == sign(sk, msg)
  # Random nonces still give valid but different signatures
  sig1 = sign(sk, msg, nonce=ecdsa.random_nonce)
  sig2 = sign(sk, msg, nonce=ecdsa.random_nonce)
  assert sig1 != sig2
  assert verify(sk.public_key, msg, sig1)
  assert verify(sk.public_key, msg, sig2)


def test_custom_nonce_function():
  calls = []

  def fixed(key, msg_hash):
    calls.append((key, msg_hash))
    return Scalar(12345)

  sk = PrivateKey(99)
  sig = sign(sk, bytes(32), nonce=fixed)
  assert calls == [(sk, bytes(32))]
  assert sig == sign(sk, bytes(32), k=12345)


def test_rfc6979_satoshi():
  """Widely published RFC 6979 secp256k1 vector (private key 1)"""
  sk = PrivateKey(1)
  msg = sha(b"Satoshi Nakamoto")
  assert ecdsa.deterministic_nonce(sk, msg) == Scalar(0x8F8A276C19F4149656B280621E358CCE24F5F52542772691EE69063B74F15D15)
  sig = ecdsa.sign_message(sk, b"Satoshi Nakamoto")
  assert bytes(sig).hex() == (
    "934b1ea10a4b3c1757e2b0c017d0b6143ce3c9a7e6a4a49860d7a6ab210ee3d8"
    "2442ce9d2b916064108014783e923ec36b49743e2ffa1c4496f01a512aafd9e5"
  )
  assert ecdsa.verify_message(sk.public_key, b"Satoshi Nakamoto", sig)


def test_nonce_collision():
  # With d = 1 and k = 1, r = Gx and s = z + Gx, so z = -Gx makes s zero
  with pytest.raises(NonceCollision):
    sign(PrivateKey(1), tobytes(n - Gx), k=1)


def test_sign_errors():
  sk = PrivateKey.generate()
  with pytest.raises(InvalidScalar):
    sign(sk, bytes(32), k=0)
  with pytest.raises(InvalidScalar):
    sign(sk, bytes(32), k=n)
  with pytest.raises(InvalidScalar):
    sign(sk, bytes(32), k=Scalar(n))
  with pytest.raises(ValueError):
    sign(sk, bytes(31))
  with pytest.raises(InvalidScalar):
    sign(0, bytes(32))


def test_verify_rejects_malformed():
  sk = PrivateKey.generate()
  msg = sha(b"x")
  sig = sign(sk, msg)
  pk = sk.public_key
  assert not verify(pk, msg[:31], sig)
  assert not verify(pk, msg, b"")
  assert not verify(pk, msg, b"\x30\x00")
  assert not verify(pk, msg, sig.to_der() + b"\x00")
  assert not verify(pk, msg, bytes(sig))  # Compact is not DER
  assert verify(pk, msg, sig.to_der())
  # Zero and out of range values inside well-formed DER
  assert not verify(pk, msg, der.encode(0, sig.s.val))
  assert not verify(pk, msg, der.encode(sig.r.val, 0))
  assert not verify(pk, msg, der.encode(sig.r.val + n, sig.s.val))
  assert not verify(pk, msg, der.encode(sig.r.val, sig.s.val + n))


def test_low_s():
  sk = PrivateKey.generate()
  msg = sha(b"malleable")
  sig = sign(sk, msg)
  high = Signature(sig.r, -sig.s)
  assert not high.is_low_s
  assert high.normalize_s() == sig
  assert sig.normalize_s() is sig
  assert not verify(sk.public_key, msg, high)
  assert verify(sk.public_key, msg, high, low_s=False)
  assert verify(sk.public_key, msg, high.to_der(), low_s=False)


def test_signature_values():
  with pytest.raises(InvalidScalar):
    Signature(Scalar(0), Scalar(1))
  with pytest.raises(InvalidScalar):
    Signature.from_ints(1, n)
  with pytest.raises(InvalidScalar):
    Signature.from_compact(bytes(64))
  with pytest.raises(ValueError):
    Signature.from_compact(bytes(63))
  sig = Signature.from_ints(3, 4)
  assert Signature.from_der(sig.to_der()) == sig
  assert Signature.from_compact(bytes(sig)) == sig


def test_sign_vs_openssl():
  for _ in range(3):
    osk, sk = openssl_keypair()
    message = token_bytes(200)
    sig = ecdsa.sign_message(sk, message)
    osk.public_key().verify(sig.to_der(), message, ec.ECDSA(hashes.SHA256()))
    # A wrong message is rejected by OpenSSL too
    with pytest.raises(InvalidSignature):
      osk.public_key().verify(sig.to_der(), message + b"!", ec.ECDSA(hashes.SHA256()))


def test_verify_openssl_signatures():
  for _ in range(3):
    osk, sk = openssl_keypair()
    msg_hash = sha(token_bytes(64))
    dersig = osk.sign(msg_hash, ec.ECDSA(utils.Prehashed(hashes.SHA256())))
    # OpenSSL does not normalize s
    assert verify(sk.public_key, msg_hash, dersig, low_s=False)
    sig = Signature.from_der(dersig)
    assert verify(sk.public_key, msg_hash, sig.normalize_s())
    assert not verify(sk.public_key, sha(msg_hash), dersig, low_s=False)
