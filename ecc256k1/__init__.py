__version__ = "0.1.0"

from ecc256k1.ecdsa import Signature
from ecc256k1.elliptic import INF, FieldElement, G, Point, Scalar, n, p
from ecc256k1.exceptions import DivisionByZero, InvalidPoint, InvalidScalar, MalformedDER, NonceCollision
from ecc256k1.keys import PrivateKey, PublicKey
from ecc256k1.schnorr import SchnorrSignature
