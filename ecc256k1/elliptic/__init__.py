# A plain Python submodule for secp256k1 field, scalar and point arithmetic

# Written after SEC 1 v2 and SEC 2 v2, with the x-only conventions of BIP-340.
# https://www.secg.org/sec1-v2.pdf
# https://www.secg.org/sec2-v2.pdf

# Not constant time, not zeroing buffers after use, and plain affine
# coordinates everywhere, so libsecp256k1 should be preferred where timing
# side channels matter. Validity checks are only those that the protocols
# require: points are checked to be on the curve, scalars to be in range.

# Public symbols are imported here. These are very low level primitives.
# Lower case constants are integers, upper case are Points.

from .point import INF, G, Point, lift_x, scalar_mul
from .scalar import FieldElement, Scalar, n, p
from .util import jacobi, sha, tagged_hash, tobytes, toint, xor
