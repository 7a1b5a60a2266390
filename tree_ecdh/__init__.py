"""
tree_ecdh: group secret agreement by tree-structured ECDH.

Participants are paired left to right, each pair runs ECDH, and the
pair secrets are paired again until one scalar remains.  This is a
building block for group key agreement, not a protocol: it has no
transport, membership management, ratcheting or authentication.

Curve arithmetic is secp256k1 via libsecp256k1 (``coincurve``).

Quick start
-----------
::

    from tree_ecdh import ParticipantNode, reduce_tree

    nodes = [ParticipantNode.generate() for _ in range(5)]
    secret = reduce_tree(nodes)
"""

__version__ = "0.1.0"

# ── core types ──────────────────────────────────────────────────────────
from .curve import Scalar, Point, G, ORDER, CURVE_NAME

# ── curve provider / randomness ─────────────────────────────────────────
from .curve import base_point, scalar_multiply, is_on_curve, random_scalar_below

# ── keypairs and pairwise ECDH ──────────────────────────────────────────
from .keys import generate_keypair, derive_shared

# ── tree reduction ──────────────────────────────────────────────────────
from .tree import (
    ParticipantNode,
    combine,
    next_generation,
    reduce_tree,
    reduce_tree_levels,
    tree_depth,
)

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    TreeECDHError,
    EmptyParticipantList,
    ZeroPrivateKey,
    InvalidPublicKey,
    RandomnessFailure,
)

__all__ = [
    # version
    "__version__",
    # core
    "Scalar", "Point", "G", "ORDER", "CURVE_NAME",
    # provider
    "base_point", "scalar_multiply", "is_on_curve", "random_scalar_below",
    # keys
    "generate_keypair", "derive_shared",
    # tree
    "ParticipantNode", "combine", "next_generation",
    "reduce_tree", "reduce_tree_levels", "tree_depth",
    # errors
    "TreeECDHError", "EmptyParticipantList", "ZeroPrivateKey",
    "InvalidPublicKey", "RandomnessFailure",
]
