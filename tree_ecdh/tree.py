"""
Tree-structured group ECDH.

N participants are folded into one shared scalar by repeated pairwise
ECDH.  Each round pairs adjacent nodes (0,1), (2,3), …; every pair is
replaced by a synthetic node whose private key is the pair's shared
secret and whose public key is that secret times G.  An odd node out is
carried to the end of the next round unchanged.  Rounds repeat until a
single node remains; its private key is the group secret.

Example with five participants::

    round 0:  N0  N1  N2  N3  N4
    round 1:  [N0·N1]  [N2·N3]  N4
    round 2:  [[N0·N1]·[N2·N3]]  N4
    round 3:  [[[N0·N1]·[N2·N3]]·N4]

Pairing is positional, so the order of the input list is part of the
result.  Reversing a list whose length is a power of two keeps every
pair together at every level and therefore yields the same secret.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .curve import Scalar, Point, base_point, is_on_curve, scalar_multiply
from .errors import EmptyParticipantList, InvalidPublicKey, ZeroPrivateKey
from .keys import RandomSource, derive_shared, generate_keypair

logger = logging.getLogger(__name__)


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ParticipantNode:
    """
    One leaf or interior node of the reduction tree.

    For real participants ``public_key = private_key · G``; interior
    nodes hold a derived pair secret and its public point.
    """

    private_key: Scalar
    public_key: Point

    def __post_init__(self) -> None:
        if self.private_key.is_zero():
            raise ZeroPrivateKey("participant private key is zero")
        if not is_on_curve(self.public_key):
            raise InvalidPublicKey("participant public key is not on curve")

    @classmethod
    def generate(cls, rng: Optional[RandomSource] = None) -> ParticipantNode:
        """Node for a new participant with a fresh ephemeral keypair."""
        private, public = generate_keypair(rng)
        return cls(private_key=private, public_key=public)


# ── reduction ───────────────────────────────────────────────────────────

def combine(left: ParticipantNode, right: ParticipantNode) -> ParticipantNode:
    """Interior node for the pair  (left, right)."""
    secret = derive_shared(left.private_key, right.public_key)
    return ParticipantNode(
        private_key=secret,
        public_key=scalar_multiply(secret, base_point()),
    )


def next_generation(nodes: Sequence[ParticipantNode]) -> List[ParticipantNode]:
    """
    One reduction round.

    Returns ``ceil(len(nodes) / 2)`` nodes: the combined pairs in order,
    followed by the unpaired last node when ``len(nodes)`` is odd.
    """
    if not nodes:
        raise EmptyParticipantList("empty node list")

    paired = len(nodes) - len(nodes) % 2
    level = [combine(nodes[i], nodes[i + 1]) for i in range(0, paired, 2)]
    if paired < len(nodes):
        level.append(nodes[-1])
    return level


def reduce_tree_levels(
    nodes: Sequence[ParticipantNode],
) -> List[List[ParticipantNode]]:
    """
    Every generation of the reduction, input first, singleton last.

    The interior public keys of the intermediate levels are what a group
    protocol would publish so members can recompute the path to the
    root.
    """
    if not nodes:
        raise EmptyParticipantList("empty node list")

    levels = [list(nodes)]
    while len(levels[-1]) > 1:
        current = levels[-1]
        if len(current) % 2:
            logger.debug(
                "round %d: carrying node %d forward unpaired",
                len(levels), len(current) - 1,
            )
        levels.append(next_generation(current))
        logger.debug(
            "round %d: %d -> %d nodes",
            len(levels) - 1, len(current), len(levels[-1]),
        )
    return levels


def reduce_tree(nodes: Sequence[ParticipantNode]) -> Scalar:
    """
    Fold an ordered participant list into the group secret.

    A one-element list returns that participant's own private key.  No
    agreement happens in that case, so it is not a meaningful group
    secret for a single real participant.

    Raises
    ------
    EmptyParticipantList
        ``nodes`` is empty.
    """
    if not nodes:
        raise EmptyParticipantList("empty node list")
    if len(nodes) == 1:
        logger.warning(
            "tree reduction over a single participant: "
            "returning its own private key, no key agreement performed"
        )
    return reduce_tree_levels(nodes)[-1][0].private_key


def tree_depth(n: int) -> int:
    """Number of reduction rounds needed for *n* participants."""
    if n < 1:
        raise EmptyParticipantList("tree over zero participants")
    return (n - 1).bit_length()
