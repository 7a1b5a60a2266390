"""
Ephemeral keypairs and the pairwise ECDH step.

``generate_keypair`` produces one participant's (d, Q = d·G).
``derive_shared`` is the primitive every tree node is built from: the
x-coordinate of  d · Q_peer,  taken as a scalar.  Because
d_a · (d_b · G) = d_b · (d_a · G), the two sides of a pair always agree.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from .curve import (
    Scalar,
    Point,
    ORDER,
    base_point,
    is_on_curve,
    random_scalar_below,
    scalar_multiply,
)
from .errors import InvalidPublicKey, ZeroPrivateKey

RandomSource = Callable[[int], Scalar]


def generate_keypair(
    rng: Optional[RandomSource] = None,
) -> Tuple[Scalar, Point]:
    """
    Draw a fresh keypair  (d, d·G).

    Parameters
    ----------
    rng : callable, optional
        ``rng(bound)`` returning a uniform scalar in [0, bound).
        Defaults to :func:`tree_ecdh.curve.random_scalar_below`.

    Raises
    ------
    RandomnessFailure
        The randomness source could not supply entropy.
    ZeroPrivateKey
        The draw was zero.
    InvalidPublicKey
        d·G failed the on-curve check (curve provider defect).
    """
    draw = rng if rng is not None else random_scalar_below
    private = Scalar(int(draw(ORDER)))
    if private.is_zero():
        raise ZeroPrivateKey("private key is zero")

    public = scalar_multiply(private, base_point())
    if not is_on_curve(public):
        raise InvalidPublicKey("public key is not on curve")

    return private, public


def derive_shared(private_key: Scalar, peer_public_key: Point) -> Scalar:
    """Shared secret  x(private_key · peer_public_key)  reduced into Z_q."""
    shared_point = scalar_multiply(private_key, peer_public_key)
    return Scalar(shared_point.x)
