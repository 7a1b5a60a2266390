"""
Elliptic curve arithmetic on secp256k1 via libsecp256k1.

Scalar multiplication and point decoding are delegated to the C library
``coincurve``, which wraps Bitcoin Core's libsecp256k1.  The pure-Python
parts are limited to Z_q bookkeeping and the curve-equation check.

This module is the curve arithmetic provider and the secure randomness
source for the rest of the package:

- ``scalar_multiply(k, P)``   k · P
- ``base_point()``            the generator G
- ``is_on_curve(P)``          y² = x³ + 7  (mod p), identity excluded
- ``random_scalar_below(n)``  uniform draw from [0, n) via ``secrets``

Install
-------
    pip install coincurve>=18.0.0

References
----------
- SEC 1 v2 §2.3.3-2.3.4  point encoding / decoding
- SEC 2 v2 §2.4.1        secp256k1 domain parameters
"""

from __future__ import annotations

import secrets
from typing import Optional, Tuple

from coincurve import PrivateKey as _SK, PublicKey as _PK

from .errors import InvalidPublicKey, RandomnessFailure

# ── secp256k1 constants ─────────────────────────────────────────────────
CURVE_NAME = "secp256k1"
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
CURVE_B = 7
SCALAR_BYTES = 32
COMPRESSED_BYTES = 33
UNCOMPRESSED_BYTES = 65


# ── Scalar  (Z_q, pure Python) ──────────────────────────────────────────
class Scalar:
    """Element of the scalar field  Z_q  where *q* = ``ORDER``."""

    __slots__ = ("_v",)

    def __init__(self, value: int) -> None:
        self._v = value % ORDER

    @classmethod
    def zero(cls) -> Scalar:
        return cls(0)

    @classmethod
    def from_bytes(cls, data: bytes) -> Scalar:
        if len(data) != SCALAR_BYTES:
            raise ValueError(f"need {SCALAR_BYTES} bytes, got {len(data)}")
        v = int.from_bytes(data, "big")
        if v >= ORDER:
            raise ValueError("scalar out of range")
        return cls(v)

    def to_bytes(self) -> bytes:
        return self._v.to_bytes(SCALAR_BYTES, "big")

    @property
    def value(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    def __int__(self) -> int:
        return self._v

    def __eq__(self, o: object) -> bool:
        if isinstance(o, Scalar):
            return self._v == o._v
        if isinstance(o, int):
            return self._v == o % ORDER
        return False

    def __hash__(self) -> int:
        return hash(self._v)

    def __bool__(self) -> bool:
        return self._v != 0

    def __repr__(self) -> str:
        h = hex(self._v)
        return f"Scalar(0x{h[2:10]}…)" if len(h) > 14 else f"Scalar({h})"


# ── Point  (secp256k1 group element via libsecp256k1) ───────────────────
class Point:
    """
    Point on secp256k1.

    The identity (point at infinity) is represented by a flag rather than
    a ``coincurve.PublicKey``, which cannot hold it.  The identity is a
    valid group element for arithmetic but never a valid public key:
    ``is_on_curve`` rejects it and it has no SEC 1 encoding.
    """

    __slots__ = ("_pk", "_inf")

    def __init__(self, *, pk: Optional[_PK] = None, infinity: bool = False):
        self._pk: Optional[_PK] = pk
        self._inf: bool = infinity

    # constructors -----------------------------------------------------------
    @classmethod
    def generator(cls) -> Point:
        """Standard base point *G*."""
        return cls(pk=_SK(b"\x00" * 31 + b"\x01").public_key)

    @classmethod
    def identity(cls) -> Point:
        """Point at infinity."""
        return cls(infinity=True)

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        """
        Decode a SEC 1 compressed (33 B) or uncompressed (65 B) point.

        Raises ``InvalidPublicKey`` for anything libsecp256k1 refuses:
        wrong length, bad prefix, x ≥ p, or a point off the curve.
        """
        if len(data) not in (COMPRESSED_BYTES, UNCOMPRESSED_BYTES):
            raise InvalidPublicKey(
                f"need {COMPRESSED_BYTES} or {UNCOMPRESSED_BYTES} bytes, "
                f"got {len(data)}"
            )
        try:
            return cls(pk=_PK(data))
        except ValueError as exc:
            raise InvalidPublicKey(f"cannot decode point: {exc}") from exc

    @classmethod
    def from_coordinates(cls, x: int, y: int) -> Point:
        """Build a point from affine coordinates, checking the curve equation."""
        if not (0 <= x < FIELD_PRIME and 0 <= y < FIELD_PRIME):
            raise InvalidPublicKey("coordinate out of field range")
        if not _satisfies_curve(x, y):
            raise InvalidPublicKey("point is not on secp256k1")
        return cls(pk=_PK.from_point(x, y))

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        """SEC 1 compressed encoding."""
        if self._inf:
            raise InvalidPublicKey("point at infinity has no SEC 1 encoding")
        return self._pk.format(compressed=True)  # type: ignore[union-attr]

    def coordinates(self) -> Tuple[int, int]:
        """Affine  (x, y)  from a single uncompressed serialisation."""
        if self._inf:
            return 0, 0
        raw = self._pk.format(compressed=False)  # type: ignore[union-attr]
        return int.from_bytes(raw[1:33], "big"), int.from_bytes(raw[33:65], "big")

    @property
    def x(self) -> int:
        return self.coordinates()[0]

    @property
    def y(self) -> int:
        return self.coordinates()[1]

    def is_inf(self) -> bool:
        return self._inf

    # group operations -------------------------------------------------------
    def _smul(self, s: Scalar) -> Point:
        """Scalar multiplication  s · self  (C speed)."""
        if self._inf or s.is_zero():
            return Point.identity()
        return Point(pk=self._pk.multiply(s.to_bytes()))  # type: ignore

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Point):
            return False
        if self._inf and o._inf:
            return True
        if self._inf or o._inf:
            return False
        return self._pk.format() == o._pk.format()  # type: ignore

    def __hash__(self) -> int:
        if self._inf:
            return hash(None)
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        if self._inf:
            return "Point(∞)"
        return f"Point(0x{self.x:064x})"[:42] + "…)"


def _satisfies_curve(x: int, y: int) -> bool:
    return (y * y - (pow(x, 3, FIELD_PRIME) + CURVE_B)) % FIELD_PRIME == 0


# ── module-level generator ──────────────────────────────────────────────
G = Point.generator()


# ── provider interface ──────────────────────────────────────────────────
def base_point() -> Point:
    """The fixed generator *G*."""
    return G


def scalar_multiply(scalar: Scalar, point: Point) -> Point:
    """Standard scalar multiplication  scalar · point."""
    return point._smul(scalar)


def is_on_curve(point: Point) -> bool:
    """
    Curve membership test.

    Re-checks the Weierstrass equation on the affine coordinates instead
    of trusting that the point came out of libsecp256k1.  The identity
    has no affine coordinates and is reported as off-curve.
    """
    if point.is_inf():
        return False
    return _satisfies_curve(*point.coordinates())


def random_scalar_below(bound: int) -> Scalar:
    """
    Uniform scalar in  [0, bound)  from the OS CSPRNG.

    Failures of the entropy source are raised as ``RandomnessFailure``
    and never retried.
    """
    if not 1 <= bound <= ORDER:
        raise ValueError(f"bound must be in [1, ORDER], got {bound}")
    try:
        v = secrets.randbelow(bound)
    except (OSError, NotImplementedError) as exc:
        raise RandomnessFailure("system entropy source unavailable") from exc
    return Scalar(v)
