"""
Tests for the curve provider — secp256k1 arithmetic and randomness

Checked invariants:
1. G is on the curve and has order ORDER
2. Scalar values are always reduced into Z_q
3. is_on_curve rejects the identity and tampered coordinates
4. SEC 1 decoding rejects malformed input with InvalidPublicKey
5. Entropy failures surface as RandomnessFailure
"""

import pytest

from tree_ecdh import curve
from tree_ecdh.curve import (
    FIELD_PRIME,
    ORDER,
    Point,
    Scalar,
    base_point,
    is_on_curve,
    random_scalar_below,
    scalar_multiply,
)
from tree_ecdh.errors import InvalidPublicKey, RandomnessFailure, TreeECDHError


# =============================================================================
# Scalar
# =============================================================================


class TestScalar:
    """Z_q bookkeeping."""

    def test_reduces_modulo_order(self):
        """Values at or above ORDER wrap around."""
        assert Scalar(ORDER).is_zero()
        assert Scalar(ORDER + 5) == Scalar(5)
        assert Scalar(-1).value == ORDER - 1

    def test_bytes_round_trip(self):
        """32-byte big-endian encoding."""
        s = Scalar(0xDEADBEEF)
        assert len(s.to_bytes()) == 32
        assert Scalar.from_bytes(s.to_bytes()) == s

    def test_from_bytes_rejects_out_of_range(self):
        """Encodings of values ≥ ORDER are refused."""
        with pytest.raises(ValueError, match="out of range"):
            Scalar.from_bytes(ORDER.to_bytes(32, "big"))

    def test_from_bytes_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="need 32 bytes"):
            Scalar.from_bytes(b"\x01" * 31)

    def test_int_and_bool(self):
        assert int(Scalar(42)) == 42
        assert not Scalar.zero()
        assert Scalar(1)


# =============================================================================
# Point arithmetic
# =============================================================================


class TestPointArithmetic:
    """Scalar multiplication through libsecp256k1."""

    def test_base_point_on_curve(self):
        assert is_on_curve(base_point())

    def test_order_times_generator_is_identity(self):
        """(q-1)·G = -G, so q·G wraps to the identity."""
        minus_g = scalar_multiply(Scalar(ORDER - 1), base_point())
        assert minus_g.x == base_point().x
        assert minus_g.y == FIELD_PRIME - base_point().y
        assert scalar_multiply(Scalar(ORDER), base_point()).is_inf()

    def test_multiplication_is_associative(self):
        """a·(b·G) == b·(a·G) == (ab)·G."""
        a, b = Scalar(0x1234), Scalar(0xABCDEF)
        ab_g = scalar_multiply(Scalar(0x1234 * 0xABCDEF), base_point())
        assert scalar_multiply(a, scalar_multiply(b, base_point())) == ab_g
        assert scalar_multiply(b, scalar_multiply(a, base_point())) == ab_g

    def test_coordinates_match_properties(self):
        """One serialisation yields the same (x, y) as the properties."""
        p = scalar_multiply(Scalar(42), base_point())
        assert p.coordinates() == (p.x, p.y)
        assert Point.identity().coordinates() == (0, 0)

    def test_points_hash_by_encoding(self):
        p = scalar_multiply(Scalar(42), base_point())
        q = Point.from_bytes(p.to_bytes())
        assert hash(p) == hash(q)
        assert len({p, q, Point.identity(), Point.identity()}) == 2


# =============================================================================
# Curve membership and decoding
# =============================================================================


class TestCurveMembership:
    """On-curve checks and SEC 1 decoding."""

    def test_identity_is_not_on_curve(self):
        assert not is_on_curve(Point.identity())

    def test_from_coordinates_accepts_generator(self):
        g = base_point()
        assert Point.from_coordinates(g.x, g.y) == g

    def test_from_coordinates_rejects_tampered_y(self):
        g = base_point()
        with pytest.raises(InvalidPublicKey, match="not on secp256k1"):
            Point.from_coordinates(g.x, (g.y + 1) % FIELD_PRIME)

    def test_from_coordinates_rejects_out_of_field(self):
        with pytest.raises(InvalidPublicKey, match="out of field range"):
            Point.from_coordinates(FIELD_PRIME, 1)

    def test_compressed_and_uncompressed_decoding(self):
        p = scalar_multiply(Scalar(99), base_point())
        assert Point.from_bytes(p.to_bytes()) == p
        uncompressed = b"\x04" + p.x.to_bytes(32, "big") + p.y.to_bytes(32, "big")
        assert Point.from_bytes(uncompressed) == p

    def test_from_bytes_rejects_wrong_length(self):
        with pytest.raises(InvalidPublicKey):
            Point.from_bytes(b"\x02" + b"\x01" * 10)

    def test_from_bytes_rejects_off_curve_encoding(self):
        """Uncompressed encoding with a tampered y-coordinate."""
        g = base_point()
        bad = b"\x04" + g.x.to_bytes(32, "big") + ((g.y + 1) % FIELD_PRIME).to_bytes(32, "big")
        with pytest.raises(InvalidPublicKey):
            Point.from_bytes(bad)

    def test_identity_has_no_encoding(self):
        with pytest.raises(InvalidPublicKey):
            Point.identity().to_bytes()

    def test_invalid_public_key_is_value_error(self):
        """Callers catching ValueError still see decoding failures."""
        with pytest.raises(ValueError):
            Point.from_bytes(b"")
        assert issubclass(InvalidPublicKey, TreeECDHError)


# =============================================================================
# Randomness source
# =============================================================================


class TestRandomScalarBelow:
    """OS CSPRNG wrapper."""

    def test_within_bound(self):
        for bound in (1, 2, 17, ORDER):
            s = random_scalar_below(bound)
            assert 0 <= s.value < bound

    def test_bound_one_always_zero(self):
        assert random_scalar_below(1).is_zero()

    def test_invalid_bound_rejected(self):
        with pytest.raises(ValueError):
            random_scalar_below(0)
        with pytest.raises(ValueError):
            random_scalar_below(ORDER + 1)

    def test_entropy_failure_is_wrapped(self, monkeypatch):
        """OSError from the OS source → RandomnessFailure, cause kept."""
        def exhausted(bound):
            raise OSError("getrandom failed")

        monkeypatch.setattr(curve.secrets, "randbelow", exhausted)
        with pytest.raises(RandomnessFailure) as info:
            random_scalar_below(ORDER)
        assert isinstance(info.value.__cause__, OSError)
