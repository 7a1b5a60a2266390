"""
Exceptions raised by tree_ecdh.

Every error the package raises on purpose derives from
``TreeECDHError``.  Each concrete error also subclasses the builtin it
refines (``ValueError`` for bad inputs, ``RuntimeError`` for a failing
entropy source), so callers that already catch those keep working.

Nothing in the package retries or recovers from these: they are raised
synchronously to the caller of the failing operation.
"""

from __future__ import annotations


class TreeECDHError(Exception):
    """Base class for tree_ecdh errors."""


class EmptyParticipantList(TreeECDHError, ValueError):
    """Tree reduction was asked to fold zero participants."""


class ZeroPrivateKey(TreeECDHError, ValueError):
    """A freshly drawn private scalar was zero."""


class InvalidPublicKey(TreeECDHError, ValueError):
    """A point failed the on-curve check or could not be decoded."""


class RandomnessFailure(TreeECDHError, RuntimeError):
    """The secure randomness source could not supply entropy."""
