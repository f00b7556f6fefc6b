"""Aggregate pytest-bdd step definitions for command mocker features."""

from .mock_assertions import *  # noqa: F403
from .mock_execution import *  # noqa: F403
from .mock_setup import *  # noqa: F403

# Re-export all imported step definitions so ``from tests.steps import *``
# makes them available to scenario modules during collection.
__all__ = [
    name
    for name in globals()
    if not name.startswith("_") and name != "annotations"
]
