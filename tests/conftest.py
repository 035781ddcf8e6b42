"""Shared fixtures for the power tests."""

from __future__ import annotations

import pytest

from bindings import build_registry
from exponentiator import Exponentiator
from integers import I8, U8, U32
from ops import PowRegistry


@pytest.fixture
def registry() -> PowRegistry:
    """A fresh registry holding the standard bindings."""
    return build_registry()


@pytest.fixture
def empty_registry() -> PowRegistry:
    return PowRegistry()


@pytest.fixture
def ex_i8() -> Exponentiator:
    return Exponentiator(I8)


@pytest.fixture
def ex_u8() -> Exponentiator:
    return Exponentiator(U8)


@pytest.fixture
def ex_u32() -> Exponentiator:
    return Exponentiator(U32)
