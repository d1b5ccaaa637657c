"""Shared fixtures for the filterviz test-suite."""

import numpy as np
import pytest

from filterviz import CoefficientSet, FilterConfig, FilterEngine


class RootHelper:
    """Order-independent comparison of root sets."""

    @staticmethod
    def expand(real_roots=(), complex_pairs=()):
        out = [complex(r, 0.0) for r in real_roots]
        for re, im in complex_pairs:
            out.append(complex(re, im))
            out.append(complex(re, -im))
        return np.array(out)

    @staticmethod
    def assert_match(found, expected, rel_tol=1e-4):
        found = list(np.asarray(found, dtype=complex))
        expected = list(np.asarray(expected, dtype=complex))
        assert len(found) == len(expected)
        for e in expected:
            distances = [abs(f - e) for f in found]
            best = int(np.argmin(distances))
            assert distances[best] <= rel_tol * max(1.0, abs(e)), (
                f"no root near {e}: closest {found[best]}")
            found.pop(best)


@pytest.fixture
def roots_helper():
    return RootHelper


@pytest.fixture
def config():
    return FilterConfig()


@pytest.fixture
def small_config():
    """Coarser response grid for faster engine tests."""
    return FilterConfig(num_frequencies=1024)


@pytest.fixture
def identity(config):
    return CoefficientSet.default(config)


@pytest.fixture
def one_pole(config):
    """y[n] = x[n] + 0.5 y[n-1]; pole at 0.5."""
    return CoefficientSet.from_lists([1.0], [0.0, 0.5], config)


@pytest.fixture
def engine(small_config):
    return FilterEngine(small_config, seed=1234)


@pytest.fixture
def noise():
    rng = np.random.default_rng(7)
    return rng.random(2048) - 0.5
