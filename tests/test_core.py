"""Tests for the payoff variant and market snapshot."""

import dataclasses
import math

import numpy as np
import pytest
from europricer.core import CALL, PUT, MarketParameters, OptionKind, Payoff
from europricer.exceptions import (
    InvalidContractParameters, InvalidMarketParameters, PricingError,
)

MKT = MarketParameters(spot=100.0, sigma=0.2, rate=0.05, maturity=1.0)


class TestPayoff:
    def test_call_values(self):
        c = Payoff.call(100)
        assert c.payoff(120.0) == 20.0
        assert c.payoff(80.0) == 0.0
        assert c.payoff(100.0) == 0.0

    def test_put_values(self):
        p = Payoff.put(100)
        assert p.payoff(80.0) == 20.0
        assert p.payoff(120.0) == 0.0

    def test_scalar_returns_float(self):
        assert type(Payoff.call(100).payoff(150.0)) is float

    def test_vectorised(self):
        ST = np.array([50.0, 100.0, 150.0])
        np.testing.assert_array_equal(Payoff.call(100)(ST), [0.0, 0.0, 50.0])
        np.testing.assert_array_equal(Payoff.put(100)(ST), [50.0, 0.0, 0.0])

    def test_accessors(self):
        c, p = Payoff.call(95), Payoff.put(105)
        assert c.is_call and not p.is_call
        assert c.strike == 95.0 and p.strike == 105.0
        assert c.kind is CALL and p.kind is PUT

    def test_kind_from_string(self):
        assert Payoff("put", 100).kind is OptionKind.PUT

    def test_unknown_kind_rejected(self):
        with pytest.raises(InvalidContractParameters):
            Payoff("straddle", 100)

    @pytest.mark.parametrize("K", [0.0, -5.0, math.nan, math.inf])
    def test_bad_strike_rejected(self, K):
        with pytest.raises(InvalidContractParameters):
            Payoff.call(K)

    @pytest.mark.parametrize("K", ["abc", None, [100]])
    def test_non_numeric_strike_rejected(self, K):
        with pytest.raises(InvalidContractParameters, match="strike"):
            Payoff.call(K)

    def test_immutable(self):
        c = Payoff.call(100)
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.strike = 90.0


class TestMarketParameters:
    def test_aliases_and_discount(self):
        assert (MKT.S, MKT.r, MKT.T) == (100.0, 0.05, 1.0)
        assert MKT.discount_factor() == pytest.approx(math.exp(-0.05))

    def test_replace_returns_copy(self):
        shocked = MKT.replace(spot=110.0)
        assert shocked.spot == 110.0
        assert MKT.spot == 100.0

    @pytest.mark.parametrize("S", [0.0, -1.0])
    def test_nonpositive_spot(self, S):
        with pytest.raises(InvalidContractParameters):
            MarketParameters(spot=S, sigma=0.2, rate=0.05, maturity=1.0)

    def test_negative_sigma(self):
        with pytest.raises(InvalidMarketParameters):
            MarketParameters(spot=100, sigma=-0.1, rate=0.05, maturity=1.0)

    def test_negative_maturity(self):
        with pytest.raises(InvalidMarketParameters):
            MarketParameters(spot=100, sigma=0.2, rate=0.05, maturity=-1.0)

    def test_nonfinite_rate(self):
        with pytest.raises(InvalidMarketParameters):
            MarketParameters(spot=100, sigma=0.2, rate=math.nan, maturity=1.0)

    def test_non_numeric_fields_rejected(self):
        with pytest.raises(InvalidContractParameters, match="spot"):
            MarketParameters(spot="abc", sigma=0.2, rate=0.05, maturity=1.0)
        with pytest.raises(InvalidMarketParameters, match="sigma"):
            MarketParameters(spot=100, sigma=None, rate=0.05, maturity=1.0)

    def test_degenerate_values_constructible(self):
        m = MarketParameters(spot=100, sigma=0.0, rate=0.05, maturity=0.0)
        with pytest.raises(InvalidMarketParameters):
            m.require_nondegenerate()

    def test_errors_are_value_errors(self):
        assert issubclass(PricingError, ValueError)
        with pytest.raises(ValueError):
            MarketParameters(spot=-1, sigma=0.2, rate=0.05, maturity=1.0)
