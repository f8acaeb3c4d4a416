import math

import numpy as np
import pytest
from europricer.black_scholes import d1, d2, delta, implied_vol, normal_cdf, price
from europricer.core import MarketParameters, Payoff
from europricer.exceptions import InvalidContractParameters, InvalidMarketParameters

MKT = MarketParameters(spot=100.0, sigma=0.2, rate=0.05, maturity=1.0)
CALL100 = Payoff.call(100)
PUT100 = Payoff.put(100)


def test_bs_known_values():
    assert abs(price(CALL100, MKT) - 10.4506) < 1e-3
    assert abs(price(PUT100, MKT) - 5.5735) < 1e-3
    assert abs(delta(CALL100, MKT) - 0.6368) < 1e-3


def test_normal_cdf():
    assert normal_cdf(0.0) == 0.5
    assert abs(normal_cdf(1.959963984540054) - 0.975) < 1e-12
    assert abs(normal_cdf(-1.0) + normal_cdf(1.0) - 1.0) < 1e-15


def test_d1_d2_atm():
    # ln(S/K) = 0  =>  d1 = (r + sigma^2/2) sqrt(T) / sigma
    assert d1(CALL100, MKT) == pytest.approx(0.35)
    assert d2(CALL100, MKT) == pytest.approx(0.15)


@pytest.mark.parametrize("S,K,sigma,r,T", [
    (100, 100, 0.2, 0.05, 1.0),
    (80, 110, 0.35, 0.01, 0.25),
    (150, 90, 0.1, 0.08, 3.0),
    (100, 100, 0.5, -0.01, 0.5),
])
def test_put_call_parity(S, K, sigma, r, T):
    m = MarketParameters(spot=S, sigma=sigma, rate=r, maturity=T)
    lhs = price(Payoff.call(K), m) - price(Payoff.put(K), m)
    rhs = S - K * math.exp(-r * T)
    assert lhs == pytest.approx(rhs, rel=1e-9, abs=1e-9)


class TestDelta:
    @pytest.mark.parametrize("K", [50, 90, 100, 110, 200])
    @pytest.mark.parametrize("sigma", [0.05, 0.2, 0.8])
    def test_bounds(self, K, sigma):
        m = MKT.replace(sigma=sigma)
        dc = delta(Payoff.call(K), m)
        dp = delta(Payoff.put(K), m)
        assert 0.0 <= dc <= 1.0
        assert -1.0 <= dp <= 0.0
        assert dc - dp == pytest.approx(1.0, abs=1e-12)

    def test_matches_finite_difference(self):
        h = 1e-3
        up = price(CALL100, MKT.replace(spot=100 + h))
        dn = price(CALL100, MKT.replace(spot=100 - h))
        assert delta(CALL100, MKT) == pytest.approx((up - dn) / (2 * h), abs=1e-6)


class TestLimits:
    def test_deep_itm_call_tends_to_spot(self):
        assert price(Payoff.call(1e-8), MKT) == pytest.approx(100.0, abs=1e-6)

    def test_deep_otm_call_tends_to_zero(self):
        assert price(Payoff.call(1e6), MKT) < 1e-10

    def test_call_decreasing_in_strike(self):
        prices = [price(Payoff.call(K), MKT) for K in np.linspace(60, 140, 17)]
        assert np.all(np.diff(prices) < 0)


class TestDegenerateInputs:
    @pytest.mark.parametrize("changes", [{"maturity": 0.0}, {"sigma": 0.0}])
    def test_price_rejects(self, changes):
        with pytest.raises(InvalidMarketParameters):
            price(CALL100, MKT.replace(**changes))

    @pytest.mark.parametrize("changes", [{"maturity": 0.0}, {"sigma": 0.0}])
    def test_delta_rejects(self, changes):
        with pytest.raises(InvalidMarketParameters):
            delta(PUT100, MKT.replace(**changes))


class TestImpliedVol:
    @pytest.mark.parametrize("payoff", [CALL100, PUT100, Payoff.call(120), Payoff.put(85)])
    @pytest.mark.parametrize("sigma", [0.1, 0.35])
    def test_round_trip(self, payoff, sigma):
        target = price(payoff, MKT.replace(sigma=sigma))
        assert implied_vol(payoff, MKT, target) == pytest.approx(sigma, abs=1e-6)

    def test_outside_bounds_rejected(self):
        with pytest.raises(InvalidContractParameters):
            implied_vol(CALL100, MKT, 150.0)
        with pytest.raises(InvalidContractParameters):
            implied_vol(PUT100, MKT, 0.0)

    def test_unreachable_target_inside_bounds_rejected(self):
        # just below the spot cap, beyond any volatility in the widened bracket
        with pytest.raises(InvalidMarketParameters, match="no volatility"):
            implied_vol(CALL100, MKT, 100.0 - 1e-7)
