# europricer: European option pricing by Monte Carlo, Black-Scholes and CRR tree
# Public API

from .core import OptionKind, Payoff, MarketParameters, CALL, PUT
from .exceptions import (
    PricingError, InvalidMarketParameters, InvalidIterationCount,
    InvalidContractParameters,
)
from .rng import GaussianSource

# Pricers
from .black_scholes import price as bs_price, delta as bs_delta, implied_vol
from .monte_carlo import (
    MonteCarloResult, monte_carlo_price, monte_carlo_estimate,
    monte_carlo_price_parallel,
)
from .binomial import binomial_price

# Configuration & validation
from .config import PricingConfig
from .validation import cross_validate, convergence_analysis

__all__ = [
    # Data model
    "OptionKind", "Payoff", "MarketParameters", "CALL", "PUT",
    "GaussianSource",
    # Errors
    "PricingError", "InvalidMarketParameters", "InvalidIterationCount",
    "InvalidContractParameters",
    # Pricers
    "bs_price", "bs_delta", "implied_vol",
    "MonteCarloResult", "monte_carlo_price", "monte_carlo_estimate",
    "monte_carlo_price_parallel",
    "binomial_price",
    # Configuration & validation
    "PricingConfig", "cross_validate", "convergence_analysis",
]

__version__ = "0.1.0"
