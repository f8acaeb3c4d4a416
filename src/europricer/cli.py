import argparse
import logging
import sys

from .binomial import binomial_price
from .black_scholes import delta as bs_delta, price as bs_price
from .config import PricingConfig
from .core import CALL, PUT, MarketParameters, Payoff
from .exceptions import PricingError
from .monte_carlo import monte_carlo_estimate, monte_carlo_price_parallel
from .rng import GaussianSource

logger = logging.getLogger(__name__)


def _kind(s: str):
    s = s.lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise argparse.ArgumentTypeError("kind must be 'call' or 'put'")


def add_common(parser: argparse.ArgumentParser, *, with_kind: bool = True):
    parser.add_argument("--S0", type=float, default=100.0, help="spot")
    parser.add_argument("--K", type=float, default=100.0, help="strike")
    parser.add_argument("--T", type=float, default=1.0, help="years")
    parser.add_argument("--r", type=float, default=0.05, help="cont. risk-free")
    parser.add_argument("--sigma", type=float, default=0.20)
    if with_kind:
        parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")


def _market(args) -> MarketParameters:
    return MarketParameters(spot=args.S0, sigma=args.sigma, rate=args.r, maturity=args.T)


def _mc(payoff, params, args):
    if args.workers > 1:
        return monte_carlo_price_parallel(
            payoff, params, args.n_paths, seed=args.seed,
            n_workers=args.workers, chunk_size=args.chunk_size,
        )
    return monte_carlo_estimate(payoff, params, args.rng, args.n_paths,
                                chunk_size=args.chunk_size)


def cmd_bs(args):
    payoff = Payoff(args.kind, args.K)
    params = _market(args)
    print(f"{bs_price(payoff, params):.10f}  (delta {bs_delta(payoff, params):.10f})")


def cmd_binomial(args):
    px = binomial_price(Payoff(args.kind, args.K), _market(args), args.N)
    print(f"{px:.10f}")


def cmd_mc(args):
    est = _mc(Payoff(args.kind, args.K), _market(args), args)
    print(f"{est.price:.10f}  (stderr {est.stderr:.10f})")


def cmd_compare(args):
    params = _market(args)
    call, put = Payoff.call(args.K), Payoff.put(args.K)

    # one source for both legs, drawn in sequence
    call_mc = _mc(call, params, args).price
    put_mc = _mc(put, params, args).price
    rows = [
        ("Call", call_mc, bs_price(call, params), binomial_price(call, params, args.N)),
        ("Put", put_mc, bs_price(put, params), binomial_price(put, params, args.N)),
    ]

    for label, mc, bs, bi in rows:
        print(f"European {label} Prices")
        print(f"Monte Carlo : {mc:.6f}")
        print(f"BlackScholes: {bs:.6f}")
        print(f"Binomial    : {bi:.6f}")
        print()
    print(f"Delta for call: {bs_delta(call, params):.6f}")
    print(f"Delta for put : {bs_delta(put, params):.6f}")


def build_parser(config: PricingConfig) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="europricer", description="European option pricing CLI")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="-v for INFO, -vv for DEBUG")
    p.add_argument("--log-level", default=None,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    # BS
    p_bs = sub.add_parser("bs", help="Black-Scholes price and delta")
    add_common(p_bs)
    p_bs.set_defaults(func=cmd_bs)

    # Binomial
    p_bin = sub.add_parser("binomial", help="CRR binomial price")
    add_common(p_bin)
    p_bin.add_argument("--N", type=int, default=config.step_count)
    p_bin.set_defaults(func=cmd_binomial)

    # Monte Carlo (GBM terminal)
    p_mc = sub.add_parser("mc", help="Monte Carlo price (GBM)")
    add_common(p_mc)
    _add_mc_args(p_mc, config)
    p_mc.set_defaults(func=cmd_mc)

    # All three methods, call and put
    p_cmp = sub.add_parser("compare", help="price call and put with every method")
    add_common(p_cmp, with_kind=False)
    p_cmp.add_argument("--N", type=int, default=config.step_count)
    _add_mc_args(p_cmp, config)
    p_cmp.set_defaults(func=cmd_compare)
    return p


def _add_mc_args(parser: argparse.ArgumentParser, config: PricingConfig):
    parser.add_argument("--n-paths", dest="n_paths", type=int, default=config.path_count)
    parser.add_argument("--seed", type=int, default=config.seed)
    parser.add_argument("--workers", type=int, default=config.n_workers)
    parser.add_argument("--chunk-size", dest="chunk_size", type=int, default=config.chunk_size)


def _setup_logging(args):
    if args.log_level:
        level = getattr(logging, args.log_level)
    else:
        level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


def main(argv=None):
    try:
        config = PricingConfig.from_env()
    except PricingError as exc:
        print(f"europricer: error: {exc}", file=sys.stderr)
        return 2

    p = build_parser(config)
    args = p.parse_args(argv)
    _setup_logging(args)

    try:
        if hasattr(args, "seed"):
            args.rng = GaussianSource(args.seed)
        args.func(args)
    except PricingError as exc:
        logger.debug("pricing failed", exc_info=True)
        print(f"europricer: error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
