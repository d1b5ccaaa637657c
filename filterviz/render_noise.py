#!/usr/bin/env python3
"""
Render white noise through one coefficient set:
    python -m filterviz.render_noise a1=0.5 b1=0.9 --seconds 2 -o out.wav
    python -m filterviz.render_noise b2=-0.81 --info     # analysis only
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from .coefficients import CoefficientSet, FilterConfig
from .engine import FilterEngine
from .io import play_audio, save_wav
from .log import configure_logging


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filterviz.render_noise",
        description="Filter white noise through an IIR coefficient set and save it as WAV",
    )
    parser.add_argument("coefficients", nargs="*", metavar="NAME=VALUE",
                        help="coefficient assignments such as a0=1 a1=0.5 b1=0.9")
    parser.add_argument("-o", "--output", type=Path, default=Path("filtered_noise.wav"))
    parser.add_argument("--seconds", type=float, default=2.0)
    parser.add_argument("--fs", type=int, default=44_100, help="sample rate")
    parser.add_argument("--subtype", default="PCM_16", help="WAV sample format, e.g. PCM_16, PCM_24, FLOAT")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--no-auto-scale", action="store_true",
                        help="do not normalise by the peak response gain")
    parser.add_argument("--play", action="store_true", help="play the result (needs sounddevice)")
    parser.add_argument("--info", action="store_true", help="print the analysis and exit")
    parser.add_argument("--log-level", default=None)
    return parser


def build_engine(assignments: Sequence[str], fs: int = 44_100, *, seed: int = 0,
                 auto_scale: bool = True) -> FilterEngine:
    config = FilterConfig(sample_rate=fs)
    engine = FilterEngine(config, CoefficientSet.default(config), seed=seed, auto_scale=auto_scale)
    for item in assignments:
        name, sep, text = item.partition("=")
        if not sep:
            raise ValueError(f"expected NAME=VALUE, got {item!r}")
        engine.edit(name, text)
    return engine


def describe(engine: FilterEngine) -> str:
    zeros, poles = engine.get_roots()
    lines = [
        engine.difference_equation,
        str(engine.transfer_function),
        f"zeros     : {', '.join(f'{z:.4g}' for z in zeros.roots) or '-'}",
        f"poles     : {', '.join(f'{p:.4g}' for p in poles.roots) or '-'}",
        f"stability : {engine.stability.value}",
        f"peak gain : {engine.get_highest_gain_magnitude():.4g}",
    ]
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_argument_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        engine = build_engine(args.coefficients, args.fs, seed=args.seed,
                              auto_scale=not args.no_auto_scale)
    except ValueError as exc:
        logger.error("{}", exc)
        return 2

    print(describe(engine))
    if args.info:
        return 0

    if not engine.is_stable():
        logger.warning("filter is {}; nothing rendered", engine.stability.value)
        return 1

    engine.set_playing(True)
    y = engine.render_block(int(round(args.seconds * args.fs)))
    try:
        save_wav(y, args.output, args.fs, args.subtype)
    except ValueError as exc:
        logger.error("{}", exc)
        return 2
    if args.play:
        play_audio(y, args.fs)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
