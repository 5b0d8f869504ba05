#!/usr/bin/env python3
"""
Command-line runner for the lag element frequency response analysis.

This script acts as the primary entry point. It handles argument parsing,
preset loading, and wires the analyzer, plotter and data logger together.

Usage:
    python -m lag_response.runner --preset second_order_lag
    python -m lag_response.runner -K 2 -T 0.5 -n 2 --compare-orders 1 2 3 4
"""

import argparse
import json
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from lag_response.core.frequency_response import (
    TransferFunctionParams,
    FrequencySweepConfig,
    FrequencyResponseAnalyzer,
    AnalyzerConfig,
    FrequencyResponsePlotter,
    PlotConfig,
    PlotStyle,
    FrequencyResponseLogger,
    LoggerConfig
)

DEFAULT_PRESETS_PATH = Path(__file__).resolve().parent / "config" / "presets.json"


def load_preset(name: str, config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a named preset from the presets file.

    A missing file yields an empty preset (built-in defaults apply); an
    unknown preset name or malformed file raises ValueError.
    """
    config_path = Path(config_path) if config_path else DEFAULT_PRESETS_PATH

    if not config_path.exists():
        print(f"Configuration Warning: presets file not found at {config_path}")
        print("Using default internal parameters.")
        return {}

    try:
        with open(config_path, 'r') as f:
            presets = json.load(f).get("presets", {})
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse JSON presets at {config_path}: {e}") from e

    if name not in presets:
        raise ValueError(
            f"Preset '{name}' not defined. Available presets: {sorted(presets)}"
        )

    return presets[name]


def map_preset_to_kwargs(preset: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split a preset into TransferFunctionParams and FrequencySweepConfig kwargs."""
    param_keys = ('gain', 'time_constant', 'order')
    sweep_keys = ('min_power', 'max_power', 'points_per_decade')

    params = preset.get("parameters", {})
    sweep = preset.get("sweep", {})

    param_kwargs = {k: params[k] for k in param_keys if k in params}
    sweep_kwargs = {k: sweep[k] for k in sweep_keys if k in sweep}
    return param_kwargs, sweep_kwargs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Frequency response of the n-th order lag G(jω) = K / (1 + jωT1)^n",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("--preset", type=str, default="default",
                        help="Named preset from the presets file")
    parser.add_argument("--presets-file", type=Path, default=None,
                        help="Alternative presets JSON file")

    # Transfer function (override the preset)
    parser.add_argument("-K", "--gain", type=str, default=None,
                        help="Static gain K > 0")
    parser.add_argument("-T", "--time-constant", type=str, default=None,
                        help="Time constant T1 > 0 [s]")
    parser.add_argument("-n", "--order", type=str, default=None,
                        help="Order n >= 1 (integer)")

    # Sweep (override the preset)
    parser.add_argument("--min-power", type=float, default=None,
                        help="Lowest frequency exponent (10^min_power rad/s)")
    parser.add_argument("--max-power", type=float, default=None,
                        help="Upper frequency exponent, excluded")
    parser.add_argument("--points-per-decade", type=int, default=None,
                        help="Samples per frequency decade")
    parser.add_argument("--workers", type=int, default=1,
                        help="Threads used to evaluate the sweep")

    parser.add_argument("--compare-orders", type=int, nargs="+", default=None,
                        metavar="N", help="Also overlay these orders on one Bode plot")
    parser.add_argument("--cross-validate", action="store_true",
                        help="Check the exact response against python-control")

    # Output
    parser.add_argument("--output-dir", type=Path, default=Path("lag_response_output"),
                        help="Directory for figures and data files")
    parser.add_argument("--no-save", action="store_true",
                        help="Do not write figures or data files")
    parser.add_argument("--no-plots", action="store_true",
                        help="Skip figure generation")
    parser.add_argument("--show", action="store_true",
                        help="Display figures interactively (requires GUI environment)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress progress output")
    return parser


def resolve_inputs(
    args: argparse.Namespace
) -> Tuple[TransferFunctionParams, FrequencySweepConfig]:
    """Merge preset values and CLI overrides, then validate."""
    preset = load_preset(args.preset, args.presets_file)
    param_kwargs, sweep_kwargs = map_preset_to_kwargs(preset)

    defaults = TransferFunctionParams()
    gain = args.gain if args.gain is not None else param_kwargs.get('gain', defaults.gain)
    time_constant = (args.time_constant if args.time_constant is not None
                     else param_kwargs.get('time_constant', defaults.time_constant))
    order = args.order if args.order is not None else param_kwargs.get('order', defaults.order)

    params = TransferFunctionParams.from_user_input(gain, time_constant, order)

    for key in ('min_power', 'max_power', 'points_per_decade'):
        value = getattr(args, key)
        if value is not None:
            sweep_kwargs[key] = value
    sweep_config = FrequencySweepConfig(**sweep_kwargs)
    # Raises ValueError on non-finite bounds
    sweep_config.get_frequency_vector()

    if args.workers < 1:
        raise ValueError(f"--workers must be >= 1, got {args.workers}")
    if args.compare_orders and min(args.compare_orders) < 1:
        raise ValueError(f"--compare-orders must all be >= 1, got {args.compare_orders}")

    return params, sweep_config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        params, sweep_config = resolve_inputs(args)
    except ValueError as e:
        parser.error(str(e))

    verbose = not args.quiet
    if verbose:
        print("=" * 60)
        print(f"Lag Element Frequency Response: {params}")
        print("=" * 60)

    if not args.show:
        plt.switch_backend("Agg")

    try:
        analyzer = FrequencyResponseAnalyzer(AnalyzerConfig(
            sweep_config=sweep_config,
            max_workers=args.workers,
            cross_validate=args.cross_validate,
            verbose=verbose
        ))
        data = analyzer.analyze(params)

        comparison = {}
        if args.compare_orders:
            comparison = analyzer.analyze_orders(
                params.gain, params.time_constant, args.compare_orders
            )

        save = not args.no_save

        if not args.no_plots:
            plotter = FrequencyResponsePlotter(PlotConfig(
                style=PlotStyle.SCREEN if args.show else PlotStyle.PUBLICATION,
                output_dir=args.output_dir / "figures"
            ))
            plotter.plot_bode(data, save=save)
            plotter.plot_nyquist(data, save=save)
            if comparison:
                for label, result in comparison.items():
                    plotter.add_response(result, label)
                plotter.plot_order_comparison(save=save)
            if args.show:
                plotter.show()
            plotter.close_all()

        if save:
            logger = FrequencyResponseLogger(LoggerConfig(output_dir=args.output_dir / "data"))
            logger.add_results_dict(analyzer.results)
            logger.set_sweep_config(sweep_config)
            logger.add_metadata("preset", args.preset)
            logger.save()

        print("\n" + "=" * 30)
        print(" RESPONSE SUMMARY")
        print("=" * 30)
        print(f"Corner Frequency:   {data.corner_frequency_rad:.4g} rad/s")
        print(f"DC Gain:            {data.dc_gain_db:.3f} dB")
        print(f"-3dB Bandwidth:     {data.bandwidth_rad:.4g} rad/s")
        print(f"Max Asymptote Err.: {data.max_gain_error_db:.3f} dB")
        print("=" * 30 + "\n")

    except KeyboardInterrupt:
        print("\nAnalysis interrupted by user.")
        return 0
    except Exception as e:
        print(f"\nCRITICAL FAILURE: {e}")
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
