"""
Frequency Sweep Engine for the n-th Order Lag Element

This module produces the logarithmically-spaced angular frequency vector and
maps the exact and asymptotic response calculators over it.

Frequency Vector
----------------
For a sweep from $10^{p_{min}}$ to $10^{p_{max}}$ with $N_d$ points per
decade, element i is:

$$\\omega_i = 10^{p_{min} + i / N_d}, \\quad i = 0, 1, ..., (p_{max} - p_{min}) N_d - 1$$

The upper decade boundary $10^{p_{max}}$ itself is NOT included, so the
default sweep (-2, 4, 50) has 300 points from 0.01 to $10^{4 - 1/50}$ rad/s.

Evaluation
----------
Every sample is an independent pure function of (K, T1, n, ω). The engine
evaluates serially or on a thread pool; in both cases sample i corresponds
to frequency i.
"""

import warnings
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from .transfer_function import TransferFunctionParams
from .exact_response import ResponseSample, compute_exact_response
from .asymptotic_approximation import AsymptoticSample, compute_asymptotic_approximation


def generate_frequency_sweep(
    min_power: float = -2,
    max_power: float = 4,
    points_per_decade: int = 50
) -> np.ndarray:
    """
    Generate logarithmically-spaced angular frequencies [rad/s].

    Parameters
    ----------
    min_power : float
        Exponent of the first frequency (10^min_power)
    max_power : float
        Exponent of the (excluded) upper bound
    points_per_decade : int
        Samples per decade of frequency

    Returns
    -------
    np.ndarray
        Read-only, strictly increasing frequency vector of length
        (max_power - min_power) * points_per_decade. Empty when
        points_per_decade <= 0 or max_power <= min_power.
    """
    if not all(np.isfinite([min_power, max_power, points_per_decade])):
        raise ValueError(
            f"Sweep bounds must be finite, got ({min_power}, {max_power}, {points_per_decade})"
        )

    if points_per_decade <= 0 or max_power <= min_power:
        frequencies = np.empty(0, dtype=float)
    else:
        # Every index i < total_points, so a fractional total rounds up
        total_points = int(np.ceil((max_power - min_power) * points_per_decade))
        log_omega = min_power + np.arange(total_points) / points_per_decade
        frequencies = np.power(10.0, log_omega)

    frequencies.setflags(write=False)
    return frequencies


@dataclass
class FrequencySweepConfig:
    """
    Configuration for the frequency sweep.

    Attributes
    ----------
    min_power : float
        Lowest decade exponent (0.01 rad/s by default)
    max_power : float
        Upper decade exponent, excluded (10^4 rad/s by default)
    points_per_decade : int
        Number of samples per decade (50 gives smooth Bode curves)
    """
    min_power: float = -2
    max_power: float = 4
    points_per_decade: int = 50

    @property
    def n_points(self) -> int:
        return len(self.get_frequency_vector())

    def get_frequency_vector(self) -> np.ndarray:
        """Generate logarithmically-spaced frequency vector [rad/s]."""
        return generate_frequency_sweep(
            self.min_power,
            self.max_power,
            self.points_per_decade
        )


@dataclass(frozen=True)
class FrequencyPoint:
    """
    Exact and asymptotic response at a single frequency.

    Attributes
    ----------
    index : int
        Position in the sweep
    frequency_rad : float
        Angular frequency [rad/s]
    exact : ResponseSample
        Closed-form response
    asymptotic : AsymptoticSample
        Straight-line approximation
    """
    index: int
    frequency_rad: float
    exact: ResponseSample
    asymptotic: AsymptoticSample

    @property
    def magnitude_error_db(self) -> float:
        """Asymptote minus exact magnitude [dB]."""
        return self.asymptotic.magnitude_db - self.exact.magnitude_db

    @property
    def phase_error_deg(self) -> float:
        """Asymptote minus exact phase [degrees]."""
        return self.asymptotic.phase_deg - self.exact.phase_deg


class FrequencySweepEngine:
    """
    Maps the response calculators over a frequency sweep.

    Example Usage
    -------------
    >>> engine = FrequencySweepEngine(FrequencySweepConfig(), verbose=False)
    >>> points = engine.run_sweep(TransferFunctionParams(2.0, 0.5, 2))
    >>> len(points)
    300

    Parameters
    ----------
    config : FrequencySweepConfig
        Sweep configuration parameters
    max_workers : int
        Thread pool size; 1 evaluates serially
    verbose : bool
        Enable progress output
    """

    def __init__(
        self,
        config: Optional[FrequencySweepConfig] = None,
        max_workers: int = 1,
        verbose: bool = True
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.config = config or FrequencySweepConfig()
        self.max_workers = max_workers
        self.verbose = verbose
        self._results: List[FrequencyPoint] = []

    def run_sweep(
        self,
        params: TransferFunctionParams,
        frequencies: Optional[np.ndarray] = None
    ) -> List[FrequencyPoint]:
        """
        Evaluate exact and asymptotic responses across the sweep.

        Parameters
        ----------
        params : TransferFunctionParams
            Validated transfer function parameters
        frequencies : np.ndarray, optional
            Frequency vector [rad/s]; generated from the config if omitted

        Returns
        -------
        List[FrequencyPoint]
            One point per frequency, in sweep order
        """
        if frequencies is None:
            frequencies = self.config.get_frequency_vector()

        if self.verbose:
            print(f"\n{'='*70}")
            print(f"FREQUENCY SWEEP - {params}")
            print(f"{'='*70}")
            if len(frequencies) > 0:
                print(f"Frequency Range: {frequencies[0]:.4g} to {frequencies[-1]:.4g} rad/s")
            print(f"Number of Points: {len(frequencies)}")
            print(f"Workers: {self.max_workers}")

        if len(frequencies) == 0:
            warnings.warn("Frequency sweep is empty; nothing to evaluate")
            self._results = []
            return self._results

        def evaluate(item):
            idx, omega = item
            omega = float(omega)
            return FrequencyPoint(
                index=idx,
                frequency_rad=omega,
                exact=compute_exact_response(
                    params.gain, params.time_constant, params.order, omega
                ),
                asymptotic=compute_asymptotic_approximation(
                    params.gain, params.time_constant, params.order, omega
                ),
            )

        items = list(enumerate(frequencies))
        if self.max_workers > 1:
            # Executor.map yields results in submission order
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                self._results = list(pool.map(evaluate, items))
        else:
            self._results = [evaluate(item) for item in items]

        if self.verbose:
            print(f"SWEEP COMPLETE: {len(self._results)} points evaluated")
            print(f"{'='*70}\n")

        return self._results

    @property
    def results(self) -> List[FrequencyPoint]:
        """Points from the most recent sweep."""
        return self._results
