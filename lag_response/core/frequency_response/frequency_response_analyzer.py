"""
Frequency Response Analyzer for the n-th Order Lag Element

This module provides the orchestration layer between the numeric core and its
collaborators (plotter, data logger, command line). It:

1. Generates the frequency sweep once
2. Maps the exact and asymptotic calculators over it
3. Packages parallel arrays for rendering and persistence
4. Computes derived frequency-domain metrics

Derived Metrics
---------------
**Corner Frequency**: ωc = 1/T1, where the asymptote slope changes.

**-3dB Bandwidth**: frequency where |G| drops 3 dB below the DC gain. Closed
form for the n-th order lag:

$$\\omega_{bw} = \\omega_c \\sqrt{2^{1/n} - 1}$$

The analyzer reports both this value and the one interpolated from the swept
data, so the sweep resolution can be judged.

**Asymptote Error**: max |asymptotic - exact| in magnitude and phase. For the
blended two-decade band the magnitude error peaks at about 3.07·n dB slightly
off the corner frequency (|log10(ω/ωc)| ≈ 0.3).

Cross-Validation
----------------
With ``cross_validate`` enabled, the exact response is compared to
python-control's evaluation of K / (T1·s + 1)^n on the imaginary axis.
"""

import warnings
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple

# Local imports
from .transfer_function import TransferFunctionParams
from .frequency_sweep_engine import (
    FrequencySweepEngine,
    FrequencySweepConfig,
    FrequencyPoint
)


@dataclass
class FrequencyResponseData:
    """
    Complete frequency response dataset for one parameter set.

    All arrays share the index of ``frequencies_rad``.

    Attributes
    ----------
    params : TransferFunctionParams
        Analyzed transfer function
    frequencies_rad : np.ndarray
        Angular frequency vector [rad/s]
    exact_gain_linear : np.ndarray
        |G(jω)| (linear)
    exact_gain_db : np.ndarray
        |G(jω)| in dB
    exact_phase_deg : np.ndarray
        ∠G(jω) in degrees (unwrapped)
    asymptotic_gain_db : np.ndarray
        Asymptotic magnitude in dB
    asymptotic_phase_deg : np.ndarray
        Asymptotic phase in degrees
    real : np.ndarray
        Re{G(jω)} for the Nyquist locus
    imag : np.ndarray
        Im{G(jω)} for the Nyquist locus
    label : str
        Display label for plots and exported files
    corner_frequency_rad : float
        ωc = 1/T1 [rad/s]
    dc_gain_db : float
        20·log10(K) [dB]
    bandwidth_rad : float
        -3dB bandwidth interpolated from the sweep [rad/s]
    analytic_bandwidth_rad : float
        Closed-form -3dB bandwidth [rad/s]
    max_gain_error_db : float
        max |asymptotic - exact| magnitude [dB]
    max_gain_error_freq_rad : float
        Frequency of the maximum magnitude error [rad/s]
    max_phase_error_deg : float
        max |asymptotic - exact| phase [degrees]
    metadata : Dict
        Additional analysis metadata
    """
    params: TransferFunctionParams
    frequencies_rad: np.ndarray
    exact_gain_linear: np.ndarray
    exact_gain_db: np.ndarray
    exact_phase_deg: np.ndarray
    asymptotic_gain_db: np.ndarray
    asymptotic_phase_deg: np.ndarray
    real: np.ndarray
    imag: np.ndarray
    label: str = ''
    corner_frequency_rad: float = 0.0
    dc_gain_db: float = 0.0
    bandwidth_rad: float = np.nan
    analytic_bandwidth_rad: float = np.nan
    max_gain_error_db: float = np.nan
    max_gain_error_freq_rad: float = np.nan
    max_phase_error_deg: float = np.nan
    metadata: Dict = field(default_factory=dict)

    @property
    def n_points(self) -> int:
        return len(self.frequencies_rad)

    def chart_series(self) -> Dict[str, np.ndarray]:
        """
        Parallel arrays consumed by the rendering collaborator.

        Returns
        -------
        Dict[str, np.ndarray]
            frequency, exact/asymptotic magnitude [dB], exact/asymptotic
            phase [deg], real and imaginary parts
        """
        return {
            'frequency_rad': self.frequencies_rad,
            'exact_gain_db': self.exact_gain_db,
            'asymptotic_gain_db': self.asymptotic_gain_db,
            'exact_phase_deg': self.exact_phase_deg,
            'asymptotic_phase_deg': self.asymptotic_phase_deg,
            'real': self.real,
            'imag': self.imag,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the sweep to a pandas DataFrame, one row per frequency.

        Returns
        -------
        pd.DataFrame
            Columns of :meth:`chart_series` plus the linear magnitude and
            asymptote errors
        """
        df = pd.DataFrame(self.chart_series())
        df['exact_gain_linear'] = self.exact_gain_linear
        df['gain_error_db'] = self.asymptotic_gain_db - self.exact_gain_db
        df['phase_error_deg'] = self.asymptotic_phase_deg - self.exact_phase_deg
        return df


@dataclass
class AnalyzerConfig:
    """
    Configuration for the frequency response analyzer.

    Attributes
    ----------
    sweep_config : FrequencySweepConfig
        Frequency sweep definition
    max_workers : int
        Thread pool size for sweep evaluation (1 = serial)
    cross_validate : bool
        Compare the exact response against python-control
    cross_validation_rtol : float
        Relative tolerance for the cross-validation check
    verbose : bool
        Enable detailed progress output
    """
    sweep_config: FrequencySweepConfig = field(default_factory=FrequencySweepConfig)
    max_workers: int = 1
    cross_validate: bool = False
    cross_validation_rtol: float = 1e-9
    verbose: bool = True


class FrequencyResponseAnalyzer:
    """
    High-Level Frequency Response Analyzer.

    Runs the sweep for one or more parameter sets and packages the results.
    Results are stored under their label so several orders (or gains) can be
    compared on a single figure.

    Example Usage
    -------------
    >>> analyzer = FrequencyResponseAnalyzer(AnalyzerConfig(verbose=False))
    >>> data = analyzer.analyze(TransferFunctionParams(gain=1.0, time_constant=1.0, order=2))
    >>> round(data.corner_frequency_rad, 3)
    1.0

    Parameters
    ----------
    config : AnalyzerConfig
        Analyzer configuration
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()
        self._sweep_engine = FrequencySweepEngine(
            self.config.sweep_config,
            max_workers=self.config.max_workers,
            verbose=self.config.verbose
        )
        self._results: Dict[str, FrequencyResponseData] = {}

    def analyze(
        self,
        params: TransferFunctionParams,
        label: Optional[str] = None
    ) -> FrequencyResponseData:
        """
        Run the complete analysis for one parameter set.

        Parameters
        ----------
        params : TransferFunctionParams
            Transfer function parameters (validated by the caller)
        label : str, optional
            Result label; defaults to "K=.., T1=.., n=.."

        Returns
        -------
        FrequencyResponseData
            Parallel arrays and derived metrics
        """
        label = label or f"K={params.gain:g}, T1={params.time_constant:g}, n={params.order}"
        points = self._sweep_engine.run_sweep(params)
        data = self._package_results(params, points, label)

        if self.config.cross_validate and data.n_points > 0:
            deviation = self.cross_validate(data)
            data.metadata['control_max_relative_deviation'] = deviation

        self._results[label] = data

        if self.config.verbose:
            self._print_summary(data)

        return data

    def analyze_orders(
        self,
        gain: float,
        time_constant: float,
        orders: List[int]
    ) -> Dict[str, FrequencyResponseData]:
        """
        Analyze the same gain and time constant for several orders.

        Returns
        -------
        Dict[str, FrequencyResponseData]
            Results keyed by "n=<order>"
        """
        results = {}
        for order in orders:
            params = TransferFunctionParams(gain, time_constant, order)
            params.validate()
            label = f"n={order}"
            results[label] = self.analyze(params, label=label)
        return results

    def _package_results(
        self,
        params: TransferFunctionParams,
        points: List[FrequencyPoint],
        label: str
    ) -> FrequencyResponseData:
        """
        Package sweep points into FrequencyResponseData.

        Also computes derived metrics:
        - Bandwidth (-3dB frequency), interpolated and analytic
        - Maximum asymptote error in magnitude and phase
        """
        frequencies = np.array([p.frequency_rad for p in points], dtype=float)
        exact_gain_db = np.array([p.exact.magnitude_db for p in points], dtype=float)
        asym_gain_db = np.array([p.asymptotic.magnitude_db for p in points], dtype=float)
        exact_phase = np.array([p.exact.phase_deg for p in points], dtype=float)
        asym_phase = np.array([p.asymptotic.phase_deg for p in points], dtype=float)

        gain_error_freq, gain_error = self._compute_max_error(
            frequencies, asym_gain_db - exact_gain_db
        )
        _, phase_error = self._compute_max_error(frequencies, asym_phase - exact_phase)

        return FrequencyResponseData(
            params=params,
            frequencies_rad=frequencies,
            exact_gain_linear=np.array([p.exact.magnitude for p in points], dtype=float),
            exact_gain_db=exact_gain_db,
            exact_phase_deg=exact_phase,
            asymptotic_gain_db=asym_gain_db,
            asymptotic_phase_deg=asym_phase,
            real=np.array([p.exact.real for p in points], dtype=float),
            imag=np.array([p.exact.imag for p in points], dtype=float),
            label=label,
            corner_frequency_rad=params.corner_frequency,
            dc_gain_db=params.dc_gain_db,
            bandwidth_rad=self._compute_bandwidth(frequencies, exact_gain_db, params.dc_gain_db),
            analytic_bandwidth_rad=params.bandwidth,
            max_gain_error_db=gain_error,
            max_gain_error_freq_rad=gain_error_freq,
            max_phase_error_deg=phase_error,
            metadata={
                'n_points': len(frequencies),
                'omega_min': float(frequencies[0]) if len(frequencies) > 0 else 0.0,
                'omega_max': float(frequencies[-1]) if len(frequencies) > 0 else 0.0,
                'points_per_decade': self.config.sweep_config.points_per_decade,
            }
        )

    def _compute_bandwidth(
        self,
        frequencies: np.ndarray,
        gain_db: np.ndarray,
        dc_gain_db: float
    ) -> float:
        """
        Compute -3dB bandwidth from the swept magnitude.

        The reference is the DC gain 20·log10(K), not the first sample, so
        a sweep that starts near the corner still reports the true crossing.

        Parameters
        ----------
        frequencies : np.ndarray
            Frequency vector [rad/s]
        gain_db : np.ndarray
            Magnitude response [dB]
        dc_gain_db : float
            Low-frequency gain [dB]

        Returns
        -------
        float
            Bandwidth [rad/s] (interpolated in log-frequency), NaN if the
            sweep is empty, never crosses the -3dB level, or starts below it
        """
        if len(frequencies) == 0:
            return np.nan

        threshold = dc_gain_db - 20.0 * np.log10(np.sqrt(2.0))

        crossings = np.where(gain_db < threshold)[0]
        if len(crossings) == 0:
            return np.nan

        idx = crossings[0]
        if idx == 0:
            # Crossing lies below the first swept frequency
            return np.nan

        # Linear interpolation in log10(ω)
        x1, g1 = np.log10(frequencies[idx-1]), gain_db[idx-1]
        x2, g2 = np.log10(frequencies[idx]), gain_db[idx]
        if g1 == g2:
            return float(frequencies[idx])
        x_bw = x1 + (threshold - g1) * (x2 - x1) / (g2 - g1)
        return float(10 ** x_bw)

    def _compute_max_error(
        self,
        frequencies: np.ndarray,
        error: np.ndarray
    ) -> Tuple[float, float]:
        """Return (frequency, |error|) at the largest absolute error."""
        if len(error) == 0:
            return np.nan, np.nan
        idx = int(np.argmax(np.abs(error)))
        return float(frequencies[idx]), float(np.abs(error[idx]))

    def cross_validate(self, data: FrequencyResponseData) -> float:
        """
        Compare the exact response against python-control.

        Evaluates the python-control transfer function at s = jω and returns
        the maximum relative deviation of the complex response. A warning is
        issued when it exceeds ``cross_validation_rtol``.

        Parameters
        ----------
        data : FrequencyResponseData
            Result of :meth:`analyze`

        Returns
        -------
        float
            max |G_core - G_control| / |G_control|
        """
        reference_tf = data.params.to_control()
        reference = np.atleast_1d(
            np.asarray(reference_tf(1j * data.frequencies_rad), dtype=complex)
        )
        computed = data.real + 1j * data.imag

        deviation = float(np.max(np.abs(computed - reference) / np.abs(reference)))

        if deviation > self.config.cross_validation_rtol:
            warnings.warn(
                f"Exact response deviates from python-control by {deviation:.3e} "
                f"(rtol={self.config.cross_validation_rtol:.1e}) for {data.label}"
            )
        elif self.config.verbose:
            print(f"  [CHECK] python-control agreement: max rel. deviation {deviation:.2e}")

        return deviation

    def _print_summary(self, data: FrequencyResponseData) -> None:
        print(f"{'='*70}")
        print(f"RESPONSE SUMMARY: {data.label}")
        print(f"{'='*70}")
        print(f"Corner Frequency:      {data.corner_frequency_rad:10.4g} rad/s")
        print(f"DC Gain:               {data.dc_gain_db:10.3f} dB")
        print(f"-3dB Bandwidth:        {data.bandwidth_rad:10.4g} rad/s "
              f"(analytic {data.analytic_bandwidth_rad:.4g})")
        print(f"Max Asymptote Error:   {data.max_gain_error_db:10.3f} dB "
              f"@ {data.max_gain_error_freq_rad:.4g} rad/s")
        print(f"Max Phase Error:       {data.max_phase_error_deg:10.3f} deg")
        print(f"{'='*70}\n")

    @property
    def results(self) -> Dict[str, FrequencyResponseData]:
        """Get analysis results keyed by label."""
        return self._results

    def get_summary(self) -> Dict[str, Dict[str, Any]]:
        """
        Summarize the derived metrics of all analyzed responses.

        Returns
        -------
        Dict
            Metrics keyed by result label
        """
        summary = {}

        for label, data in self._results.items():
            summary[label] = {
                'gain': data.params.gain,
                'time_constant': data.params.time_constant,
                'order': data.params.order,
                'corner_frequency_rad': data.corner_frequency_rad,
                'dc_gain_db': data.dc_gain_db,
                'bandwidth_rad': data.bandwidth_rad,
                'analytic_bandwidth_rad': data.analytic_bandwidth_rad,
                'max_gain_error_db': data.max_gain_error_db,
                'max_gain_error_freq_rad': data.max_gain_error_freq_rad,
                'max_phase_error_deg': data.max_phase_error_deg,
            }

        return summary


def analyze_frequency_response(
    params: TransferFunctionParams,
    sweep_config: Optional[FrequencySweepConfig] = None,
    verbose: bool = False
) -> FrequencyResponseData:
    """
    Validate parameters and run a single analysis.

    Convenience entry point for scripts, web handlers and tests.
    """
    params.validate()
    config = AnalyzerConfig(
        sweep_config=sweep_config or FrequencySweepConfig(),
        verbose=verbose
    )
    return FrequencyResponseAnalyzer(config).analyze(params)
