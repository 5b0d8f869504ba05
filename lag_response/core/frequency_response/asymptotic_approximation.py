"""
Asymptotic (Straight-Line) Bode Approximation

Piecewise approximation of the n-th order lag relative to the corner
frequency ωc = 1/T1, with a two-decade blending band centred on ωc:

=============  ======================  ==============================================  ==========
Regime         Range                   Magnitude [dB]                                  Phase [°]
=============  ======================  ==============================================  ==========
LOW            ω < ωc/10               20·log10(K)                                     0
TRANSITION     ωc/10 <= ω <= 10·ωc     20·log10(K) - 20·n·log10(ω/ωc)·t                -90·n·t
HIGH           ω > 10·ωc               20·log10(K) - 20·n·log10(ω/ωc)                  -90·n
=============  ======================  ==============================================  ==========

with the log-frequency ramp

$$t = \\frac{\\log_{10}\\omega - \\log_{10}\\omega_c + 1}{2} \\in [0, 1]$$

This is not the textbook single-breakpoint asymptote: the slope and phase
contributions are blended proportionally across the band so the approximation
has no corner kink when drawn against the exact curve. At ω = ωc/10 (t = 0)
the transition branch equals the LOW branch and at ω = 10·ωc (t = 1) it
equals the HIGH branch.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum, auto


class ApproximationRegime(Enum):
    """Branch of the piecewise approximation."""
    LOW = auto()         # Flat gain, zero phase
    TRANSITION = auto()  # Blended band around the corner
    HIGH = auto()        # -20n dB/decade, -90n degrees


@dataclass(frozen=True)
class AsymptoticSample:
    """
    Asymptotic response at one frequency.

    Attributes
    ----------
    omega : float
        Angular frequency [rad/s]
    magnitude_db : float
        Approximate magnitude [dB]
    phase_deg : float
        Approximate phase [degrees]
    regime : ApproximationRegime
        Branch used for this frequency
    """
    omega: float
    magnitude_db: float
    phase_deg: float
    regime: ApproximationRegime


def classify_regime(omega: float, corner_frequency: float) -> ApproximationRegime:
    """Select the approximation branch; both band edges belong to TRANSITION."""
    if omega < corner_frequency / 10:
        return ApproximationRegime.LOW
    if omega > corner_frequency * 10:
        return ApproximationRegime.HIGH
    return ApproximationRegime.TRANSITION


def transition_ramp(omega: float, corner_frequency: float) -> float:
    """Log-frequency ramp t, 0 at ωc/10 and 1 at 10·ωc."""
    return (np.log10(omega) - np.log10(corner_frequency) + 1) / 2


def compute_asymptotic_approximation(K: float, T1: float, n: int, omega: float) -> AsymptoticSample:
    """
    Evaluate the straight-line approximation of K / (1 + jωT1)^n.

    Input contract: K > 0, T1 > 0, n >= 1, omega > 0 (unchecked).

    Parameters
    ----------
    K : float
        Static gain
    T1 : float
        Time constant [s]
    n : int
        Order
    omega : float
        Angular frequency [rad/s]

    Returns
    -------
    AsymptoticSample
        Approximate magnitude [dB] and phase [degrees]
    """
    corner_freq = 1.0 / T1
    dc_gain_db = 20.0 * np.log10(K)
    regime = classify_regime(omega, corner_freq)

    if regime is ApproximationRegime.LOW:
        magnitude_db = dc_gain_db
        phase_deg = 0.0
    elif regime is ApproximationRegime.HIGH:
        magnitude_db = dc_gain_db - 20.0 * n * np.log10(omega / corner_freq)
        phase_deg = -90.0 * n
    else:
        t = transition_ramp(omega, corner_freq)
        magnitude_db = dc_gain_db - 20.0 * n * np.log10(omega / corner_freq) * t
        phase_deg = -90.0 * n * t

    return AsymptoticSample(
        omega=float(omega),
        magnitude_db=float(magnitude_db),
        phase_deg=float(phase_deg),
        regime=regime,
    )
