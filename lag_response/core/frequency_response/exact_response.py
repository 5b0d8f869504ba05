"""
Exact Frequency Response of the n-th Order Lag

Evaluates the closed-form response using the polar form of the denominator:

$$|1 + j\\omega T_1|^n = \\left(1 + (\\omega T_1)^2\\right)^{n/2}$$
$$\\angle (1 + j\\omega T_1)^n = n \\cdot \\operatorname{atan2}(\\omega T_1, 1)$$

Since the numerator K is real and positive, the response magnitude is
K divided by the denominator magnitude and the response phase is the
negated denominator phase. The phase is left unwrapped, so it runs
continuously from 0 to -n·90° over the sweep instead of jumping at -180°.
"""

import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class ResponseSample:
    """
    Complex frequency response G(jω) at one frequency.

    Attributes
    ----------
    omega : float
        Angular frequency [rad/s]
    magnitude : float
        |G(jω)| (linear)
    magnitude_db : float
        20·log10|G(jω)| [dB]
    phase_rad : float
        ∠G(jω) [rad], unwrapped
    phase_deg : float
        ∠G(jω) [degrees], unwrapped
    real : float
        Re{G(jω)}
    imag : float
        Im{G(jω)}
    """
    omega: float
    magnitude: float
    magnitude_db: float
    phase_rad: float
    phase_deg: float
    real: float
    imag: float

    @property
    def complex_value(self) -> complex:
        return complex(self.real, self.imag)


def compute_exact_response(K: float, T1: float, n: int, omega: float) -> ResponseSample:
    """
    Evaluate G(jω) = K / (1 + jωT1)^n.

    Input contract: K > 0, T1 > 0, n >= 1, omega >= 0. These are not
    checked here; see TransferFunctionParams.validate. Under the contract
    the denominator magnitude is finite and >= 1, so the result is always
    finite (barring float overflow for absurdly large ωT1 and n).

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
    ResponseSample
        Mutually consistent magnitude, phase and rectangular components
    """
    re_den = 1.0
    im_den = omega * T1

    den_magnitude = np.power(re_den * re_den + im_den * im_den, n / 2.0)
    den_phase = n * np.arctan2(im_den, re_den)

    magnitude = K / den_magnitude
    phase_rad = -den_phase

    return ResponseSample(
        omega=float(omega),
        magnitude=float(magnitude),
        magnitude_db=float(20.0 * np.log10(magnitude)),
        phase_rad=float(phase_rad),
        phase_deg=float(np.rad2deg(phase_rad)),
        real=float(magnitude * np.cos(phase_rad)),
        imag=float(magnitude * np.sin(phase_rad)),
    )
