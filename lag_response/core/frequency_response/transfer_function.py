"""
Transfer Function Parameters for the n-th Order Lag Element

The system under analysis is a first-order lag raised to an integer power:

$$G(j\\omega) = \\frac{K}{(1 + j\\omega T_1)^n}$$

Parameters
----------
- K  : static gain (K > 0)
- T1 : time constant [s] (T1 > 0)
- n  : order, number of identical cascaded first-order lags (n >= 1)

The numeric core (exact response, asymptotic approximation) assumes these
preconditions and does not check them. Validation belongs to whatever layer
sources the values (CLI, web form, test harness) and is provided here by
:meth:`TransferFunctionParams.validate` and
:meth:`TransferFunctionParams.from_user_input`.
"""

import numpy as np
import control as ctrl
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class TransferFunctionParams:
    """
    Parameters of G(s) = K / (T1·s + 1)^n.

    Attributes
    ----------
    gain : float
        Static gain K (linear)
    time_constant : float
        Time constant T1 [s]
    order : int
        Number of cascaded lag stages n
    """
    gain: float = 1.0
    time_constant: float = 1.0
    order: int = 1

    @classmethod
    def from_user_input(cls, gain: Any, time_constant: Any, order: Any) -> 'TransferFunctionParams':
        """
        Parse and validate raw user input (strings or numbers).

        Raises
        ------
        ValueError
            If a value is not numeric, not finite, or violates
            K > 0, T1 > 0, n >= 1 (integer).
        """
        try:
            k = float(gain)
            t1 = float(time_constant)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Gain and time constant must be numeric: {e}") from e

        try:
            n_float = float(order)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Order must be an integer: {e}") from e
        if not np.isfinite(n_float) or n_float != int(n_float):
            raise ValueError(f"Order must be an integer, got {order!r}")

        params = cls(gain=k, time_constant=t1, order=int(n_float))
        params.validate()
        return params

    def validate(self) -> None:
        """Check the input contract K > 0, T1 > 0, n >= 1."""
        if not np.isfinite(self.gain) or self.gain <= 0:
            raise ValueError(f"Gain K must be a positive finite number, got {self.gain}")
        if not np.isfinite(self.time_constant) or self.time_constant <= 0:
            raise ValueError(
                f"Time constant T1 must be a positive finite number, got {self.time_constant}"
            )
        if isinstance(self.order, bool) or int(self.order) != self.order or self.order < 1:
            raise ValueError(f"Order n must be an integer >= 1, got {self.order}")

    @property
    def corner_frequency(self) -> float:
        """Break frequency ωc = 1/T1 [rad/s]."""
        return 1.0 / self.time_constant

    @property
    def dc_gain_db(self) -> float:
        """Low-frequency gain 20·log10(K) [dB]."""
        return 20.0 * np.log10(self.gain)

    @property
    def bandwidth(self) -> float:
        """
        Analytic -3dB bandwidth [rad/s].

        Solves |G(jω)| = K/√2, i.e. (1 + (ωT1)²)^n = 2:

        $$\\omega_{bw} = \\frac{1}{T_1}\\sqrt{2^{1/n} - 1}$$
        """
        return self.corner_frequency * np.sqrt(2.0 ** (1.0 / self.order) - 1.0)

    def to_control(self) -> ctrl.TransferFunction:
        """Build the equivalent python-control transfer function."""
        den = np.poly1d([self.time_constant, 1.0]) ** self.order
        return ctrl.tf([self.gain], den.coeffs.tolist())

    def to_dict(self) -> Dict[str, float]:
        return {
            'gain': float(self.gain),
            'time_constant': float(self.time_constant),
            'order': int(self.order),
        }

    def __str__(self) -> str:
        return f"G(s) = {self.gain:g} / ({self.time_constant:g}s + 1)^{self.order}"
