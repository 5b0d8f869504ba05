"""
Plot styling for lag_response figures.

- `style_config`: matplotlib rcParams presets and the color schemes used by
  the Bode and Nyquist figures in ``core.frequency_response``.
"""

from lag_response.core.plots.style_config import (
    PlotStyleConfig,
    ResponseColors,
    OrderColors,
    configure_matplotlib_defaults
)

__all__ = [
    'PlotStyleConfig',
    'ResponseColors',
    'OrderColors',
    'configure_matplotlib_defaults',
]
