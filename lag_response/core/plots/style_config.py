"""
Matplotlib Style Configuration for Frequency Response Figures.

This module centralizes the visual styling constants and matplotlib
configuration shared by the Bode and Nyquist figures of lag_response.

Usage
-----
```python
from lag_response.core.plots.style_config import (
    configure_matplotlib_defaults,
    PlotStyleConfig,
    ResponseColors
)

# Apply global matplotlib settings
configure_matplotlib_defaults()

# Access color schemes
color = ResponseColors.EXACT_MAGNITUDE  # '#2196F3'
```

Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import matplotlib


class ResponseColors:
    """
    Color scheme for exact vs asymptotic traces.

    Exact curves are solid, asymptotes dashed; magnitude and phase use
    different hues so the two panels are distinguishable in print.
    """
    # Bode magnitude
    EXACT_MAGNITUDE: str = '#2196F3'      # Blue
    ASYMPTOTIC_MAGNITUDE: str = '#FF5252' # Red

    # Bode phase
    EXACT_PHASE: str = '#4CAF50'          # Green
    ASYMPTOTIC_PHASE: str = '#FFC107'     # Amber

    # Nyquist
    NYQUIST: str = '#9C27B0'              # Purple
    UNIT_CIRCLE: str = '#cccccc'          # Light gray

    # Reference markers
    CORNER: str = '#7f7f7f'               # Gray
    GRID: str = '#e0e0e0'
    ZERO_LINE: str = '#999999'
    BACKGROUND: str = '#fafafa'


class OrderColors:
    """Cycle of trace colors for multi-order comparison figures."""
    CYCLE: List[str] = [
        '#1f77b4',  # Blue
        '#ff7f0e',  # Orange
        '#2ca02c',  # Green
        '#d62728',  # Red
        '#9467bd',  # Purple
        '#8c564b',  # Brown
    ]

    @classmethod
    def by_index(cls, index: int) -> str:
        """Get color for the i-th trace, wrapping around the cycle."""
        return cls.CYCLE[index % len(cls.CYCLE)]


@dataclass
class PlotStyleConfig:
    """
    Line and grid styling shared by all frequency response figures.

    Attributes
    ----------
    linewidth_exact : float
        Line width for exact response traces
    linewidth_asymptotic : float
        Line width for asymptote traces
    linewidth_nyquist : float
        Line width for the Nyquist locus
    linewidth_circle : float
        Line width for the Nyquist unit circle
    linestyle_asymptotic : str
        Dash pattern for asymptotes
    linestyle_circle : str
        Dash pattern for the unit circle
    grid_alpha : float
        Transparency of grid lines
    grid_linestyle : str
        Grid line style
    legend_framealpha : float
        Legend background opacity
    legend_loc : str
        Legend placement
    figure_sizes : Dict[str, Tuple[float, float]]
        Named figure sizes for different layouts
    """
    linewidth_exact: float = 2.0
    linewidth_asymptotic: float = 2.0
    linewidth_nyquist: float = 2.5
    linewidth_circle: float = 1.5
    linestyle_asymptotic: str = '--'
    linestyle_circle: str = ':'

    grid_alpha: float = 0.3
    grid_linestyle: str = ':'

    legend_framealpha: float = 0.95
    legend_loc: str = 'best'

    figure_sizes: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        'single': (7, 5),
        '2x1': (10, 8),
        'square': (6, 6),
    })

    def get_figure_size(self, layout: str) -> Tuple[float, float]:
        """Get figure size for a named layout."""
        return self.figure_sizes.get(layout, (7, 5))


def configure_matplotlib_defaults() -> None:
    """
    Apply publication-quality matplotlib defaults globally.

    Configures STIX typography, font sizes and saved-figure resolution.
    """
    matplotlib.rcParams['mathtext.fontset'] = 'stix'
    matplotlib.rcParams['font.family'] = 'STIXGeneral'
    matplotlib.rcParams['font.size'] = 12
    matplotlib.rcParams['axes.labelsize'] = 12
    matplotlib.rcParams['axes.titlesize'] = 14
    matplotlib.rcParams['xtick.labelsize'] = 10
    matplotlib.rcParams['ytick.labelsize'] = 10
    matplotlib.rcParams['legend.fontsize'] = 10
    matplotlib.rcParams['figure.titlesize'] = 16

    matplotlib.rcParams['figure.dpi'] = 100  # Screen display
    matplotlib.rcParams['savefig.dpi'] = 300  # Saved figures
    matplotlib.rcParams['axes.axisbelow'] = True  # Grid behind data
