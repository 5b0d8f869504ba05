"""
Frequency Response Plotter

Renders the exact and asymptotic frequency response of the n-th order lag
with matplotlib.

Plot Types Generated
--------------------
1. **Bode Magnitude Plot**: |G(jω)| [dB] vs ω, exact vs asymptotic
2. **Bode Phase Plot**: ∠G(jω) [deg] vs ω, exact vs asymptotic
3. **Bode Plot**: magnitude and phase stacked with shared frequency axis
4. **Nyquist Diagram**: Re{G} vs Im{G} with the unit circle for reference
5. **Order Comparison**: several registered responses overlaid

Design Specifications
---------------------
- Frequency axis: logarithmic, angular frequency [rad/s]
- Exact traces solid, asymptotes dashed
- Grid: alpha=0.3, linestyle=':'
- Nyquist: equal aspect ratio so the unit circle is round
- DPI: 300 for saved figures
"""

import numpy as np
import matplotlib.pyplot as plt
import matplotlib
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple
from pathlib import Path

# Local imports
from .frequency_response_analyzer import FrequencyResponseData
from ..plots.style_config import (
    PlotStyleConfig,
    ResponseColors,
    OrderColors,
    configure_matplotlib_defaults
)


class PlotStyle(Enum):
    """Plot style presets."""
    PUBLICATION = auto()   # Journal quality
    PRESENTATION = auto()  # Conference slides
    SCREEN = auto()        # Interactive viewing


@dataclass
class PlotConfig:
    """
    Configuration for frequency response plots.

    Attributes
    ----------
    style : PlotStyle
        Visual style preset
    dpi : int
        Output resolution
    font_family : str
        Font family for text
    save_format : str
        Output format ('png', 'pdf', 'svg')
    output_dir : Path
        Directory for saved figures
    show_corner_frequency : bool
        Mark ωc = 1/T1 on the Bode plots
    show_unit_circle : bool
        Draw the unit circle on the Nyquist diagram
    unit_circle_points : int
        Segments used to draw the unit circle
    line_style : PlotStyleConfig
        Line widths, dash patterns, grid and figure sizes
    """
    style: PlotStyle = PlotStyle.PUBLICATION
    dpi: int = 300
    font_family: str = 'STIXGeneral'
    save_format: str = 'png'
    output_dir: Path = field(default_factory=lambda: Path('figures_bode'))
    show_corner_frequency: bool = True
    show_unit_circle: bool = True
    unit_circle_points: int = 100
    line_style: PlotStyleConfig = field(default_factory=PlotStyleConfig)


def generate_circle(radius: float, points: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample a closed circle centred on the origin.

    Returns ``points + 1`` samples; the last coincides with the first so the
    drawn curve is closed.

    Parameters
    ----------
    radius : float
        Circle radius
    points : int
        Number of segments

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        (real, imag) coordinates
    """
    angle = np.arange(points + 1) / points * 2 * np.pi
    return radius * np.cos(angle), radius * np.sin(angle)


class FrequencyResponsePlotter:
    """
    Bode and Nyquist visualization for the n-th order lag.

    Example Usage
    -------------
    >>> plotter = FrequencyResponsePlotter(PlotConfig(style=PlotStyle.SCREEN))
    >>> plotter.add_response(data)
    >>> plotter.plot_bode(data, save=False)
    >>> plotter.plot_nyquist(data, save=False)
    >>> plotter.show()

    Parameters
    ----------
    config : PlotConfig
        Plotting configuration
    """

    def __init__(self, config: Optional[PlotConfig] = None):
        self.config = config or PlotConfig()
        self._responses: Dict[str, FrequencyResponseData] = {}
        self._figures: Dict[str, plt.Figure] = {}

        # Apply matplotlib configuration
        self._configure_matplotlib()

    def _configure_matplotlib(self) -> None:
        """Configure matplotlib fonts and sizes for the selected preset."""
        configure_matplotlib_defaults()
        matplotlib.rcParams['savefig.dpi'] = self.config.dpi
        matplotlib.rcParams['font.family'] = self.config.font_family

        if self.config.style == PlotStyle.PUBLICATION:
            matplotlib.rcParams['font.size'] = 12
            matplotlib.rcParams['axes.labelsize'] = 14
            matplotlib.rcParams['axes.titlesize'] = 14
            matplotlib.rcParams['xtick.labelsize'] = 11
            matplotlib.rcParams['ytick.labelsize'] = 11
            matplotlib.rcParams['legend.fontsize'] = 11
            matplotlib.rcParams['lines.linewidth'] = 2.0
            matplotlib.rcParams['axes.linewidth'] = 1.2
        elif self.config.style == PlotStyle.PRESENTATION:
            matplotlib.rcParams['font.size'] = 14
            matplotlib.rcParams['axes.labelsize'] = 16
            matplotlib.rcParams['axes.titlesize'] = 18
            matplotlib.rcParams['legend.fontsize'] = 12
            matplotlib.rcParams['lines.linewidth'] = 2.5
        else:
            matplotlib.rcParams['font.size'] = 10
            matplotlib.rcParams['lines.linewidth'] = 1.5

    def add_response(
        self,
        data: FrequencyResponseData,
        label: Optional[str] = None
    ) -> None:
        """
        Register frequency response data for comparison plots.

        Parameters
        ----------
        data : FrequencyResponseData
            Frequency response data from analyzer
        label : str, optional
            Custom label override
        """
        self._responses[label or data.label] = data

    def _style_axes(self, ax: plt.Axes, which: str = 'major') -> None:
        style = self.config.line_style
        ax.set_facecolor(ResponseColors.BACKGROUND)
        ax.grid(True, which=which, color=ResponseColors.GRID,
                alpha=style.grid_alpha, linestyle=style.grid_linestyle)

    def _format_frequency_axis(self, ax: plt.Axes, *responses: FrequencyResponseData) -> None:
        """Grid the axis and span the union of the responses' sweeps."""
        self._style_axes(ax, which='both')
        swept = [d.frequencies_rad for d in responses if d.n_points > 0]
        if swept:
            ax.set_xlim([min(f[0] for f in swept), max(f[-1] for f in swept)])

    def _mark_corner(self, ax: plt.Axes, data: FrequencyResponseData) -> None:
        if self.config.show_corner_frequency and data.n_points > 0:
            ax.axvline(data.corner_frequency_rad, color=ResponseColors.CORNER,
                       linestyle=':', alpha=0.7, linewidth=1.5,
                       label=f'ωc = {data.corner_frequency_rad:.3g} rad/s')

    def _draw_magnitude(self, ax: plt.Axes, data: FrequencyResponseData) -> None:
        style = self.config.line_style
        ax.semilogx(data.frequencies_rad, data.exact_gain_db,
                    color=ResponseColors.EXACT_MAGNITUDE,
                    linewidth=style.linewidth_exact, label='Exact')
        ax.semilogx(data.frequencies_rad, data.asymptotic_gain_db,
                    color=ResponseColors.ASYMPTOTIC_MAGNITUDE,
                    linestyle=style.linestyle_asymptotic,
                    linewidth=style.linewidth_asymptotic, label='Asymptotic')
        self._mark_corner(ax, data)
        ax.set_ylabel('Magnitude [dB]', fontweight='bold')
        ax.legend(loc=style.legend_loc, framealpha=style.legend_framealpha)
        self._format_frequency_axis(ax, data)

    def _draw_phase(self, ax: plt.Axes, data: FrequencyResponseData) -> None:
        style = self.config.line_style
        ax.semilogx(data.frequencies_rad, data.exact_phase_deg,
                    color=ResponseColors.EXACT_PHASE,
                    linewidth=style.linewidth_exact, label='Exact')
        ax.semilogx(data.frequencies_rad, data.asymptotic_phase_deg,
                    color=ResponseColors.ASYMPTOTIC_PHASE,
                    linestyle=style.linestyle_asymptotic,
                    linewidth=style.linewidth_asymptotic, label='Asymptotic')
        self._mark_corner(ax, data)
        ax.axhline(-90 * data.params.order, color='gray', linestyle='--',
                   alpha=0.5, linewidth=1.0)
        ax.set_ylabel('Phase [degrees]', fontweight='bold')
        ax.legend(loc=style.legend_loc, framealpha=style.legend_framealpha)
        self._format_frequency_axis(ax, data)

    def plot_bode_magnitude(
        self,
        data: FrequencyResponseData,
        title: Optional[str] = None,
        save: bool = True
    ) -> plt.Figure:
        """
        Generate the Bode magnitude plot (exact vs asymptotic).

        Parameters
        ----------
        data : FrequencyResponseData
            Analysis result
        title : str, optional
            Custom figure title
        save : bool
            Save figure to disk

        Returns
        -------
        plt.Figure
            Generated figure
        """
        fig, ax = plt.subplots(
            figsize=self.config.line_style.get_figure_size('single'),
            constrained_layout=True
        )
        self._draw_magnitude(ax, data)
        ax.set_xlabel('Frequency ω [rad/s]', fontweight='bold')
        ax.set_title(title or f'Bode Magnitude - {data.params}', fontweight='bold')

        self._figures['bode_magnitude'] = fig

        if save:
            self._save_figure(fig, 'bode_magnitude')

        return fig

    def plot_bode_phase(
        self,
        data: FrequencyResponseData,
        title: Optional[str] = None,
        save: bool = True
    ) -> plt.Figure:
        """
        Generate the Bode phase plot (exact vs asymptotic).

        Parameters
        ----------
        data : FrequencyResponseData
            Analysis result
        title : str, optional
            Custom figure title
        save : bool
            Save figure to disk

        Returns
        -------
        plt.Figure
            Generated figure
        """
        fig, ax = plt.subplots(
            figsize=self.config.line_style.get_figure_size('single'),
            constrained_layout=True
        )
        self._draw_phase(ax, data)
        ax.set_xlabel('Frequency ω [rad/s]', fontweight='bold')
        ax.set_title(title or f'Bode Phase - {data.params}', fontweight='bold')

        self._figures['bode_phase'] = fig

        if save:
            self._save_figure(fig, 'bode_phase')

        return fig

    def plot_bode(
        self,
        data: FrequencyResponseData,
        title: Optional[str] = None,
        save: bool = True
    ) -> plt.Figure:
        """
        Generate the combined Bode plot.

        Creates a 2-subplot figure showing:
        - Top: Magnitude |G(jω)| in dB
        - Bottom: Phase ∠G(jω) in degrees

        Parameters
        ----------
        data : FrequencyResponseData
            Analysis result
        title : str, optional
            Custom figure title
        save : bool
            Save figure to disk

        Returns
        -------
        plt.Figure
            Generated figure
        """
        fig, (ax_mag, ax_phase) = plt.subplots(
            2, 1,
            figsize=self.config.line_style.get_figure_size('2x1'),
            sharex=True,
            constrained_layout=True
        )
        self._draw_magnitude(ax_mag, data)
        self._draw_phase(ax_phase, data)

        ax_mag.set_title(title or f'Bode Plot - {data.params}', fontweight='bold')
        ax_phase.set_xlabel('Frequency ω [rad/s]', fontweight='bold')

        self._figures['bode'] = fig

        if save:
            self._save_figure(fig, 'bode')

        return fig

    def plot_nyquist(
        self,
        data: FrequencyResponseData,
        title: Optional[str] = None,
        save: bool = True
    ) -> plt.Figure:
        """
        Generate the Nyquist diagram.

        Plots the locus of G(jω) in the complex plane for the swept
        frequencies (positive ω only), with the unit circle for reference.

        Parameters
        ----------
        data : FrequencyResponseData
            Analysis result
        title : str, optional
            Custom figure title
        save : bool
            Save figure to disk

        Returns
        -------
        plt.Figure
            Generated figure
        """
        style = self.config.line_style
        fig, ax = plt.subplots(
            figsize=style.get_figure_size('square'),
            constrained_layout=True
        )

        ax.plot(data.real, data.imag, color=ResponseColors.NYQUIST,
                linewidth=style.linewidth_nyquist, label='G(jω)')

        if self.config.show_unit_circle:
            circle_re, circle_im = generate_circle(1.0, self.config.unit_circle_points)
            ax.plot(circle_re, circle_im, color=ResponseColors.UNIT_CIRCLE,
                    linestyle=style.linestyle_circle,
                    linewidth=style.linewidth_circle, label='Unit circle')

        # Direction of increasing frequency
        if data.n_points > 1:
            mid = (data.n_points - 1) // 2
            ax.annotate('', xy=(data.real[mid + 1], data.imag[mid + 1]),
                        xytext=(data.real[mid], data.imag[mid]),
                        arrowprops=dict(arrowstyle='->', color=ResponseColors.NYQUIST))

        ax.axhline(0, color=ResponseColors.ZERO_LINE, linewidth=1.0)
        ax.axvline(0, color=ResponseColors.ZERO_LINE, linewidth=1.0)
        ax.set_aspect('equal', adjustable='datalim')
        ax.set_xlabel('Real Part', fontweight='bold')
        ax.set_ylabel('Imaginary Part', fontweight='bold')
        ax.set_title(title or f'Nyquist Diagram - {data.params}', fontweight='bold')
        ax.legend(loc=style.legend_loc, framealpha=style.legend_framealpha)
        self._style_axes(ax)

        self._figures['nyquist'] = fig

        if save:
            self._save_figure(fig, 'nyquist')

        return fig

    def plot_order_comparison(
        self,
        title: Optional[str] = None,
        show_asymptotes: bool = True,
        save: bool = True
    ) -> plt.Figure:
        """
        Overlay all registered responses on one Bode figure.

        Parameters
        ----------
        title : str, optional
            Custom figure title
        show_asymptotes : bool
            Draw each response's asymptote (dashed, same color)
        save : bool
            Save figure to disk

        Returns
        -------
        plt.Figure
            Generated figure
        """
        if not self._responses:
            raise ValueError("No responses registered; call add_response() first")

        style = self.config.line_style
        fig, (ax_mag, ax_phase) = plt.subplots(
            2, 1,
            figsize=style.get_figure_size('2x1'),
            sharex=True,
            constrained_layout=True
        )

        for idx, (label, data) in enumerate(self._responses.items()):
            color = OrderColors.by_index(idx)

            ax_mag.semilogx(data.frequencies_rad, data.exact_gain_db, color=color,
                            linewidth=style.linewidth_exact, label=label)
            ax_phase.semilogx(data.frequencies_rad, data.exact_phase_deg, color=color,
                              linewidth=style.linewidth_exact, label=label)

            if show_asymptotes:
                ax_mag.semilogx(data.frequencies_rad, data.asymptotic_gain_db,
                                color=color, linestyle=style.linestyle_asymptotic,
                                linewidth=1.0, alpha=0.6)
                ax_phase.semilogx(data.frequencies_rad, data.asymptotic_phase_deg,
                                  color=color, linestyle=style.linestyle_asymptotic,
                                  linewidth=1.0, alpha=0.6)

        ax_mag.set_ylabel('Magnitude [dB]', fontweight='bold')
        ax_mag.set_title(title or 'Frequency Response Comparison', fontweight='bold')
        ax_mag.legend(loc='lower left', framealpha=style.legend_framealpha)
        self._format_frequency_axis(ax_mag, *self._responses.values())

        ax_phase.set_xlabel('Frequency ω [rad/s]', fontweight='bold')
        ax_phase.set_ylabel('Phase [degrees]', fontweight='bold')
        ax_phase.legend(loc='lower left', framealpha=style.legend_framealpha)
        self._format_frequency_axis(ax_phase, *self._responses.values())

        self._figures['order_comparison'] = fig

        if save:
            self._save_figure(fig, 'order_comparison')

        return fig

    def _save_figure(self, fig: plt.Figure, name: str) -> Path:
        """Save figure to disk."""
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.config.output_dir / f'{name}.{self.config.save_format}'
        fig.savefig(filepath, dpi=self.config.dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        print(f"  [SAVED] {filepath}")
        return filepath

    def save_all_figures(self) -> None:
        """Save all generated figures to disk."""
        print(f"\nSaving {len(self._figures)} figures to {self.config.output_dir}/")
        for name, fig in self._figures.items():
            self._save_figure(fig, name)
        print(f"[COMPLETE] All figures saved ({self.config.dpi} DPI, {self.config.save_format.upper()})")

    def close_all(self) -> None:
        """Close all generated figures and forget them."""
        for fig in self._figures.values():
            plt.close(fig)
        self._figures = {}

    def show(self) -> None:
        """Display all figures."""
        plt.show()

    @property
    def figures(self) -> Dict[str, plt.Figure]:
        """Get all generated figures."""
        return self._figures
