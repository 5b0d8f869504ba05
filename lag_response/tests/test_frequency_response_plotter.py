"""
Unit tests for FrequencyResponsePlotter.

Figures are rendered on the Agg backend and saved under pytest's tmp_path.
"""

import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import to_rgba
import pytest

from lag_response.core.frequency_response import (
    AnalyzerConfig,
    FrequencyResponseAnalyzer,
    FrequencyResponsePlotter,
    FrequencySweepConfig,
    PlotConfig,
    PlotStyle,
    TransferFunctionParams,
    generate_circle
)
from lag_response.core.plots import OrderColors, ResponseColors


@pytest.fixture
def analyzer():
    config = AnalyzerConfig(
        sweep_config=FrequencySweepConfig(min_power=-2, max_power=3, points_per_decade=20),
        verbose=False
    )
    return FrequencyResponseAnalyzer(config)


@pytest.fixture
def data(analyzer):
    return analyzer.analyze(TransferFunctionParams(2.0, 0.5, 2))


@pytest.fixture
def plotter(tmp_path):
    p = FrequencyResponsePlotter(PlotConfig(style=PlotStyle.SCREEN, dpi=50, output_dir=tmp_path))
    yield p
    p.close_all()


class TestGenerateCircle:
    """Test suite for generate_circle."""

    def test_closed(self):
        re, im = generate_circle(1.0, 100)
        assert len(re) == 101
        assert re[0] == pytest.approx(re[-1])
        assert im[0] == pytest.approx(im[-1], abs=1e-12)

    def test_radius(self):
        re, im = generate_circle(2.5, 36)
        np.testing.assert_allclose(np.hypot(re, im), 2.5)


class TestBodePlots:
    """Bode magnitude, phase and combined figures."""

    def test_magnitude_traces(self, plotter, data):
        fig = plotter.plot_bode_magnitude(data, save=False)
        ax = fig.axes[0]

        exact, asym = ax.get_lines()[:2]
        np.testing.assert_array_equal(exact.get_ydata(), data.exact_gain_db)
        np.testing.assert_array_equal(asym.get_ydata(), data.asymptotic_gain_db)
        assert exact.get_color() == ResponseColors.EXACT_MAGNITUDE
        assert asym.get_linestyle() == '--'
        assert ax.get_xscale() == 'log'

    def test_phase_traces(self, plotter, data):
        fig = plotter.plot_bode_phase(data, save=False)
        exact, asym = fig.axes[0].get_lines()[:2]

        np.testing.assert_array_equal(exact.get_ydata(), data.exact_phase_deg)
        np.testing.assert_array_equal(asym.get_ydata(), data.asymptotic_phase_deg)
        assert exact.get_color() == ResponseColors.EXACT_PHASE

    def test_corner_marker(self, plotter, data):
        fig = plotter.plot_bode_magnitude(data, save=False)
        xs = [line.get_xdata()[0] for line in fig.axes[0].get_lines()[2:]]
        assert data.corner_frequency_rad in xs

    def test_corner_marker_disabled(self, tmp_path, data):
        plotter = FrequencyResponsePlotter(PlotConfig(output_dir=tmp_path,
                                                      show_corner_frequency=False))
        fig = plotter.plot_bode_magnitude(data, save=False)
        assert len(fig.axes[0].get_lines()) == 2
        plotter.close_all()

    def test_background_and_grid_colors(self, plotter, data):
        fig = plotter.plot_bode(data, save=False)

        for ax in fig.axes:
            assert ax.get_facecolor() == to_rgba(ResponseColors.BACKGROUND)
            gridline = ax.xaxis.get_gridlines()[0]
            assert to_rgba(gridline.get_color()) == to_rgba(ResponseColors.GRID)

    def test_combined_bode(self, plotter, data):
        fig = plotter.plot_bode(data, save=False)
        assert len(fig.axes) == 2
        assert 'bode' in plotter.figures

    def test_save(self, plotter, data, tmp_path):
        plotter.plot_bode(data, save=True)
        assert (tmp_path / 'bode.png').exists()


class TestNyquist:
    """Nyquist diagram."""

    def test_locus_and_circle(self, plotter, data):
        fig = plotter.plot_nyquist(data, save=False)
        lines = fig.axes[0].get_lines()

        locus = lines[0]
        np.testing.assert_array_equal(locus.get_xdata(), data.real)
        np.testing.assert_array_equal(locus.get_ydata(), data.imag)
        assert locus.get_color() == ResponseColors.NYQUIST

        circle = lines[1]
        assert len(circle.get_xdata()) == 101

    def test_background_color(self, plotter, data):
        fig = plotter.plot_nyquist(data, save=False)
        assert fig.axes[0].get_facecolor() == to_rgba(ResponseColors.BACKGROUND)

    def test_without_unit_circle(self, tmp_path, data):
        plotter = FrequencyResponsePlotter(PlotConfig(output_dir=tmp_path,
                                                      show_unit_circle=False))
        fig = plotter.plot_nyquist(data, save=False)
        labels = [line.get_label() for line in fig.axes[0].get_lines()]
        assert 'Unit circle' not in labels
        plotter.close_all()

    def test_save(self, plotter, data, tmp_path):
        plotter.plot_nyquist(data, save=True)
        assert (tmp_path / 'nyquist.png').exists()


class TestOrderComparison:
    """Multi-response overlay."""

    def test_requires_responses(self, plotter):
        with pytest.raises(ValueError):
            plotter.plot_order_comparison(save=False)

    def test_overlay(self, plotter, analyzer):
        for label, result in analyzer.analyze_orders(1.0, 1.0, [1, 2, 3]).items():
            plotter.add_response(result, label)

        fig = plotter.plot_order_comparison(save=False)
        ax_mag = fig.axes[0]

        labels = [line.get_label() for line in ax_mag.get_lines()]
        assert {'n=1', 'n=2', 'n=3'} <= set(labels)
        # Exact + asymptote per order
        assert len(ax_mag.get_lines()) == 6
        assert ax_mag.get_lines()[0].get_color() == OrderColors.by_index(0)

    def test_axis_spans_all_sweeps(self, plotter):
        narrow = FrequencyResponseAnalyzer(AnalyzerConfig(
            sweep_config=FrequencySweepConfig(min_power=0, max_power=1, points_per_decade=10),
            verbose=False
        )).analyze(TransferFunctionParams(1.0, 1.0, 1), label='narrow')
        wide = FrequencyResponseAnalyzer(AnalyzerConfig(
            sweep_config=FrequencySweepConfig(min_power=-2, max_power=3, points_per_decade=10),
            verbose=False
        )).analyze(TransferFunctionParams(1.0, 1.0, 2), label='wide')

        plotter.add_response(wide)
        plotter.add_response(narrow)
        fig = plotter.plot_order_comparison(save=False)

        for ax in fig.axes:
            left, right = ax.get_xlim()
            assert left == pytest.approx(wide.frequencies_rad[0])
            assert right == pytest.approx(wide.frequencies_rad[-1])

    def test_overlay_without_asymptotes(self, plotter, analyzer):
        for result in analyzer.analyze_orders(1.0, 1.0, [1, 2]).values():
            plotter.add_response(result)

        fig = plotter.plot_order_comparison(show_asymptotes=False, save=False)
        assert len(fig.axes[0].get_lines()) == 2


class TestFigureManagement:
    """Saving and closing figures."""

    def test_save_all(self, plotter, data, tmp_path):
        plotter.plot_bode_magnitude(data, save=False)
        plotter.plot_nyquist(data, save=False)
        plotter.save_all_figures()

        assert (tmp_path / 'bode_magnitude.png').exists()
        assert (tmp_path / 'nyquist.png').exists()

    def test_close_all(self, plotter, data):
        fig = plotter.plot_bode(data, save=False)
        plotter.close_all()

        assert plotter.figures == {}
        assert not plt.fignum_exists(fig.number)

    def test_order_colors_wrap(self):
        assert OrderColors.by_index(len(OrderColors.CYCLE)) == OrderColors.by_index(0)
