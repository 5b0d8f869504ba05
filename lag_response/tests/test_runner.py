"""
Tests for the command-line runner.
"""

import json

import matplotlib
matplotlib.use('Agg')

import pytest

from lag_response import runner
from lag_response.core.frequency_response import FrequencyResponseLogger


class TestPresets:
    """Loading and mapping presets."""

    def test_bundled_default(self):
        preset = runner.load_preset('default')
        assert preset['parameters'] == {'gain': 1.0, 'time_constant': 1.0, 'order': 1}

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="not defined"):
            runner.load_preset('no_such_preset')

    def test_missing_file_uses_defaults(self, tmp_path, capsys):
        assert runner.load_preset('default', tmp_path / 'missing.json') == {}
        assert 'presets file not found' in capsys.readouterr().out

    def test_malformed_file(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('{"presets": ')
        with pytest.raises(ValueError, match="Failed to parse"):
            runner.load_preset('default', path)

    def test_map_preset_to_kwargs(self):
        preset = {
            'description': 'ignored',
            'parameters': {'gain': 2.0, 'order': 3, 'extra': 1},
            'sweep': {'points_per_decade': 20},
        }
        params, sweep = runner.map_preset_to_kwargs(preset)

        assert params == {'gain': 2.0, 'order': 3}
        assert sweep == {'points_per_decade': 20}


class TestResolveInputs:
    """Preset values merged with command-line overrides."""

    def test_overrides_win(self):
        args = runner.build_parser().parse_args(
            ['--preset', 'second_order_lag', '-n', '4', '--points-per-decade', '10']
        )
        params, sweep = runner.resolve_inputs(args)

        assert (params.gain, params.time_constant, params.order) == (2.0, 0.5, 4)
        assert sweep.points_per_decade == 10
        assert sweep.min_power == -2

    def test_custom_presets_file(self, tmp_path):
        path = tmp_path / 'presets.json'
        path.write_text(json.dumps({'presets': {'mine': {
            'parameters': {'gain': 3.0, 'time_constant': 0.1, 'order': 2},
            'sweep': {'min_power': 0, 'max_power': 3, 'points_per_decade': 5},
        }}}))
        args = runner.build_parser().parse_args(['--preset', 'mine', '--presets-file', str(path)])
        params, sweep = runner.resolve_inputs(args)

        assert params.corner_frequency == pytest.approx(10.0)
        assert sweep.n_points == 15

    def test_non_finite_sweep_bounds(self):
        args = runner.build_parser().parse_args(['--min-power=-inf'])
        with pytest.raises(ValueError, match="finite"):
            runner.resolve_inputs(args)

    def test_invalid_workers(self):
        args = runner.build_parser().parse_args(['--workers', '0'])
        with pytest.raises(ValueError):
            runner.resolve_inputs(args)


class TestMain:
    """End-to-end runs."""

    def test_quiet_run_without_outputs(self, capsys):
        code = runner.main(['--no-save', '--no-plots', '--quiet', '--points-per-decade', '10'])

        assert code == 0
        out = capsys.readouterr().out
        assert 'RESPONSE SUMMARY' in out
        assert 'FREQUENCY SWEEP' not in out

    @pytest.mark.parametrize("argv", [
        ['-K', 'abc'],
        ['-T', '0'],
        ['-n', '1.5'],
        ['--preset', 'no_such_preset'],
        ['--compare-orders', '1', '0'],
        ['--min-power', 'inf'],
        ['--max-power', 'nan'],
    ])
    def test_invalid_input_exits(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            runner.main(argv + ['--no-save', '--no-plots', '--quiet'])
        assert exc_info.value.code == 2

    def test_writes_figures_and_data(self, tmp_path):
        code = runner.main([
            '-K', '2', '-T', '0.5', '-n', '2',
            '--points-per-decade', '10',
            '--compare-orders', '1', '2', '3',
            '--cross-validate',
            '--output-dir', str(tmp_path),
            '--quiet'
        ])
        assert code == 0

        figures = tmp_path / 'figures'
        for name in ('bode', 'nyquist', 'order_comparison'):
            assert (figures / f'{name}.png').exists()

        json_files = list((tmp_path / 'data').glob('*.json'))
        assert len(json_files) == 1

        content = FrequencyResponseLogger.load_json(json_files[0])
        assert content['metadata']['custom'] == {'preset': 'default'}
        assert set(content['responses']) == {'K=2, T1=0.5, n=2', 'n=1', 'n=2', 'n=3'}
        assert FrequencyResponseLogger.verify_checksum(json_files[0])
