"""
Unit tests for FrequencyResponseLogger.

Test coverage:
- JSON and CSV output layout
- Metadata (sweep config, custom entries, checksums)
- Checksum verification, including a tampered file
- Non-finite metrics serialized as null
"""

import csv
import json

import numpy as np
import pytest

from lag_response.core.frequency_response import (
    AnalyzerConfig,
    FrequencyResponseAnalyzer,
    FrequencyResponseLogger,
    FrequencySweepConfig,
    LoggerConfig,
    TransferFunctionParams
)


@pytest.fixture
def sweep_config():
    return FrequencySweepConfig(min_power=-1, max_power=2, points_per_decade=10)


@pytest.fixture
def analyzer(sweep_config):
    return FrequencyResponseAnalyzer(AnalyzerConfig(sweep_config=sweep_config, verbose=False))


@pytest.fixture
def logger(tmp_path):
    return FrequencyResponseLogger(LoggerConfig(output_dir=tmp_path, base_filename='test'))


class TestSave:
    """Files written by save()."""

    def test_json_layout(self, logger, analyzer, sweep_config):
        data = analyzer.analyze(TransferFunctionParams(2.0, 0.5, 2), label='plant')
        logger.add_result(data)
        logger.set_sweep_config(sweep_config)
        logger.add_metadata('preset', 'second_order_lag')

        saved = logger.save()
        loaded = FrequencyResponseLogger.load_json(saved['json'])

        assert set(loaded) == {'metadata', 'responses'}
        assert loaded['metadata']['sweep_config'] == {
            'min_power': -1, 'max_power': 2, 'points_per_decade': 10
        }
        assert loaded['metadata']['custom'] == {'preset': 'second_order_lag'}
        assert 'plant' in loaded['metadata']['checksums']

        response = loaded['responses']['plant']
        assert response['params'] == {'gain': 2.0, 'time_constant': 0.5, 'order': 2}
        assert len(response['frequencies_rad']) == 30
        np.testing.assert_array_equal(response['exact_gain_db'], data.exact_gain_db)
        assert response['metrics']['corner_frequency_rad'] == pytest.approx(2.0)

    def test_csv_per_response(self, logger, analyzer):
        logger.add_results_dict(analyzer.analyze_orders(1.0, 1.0, [1, 2]))
        saved = logger.save(suffix='orders')

        assert len(saved['csv']) == 2
        assert all(path.name.endswith(('_n_1.csv', '_n_2.csv')) for path in saved['csv'])
        assert saved['json'].name.endswith('_orders.json')

        with open(saved['csv'][0], newline='') as f:
            rows = list(csv.reader(f))

        assert rows[0][0] == 'frequency_rad'
        assert len(rows[0]) == 8
        assert len(rows) == 31
        assert float(rows[1][0]) == pytest.approx(0.1)

    def test_colliding_labels_get_distinct_files(self, logger, analyzer):
        logger.add_result(analyzer.analyze(TransferFunctionParams(1.0, 1.0, 1)), 'n=1')
        logger.add_result(analyzer.analyze(TransferFunctionParams(1.0, 1.0, 2)), 'n 1')

        paths = logger.save()['csv']

        assert len(set(paths)) == 2
        assert paths[0].name.endswith('_n_1.csv')
        assert paths[1].name.endswith('_n_1_2.csv')
        assert all(path.exists() for path in paths)

    def test_formats_can_be_disabled(self, tmp_path, analyzer):
        logger = FrequencyResponseLogger(LoggerConfig(output_dir=tmp_path, save_csv=False))
        logger.add_result(analyzer.analyze(TransferFunctionParams()))

        saved = logger.save()
        assert 'csv' not in saved
        assert saved['json'].exists()

    def test_creates_output_dir(self, tmp_path, analyzer):
        out = tmp_path / 'nested' / 'data'
        logger = FrequencyResponseLogger(LoggerConfig(output_dir=out))
        logger.add_result(analyzer.analyze(TransferFunctionParams()))
        logger.save()

        assert out.is_dir()

    def test_nan_metrics_become_null(self, logger):
        config = AnalyzerConfig(
            sweep_config=FrequencySweepConfig(min_power=-3, max_power=-2, points_per_decade=5),
            verbose=False
        )
        data = FrequencyResponseAnalyzer(config).analyze(TransferFunctionParams())
        logger.add_result(data)

        saved = logger.save()
        with open(saved['json']) as f:
            text = f.read()

        assert 'NaN' not in text
        metrics = json.loads(text)['responses'][data.label]['metrics']
        assert metrics['bandwidth_rad'] is None


class TestChecksums:
    """Integrity verification."""

    def test_roundtrip_verifies(self, logger, analyzer):
        logger.add_result(analyzer.analyze(TransferFunctionParams(3.0, 0.1, 3)))
        saved = logger.save()

        assert FrequencyResponseLogger.verify_checksum(saved['json'])

    def test_tampered_file_fails(self, logger, analyzer):
        data = analyzer.analyze(TransferFunctionParams(), label='plant')
        logger.add_result(data)
        saved = logger.save()

        content = FrequencyResponseLogger.load_json(saved['json'])
        content['responses']['plant']['real'][0] += 1e-3
        with open(saved['json'], 'w') as f:
            json.dump(content, f)

        assert not FrequencyResponseLogger.verify_checksum(saved['json'])

    def test_missing_checksums(self, tmp_path, analyzer):
        logger = FrequencyResponseLogger(LoggerConfig(output_dir=tmp_path,
                                                      include_checksums=False,
                                                      save_csv=False))
        logger.add_result(analyzer.analyze(TransferFunctionParams()))
        saved = logger.save()

        assert 'checksums' not in FrequencyResponseLogger.load_json(saved['json'])['metadata']
        assert FrequencyResponseLogger.verify_checksum(saved['json'])
