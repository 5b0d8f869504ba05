"""
Frequency Response Data Logger

This module provides data logging and persistence for frequency response
analysis results. Features include:

- JSON-based storage with full metadata
- Reproducibility tracking (parameters, sweep configuration, timestamps)
- Export to CSV for external analysis tools
- Integrity verification via checksums

Data Schema
-----------
The JSON output follows a hierarchical structure:

{
    "metadata": {
        "timestamp": "2026-01-28T12:00:00",
        "version": "1.0.0",
        "sweep_config": { ... },
        "checksums": { ... }
    },
    "responses": {
        "n=2": {
            "params": {"gain": 1.0, "time_constant": 1.0, "order": 2},
            "frequencies_rad": [...],
            "exact_gain_db": [...],
            "exact_phase_deg": [...],
            "asymptotic_gain_db": [...],
            "asymptotic_phase_deg": [...],
            "real": [...],
            "imag": [...],
            "metrics": {
                "corner_frequency_rad": 1.0,
                "bandwidth_rad": 0.64,
                ...
            }
        },
        ...
    }
}
"""

import json
import numpy as np
import hashlib
from dataclasses import dataclass, asdict, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
import csv
import re

# Local imports
from .frequency_response_analyzer import FrequencyResponseData
from .transfer_function import TransferFunctionParams


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy arrays."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, (np.bool_,)):
            return bool(obj)
        if isinstance(obj, TransferFunctionParams):
            return obj.to_dict()
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


@dataclass
class LoggerConfig:
    """
    Configuration for frequency response data logger.

    Attributes
    ----------
    output_dir : Path
        Directory for saved data files
    base_filename : str
        Base name for output files
    save_json : bool
        Save JSON format
    save_csv : bool
        Save CSV format for each response
    include_checksums : bool
        Add integrity checksums to metadata
    pretty_print : bool
        Format JSON with indentation
    version : str
        Data format version string
    """
    output_dir: Path = field(default_factory=lambda: Path('frequency_response_data'))
    base_filename: str = 'freq_response'
    save_json: bool = True
    save_csv: bool = True
    include_checksums: bool = True
    pretty_print: bool = True
    version: str = '1.0.0'


# Arrays covered by the integrity checksum, in hashing order
CHECKSUM_FIELDS = ('frequencies_rad', 'exact_gain_db', 'exact_phase_deg', 'real', 'imag')


def _checksum(arrays: List[np.ndarray]) -> str:
    combined = np.concatenate([np.asarray(a, dtype=np.float64) for a in arrays])
    # Handle non-finite values for hashing
    combined = np.nan_to_num(combined, nan=0.0, posinf=0.0, neginf=0.0)
    return hashlib.md5(combined.tobytes()).hexdigest()


class FrequencyResponseLogger:
    """
    Data Logger for Frequency Response Analysis.

    Provides persistent storage of frequency response data with full
    traceability metadata. Supports JSON for archival and CSV for external
    analysis tools (MATLAB, Excel, etc.)

    Example Usage
    -------------
    >>> logger = FrequencyResponseLogger(LoggerConfig(output_dir=Path('data')))
    >>> logger.add_result(data)
    >>> logger.set_sweep_config(sweep_config)
    >>> logger.save()

    Parameters
    ----------
    config : LoggerConfig
        Logger configuration
    """

    def __init__(self, config: Optional[LoggerConfig] = None):
        self.config = config or LoggerConfig()
        self._results: Dict[str, FrequencyResponseData] = {}
        self._sweep_config: Optional[Dict] = None
        self._custom_metadata: Dict[str, Any] = {}
        self._start_time = datetime.now()

    def add_result(
        self,
        data: FrequencyResponseData,
        label: Optional[str] = None
    ) -> None:
        """
        Add frequency response data.

        Parameters
        ----------
        data : FrequencyResponseData
            Frequency response data
        label : str, optional
            Key override; defaults to ``data.label``
        """
        self._results[label or data.label] = data

    def add_results_dict(self, results: Dict[str, FrequencyResponseData]) -> None:
        """Add multiple results at once, keyed by label."""
        self._results.update(results)

    def set_sweep_config(self, config: Any) -> None:
        """
        Set sweep configuration for reproducibility tracking.

        Parameters
        ----------
        config : Any
            Sweep configuration (dataclass or dict)
        """
        if hasattr(config, '__dataclass_fields__'):
            self._sweep_config = asdict(config)
        elif isinstance(config, dict):
            self._sweep_config = config
        else:
            self._sweep_config = {'raw': str(config)}

    def add_metadata(self, key: str, value: Any) -> None:
        """Add custom (JSON-serializable) metadata."""
        self._custom_metadata[key] = value

    def save(self, suffix: Optional[str] = None) -> Dict[str, Any]:
        """
        Save all data to disk.

        Parameters
        ----------
        suffix : str, optional
            Optional suffix for filename

        Returns
        -------
        Dict[str, Any]
            'json' -> Path and/or 'csv' -> List[Path]
        """
        saved_files = {}

        self.config.output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = self._start_time.strftime('%Y%m%d_%H%M%S')
        base = f"{self.config.base_filename}_{timestamp}"
        if suffix:
            base = f"{base}_{suffix}"

        data = self._build_data_structure()

        if self.config.save_json:
            json_path = self.config.output_dir / f"{base}.json"
            self._save_json(data, json_path)
            saved_files['json'] = json_path

        if self.config.save_csv:
            saved_files['csv'] = self._save_csv(base)

        return saved_files

    def _build_data_structure(self) -> Dict[str, Any]:
        """Build complete data structure for serialization."""
        return {
            'metadata': self._build_metadata(),
            'responses': {
                label: self._serialize_freq_data(freq_data)
                for label, freq_data in self._results.items()
            }
        }

    def _build_metadata(self) -> Dict[str, Any]:
        metadata = {
            'timestamp': self._start_time.isoformat(),
            'version': self.config.version,
        }

        if self._sweep_config:
            metadata['sweep_config'] = self._sweep_config

        if self._custom_metadata:
            metadata['custom'] = self._custom_metadata

        if self.config.include_checksums:
            metadata['checksums'] = {
                label: _checksum([getattr(d, name) for name in CHECKSUM_FIELDS])
                for label, d in self._results.items()
            }

        return metadata

    @staticmethod
    def _finite_or_none(value: float) -> Optional[float]:
        return float(value) if np.isfinite(value) else None

    def _serialize_freq_data(self, data: FrequencyResponseData) -> Dict[str, Any]:
        """Serialize FrequencyResponseData to dictionary."""
        return {
            'params': data.params.to_dict(),
            'frequencies_rad': data.frequencies_rad.tolist(),
            'exact_gain_linear': data.exact_gain_linear.tolist(),
            'exact_gain_db': data.exact_gain_db.tolist(),
            'exact_phase_deg': data.exact_phase_deg.tolist(),
            'asymptotic_gain_db': data.asymptotic_gain_db.tolist(),
            'asymptotic_phase_deg': data.asymptotic_phase_deg.tolist(),
            'real': data.real.tolist(),
            'imag': data.imag.tolist(),
            'metrics': {
                'corner_frequency_rad': float(data.corner_frequency_rad),
                'dc_gain_db': float(data.dc_gain_db),
                'bandwidth_rad': self._finite_or_none(data.bandwidth_rad),
                'analytic_bandwidth_rad': self._finite_or_none(data.analytic_bandwidth_rad),
                'max_gain_error_db': self._finite_or_none(data.max_gain_error_db),
                'max_gain_error_freq_rad': self._finite_or_none(data.max_gain_error_freq_rad),
                'max_phase_error_deg': self._finite_or_none(data.max_phase_error_deg),
            },
            'metadata': data.metadata,
        }

    def _save_json(self, data: Dict, filepath: Path) -> None:
        """Save data as JSON."""
        indent = 2 if self.config.pretty_print else None

        with open(filepath, 'w') as f:
            json.dump(data, f, cls=NumpyEncoder, indent=indent)

        print(f"  [JSON] Saved: {filepath}")

    def _save_csv(self, base: str) -> List[Path]:
        """Save data as CSV files (one per response)."""
        csv_paths = []
        used_labels = set()

        for label, freq_data in self._results.items():
            safe_label = re.sub(r'[^A-Za-z0-9_.-]+', '_', label).strip('_') or 'response'
            # Distinct labels may sanitize to the same name
            candidate, counter = safe_label, 1
            while candidate in used_labels:
                counter += 1
                candidate = f"{safe_label}_{counter}"
            used_labels.add(candidate)
            safe_label = candidate

            filepath = self.config.output_dir / f"{base}_{safe_label}.csv"

            with open(filepath, 'w', newline='') as f:
                writer = csv.writer(f)

                writer.writerow([
                    'frequency_rad',
                    'exact_gain_linear',
                    'exact_gain_db',
                    'exact_phase_deg',
                    'asymptotic_gain_db',
                    'asymptotic_phase_deg',
                    'real',
                    'imag'
                ])

                for i in range(freq_data.n_points):
                    writer.writerow([
                        freq_data.frequencies_rad[i],
                        freq_data.exact_gain_linear[i],
                        freq_data.exact_gain_db[i],
                        freq_data.exact_phase_deg[i],
                        freq_data.asymptotic_gain_db[i],
                        freq_data.asymptotic_phase_deg[i],
                        freq_data.real[i],
                        freq_data.imag[i]
                    ])

            csv_paths.append(filepath)
            print(f"  [CSV] Saved: {filepath}")

        return csv_paths

    @staticmethod
    def load_json(filepath: Union[str, Path]) -> Dict[str, Any]:
        """
        Load frequency response data from JSON file.

        Parameters
        ----------
        filepath : Path or str
            Path to JSON file

        Returns
        -------
        Dict
            Loaded data structure
        """
        with open(filepath, 'r') as f:
            return json.load(f)

    @staticmethod
    def verify_checksum(filepath: Union[str, Path]) -> bool:
        """
        Verify data integrity using stored checksums.

        Parameters
        ----------
        filepath : Path or str
            Path to JSON file

        Returns
        -------
        bool
            True if all checksums match (or none are stored)
        """
        data = FrequencyResponseLogger.load_json(filepath)

        if 'checksums' not in data.get('metadata', {}):
            print("No checksums found in file")
            return True

        stored_checksums = data['metadata']['checksums']

        for label, response in data['responses'].items():
            computed = _checksum([np.array(response[name], dtype=np.float64)
                                  for name in CHECKSUM_FIELDS])
            stored = stored_checksums.get(label, '')
            if computed != stored:
                print(f"Checksum mismatch for {label}: {computed} != {stored}")
                return False

        print("All checksums verified successfully")
        return True
