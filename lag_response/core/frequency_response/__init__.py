"""
Frequency Response Suite for the n-th Order Lag Element

This module computes and visualizes the frequency response of

$$G(j\\omega) = \\frac{K}{(1 + j\\omega T_1)^n}$$

Numeric Core
------------
Three pure, stateless functions:

1. ``generate_frequency_sweep``: logarithmically-spaced angular frequencies
2. ``compute_exact_response``: closed-form G(jω) in polar and rectangular form
3. ``compute_asymptotic_approximation``: straight-line Bode approximation with
   a two-decade blending band around the corner frequency ωc = 1/T1

Collaborators
-------------
- ``FrequencySweepEngine`` / ``FrequencyResponseAnalyzer``: map the core over
  the sweep and package parallel arrays plus derived metrics
- ``FrequencyResponsePlotter``: Bode magnitude/phase and Nyquist figures
- ``FrequencyResponseLogger``: JSON/CSV persistence with checksums

References
----------
[1] Ogata, K., "Modern Control Engineering", 5th Ed., Prentice Hall, 2010.
[2] Franklin, G.F., Powell, J.D., Emami-Naeini, A., "Feedback Control of
    Dynamic Systems", 7th Ed., Pearson, 2015.
"""

from .transfer_function import TransferFunctionParams

from .exact_response import (
    ResponseSample,
    compute_exact_response
)

from .asymptotic_approximation import (
    AsymptoticSample,
    ApproximationRegime,
    classify_regime,
    compute_asymptotic_approximation
)

from .frequency_sweep_engine import (
    FrequencySweepEngine,
    FrequencySweepConfig,
    FrequencyPoint,
    generate_frequency_sweep
)

from .frequency_response_analyzer import (
    FrequencyResponseAnalyzer,
    AnalyzerConfig,
    FrequencyResponseData,
    analyze_frequency_response
)

from .frequency_response_plotter import (
    FrequencyResponsePlotter,
    PlotConfig,
    PlotStyle,
    generate_circle
)

from .data_logger import (
    FrequencyResponseLogger,
    LoggerConfig
)

__all__ = [
    # Parameters
    'TransferFunctionParams',
    # Numeric core
    'ResponseSample',
    'compute_exact_response',
    'AsymptoticSample',
    'ApproximationRegime',
    'classify_regime',
    'compute_asymptotic_approximation',
    'generate_frequency_sweep',
    # Engine
    'FrequencySweepEngine',
    'FrequencySweepConfig',
    'FrequencyPoint',
    # Analyzer
    'FrequencyResponseAnalyzer',
    'AnalyzerConfig',
    'FrequencyResponseData',
    'analyze_frequency_response',
    # Plotter
    'FrequencyResponsePlotter',
    'PlotConfig',
    'PlotStyle',
    'generate_circle',
    # Logger
    'FrequencyResponseLogger',
    'LoggerConfig',
]
