"""
lag_response - frequency response of the n-th order lag K / (1 + jωT1)^n.

Exact Bode magnitude/phase, asymptotic approximation and Nyquist locus.
"""

__version__ = '1.0.0'
