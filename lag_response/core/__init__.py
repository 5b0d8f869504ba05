"""Core computation, plotting and persistence for lag_response."""
