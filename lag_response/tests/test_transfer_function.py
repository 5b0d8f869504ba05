"""
Unit tests for TransferFunctionParams.

Test coverage:
- Input parsing from user strings
- Rejection of invalid gain, time constant and order
- Derived quantities (corner frequency, DC gain, bandwidth)
- Conversion to a python-control transfer function
"""

import numpy as np
import pytest
import control as ctrl

from lag_response.core.frequency_response import (
    TransferFunctionParams,
    compute_exact_response
)


class TestFromUserInput:
    """Parsing raw form input."""

    def test_parses_strings(self):
        params = TransferFunctionParams.from_user_input("2.5", "0.1", "3")

        assert params.gain == 2.5
        assert params.time_constant == 0.1
        assert params.order == 3
        assert isinstance(params.order, int)

    def test_accepts_integral_float_order(self):
        assert TransferFunctionParams.from_user_input(1, 1, 2.0).order == 2

    @pytest.mark.parametrize("gain,time_constant,order", [
        ("abc", "1", "1"),
        ("1", "", "1"),
        ("1", "1", "two"),
        (None, "1", "1"),
    ])
    def test_non_numeric_rejected(self, gain, time_constant, order):
        with pytest.raises(ValueError):
            TransferFunctionParams.from_user_input(gain, time_constant, order)

    @pytest.mark.parametrize("gain,time_constant,order", [
        (0, 1, 1),
        (-1, 1, 1),
        (1, 0, 1),
        (1, -0.5, 1),
        (1, 1, 0),
        (1, 1, -2),
        (1, 1, 1.5),
        ("nan", 1, 1),
        (1, "inf", 1),
        (1, 1, "inf"),
    ])
    def test_invalid_values_rejected(self, gain, time_constant, order):
        with pytest.raises(ValueError):
            TransferFunctionParams.from_user_input(gain, time_constant, order)


class TestValidate:
    """Direct construction does not validate until asked."""

    def test_construction_does_not_validate(self):
        params = TransferFunctionParams(gain=-1.0)
        with pytest.raises(ValueError, match="Gain"):
            params.validate()

    def test_bool_order_rejected(self):
        with pytest.raises(ValueError, match="Order"):
            TransferFunctionParams(1.0, 1.0, True).validate()

    def test_valid_params_pass(self):
        TransferFunctionParams(0.5, 0.001, 7).validate()

    def test_frozen(self):
        params = TransferFunctionParams()
        with pytest.raises(AttributeError):
            params.gain = 2.0


class TestDerivedQuantities:
    """Corner frequency, DC gain and bandwidth."""

    def test_corner_frequency(self):
        assert TransferFunctionParams(1.0, 0.25, 1).corner_frequency == pytest.approx(4.0)

    def test_dc_gain_db(self):
        assert TransferFunctionParams(10.0, 1.0, 1).dc_gain_db == pytest.approx(20.0)

    def test_first_order_bandwidth_is_corner(self):
        params = TransferFunctionParams(3.0, 0.2, 1)
        assert params.bandwidth == pytest.approx(params.corner_frequency)

    @pytest.mark.parametrize("order", [1, 2, 3, 6])
    def test_bandwidth_is_minus_3db(self, order):
        params = TransferFunctionParams(2.0, 0.5, order)
        sample = compute_exact_response(2.0, 0.5, order, params.bandwidth)
        assert sample.magnitude == pytest.approx(2.0 / np.sqrt(2.0), rel=1e-12)

    def test_bandwidth_shrinks_with_order(self):
        bandwidths = [TransferFunctionParams(1.0, 1.0, n).bandwidth for n in range(1, 6)]
        assert np.all(np.diff(bandwidths) < 0)

    def test_str(self):
        assert str(TransferFunctionParams(2.0, 0.5, 2)) == "G(s) = 2 / (0.5s + 1)^2"

    def test_to_dict(self):
        assert TransferFunctionParams(2.0, 0.5, 2).to_dict() == {
            'gain': 2.0, 'time_constant': 0.5, 'order': 2
        }


class TestToControl:
    """Conversion to python-control."""

    def test_returns_transfer_function(self):
        assert isinstance(TransferFunctionParams().to_control(), ctrl.TransferFunction)

    def test_dc_gain(self):
        tf = TransferFunctionParams(4.0, 2.0, 3).to_control()
        assert float(np.real(ctrl.dcgain(tf))) == pytest.approx(4.0)

    def test_poles(self):
        tf = TransferFunctionParams(1.0, 0.5, 2).to_control()
        np.testing.assert_allclose(np.sort(np.real(tf.poles())), [-2.0, -2.0], rtol=1e-6)
