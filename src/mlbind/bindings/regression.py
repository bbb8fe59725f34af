"""Regression: Bayesian linear regression, LARS, ridge/linear regression."""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import MatrixInput, Outputs, VectorInput
from ..models import LARS, BayesianLinearRegression, LinearRegression

__all__ = ['bayesian_linear_regression', 'lars', 'linear_regression']


_BAYESIAN_LINEAR_REGRESSION = Binding('bayesian_linear_regression', [
    Param('center', Kind.BOOL, False),
    Param('input', Kind.MATRIX),
    Param('input_model', Kind.MODEL, model=BayesianLinearRegression),
    Param('responses', Kind.ROW),
    Param('scale', Kind.BOOL, False),
    Param('test', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, BayesianLinearRegression),
    Output('predictions', Kind.MATRIX),
    Output('stds', Kind.MATRIX),
])


@exposes(_BAYESIAN_LINEAR_REGRESSION)
def bayesian_linear_regression(*,
                               center: Optional[bool] = None,
                               input: Optional[MatrixInput] = None,
                               input_model: Optional[BayesianLinearRegression] = None,
                               responses: Optional[VectorInput] = None,
                               scale: Optional[bool] = None,
                               test: Optional[MatrixInput] = None,
                               verbose: Optional[bool] = None,
                               points_are_rows: Optional[bool] = None,
                               copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Bayesian linear regression with automatic tuning of the prior.

    Args:
        center: Center the data and fit the intercept. Default False.
        input: Covariates (X).
        input_model: Trained model.
        responses: Responses (y), one per point.
        scale: Scale each feature by its standard deviation. Default False.
        test: Points to regress on.

    Returns:
        Tuple ``(output_model, predictions, stds)``; ``stds`` are the
        standard deviations of the predictive distribution.
    """
    return _BAYESIAN_LINEAR_REGRESSION.call_with(locals())


_LARS = Binding('lars', [
    Param('input', Kind.MATRIX),
    Param('input_model', Kind.MODEL, model=LARS),
    Param('lambda1', Kind.DOUBLE, 0.0),
    Param('lambda2', Kind.DOUBLE, 0.0),
    Param('responses', Kind.MATRIX),
    Param('test', Kind.MATRIX),
    Param('use_cholesky', Kind.BOOL, False),
], [
    Output('output_model', Kind.MODEL, LARS),
    Output('output_predictions', Kind.MATRIX),
])


@exposes(_LARS)
def lars(*,
         input: Optional[MatrixInput] = None,
         input_model: Optional[LARS] = None,
         lambda1: Optional[float] = None,
         lambda2: Optional[float] = None,
         responses: Optional[MatrixInput] = None,
         test: Optional[MatrixInput] = None,
         use_cholesky: Optional[bool] = None,
         verbose: Optional[bool] = None,
         points_are_rows: Optional[bool] = None,
         copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Least angle regression (LASSO, elastic net).

    Args:
        input: Covariates (X).
        input_model: Trained LARS model.
        lambda1: l1-norm penalty. Default 0.
        lambda2: l2-norm penalty. Default 0.
        responses: Responses (y) as a matrix.
        test: Points to regress on.
        use_cholesky: Use a Cholesky decomposition instead of the full Gram
            matrix. Default False.

    Returns:
        Tuple ``(output_model, output_predictions)``.
    """
    return _LARS.call_with(locals())


_LINEAR_REGRESSION = Binding('linear_regression', [
    Param('input_model', Kind.MODEL, model=LinearRegression),
    Param('lambda', Kind.DOUBLE, 0.0, arg='lambda_'),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
    Param('training_responses', Kind.ROW),
], [
    Output('output_model', Kind.MODEL, LinearRegression),
    Output('output_predictions', Kind.ROW),
])


@exposes(_LINEAR_REGRESSION)
def linear_regression(*,
                      input_model: Optional[LinearRegression] = None,
                      lambda_: Optional[float] = None,
                      test: Optional[MatrixInput] = None,
                      training: Optional[MatrixInput] = None,
                      training_responses: Optional[VectorInput] = None,
                      verbose: Optional[bool] = None,
                      points_are_rows: Optional[bool] = None,
                      copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Linear regression, or ridge regression when ``lambda_`` is positive.

    Args:
        input_model: Existing model.
        lambda_: Tikhonov regularization (native key ``lambda``). Default 0.
        test: Test regressors.
        training: Training regressors.
        training_responses: Responses; when omitted the last dimension of
            ``training`` is used.

    Returns:
        Tuple ``(output_model, output_predictions)``.
    """
    return _LINEAR_REGRESSION.call_with(locals())
