"""Distance metric learning: LMNN and NCA."""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import IndexVectorInput, MatrixInput, Outputs

__all__ = ['lmnn', 'nca']


_LMNN = Binding('lmnn', [
    Param('input', Kind.MATRIX, required=True),
    Param('batch_size', Kind.INT, 50),
    Param('center', Kind.BOOL, False),
    Param('distance', Kind.MATRIX),
    Param('k', Kind.INT, 1),
    Param('labels', Kind.UROW),
    Param('linear_scan', Kind.BOOL, False),
    Param('max_iterations', Kind.INT, 100000),
    Param('normalize', Kind.BOOL, False),
    Param('optimizer', Kind.STRING, 'amsgrad'),
    Param('passes', Kind.INT, 50),
    Param('print_accuracy', Kind.BOOL, False),
    Param('range', Kind.INT, 1),
    Param('rank', Kind.INT, 0),
    Param('regularization', Kind.DOUBLE, 0.5),
    Param('seed', Kind.INT, 0),
    Param('step_size', Kind.DOUBLE, 0.01),
    Param('tolerance', Kind.DOUBLE, 1e-7),
], [
    Output('centered_data', Kind.MATRIX),
    Output('output', Kind.MATRIX),
    Output('transformed_data', Kind.MATRIX),
])


@exposes(_LMNN)
def lmnn(input: MatrixInput, *,
         batch_size: Optional[int] = None,
         center: Optional[bool] = None,
         distance: Optional[MatrixInput] = None,
         k: Optional[int] = None,
         labels: Optional[IndexVectorInput] = None,
         linear_scan: Optional[bool] = None,
         max_iterations: Optional[int] = None,
         normalize: Optional[bool] = None,
         optimizer: Optional[str] = None,
         passes: Optional[int] = None,
         print_accuracy: Optional[bool] = None,
         range: Optional[int] = None,
         rank: Optional[int] = None,
         regularization: Optional[float] = None,
         seed: Optional[int] = None,
         step_size: Optional[float] = None,
         tolerance: Optional[float] = None,
         verbose: Optional[bool] = None,
         points_are_rows: Optional[bool] = None,
         copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Large margin nearest neighbor metric learning.

    Args:
        input: Dataset; the last dimension holds labels when ``labels`` is
            omitted.
        batch_size: Mini-batch size. Default 50.
        center: Mean-center the dataset. Default False.
        distance: Initial distance matrix.
        k: Target neighbors per point. Default 1.
        labels: Labels of ``input``.
        linear_scan: Visit points in order. Default False.
        max_iterations: L-BFGS iteration limit (0 means none).
            Default 100000.
        normalize: Normalized starting point. Default False.
        optimizer: ``'amsgrad'``, ``'bbsgd'``, ``'sgd'`` or ``'lbfgs'``.
            Default ``'amsgrad'``.
        passes: Full passes for the SGD family. Default 50.
        print_accuracy: Print accuracy before and after. Default False.
        range: Iterations between impostor recalculations. Default 1.
        rank: Rank of the distance matrix. Default 0.
        regularization: Objective regularization. Default 0.5.
        seed: Random seed (0 uses the time). Default 0.
        step_size: Step size for the SGD family. Default 0.01.
        tolerance: Termination tolerance. Default 1e-7.

    Returns:
        Tuple ``(centered_data, output, transformed_data)``; ``output`` is
        the learned distance matrix.
    """
    return _LMNN.call_with(locals())


_NCA = Binding('nca', [
    Param('input', Kind.MATRIX, required=True),
    Param('armijo_constant', Kind.DOUBLE, 1e-4),
    Param('batch_size', Kind.INT, 50),
    Param('labels', Kind.UROW),
    Param('linear_scan', Kind.BOOL, False),
    Param('max_iterations', Kind.INT, 500000),
    Param('max_line_search_trials', Kind.INT, 50),
    Param('max_step', Kind.DOUBLE, 1e20),
    Param('min_step', Kind.DOUBLE, 1e-20),
    Param('normalize', Kind.BOOL, False),
    Param('num_basis', Kind.INT, 5),
    Param('optimizer', Kind.STRING, 'sgd'),
    Param('seed', Kind.INT, 0),
    Param('step_size', Kind.DOUBLE, 0.01),
    Param('tolerance', Kind.DOUBLE, 1e-7),
    Param('wolfe', Kind.DOUBLE, 0.9),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_NCA)
def nca(input: MatrixInput, *,
        armijo_constant: Optional[float] = None,
        batch_size: Optional[int] = None,
        labels: Optional[IndexVectorInput] = None,
        linear_scan: Optional[bool] = None,
        max_iterations: Optional[int] = None,
        max_line_search_trials: Optional[int] = None,
        max_step: Optional[float] = None,
        min_step: Optional[float] = None,
        normalize: Optional[bool] = None,
        num_basis: Optional[int] = None,
        optimizer: Optional[str] = None,
        seed: Optional[int] = None,
        step_size: Optional[float] = None,
        tolerance: Optional[float] = None,
        wolfe: Optional[float] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Neighborhood components analysis.

    ``optimizer`` is ``'sgd'`` (default) or ``'lbfgs'``; the L-BFGS options
    (``armijo_constant``, ``max_line_search_trials``, ``max_step``,
    ``min_step``, ``num_basis``, ``wolfe``) apply only to the latter.

    Returns:
        The learned distance matrix.
    """
    return _NCA.call_with(locals())
