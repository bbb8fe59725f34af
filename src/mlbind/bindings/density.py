"""Density estimation: DET, Gaussian mixture models and KDE.

``gmm_train`` and ``gmm_probability`` pass their GMM untyped: they return
and accept a bare pointer, which the caller may wrap with
``mlbind.models.GMM(ptr, finalize=True)`` to take ownership.
"""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import MatrixInput, Outputs, RawModel
from ..models import GMM, DTree, KDEModel

__all__ = ['det', 'gmm_generate', 'gmm_probability', 'gmm_train', 'kde']


_DET = Binding('det', [
    Param('folds', Kind.INT, 10),
    Param('input_model', Kind.MODEL, model=DTree),
    Param('max_leaf_size', Kind.INT, 10),
    Param('min_leaf_size', Kind.INT, 5),
    Param('path_format', Kind.STRING, 'lr'),
    Param('skip_pruning', Kind.BOOL, False),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, DTree),
    Output('tag_counters_file', Kind.STRING),
    Output('tag_file', Kind.STRING),
    Output('test_set_estimates', Kind.MATRIX),
    Output('training_set_estimates', Kind.MATRIX),
    Output('vi', Kind.MATRIX),
])


@exposes(_DET)
def det(*,
        folds: Optional[int] = None,
        input_model: Optional[DTree] = None,
        max_leaf_size: Optional[int] = None,
        min_leaf_size: Optional[int] = None,
        path_format: Optional[str] = None,
        skip_pruning: Optional[bool] = None,
        test: Optional[MatrixInput] = None,
        training: Optional[MatrixInput] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Density estimation tree.

    Args:
        folds: Cross-validation folds (0 is leave-one-out). Default 10.
        input_model: Trained tree.
        max_leaf_size: Maximum leaf size of the unpruned tree. Default 10.
        min_leaf_size: Minimum leaf size of the unpruned tree. Default 5.
        path_format: ``'lr'``, ``'id-lr'`` or ``'lr-id'``. Default ``'lr'``.
        skip_pruning: Output the unpruned tree. Default False.
        test: Points to estimate the density of.
        training: Points to build the tree on.

    Returns:
        Tuple ``(output_model, tag_counters_file, tag_file,
        test_set_estimates, training_set_estimates, vi)``.
    """
    return _DET.call_with(locals())


_GMM_GENERATE = Binding('gmm_generate', [
    Param('input_model', Kind.MODEL, model=GMM, required=True),
    Param('samples', Kind.INT, required=True),
    Param('seed', Kind.INT, 0),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_GMM_GENERATE)
def gmm_generate(input_model: GMM, samples: int, *,
                 seed: Optional[int] = None,
                 verbose: Optional[bool] = None,
                 points_are_rows: Optional[bool] = None,
                 copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Draw ``samples`` points from a trained GMM."""
    return _GMM_GENERATE.call_with(locals())


_GMM_PROBABILITY = Binding('gmm_probability', [
    Param('input', Kind.MATRIX, required=True),
    Param('input_model', Kind.RAW_MODEL, model='GMM', required=True),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_GMM_PROBABILITY)
def gmm_probability(input: MatrixInput, input_model: RawModel, *,
                    verbose: Optional[bool] = None,
                    points_are_rows: Optional[bool] = None,
                    copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Density of each point of ``input`` under a GMM.

    Args:
        input: Points to evaluate.
        input_model: GMM pointer (an int, ``ctypes.c_void_p`` or handle).
    """
    return _GMM_PROBABILITY.call_with(locals())


_GMM_TRAIN = Binding('gmm_train', [
    Param('gaussians', Kind.INT, required=True),
    Param('input', Kind.MATRIX, required=True),
    Param('diagonal_covariance', Kind.BOOL, False),
    Param('input_model', Kind.RAW_MODEL, model='GMM'),
    Param('kmeans_max_iterations', Kind.INT, 1000),
    Param('max_iterations', Kind.INT, 250),
    Param('no_force_positive', Kind.BOOL, False),
    Param('noise', Kind.DOUBLE, 0.0),
    Param('percentage', Kind.DOUBLE, 0.02),
    Param('refined_start', Kind.BOOL, False),
    Param('samplings', Kind.INT, 100),
    Param('seed', Kind.INT, 0),
    Param('tolerance', Kind.DOUBLE, 1e-10),
    Param('trials', Kind.INT, 1),
], [
    Output('output_model', Kind.RAW_MODEL, 'GMM'),
])


@exposes(_GMM_TRAIN)
def gmm_train(gaussians: int, input: MatrixInput, *,
              diagonal_covariance: Optional[bool] = None,
              input_model: Optional[RawModel] = None,
              kmeans_max_iterations: Optional[int] = None,
              max_iterations: Optional[int] = None,
              no_force_positive: Optional[bool] = None,
              noise: Optional[float] = None,
              percentage: Optional[float] = None,
              refined_start: Optional[bool] = None,
              samplings: Optional[int] = None,
              seed: Optional[int] = None,
              tolerance: Optional[float] = None,
              trials: Optional[int] = None,
              verbose: Optional[bool] = None,
              points_are_rows: Optional[bool] = None,
              copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Fit a Gaussian mixture model with EM.

    Args:
        gaussians: Number of Gaussians.
        input: Training data.
        diagonal_covariance: Force diagonal covariances. Default False.
        input_model: Initial GMM pointer.
        kmeans_max_iterations: k-means iterations for initialization.
            Default 1000.
        max_iterations: EM iterations (0 runs until convergence).
            Default 250.
        no_force_positive: Do not force positive definite covariances.
            Default False.
        noise: Variance of zero-mean Gaussian noise added to the data.
            Default 0.
        percentage: Fraction of data per refined-start sampling.
            Default 0.02.
        refined_start: Refined k-means initial positions. Default False.
        samplings: Refined-start samplings. Default 100.
        seed: Random seed (0 uses the time). Default 0.
        tolerance: EM convergence tolerance. Default 1e-10.
        trials: Training trials. Default 1.

    Returns:
        The trained GMM as a bare address (int). It has no finalizer.
    """
    return _GMM_TRAIN.call_with(locals())


_KDE = Binding('kde', [
    Param('abs_error', Kind.DOUBLE, 0.0),
    Param('algorithm', Kind.STRING, 'dual-tree'),
    Param('bandwidth', Kind.DOUBLE, 1.0),
    Param('initial_sample_size', Kind.INT, 100),
    Param('input_model', Kind.MODEL, model=KDEModel),
    Param('kernel', Kind.STRING, 'gaussian'),
    Param('mc_break_coef', Kind.DOUBLE, 0.4),
    Param('mc_entry_coef', Kind.DOUBLE, 3.0),
    Param('mc_probability', Kind.DOUBLE, 0.95),
    Param('monte_carlo', Kind.BOOL, False),
    Param('query', Kind.MATRIX),
    Param('reference', Kind.MATRIX),
    Param('rel_error', Kind.DOUBLE, 0.05),
    Param('tree', Kind.STRING, 'kd-tree'),
], [
    Output('output_model', Kind.MODEL, KDEModel),
    Output('predictions', Kind.COL),
])


@exposes(_KDE)
def kde(*,
        abs_error: Optional[float] = None,
        algorithm: Optional[str] = None,
        bandwidth: Optional[float] = None,
        initial_sample_size: Optional[int] = None,
        input_model: Optional[KDEModel] = None,
        kernel: Optional[str] = None,
        mc_break_coef: Optional[float] = None,
        mc_entry_coef: Optional[float] = None,
        mc_probability: Optional[float] = None,
        monte_carlo: Optional[bool] = None,
        query: Optional[MatrixInput] = None,
        reference: Optional[MatrixInput] = None,
        rel_error: Optional[float] = None,
        tree: Optional[str] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Kernel density estimation.

    Args:
        abs_error: Absolute error tolerance. Default 0.
        algorithm: ``'dual-tree'`` or ``'single-tree'``.
            Default ``'dual-tree'``.
        bandwidth: Kernel bandwidth. Default 1.
        initial_sample_size: Initial Monte Carlo sample size. Default 100.
        input_model: Trained KDE model.
        kernel: ``'gaussian'``, ``'epanechnikov'``, ``'laplacian'``,
            ``'spherical'`` or ``'triangular'``. Default ``'gaussian'``.
        mc_break_coef: Monte Carlo recursion limit fraction. Default 0.4.
        mc_entry_coef: Monte Carlo entry factor. Default 3.
        mc_probability: Probability that Monte Carlo estimates respect
            ``rel_error``. Default 0.95.
        monte_carlo: Use Monte Carlo estimations. Default False.
        query: Points to estimate the density of.
        reference: Reference dataset.
        rel_error: Relative error tolerance. Default 0.05.
        tree: ``'kd-tree'``, ``'ball-tree'``, ``'cover-tree'``, ``'octree'``
            or ``'r-tree'``. Default ``'kd-tree'``.

    Returns:
        Tuple ``(output_model, predictions)``.
    """
    return _KDE.call_with(locals())
