"""Matrix decompositions and dictionary learning.

PCA, kernel PCA, NMF, RADICAL ICA, sparse coding, local coordinate coding,
and collaborative filtering (which factorizes the rating matrix).
"""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import IndexMatrixInput, MatrixInput, Outputs
from ..models import CFModel, LocalCoordinateCoding, SparseCoding

__all__ = [
    'cf',
    'kernel_pca',
    'local_coordinate_coding',
    'nmf',
    'pca',
    'radical',
    'sparse_coding',
]


_CF = Binding('cf', [
    Param('algorithm', Kind.STRING, 'NMF'),
    Param('all_user_recommendations', Kind.BOOL, False),
    Param('input_model', Kind.MODEL, model=CFModel),
    Param('interpolation', Kind.STRING, 'average'),
    Param('iteration_only_termination', Kind.BOOL, False),
    Param('max_iterations', Kind.INT, 1000),
    Param('min_residue', Kind.DOUBLE, 1e-5),
    Param('neighbor_search', Kind.STRING, 'euclidean'),
    Param('neighborhood', Kind.INT, 5),
    Param('normalization', Kind.STRING, 'none'),
    Param('query', Kind.UMATRIX),
    Param('rank', Kind.INT, 0),
    Param('recommendations', Kind.INT, 5),
    Param('seed', Kind.INT, 0),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
], [
    Output('output', Kind.UMATRIX),
    Output('output_model', Kind.MODEL, CFModel),
])


@exposes(_CF)
def cf(*,
       algorithm: Optional[str] = None,
       all_user_recommendations: Optional[bool] = None,
       input_model: Optional[CFModel] = None,
       interpolation: Optional[str] = None,
       iteration_only_termination: Optional[bool] = None,
       max_iterations: Optional[int] = None,
       min_residue: Optional[float] = None,
       neighbor_search: Optional[str] = None,
       neighborhood: Optional[int] = None,
       normalization: Optional[str] = None,
       query: Optional[IndexMatrixInput] = None,
       rank: Optional[int] = None,
       recommendations: Optional[int] = None,
       seed: Optional[int] = None,
       test: Optional[MatrixInput] = None,
       training: Optional[MatrixInput] = None,
       verbose: Optional[bool] = None,
       points_are_rows: Optional[bool] = None,
       copy_all_inputs: Optional[bool] = None) -> Outputs:
    """
    Collaborative filtering recommendations.

    ``training`` holds ``(user, item, rating)`` triples, one per point.

    Args:
        algorithm: Factorization method, e.g. ``'NMF'``, ``'BatchSVD'``,
            ``'SVDIncompleteIncremental'``, ``'RegSVD'``. Default ``'NMF'``.
        all_user_recommendations: Recommend for every user. Default False.
        input_model: Trained CF model.
        interpolation: Weight interpolation. Default ``'average'``.
        iteration_only_termination: Stop only at ``max_iterations``.
            Default False.
        max_iterations: Iteration limit (0 means none). Default 1000.
        min_residue: Residue that terminates the factorization.
            Default 1e-5.
        neighbor_search: Neighbor search metric. Default ``'euclidean'``.
        neighborhood: Similar users considered per query user. Default 5.
        normalization: Rating normalization. Default ``'none'``.
        query: Users to generate recommendations for.
        rank: Decomposition rank (0 estimates it). Default 0.
        recommendations: Recommendations per user. Default 5.
        seed: Random seed (0 uses the time). Default 0.
        test: Test set for RMSE.
        training: Ratings to factorize.

    Returns:
        Tuple ``(output, output_model)``.
    """
    return _CF.call_with(locals())


_KERNEL_PCA = Binding('kernel_pca', [
    Param('input', Kind.MATRIX, required=True),
    Param('kernel', Kind.STRING, required=True),
    Param('bandwidth', Kind.DOUBLE, 1.0),
    Param('center', Kind.BOOL, False),
    Param('degree', Kind.DOUBLE, 1.0),
    Param('kernel_scale', Kind.DOUBLE, 1.0),
    Param('new_dimensionality', Kind.INT, 0),
    Param('nystroem_method', Kind.BOOL, False),
    Param('offset', Kind.DOUBLE, 0.0),
    Param('sampling', Kind.STRING, 'kmeans'),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_KERNEL_PCA)
def kernel_pca(input: MatrixInput, kernel: str, *,
               bandwidth: Optional[float] = None,
               center: Optional[bool] = None,
               degree: Optional[float] = None,
               kernel_scale: Optional[float] = None,
               new_dimensionality: Optional[int] = None,
               nystroem_method: Optional[bool] = None,
               offset: Optional[float] = None,
               sampling: Optional[str] = None,
               verbose: Optional[bool] = None,
               points_are_rows: Optional[bool] = None,
               copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Kernel principal components analysis.

    Args:
        input: Dataset to transform.
        kernel: ``'linear'``, ``'gaussian'``, ``'polynomial'``,
            ``'hyptan'``, ``'laplacian'``, ``'epanechnikov'`` or
            ``'cosine'``.
        bandwidth: Gaussian/laplacian bandwidth. Default 1.
        center: Center the transformed data. Default False.
        degree: Polynomial degree. Default 1.
        kernel_scale: Hyptan scale. Default 1.
        new_dimensionality: Output dimensions (0 keeps all). Default 0.
        nystroem_method: Use the Nystroem approximation. Default False.
        offset: Hyptan/polynomial offset. Default 0.
        sampling: Nystroem sampling: ``'kmeans'``, ``'random'`` or
            ``'ordered'``. Default ``'kmeans'``.
    """
    return _KERNEL_PCA.call_with(locals())


_LOCAL_COORDINATE_CODING = Binding('local_coordinate_coding', [
    Param('atoms', Kind.INT, 0),
    Param('initial_dictionary', Kind.MATRIX),
    Param('input_model', Kind.MODEL, model=LocalCoordinateCoding),
    Param('lambda', Kind.DOUBLE, 0.0, arg='lambda_'),
    Param('max_iterations', Kind.INT, 0),
    Param('normalize', Kind.BOOL, False),
    Param('seed', Kind.INT, 0),
    Param('test', Kind.MATRIX),
    Param('tolerance', Kind.DOUBLE, 0.01),
    Param('training', Kind.MATRIX),
], [
    Output('codes', Kind.MATRIX),
    Output('dictionary', Kind.MATRIX),
    Output('output_model', Kind.MODEL, LocalCoordinateCoding),
])


@exposes(_LOCAL_COORDINATE_CODING)
def local_coordinate_coding(*,
                            atoms: Optional[int] = None,
                            initial_dictionary: Optional[MatrixInput] = None,
                            input_model: Optional[LocalCoordinateCoding] = None,
                            lambda_: Optional[float] = None,
                            max_iterations: Optional[int] = None,
                            normalize: Optional[bool] = None,
                            seed: Optional[int] = None,
                            test: Optional[MatrixInput] = None,
                            tolerance: Optional[float] = None,
                            training: Optional[MatrixInput] = None,
                            verbose: Optional[bool] = None,
                            points_are_rows: Optional[bool] = None,
                            copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Local coordinate coding.

    ``lambda_`` is the weighted l1-norm regularization (native key
    ``lambda``, default 0); ``atoms`` defaults to 0 and ``tolerance`` to 0.01.

    Returns:
        Tuple ``(codes, dictionary, output_model)``.
    """
    return _LOCAL_COORDINATE_CODING.call_with(locals())


_NMF = Binding('nmf', [
    Param('input', Kind.MATRIX, required=True),
    Param('rank', Kind.INT, required=True),
    Param('initial_h', Kind.MATRIX),
    Param('initial_w', Kind.MATRIX),
    Param('max_iterations', Kind.INT, 10000),
    Param('min_residue', Kind.DOUBLE, 1e-5),
    Param('seed', Kind.INT, 0),
    Param('update_rules', Kind.STRING, 'multdist'),
], [
    Output('h', Kind.MATRIX),
    Output('w', Kind.MATRIX),
])


@exposes(_NMF)
def nmf(input: MatrixInput, rank: int, *,
        initial_h: Optional[MatrixInput] = None,
        initial_w: Optional[MatrixInput] = None,
        max_iterations: Optional[int] = None,
        min_residue: Optional[float] = None,
        seed: Optional[int] = None,
        update_rules: Optional[str] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Non-negative matrix factorization ``V = WH``.

    Args:
        input: Matrix to factorize.
        rank: Rank of the factorization.
        initial_h: Starting H.
        initial_w: Starting W.
        max_iterations: Iteration limit (0 runs until convergence).
            Default 10000.
        min_residue: Minimum RMS residue per iteration. Default 1e-5.
        seed: Random seed (0 uses the time). Default 0.
        update_rules: ``'multdist'``, ``'multdiv'`` or ``'als'``.
            Default ``'multdist'``.

    Returns:
        Tuple ``(h, w)``.
    """
    return _NMF.call_with(locals())


_PCA = Binding('pca', [
    Param('input', Kind.MATRIX, required=True),
    Param('decomposition_method', Kind.STRING, 'exact'),
    Param('new_dimensionality', Kind.INT, 0),
    Param('scale', Kind.BOOL, False),
    Param('var_to_retain', Kind.DOUBLE, 0.0),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_PCA)
def pca(input: MatrixInput, *,
        decomposition_method: Optional[str] = None,
        new_dimensionality: Optional[int] = None,
        scale: Optional[bool] = None,
        var_to_retain: Optional[float] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """
    Principal components analysis.

    Example:
        >>> reduced = mlbind.pca(data, new_dimensionality=2)

    Args:
        input: Dataset to transform.
        decomposition_method: ``'exact'``, ``'randomized'``,
            ``'randomized-block-krylov'`` or ``'quic'``. Default ``'exact'``.
        new_dimensionality: Output dimensions (0 keeps all). Default 0.
        scale: Scale every feature to unit variance first. Default False.
        var_to_retain: Fraction of variance to keep; overrides
            ``new_dimensionality``. Default 0.

    Returns:
        The transformed dataset.
    """
    return _PCA.call_with(locals())


_RADICAL = Binding('radical', [
    Param('input', Kind.MATRIX, required=True),
    Param('angles', Kind.INT, 150),
    Param('noise_std_dev', Kind.DOUBLE, 0.175),
    Param('objective', Kind.BOOL, False),
    Param('replicates', Kind.INT, 30),
    Param('seed', Kind.INT, 0),
    Param('sweeps', Kind.INT, 0),
], [
    Output('output_ic', Kind.MATRIX),
    Output('output_unmixing', Kind.MATRIX),
])


@exposes(_RADICAL)
def radical(input: MatrixInput, *,
            angles: Optional[int] = None,
            noise_std_dev: Optional[float] = None,
            objective: Optional[bool] = None,
            replicates: Optional[int] = None,
            seed: Optional[int] = None,
            sweeps: Optional[int] = None,
            verbose: Optional[bool] = None,
            points_are_rows: Optional[bool] = None,
            copy_all_inputs: Optional[bool] = None) -> Outputs:
    """RADICAL independent components analysis.

    Returns:
        Tuple ``(output_ic, output_unmixing)``.
    """
    return _RADICAL.call_with(locals())


_SPARSE_CODING = Binding('sparse_coding', [
    Param('atoms', Kind.INT, 15),
    Param('initial_dictionary', Kind.MATRIX),
    Param('input_model', Kind.MODEL, model=SparseCoding),
    Param('lambda1', Kind.DOUBLE, 0.0),
    Param('lambda2', Kind.DOUBLE, 0.0),
    Param('max_iterations', Kind.INT, 0),
    Param('newton_tolerance', Kind.DOUBLE, 1e-6),
    Param('normalize', Kind.BOOL, False),
    Param('objective_tolerance', Kind.DOUBLE, 0.01),
    Param('seed', Kind.INT, 0),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
], [
    Output('codes', Kind.MATRIX),
    Output('dictionary', Kind.MATRIX),
    Output('output_model', Kind.MODEL, SparseCoding),
])


@exposes(_SPARSE_CODING)
def sparse_coding(*,
                  atoms: Optional[int] = None,
                  initial_dictionary: Optional[MatrixInput] = None,
                  input_model: Optional[SparseCoding] = None,
                  lambda1: Optional[float] = None,
                  lambda2: Optional[float] = None,
                  max_iterations: Optional[int] = None,
                  newton_tolerance: Optional[float] = None,
                  normalize: Optional[bool] = None,
                  objective_tolerance: Optional[float] = None,
                  seed: Optional[int] = None,
                  test: Optional[MatrixInput] = None,
                  training: Optional[MatrixInput] = None,
                  verbose: Optional[bool] = None,
                  points_are_rows: Optional[bool] = None,
                  copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Sparse coding with dictionary learning.

    Args:
        atoms: Dictionary size. Default 15.
        initial_dictionary: Starting dictionary.
        input_model: Trained model.
        lambda1: l1-norm regularization. Default 0.
        lambda2: l2-norm regularization. Default 0.
        max_iterations: Iteration limit (0 means none). Default 0.
        newton_tolerance: Newton method tolerance. Default 1e-6.
        normalize: Normalize the input first. Default False.
        objective_tolerance: Objective convergence tolerance. Default 0.01.
        seed: Random seed (0 uses the time). Default 0.
        test: Points to encode.
        training: Training data.

    Returns:
        Tuple ``(codes, dictionary, output_model)``.
    """
    return _SPARSE_CODING.call_with(locals())
