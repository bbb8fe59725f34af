"""Neighbor search: exact, approximate and rank-approximate k-NN/k-FN,
LSH and max-kernel search.

All searches return ``(distances, neighbors, output_model)``-shaped tuples
(``fastmks`` returns ``(indices, kernels, output_model)``), with one row per
query point when ``points_are_rows`` is set.
"""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import IndexMatrixInput, MatrixInput, Outputs, RawModel
from ..models import ApproxKFNModel, FastMKSModel, KFNModel, KNNModel, LSHSearch

__all__ = ['approx_kfn', 'fastmks', 'kfn', 'knn', 'krann', 'lsh']


_APPROX_KFN = Binding('approx_kfn', [
    Param('algorithm', Kind.STRING, 'ds'),
    Param('calculate_error', Kind.BOOL, False),
    Param('exact_distances', Kind.MATRIX),
    Param('input_model', Kind.MODEL, model=ApproxKFNModel),
    Param('k', Kind.INT, 0),
    Param('num_projections', Kind.INT, 5),
    Param('num_tables', Kind.INT, 5),
    Param('query', Kind.MATRIX),
    Param('reference', Kind.MATRIX),
], [
    Output('distances', Kind.MATRIX),
    Output('neighbors', Kind.UMATRIX),
    Output('output_model', Kind.MODEL, ApproxKFNModel),
])


@exposes(_APPROX_KFN)
def approx_kfn(*,
               algorithm: Optional[str] = None,
               calculate_error: Optional[bool] = None,
               exact_distances: Optional[MatrixInput] = None,
               input_model: Optional[ApproxKFNModel] = None,
               k: Optional[int] = None,
               num_projections: Optional[int] = None,
               num_tables: Optional[int] = None,
               query: Optional[MatrixInput] = None,
               reference: Optional[MatrixInput] = None,
               verbose: Optional[bool] = None,
               points_are_rows: Optional[bool] = None,
               copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Approximate furthest neighbor search.

    Args:
        algorithm: ``'ds'`` or ``'qdafn'``. Default ``'ds'``.
        calculate_error: Report the average distance error of the first
            furthest neighbor. Default False.
        exact_distances: Precomputed exact furthest-neighbor distances.
        input_model: Trained model.
        k: Number of furthest neighbors. Default 0.
        num_projections: Projections per hash table. Default 5.
        num_tables: Number of hash tables. Default 5.
        query: Query points.
        reference: Reference dataset.
    """
    return _APPROX_KFN.call_with(locals())


_FASTMKS = Binding('fastmks', [
    Param('bandwidth', Kind.DOUBLE, 1.0),
    Param('base', Kind.DOUBLE, 2.0),
    Param('degree', Kind.DOUBLE, 2.0),
    Param('input_model', Kind.MODEL, model=FastMKSModel),
    Param('k', Kind.INT, 0),
    Param('kernel', Kind.STRING, 'linear'),
    Param('naive', Kind.BOOL, False),
    Param('offset', Kind.DOUBLE, 0.0),
    Param('query', Kind.MATRIX),
    Param('reference', Kind.MATRIX),
    Param('scale', Kind.DOUBLE, 1.0),
    Param('single', Kind.BOOL, False),
], [
    Output('indices', Kind.UMATRIX),
    Output('kernels', Kind.MATRIX),
    Output('output_model', Kind.MODEL, FastMKSModel),
])


@exposes(_FASTMKS)
def fastmks(*,
            bandwidth: Optional[float] = None,
            base: Optional[float] = None,
            degree: Optional[float] = None,
            input_model: Optional[FastMKSModel] = None,
            k: Optional[int] = None,
            kernel: Optional[str] = None,
            naive: Optional[bool] = None,
            offset: Optional[float] = None,
            query: Optional[MatrixInput] = None,
            reference: Optional[MatrixInput] = None,
            scale: Optional[float] = None,
            single: Optional[bool] = None,
            verbose: Optional[bool] = None,
            points_are_rows: Optional[bool] = None,
            copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Fast max-kernel search.

    Args:
        bandwidth: Bandwidth for the gaussian, epanechnikov and triangular
            kernels. Default 1.
        base: Cover tree base. Default 2.
        degree: Polynomial kernel degree. Default 2.
        input_model: Trained model.
        k: Number of maximum kernels to find. Default 0.
        kernel: ``'linear'``, ``'polynomial'``, ``'cosine'``,
            ``'gaussian'``, ``'epanechnikov'``, ``'triangular'`` or
            ``'hyptan'``. Default ``'linear'``.
        naive: O(n^2) brute force. Default False.
        offset: Polynomial/hyptan kernel offset. Default 0.
        query: Query dataset.
        reference: Reference dataset.
        scale: Hyptan kernel scale. Default 1.
        single: Single-tree search. Default False.
    """
    return _FASTMKS.call_with(locals())


_KFN = Binding('kfn', [
    Param('algorithm', Kind.STRING, 'dual_tree'),
    Param('epsilon', Kind.DOUBLE, 0.0),
    Param('input_model', Kind.MODEL, model=KFNModel),
    Param('k', Kind.INT, 0),
    Param('leaf_size', Kind.INT, 20),
    Param('percentage', Kind.DOUBLE, 1.0),
    Param('query', Kind.MATRIX),
    Param('random_basis', Kind.BOOL, False),
    Param('reference', Kind.MATRIX),
    Param('seed', Kind.INT, 0),
    Param('tree_type', Kind.STRING, 'kd'),
    Param('true_distances', Kind.MATRIX),
    Param('true_neighbors', Kind.UMATRIX),
], [
    Output('distances', Kind.MATRIX),
    Output('neighbors', Kind.UMATRIX),
    Output('output_model', Kind.MODEL, KFNModel),
])


@exposes(_KFN)
def kfn(*,
        algorithm: Optional[str] = None,
        epsilon: Optional[float] = None,
        input_model: Optional[KFNModel] = None,
        k: Optional[int] = None,
        leaf_size: Optional[int] = None,
        percentage: Optional[float] = None,
        query: Optional[MatrixInput] = None,
        random_basis: Optional[bool] = None,
        reference: Optional[MatrixInput] = None,
        seed: Optional[int] = None,
        tree_type: Optional[str] = None,
        true_distances: Optional[MatrixInput] = None,
        true_neighbors: Optional[IndexMatrixInput] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """k-furthest-neighbor search.

    Takes the same tree options as :func:`knn`; ``percentage`` in (0, 1]
    requests approximate search.
    """
    return _KFN.call_with(locals())


_KNN = Binding('knn', [
    Param('algorithm', Kind.STRING, 'dual_tree'),
    Param('epsilon', Kind.DOUBLE, 0.0),
    Param('input_model', Kind.MODEL, model=KNNModel),
    Param('k', Kind.INT, 0),
    Param('leaf_size', Kind.INT, 20),
    Param('query', Kind.MATRIX),
    Param('random_basis', Kind.BOOL, False),
    Param('reference', Kind.MATRIX),
    Param('rho', Kind.DOUBLE, 0.7),
    Param('seed', Kind.INT, 0),
    Param('tau', Kind.DOUBLE, 0.0),
    Param('tree_type', Kind.STRING, 'kd'),
    Param('true_distances', Kind.MATRIX),
    Param('true_neighbors', Kind.UMATRIX),
], [
    Output('distances', Kind.MATRIX),
    Output('neighbors', Kind.UMATRIX),
    Output('output_model', Kind.MODEL, KNNModel),
])


@exposes(_KNN)
def knn(*,
        algorithm: Optional[str] = None,
        epsilon: Optional[float] = None,
        input_model: Optional[KNNModel] = None,
        k: Optional[int] = None,
        leaf_size: Optional[int] = None,
        query: Optional[MatrixInput] = None,
        random_basis: Optional[bool] = None,
        reference: Optional[MatrixInput] = None,
        rho: Optional[float] = None,
        seed: Optional[int] = None,
        tau: Optional[float] = None,
        tree_type: Optional[str] = None,
        true_distances: Optional[MatrixInput] = None,
        true_neighbors: Optional[IndexMatrixInput] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """
    k-nearest-neighbor search.

    Example:
        >>> distances, neighbors, model = mlbind.knn(reference=data, k=5)
        >>> distances, neighbors, _ = mlbind.knn(input_model=model, query=q, k=5)

    Args:
        algorithm: ``'naive'``, ``'single_tree'``, ``'dual_tree'`` or
            ``'greedy'``. Default ``'dual_tree'``.
        epsilon: Relative error for approximate search. Default 0.
        input_model: Pre-trained model.
        k: Number of nearest neighbors. Default 0.
        leaf_size: Leaf size for tree building. Default 20.
        query: Query points; the reference set is searched when omitted.
        random_basis: Project onto a random orthogonal basis first.
            Default False.
        reference: Reference dataset.
        rho: Spill tree balance threshold. Default 0.7.
        seed: Random seed (0 uses the time). Default 0.
        tau: Spill tree overlap. Default 0.
        tree_type: ``'kd'``, ``'vp'``, ``'rp'``, ``'max-rp'``, ``'ub'``,
            ``'cover'``, ``'r'``, ``'r-star'``, ``'x'``, ``'ball'``,
            ``'hilbert-r'``, ``'r-plus'``, ``'r-plus-plus'``, ``'spill'`` or
            ``'oct'``. Default ``'kd'``.
        true_distances: True distances, for effective error reporting.
        true_neighbors: True neighbors, for recall reporting.

    Returns:
        Tuple ``(distances, neighbors, output_model)``.
    """
    return _KNN.call_with(locals())


_KRANN = Binding('krann', [
    Param('alpha', Kind.DOUBLE, 0.95),
    Param('first_leaf_exact', Kind.BOOL, False),
    Param('input_model', Kind.RAW_MODEL, model='RANNModel'),
    Param('k', Kind.INT, 0),
    Param('leaf_size', Kind.INT, 20),
    Param('naive', Kind.BOOL, False),
    Param('query', Kind.MATRIX),
    Param('random_basis', Kind.BOOL, False),
    Param('reference', Kind.MATRIX),
    Param('sample_at_leaves', Kind.BOOL, False),
    Param('seed', Kind.INT, 0),
    Param('single_mode', Kind.BOOL, False),
    Param('single_sample_limit', Kind.INT, 20),
    Param('tau', Kind.DOUBLE, 5.0),
    Param('tree_type', Kind.STRING, 'kd'),
], [
    Output('distances', Kind.MATRIX),
    Output('neighbors', Kind.UMATRIX),
    Output('output_model', Kind.RAW_MODEL, 'RANNModel'),
])


@exposes(_KRANN)
def krann(*,
          alpha: Optional[float] = None,
          first_leaf_exact: Optional[bool] = None,
          input_model: Optional[RawModel] = None,
          k: Optional[int] = None,
          leaf_size: Optional[int] = None,
          naive: Optional[bool] = None,
          query: Optional[MatrixInput] = None,
          random_basis: Optional[bool] = None,
          reference: Optional[MatrixInput] = None,
          sample_at_leaves: Optional[bool] = None,
          seed: Optional[int] = None,
          single_mode: Optional[bool] = None,
          single_sample_limit: Optional[int] = None,
          tau: Optional[float] = None,
          tree_type: Optional[str] = None,
          verbose: Optional[bool] = None,
          points_are_rows: Optional[bool] = None,
          copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Rank-approximate nearest neighbor search.

    The model is untyped: ``input_model`` takes a bare pointer and
    ``output_model`` comes back as an int address without a finalizer.
    ``RANNModel(ptr, finalize=True)`` takes ownership of it.

    Args:
        alpha: Desired success probability. Default 0.95.
        first_leaf_exact: Sample only after exploring the first leaf
            exactly. Default False.
        tau: Allowed rank error, as a percentile of the data. Default 5.
        single_sample_limit: Largest node that may be approximated.
            Default 20.
    """
    return _KRANN.call_with(locals())


_LSH = Binding('lsh', [
    Param('bucket_size', Kind.INT, 500),
    Param('hash_width', Kind.DOUBLE, 0.0),
    Param('input_model', Kind.MODEL, model=LSHSearch),
    Param('k', Kind.INT, 0),
    Param('num_probes', Kind.INT, 0),
    Param('projections', Kind.INT, 10),
    Param('query', Kind.MATRIX),
    Param('reference', Kind.MATRIX),
    Param('second_hash_size', Kind.INT, 99901),
    Param('seed', Kind.INT, 0),
    Param('tables', Kind.INT, 30),
    Param('true_neighbors', Kind.UMATRIX),
], [
    Output('distances', Kind.MATRIX),
    Output('neighbors', Kind.UMATRIX),
    Output('output_model', Kind.MODEL, LSHSearch),
])


@exposes(_LSH)
def lsh(*,
        bucket_size: Optional[int] = None,
        hash_width: Optional[float] = None,
        input_model: Optional[LSHSearch] = None,
        k: Optional[int] = None,
        num_probes: Optional[int] = None,
        projections: Optional[int] = None,
        query: Optional[MatrixInput] = None,
        reference: Optional[MatrixInput] = None,
        second_hash_size: Optional[int] = None,
        seed: Optional[int] = None,
        tables: Optional[int] = None,
        true_neighbors: Optional[IndexMatrixInput] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Locality-sensitive hashing nearest neighbor search.

    Args:
        bucket_size: Second-level bucket size. Default 500.
        hash_width: First-level hash width; 0 estimates it. Default 0.
        input_model: Trained LSH model.
        k: Number of nearest neighbors. Default 0.
        num_probes: Extra probes for multiprobe LSH. Default 0.
        projections: Hash functions per table. Default 10.
        query: Query points.
        reference: Reference dataset.
        second_hash_size: Second-level hash table size. Default 99901.
        seed: Random seed (0 uses the time). Default 0.
        tables: Number of hash tables. Default 30.
        true_neighbors: True neighbors, for recall reporting.
    """
    return _LSH.call_with(locals())
