"""Clustering: DBSCAN, k-means, mean shift and Euclidean MST."""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import MatrixInput, Outputs

__all__ = ['dbscan', 'emst', 'kmeans', 'mean_shift']


_DBSCAN = Binding('dbscan', [
    Param('input', Kind.MATRIX, required=True),
    Param('epsilon', Kind.DOUBLE, 1.0),
    Param('min_size', Kind.INT, 5),
    Param('naive', Kind.BOOL, False),
    Param('selection_type', Kind.STRING, 'ordered'),
    Param('single_mode', Kind.BOOL, False),
    Param('tree_type', Kind.STRING, 'kd'),
], [
    Output('assignments', Kind.UROW),
    Output('centroids', Kind.MATRIX),
])


@exposes(_DBSCAN)
def dbscan(input: MatrixInput, *,
           epsilon: Optional[float] = None,
           min_size: Optional[int] = None,
           naive: Optional[bool] = None,
           selection_type: Optional[str] = None,
           single_mode: Optional[bool] = None,
           tree_type: Optional[str] = None,
           verbose: Optional[bool] = None,
           points_are_rows: Optional[bool] = None,
           copy_all_inputs: Optional[bool] = None) -> Outputs:
    """DBSCAN clustering.

    Args:
        input: Dataset to cluster.
        epsilon: Radius of each range search. Default 1.
        min_size: Minimum number of points in a cluster. Default 5.
        naive: Brute-force range search. Default False.
        selection_type: ``'ordered'`` or ``'random'``. Default ``'ordered'``.
        single_mode: Single-tree instead of dual-tree search. Default False.
        tree_type: ``'kd'``, ``'r'``, ``'r-star'``, ``'x'``,
            ``'hilbert-r'``, ``'r-plus'``, ``'r-plus-plus'``, ``'cover'`` or
            ``'ball'``. Default ``'kd'``.

    Returns:
        Tuple ``(assignments, centroids)``.
    """
    return _DBSCAN.call_with(locals())


_EMST = Binding('emst', [
    Param('input', Kind.MATRIX, required=True),
    Param('leaf_size', Kind.INT, 1),
    Param('naive', Kind.BOOL, False),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_EMST)
def emst(input: MatrixInput, *,
         leaf_size: Optional[int] = None,
         naive: Optional[bool] = None,
         verbose: Optional[bool] = None,
         points_are_rows: Optional[bool] = None,
         copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Euclidean minimum spanning tree, returned as an edge list.

    Each edge is ``(lesser index, greater index, distance)``.
    """
    return _EMST.call_with(locals())


_KMEANS = Binding('kmeans', [
    Param('clusters', Kind.INT, required=True),
    Param('input', Kind.MATRIX, required=True),
    Param('algorithm', Kind.STRING, 'naive'),
    Param('allow_empty_clusters', Kind.BOOL, False),
    Param('in_place', Kind.BOOL, False),
    Param('initial_centroids', Kind.MATRIX),
    Param('kill_empty_clusters', Kind.BOOL, False),
    Param('labels_only', Kind.BOOL, False),
    Param('max_iterations', Kind.INT, 1000),
    Param('percentage', Kind.DOUBLE, 0.02),
    Param('refined_start', Kind.BOOL, False),
    Param('samplings', Kind.INT, 100),
    Param('seed', Kind.INT, 0),
], [
    Output('centroid', Kind.MATRIX),
    Output('output', Kind.MATRIX),
])


@exposes(_KMEANS)
def kmeans(clusters: int, input: MatrixInput, *,
           algorithm: Optional[str] = None,
           allow_empty_clusters: Optional[bool] = None,
           in_place: Optional[bool] = None,
           initial_centroids: Optional[MatrixInput] = None,
           kill_empty_clusters: Optional[bool] = None,
           labels_only: Optional[bool] = None,
           max_iterations: Optional[int] = None,
           percentage: Optional[float] = None,
           refined_start: Optional[bool] = None,
           samplings: Optional[int] = None,
           seed: Optional[int] = None,
           verbose: Optional[bool] = None,
           points_are_rows: Optional[bool] = None,
           copy_all_inputs: Optional[bool] = None) -> Outputs:
    """
    K-means clustering.

    Example:
        >>> centroids, labeled = mlbind.kmeans(3, data)
        >>> centroids.shape
        (3, 4)

    Args:
        clusters: Number of clusters; 0 takes the count from
            ``initial_centroids``.
        input: Dataset to cluster.
        algorithm: Lloyd iteration: ``'naive'``, ``'pelleg-moore'``,
            ``'elkan'``, ``'hamerly'``, ``'dualtree'`` or
            ``'dualtree-covertree'``. Default ``'naive'``.
        allow_empty_clusters: Let empty clusters persist. Default False.
        in_place: Append assignments to the input dataset. Default False.
        initial_centroids: Starting centroids.
        kill_empty_clusters: Remove empty clusters. Default False.
        labels_only: Output only the labels. Default False.
        max_iterations: Iteration limit. Default 1000.
        percentage: Fraction of the dataset per refined-start sampling.
            Default 0.02.
        refined_start: Bradley-Fayyad refined initial points. Default False.
        samplings: Refined-start samplings. Default 100.
        seed: Random seed (0 uses the time). Default 0.

    Returns:
        Tuple ``(centroid, output)``: one centroid per row, and the dataset
        with an appended assignment column (or just the labels).
    """
    return _KMEANS.call_with(locals())


_MEAN_SHIFT = Binding('mean_shift', [
    Param('input', Kind.MATRIX, required=True),
    Param('force_convergence', Kind.BOOL, False),
    Param('in_place', Kind.BOOL, False),
    Param('labels_only', Kind.BOOL, False),
    Param('max_iterations', Kind.INT, 1000),
    Param('radius', Kind.DOUBLE, 0.0),
], [
    Output('centroid', Kind.MATRIX),
    Output('output', Kind.MATRIX),
])


@exposes(_MEAN_SHIFT)
def mean_shift(input: MatrixInput, *,
               force_convergence: Optional[bool] = None,
               in_place: Optional[bool] = None,
               labels_only: Optional[bool] = None,
               max_iterations: Optional[int] = None,
               radius: Optional[float] = None,
               verbose: Optional[bool] = None,
               points_are_rows: Optional[bool] = None,
               copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Mean shift clustering.

    Args:
        input: Dataset to cluster.
        force_convergence: Keep iterating past ``max_iterations`` until the
            clusters converge. Default False.
        in_place: Append assignments to the input dataset. Default False.
        labels_only: Output only the labels. Default False.
        max_iterations: Iteration limit. Default 1000.
        radius: Centroids closer than this are merged; 0 or less estimates
            it. Default 0.

    Returns:
        Tuple ``(centroid, output)``.
    """
    return _MEAN_SHIFT.call_with(locals())
