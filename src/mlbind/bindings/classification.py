"""Classifiers: boosting, trees, linear models, naive Bayes, perceptron."""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import IndexVectorInput, MatrixInput, MatrixWithInfo, Outputs, RawModel
from ..models import (
    AdaBoostModel,
    DecisionTreeModel,
    DSModel,
    HoeffdingTreeModel,
    LinearSVMModel,
    LogisticRegression,
    NBCModel,
    RandomForestModel,
    SoftmaxRegression,
)

__all__ = [
    'adaboost',
    'decision_stump',
    'decision_tree',
    'hoeffding_tree',
    'linear_svm',
    'logistic_regression',
    'nbc',
    'perceptron',
    'random_forest',
    'softmax_regression',
]


# =============================================================================
# AdaBoost
# =============================================================================

_ADABOOST = Binding('adaboost', [
    Param('input_model', Kind.MODEL, model=AdaBoostModel),
    Param('iterations', Kind.INT, 1000),
    Param('labels', Kind.UROW),
    Param('test', Kind.MATRIX),
    Param('tolerance', Kind.DOUBLE, 1e-10),
    Param('training', Kind.MATRIX),
    Param('weak_learner', Kind.STRING, 'decision_stump'),
], [
    Output('output', Kind.UROW),
    Output('output_model', Kind.MODEL, AdaBoostModel),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_ADABOOST)
def adaboost(*,
             input_model: Optional[AdaBoostModel] = None,
             iterations: Optional[int] = None,
             labels: Optional[IndexVectorInput] = None,
             test: Optional[MatrixInput] = None,
             tolerance: Optional[float] = None,
             training: Optional[MatrixInput] = None,
             weak_learner: Optional[str] = None,
             verbose: Optional[bool] = None,
             points_are_rows: Optional[bool] = None,
             copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train an AdaBoost classifier, or classify points with one.

    Either ``training`` and ``labels`` or ``input_model`` must be given.
    With ``test``, predictions are computed for the test points.

    Args:
        input_model: Previously trained AdaBoost model.
        iterations: Maximum number of boosting iterations (0 runs until
            convergence). Default 1000.
        labels: Labels for the training set.
        test: Test dataset.
        tolerance: Tolerance for change in the weighted error during
            training. Default 1e-10.
        training: Training dataset.
        weak_learner: ``'decision_stump'`` or ``'perceptron'``.
            Default ``'decision_stump'``.

    Returns:
        Tuple ``(output, output_model, predictions, probabilities)``.
        ``output`` duplicates ``predictions`` and is kept for compatibility.
    """
    return _ADABOOST.call_with(locals())


# =============================================================================
# Decision stump
# =============================================================================

_DECISION_STUMP = Binding('decision_stump', [
    Param('bucket_size', Kind.INT, 6),
    Param('input_model', Kind.MODEL, model=DSModel),
    Param('labels', Kind.UROW),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, DSModel),
    Output('predictions', Kind.UROW),
])


@exposes(_DECISION_STUMP)
def decision_stump(*,
                   bucket_size: Optional[int] = None,
                   input_model: Optional[DSModel] = None,
                   labels: Optional[IndexVectorInput] = None,
                   test: Optional[MatrixInput] = None,
                   training: Optional[MatrixInput] = None,
                   verbose: Optional[bool] = None,
                   points_are_rows: Optional[bool] = None,
                   copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a decision stump or predict with one.

    Args:
        bucket_size: Minimum number of training points in each bucket.
            Default 6.
        input_model: Decision stump to load.
        labels: Training labels. When omitted the last dimension of
            ``training`` holds the labels.
        test: Points to predict.
        training: Training dataset.

    Returns:
        Tuple ``(output_model, predictions)``.
    """
    return _DECISION_STUMP.call_with(locals())


# =============================================================================
# Decision tree
# =============================================================================

_DECISION_TREE = Binding('decision_tree', [
    Param('input_model', Kind.MODEL, model=DecisionTreeModel),
    Param('labels', Kind.UROW),
    Param('maximum_depth', Kind.INT, 0),
    Param('minimum_gain_split', Kind.DOUBLE, 1e-7),
    Param('minimum_leaf_size', Kind.INT, 20),
    Param('print_training_accuracy', Kind.BOOL, False),
    Param('print_training_error', Kind.BOOL, False),
    Param('test', Kind.MATRIX_WITH_INFO),
    Param('test_labels', Kind.UROW),
    Param('training', Kind.MATRIX_WITH_INFO),
    Param('weights', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, DecisionTreeModel),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_DECISION_TREE)
def decision_tree(*,
                  input_model: Optional[DecisionTreeModel] = None,
                  labels: Optional[IndexVectorInput] = None,
                  maximum_depth: Optional[int] = None,
                  minimum_gain_split: Optional[float] = None,
                  minimum_leaf_size: Optional[int] = None,
                  print_training_accuracy: Optional[bool] = None,
                  print_training_error: Optional[bool] = None,
                  test: Optional[MatrixWithInfo] = None,
                  test_labels: Optional[IndexVectorInput] = None,
                  training: Optional[MatrixWithInfo] = None,
                  weights: Optional[MatrixInput] = None,
                  verbose: Optional[bool] = None,
                  points_are_rows: Optional[bool] = None,
                  copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a decision tree on possibly categorical data, or predict with one.

    ``training`` and ``test`` are ``(dimension_info, matrix)`` pairs, where
    ``dimension_info[i]`` is True when dimension ``i`` is categorical.

    Args:
        input_model: Pre-trained decision tree.
        labels: Training labels.
        maximum_depth: Maximum tree depth (0 means no limit). Default 0.
        minimum_gain_split: Minimum gain for node splitting. Default 1e-7.
        minimum_leaf_size: Minimum number of points in a leaf. Default 20.
        print_training_accuracy: Print the training accuracy. Default False.
        print_training_error: Deprecated alias of print_training_accuracy.
        test: Test dataset with dimension info.
        test_labels: Test labels, for accuracy reporting.
        training: Training dataset with dimension info.
        weights: Weight of each training label.

    Returns:
        Tuple ``(output_model, predictions, probabilities)``.
    """
    return _DECISION_TREE.call_with(locals())


# =============================================================================
# Hoeffding tree
# =============================================================================

_HOEFFDING_TREE = Binding('hoeffding_tree', [
    Param('batch_mode', Kind.BOOL, False),
    Param('bins', Kind.INT, 10),
    Param('confidence', Kind.DOUBLE, 0.95),
    Param('info_gain', Kind.BOOL, False),
    Param('input_model', Kind.MODEL, model=HoeffdingTreeModel),
    Param('labels', Kind.UROW),
    Param('max_samples', Kind.INT, 5000),
    Param('min_samples', Kind.INT, 100),
    Param('numeric_split_strategy', Kind.STRING, 'binary'),
    Param('observations_before_binning', Kind.INT, 100),
    Param('passes', Kind.INT, 1),
    Param('test', Kind.MATRIX_WITH_INFO),
    Param('test_labels', Kind.UROW),
    Param('training', Kind.MATRIX_WITH_INFO),
], [
    Output('output_model', Kind.MODEL, HoeffdingTreeModel),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_HOEFFDING_TREE)
def hoeffding_tree(*,
                   batch_mode: Optional[bool] = None,
                   bins: Optional[int] = None,
                   confidence: Optional[float] = None,
                   info_gain: Optional[bool] = None,
                   input_model: Optional[HoeffdingTreeModel] = None,
                   labels: Optional[IndexVectorInput] = None,
                   max_samples: Optional[int] = None,
                   min_samples: Optional[int] = None,
                   numeric_split_strategy: Optional[str] = None,
                   observations_before_binning: Optional[int] = None,
                   passes: Optional[int] = None,
                   test: Optional[MatrixWithInfo] = None,
                   test_labels: Optional[IndexVectorInput] = None,
                   training: Optional[MatrixWithInfo] = None,
                   verbose: Optional[bool] = None,
                   points_are_rows: Optional[bool] = None,
                   copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a streaming Hoeffding tree, or predict with one.

    Args:
        batch_mode: Consider samples as a batch instead of a stream.
            Default False.
        bins: Bins per numeric split for the 'domingos' strategy. Default 10.
        confidence: Confidence before splitting, in (0, 1). Default 0.95.
        info_gain: Use information gain instead of Gini impurity.
            Default False.
        input_model: Previously trained tree.
        labels: Training labels.
        max_samples: Maximum samples before splitting. Default 5000.
        min_samples: Minimum samples before splitting. Default 100.
        numeric_split_strategy: ``'domingos'`` or ``'binary'``.
            Default ``'binary'``.
        observations_before_binning: Samples seen before binning with the
            'domingos' strategy. Default 100.
        passes: Passes over the dataset. Default 1.
        test: Test dataset with dimension info.
        test_labels: Test labels.
        training: Training dataset with dimension info.

    Returns:
        Tuple ``(output_model, predictions, probabilities)``.
    """
    return _HOEFFDING_TREE.call_with(locals())


# =============================================================================
# Linear SVM
# =============================================================================

_LINEAR_SVM = Binding('linear_svm', [
    Param('delta', Kind.DOUBLE, 1.0),
    Param('epochs', Kind.INT, 50),
    Param('input_model', Kind.MODEL, model=LinearSVMModel),
    Param('labels', Kind.UROW),
    Param('lambda', Kind.DOUBLE, 0.0001, arg='lambda_'),
    Param('max_iterations', Kind.INT, 10000),
    Param('no_intercept', Kind.BOOL, False),
    Param('num_classes', Kind.INT, 0),
    Param('optimizer', Kind.STRING, 'lbfgs'),
    Param('seed', Kind.INT, 0),
    Param('shuffle', Kind.BOOL, False),
    Param('step_size', Kind.DOUBLE, 0.01),
    Param('test', Kind.MATRIX),
    Param('test_labels', Kind.UROW),
    Param('tolerance', Kind.DOUBLE, 1e-10),
    Param('training', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, LinearSVMModel),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_LINEAR_SVM)
def linear_svm(*,
               delta: Optional[float] = None,
               epochs: Optional[int] = None,
               input_model: Optional[LinearSVMModel] = None,
               labels: Optional[IndexVectorInput] = None,
               lambda_: Optional[float] = None,
               max_iterations: Optional[int] = None,
               no_intercept: Optional[bool] = None,
               num_classes: Optional[int] = None,
               optimizer: Optional[str] = None,
               seed: Optional[int] = None,
               shuffle: Optional[bool] = None,
               step_size: Optional[float] = None,
               test: Optional[MatrixInput] = None,
               test_labels: Optional[IndexVectorInput] = None,
               tolerance: Optional[float] = None,
               training: Optional[MatrixInput] = None,
               verbose: Optional[bool] = None,
               points_are_rows: Optional[bool] = None,
               copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a multiclass linear SVM, or classify with one.

    Args:
        delta: Margin between the correct class and other classes. Default 1.
        epochs: Maximum full epochs for 'psgd'. Default 50.
        input_model: Existing model.
        labels: Training labels.
        lambda_: L2 regularization (native key ``lambda``). Default 0.0001.
        max_iterations: Optimizer iteration limit (0 means none).
            Default 10000.
        no_intercept: Do not add an intercept term. Default False.
        num_classes: Number of classes; 0 infers it from labels. Default 0.
        optimizer: ``'lbfgs'`` or ``'psgd'``. Default ``'lbfgs'``.
        seed: Random seed (0 uses the time). Default 0.
        shuffle: Do not shuffle the visiting order for parallel SGD.
            Default False.
        step_size: Step size for parallel SGD. Default 0.01.
        test: Test dataset.
        test_labels: Test labels.
        tolerance: Optimizer convergence tolerance. Default 1e-10.
        training: Training dataset.

    Returns:
        Tuple ``(output_model, predictions, probabilities)``.
    """
    return _LINEAR_SVM.call_with(locals())


# =============================================================================
# Logistic regression
# =============================================================================

_LOGISTIC_REGRESSION = Binding('logistic_regression', [
    Param('batch_size', Kind.INT, 64),
    Param('decision_boundary', Kind.DOUBLE, 0.5),
    Param('input_model', Kind.MODEL, model=LogisticRegression),
    Param('labels', Kind.UROW),
    Param('lambda', Kind.DOUBLE, 0.0, arg='lambda_'),
    Param('max_iterations', Kind.INT, 10000),
    Param('optimizer', Kind.STRING, 'lbfgs'),
    Param('print_training_accuracy', Kind.BOOL, False),
    Param('step_size', Kind.DOUBLE, 0.01),
    Param('test', Kind.MATRIX),
    Param('tolerance', Kind.DOUBLE, 1e-10),
    Param('training', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, LogisticRegression),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_LOGISTIC_REGRESSION)
def logistic_regression(*,
                        batch_size: Optional[int] = None,
                        decision_boundary: Optional[float] = None,
                        input_model: Optional[LogisticRegression] = None,
                        labels: Optional[IndexVectorInput] = None,
                        lambda_: Optional[float] = None,
                        max_iterations: Optional[int] = None,
                        optimizer: Optional[str] = None,
                        print_training_accuracy: Optional[bool] = None,
                        step_size: Optional[float] = None,
                        test: Optional[MatrixInput] = None,
                        tolerance: Optional[float] = None,
                        training: Optional[MatrixInput] = None,
                        verbose: Optional[bool] = None,
                        points_are_rows: Optional[bool] = None,
                        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train an L2-regularized two-class logistic regression model, or
    classify with one.

    Example:
        >>> model, _, _ = logistic_regression(training=x, labels=y)
        >>> _, predictions, _ = logistic_regression(input_model=model, test=x_test)

    Args:
        batch_size: Batch size for SGD. Default 64.
        decision_boundary: Points whose logistic value is below this are
            class 0. Default 0.5.
        input_model: Existing model.
        labels: Training labels (0 or 1).
        lambda_: L2 regularization (native key ``lambda``). Default 0.
        max_iterations: Optimizer iteration limit (0 means none).
            Default 10000.
        optimizer: ``'lbfgs'`` or ``'sgd'``. Default ``'lbfgs'``.
        print_training_accuracy: Print training accuracy (needs verbose).
            Default False.
        step_size: Step size for SGD. Default 0.01.
        test: Test dataset.
        tolerance: Optimizer convergence tolerance. Default 1e-10.
        training: Training dataset.

    Returns:
        Tuple ``(output_model, predictions, probabilities)``.
    """
    return _LOGISTIC_REGRESSION.call_with(locals())


# =============================================================================
# Naive Bayes
# =============================================================================

_NBC = Binding('nbc', [
    Param('incremental_variance', Kind.BOOL, False),
    Param('input_model', Kind.MODEL, model=NBCModel),
    Param('labels', Kind.UROW),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
], [
    Output('output', Kind.UROW),
    Output('output_model', Kind.MODEL, NBCModel),
    Output('output_probs', Kind.MATRIX),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_NBC)
def nbc(*,
        incremental_variance: Optional[bool] = None,
        input_model: Optional[NBCModel] = None,
        labels: Optional[IndexVectorInput] = None,
        test: Optional[MatrixInput] = None,
        training: Optional[MatrixInput] = None,
        verbose: Optional[bool] = None,
        points_are_rows: Optional[bool] = None,
        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Parametric naive Bayes classifier.

    Returns:
        Tuple ``(output, output_model, output_probs, predictions,
        probabilities)``; ``output`` and ``output_probs`` are deprecated
        duplicates of ``predictions`` and ``probabilities``.
    """
    return _NBC.call_with(locals())


# =============================================================================
# Perceptron
# =============================================================================

_PERCEPTRON = Binding('perceptron', [
    Param('input_model', Kind.RAW_MODEL, model='PerceptronModel'),
    Param('labels', Kind.UROW),
    Param('max_iterations', Kind.INT, 1000),
    Param('test', Kind.MATRIX),
    Param('training', Kind.MATRIX),
], [
    Output('output', Kind.UROW),
    Output('output_model', Kind.RAW_MODEL, 'PerceptronModel'),
    Output('predictions', Kind.UROW),
])


@exposes(_PERCEPTRON)
def perceptron(*,
               input_model: Optional[RawModel] = None,
               labels: Optional[IndexVectorInput] = None,
               max_iterations: Optional[int] = None,
               test: Optional[MatrixInput] = None,
               training: Optional[MatrixInput] = None,
               verbose: Optional[bool] = None,
               points_are_rows: Optional[bool] = None,
               copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a single-layer perceptron, or classify with one.

    The perceptron model crosses the ABI untyped: ``output_model`` is a bare
    pointer with no finalizer, and ``input_model`` accepts such a pointer.
    Wrap it with ``PerceptronModel(ptr, finalize=True)`` to own it.

    Args:
        input_model: Perceptron model pointer.
        labels: Training labels.
        max_iterations: Maximum number of iterations. Default 1000.
        test: Test dataset.
        training: Training dataset.

    Returns:
        Tuple ``(output, output_model, predictions)``.
    """
    return _PERCEPTRON.call_with(locals())


# =============================================================================
# Random forest
# =============================================================================

_RANDOM_FOREST = Binding('random_forest', [
    Param('input_model', Kind.MODEL, model=RandomForestModel),
    Param('labels', Kind.UROW),
    Param('maximum_depth', Kind.INT, 0),
    Param('minimum_gain_split', Kind.DOUBLE, 0.0),
    Param('minimum_leaf_size', Kind.INT, 1),
    Param('num_trees', Kind.INT, 10),
    Param('print_training_accuracy', Kind.BOOL, False),
    Param('seed', Kind.INT, 0),
    Param('subspace_dim', Kind.INT, 0),
    Param('test', Kind.MATRIX),
    Param('test_labels', Kind.UROW),
    Param('training', Kind.MATRIX),
    Param('warm_start', Kind.BOOL, False),
], [
    Output('output_model', Kind.MODEL, RandomForestModel),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_RANDOM_FOREST)
def random_forest(*,
                  input_model: Optional[RandomForestModel] = None,
                  labels: Optional[IndexVectorInput] = None,
                  maximum_depth: Optional[int] = None,
                  minimum_gain_split: Optional[float] = None,
                  minimum_leaf_size: Optional[int] = None,
                  num_trees: Optional[int] = None,
                  print_training_accuracy: Optional[bool] = None,
                  seed: Optional[int] = None,
                  subspace_dim: Optional[int] = None,
                  test: Optional[MatrixInput] = None,
                  test_labels: Optional[IndexVectorInput] = None,
                  training: Optional[MatrixInput] = None,
                  warm_start: Optional[bool] = None,
                  verbose: Optional[bool] = None,
                  points_are_rows: Optional[bool] = None,
                  copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a random forest, or classify with one.

    Args:
        input_model: Pre-trained random forest.
        labels: Training labels.
        maximum_depth: Maximum tree depth (0 means no limit). Default 0.
        minimum_gain_split: Minimum gain to split a node. Default 0.
        minimum_leaf_size: Minimum points per leaf. Default 1.
        num_trees: Number of trees. Default 10.
        print_training_accuracy: Print training accuracy (needs verbose).
            Default False.
        seed: Random seed (0 uses the time). Default 0.
        subspace_dim: Random subspace size per split; 0 picks the square
            root of the dimensionality. Default 0.
        test: Test dataset.
        test_labels: Test labels, for accuracy reporting.
        training: Training dataset.
        warm_start: With ``training`` and ``input_model``, grow more trees
            on the existing forest. Default False.

    Returns:
        Tuple ``(output_model, predictions, probabilities)``.
    """
    return _RANDOM_FOREST.call_with(locals())


# =============================================================================
# Softmax regression
# =============================================================================

_SOFTMAX_REGRESSION = Binding('softmax_regression', [
    Param('input_model', Kind.MODEL, model=SoftmaxRegression),
    Param('labels', Kind.UROW),
    Param('lambda', Kind.DOUBLE, 0.0001, arg='lambda_'),
    Param('max_iterations', Kind.INT, 400),
    Param('no_intercept', Kind.BOOL, False),
    Param('number_of_classes', Kind.INT, 0),
    Param('test', Kind.MATRIX),
    Param('test_labels', Kind.UROW),
    Param('training', Kind.MATRIX),
], [
    Output('output_model', Kind.MODEL, SoftmaxRegression),
    Output('predictions', Kind.UROW),
    Output('probabilities', Kind.MATRIX),
])


@exposes(_SOFTMAX_REGRESSION)
def softmax_regression(*,
                       input_model: Optional[SoftmaxRegression] = None,
                       labels: Optional[IndexVectorInput] = None,
                       lambda_: Optional[float] = None,
                       max_iterations: Optional[int] = None,
                       no_intercept: Optional[bool] = None,
                       number_of_classes: Optional[int] = None,
                       test: Optional[MatrixInput] = None,
                       test_labels: Optional[IndexVectorInput] = None,
                       training: Optional[MatrixInput] = None,
                       verbose: Optional[bool] = None,
                       points_are_rows: Optional[bool] = None,
                       copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Train a softmax regression classifier, or classify with one.

    Args:
        input_model: Existing model.
        labels: Training labels.
        lambda_: L2 regularization (native key ``lambda``). Default 0.0001.
        max_iterations: Iteration limit. Default 400.
        no_intercept: Do not add an intercept term. Default False.
        number_of_classes: Number of classes; 0 infers it. Default 0.
        test: Test dataset.
        test_labels: Test labels.
        training: Training dataset.

    Returns:
        Tuple ``(output_model, predictions, probabilities)``.
    """
    return _SOFTMAX_REGRESSION.call_with(locals())
