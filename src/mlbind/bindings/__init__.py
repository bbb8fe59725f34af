"""
Public binding functions, one per mlpack program.

Required arguments are positional; everything else is keyword-only and
defaults to None, which leaves the parameter unset so the native default
applies. Every function also accepts:

    verbose: Print native informational output.
    points_are_rows: Matrices hold one point per row (the numpy
        convention). Outputs follow the same convention.
    copy_all_inputs: Lend private copies of input arrays instead of the
        caller's buffers.

Each of the three falls back to ``mlbind.config.call`` when omitted.
"""

from .check import check_binding
from .classification import (
    adaboost,
    decision_stump,
    decision_tree,
    hoeffding_tree,
    linear_svm,
    logistic_regression,
    nbc,
    perceptron,
    random_forest,
    softmax_regression,
)
from .clustering import dbscan, emst, kmeans, mean_shift
from .decomposition import (
    cf,
    kernel_pca,
    local_coordinate_coding,
    nmf,
    pca,
    radical,
    sparse_coding,
)
from .density import det, gmm_generate, gmm_probability, gmm_train, kde
from .hmm import hmm_generate, hmm_loglik, hmm_train, hmm_viterbi
from .metric_learning import lmnn, nca
from .neighbors import approx_kfn, fastmks, kfn, knn, krann, lsh
from .preprocessing import (
    image_converter,
    preprocess_binarize,
    preprocess_describe,
    preprocess_one_hot_encoding,
    preprocess_scale,
    preprocess_split,
)
from .regression import bayesian_linear_regression, lars, linear_regression

__all__ = [
    # Classification
    "adaboost",
    "decision_stump",
    "decision_tree",
    "hoeffding_tree",
    "linear_svm",
    "logistic_regression",
    "nbc",
    "perceptron",
    "random_forest",
    "softmax_regression",
    # Regression
    "bayesian_linear_regression",
    "lars",
    "linear_regression",
    # Clustering
    "dbscan",
    "emst",
    "kmeans",
    "mean_shift",
    # Density estimation
    "det",
    "gmm_generate",
    "gmm_probability",
    "gmm_train",
    "kde",
    # Hidden Markov models
    "hmm_generate",
    "hmm_loglik",
    "hmm_train",
    "hmm_viterbi",
    # Neighbor search
    "approx_kfn",
    "fastmks",
    "kfn",
    "knn",
    "krann",
    "lsh",
    # Decomposition
    "cf",
    "kernel_pca",
    "local_coordinate_coding",
    "nmf",
    "pca",
    "radical",
    "sparse_coding",
    # Metric learning
    "lmnn",
    "nca",
    # Preprocessing
    "image_converter",
    "preprocess_binarize",
    "preprocess_describe",
    "preprocess_one_hot_encoding",
    "preprocess_scale",
    "preprocess_split",
    # Self-test
    "check_binding",
]
