"""Dataset preprocessing and image conversion."""

from __future__ import annotations

from typing import Optional, Sequence

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import IndexMatrixInput, MatrixInput, Outputs
from ..models import ScalingModel

__all__ = [
    'image_converter',
    'preprocess_binarize',
    'preprocess_describe',
    'preprocess_one_hot_encoding',
    'preprocess_scale',
    'preprocess_split',
]


_IMAGE_CONVERTER = Binding('image_converter', [
    Param('input', Kind.VECTOR_STR, required=True),
    Param('channels', Kind.INT, 0),
    Param('dataset', Kind.MATRIX),
    Param('height', Kind.INT, 0),
    Param('quality', Kind.INT, 90),
    Param('save', Kind.BOOL, False),
    Param('width', Kind.INT, 0),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_IMAGE_CONVERTER)
def image_converter(input: Sequence[str], *,
                    channels: Optional[int] = None,
                    dataset: Optional[MatrixInput] = None,
                    height: Optional[int] = None,
                    quality: Optional[int] = None,
                    save: Optional[bool] = None,
                    width: Optional[int] = None,
                    verbose: Optional[bool] = None,
                    points_are_rows: Optional[bool] = None,
                    copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Load images into a matrix, or save a matrix as images.

    Args:
        input: Image file names.
        channels: Channels per image. Default 0.
        dataset: Matrix to save as images (with ``save``).
        height: Image height. Default 0.
        quality: JPEG quality, 0-100. Default 90.
        save: Save ``dataset`` to the files in ``input``. Default False.
        width: Image width. Default 0.

    Returns:
        The loaded images, one per point.
    """
    return _IMAGE_CONVERTER.call_with(locals())


_PREPROCESS_BINARIZE = Binding('preprocess_binarize', [
    Param('input', Kind.MATRIX, required=True),
    Param('dimension', Kind.INT, 0),
    Param('threshold', Kind.DOUBLE, 0.0),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_PREPROCESS_BINARIZE)
def preprocess_binarize(input: MatrixInput, *,
                        dimension: Optional[int] = None,
                        threshold: Optional[float] = None,
                        verbose: Optional[bool] = None,
                        points_are_rows: Optional[bool] = None,
                        copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Binarize values against ``threshold`` (default 0), in one dimension
    or, when ``dimension`` is omitted, in all of them."""
    return _PREPROCESS_BINARIZE.call_with(locals())


_PREPROCESS_DESCRIBE = Binding('preprocess_describe', [
    Param('input', Kind.MATRIX, required=True),
    Param('dimension', Kind.INT, 0),
    Param('population', Kind.BOOL, False),
    Param('precision', Kind.INT, 4),
    Param('row_major', Kind.BOOL, False),
    Param('width', Kind.INT, 8),
], [])


@exposes(_PREPROCESS_DESCRIBE)
def preprocess_describe(input: MatrixInput, *,
                        dimension: Optional[int] = None,
                        population: Optional[bool] = None,
                        precision: Optional[int] = None,
                        row_major: Optional[bool] = None,
                        width: Optional[int] = None,
                        verbose: Optional[bool] = None,
                        points_are_rows: Optional[bool] = None,
                        copy_all_inputs: Optional[bool] = None) -> None:
    """Print descriptive statistics of a dataset.

    The table goes to the native informational output, so pass
    ``verbose=True`` to see it. Nothing is returned.
    """
    return _PREPROCESS_DESCRIBE.call_with(locals())


_PREPROCESS_ONE_HOT_ENCODING = Binding('preprocess_one_hot_encoding', [
    Param('dimensions', Kind.VECTOR_INT, required=True),
    Param('input', Kind.MATRIX, required=True),
], [
    Output('output', Kind.MATRIX),
])


@exposes(_PREPROCESS_ONE_HOT_ENCODING)
def preprocess_one_hot_encoding(dimensions: Sequence[int], input: MatrixInput, *,
                                verbose: Optional[bool] = None,
                                points_are_rows: Optional[bool] = None,
                                copy_all_inputs: Optional[bool] = None) -> Outputs:
    """One-hot encode the given dimensions of ``input``."""
    return _PREPROCESS_ONE_HOT_ENCODING.call_with(locals())


_PREPROCESS_SCALE = Binding('preprocess_scale', [
    Param('input', Kind.MATRIX, required=True),
    Param('epsilon', Kind.DOUBLE, 1e-6),
    Param('input_model', Kind.MODEL, model=ScalingModel),
    Param('inverse_scaling', Kind.BOOL, False),
    Param('max_value', Kind.INT, 1),
    Param('min_value', Kind.INT, 0),
    Param('scaler_method', Kind.STRING, 'standard_scaler'),
    Param('seed', Kind.INT, 0),
], [
    Output('output', Kind.MATRIX),
    Output('output_model', Kind.MODEL, ScalingModel),
])


@exposes(_PREPROCESS_SCALE)
def preprocess_scale(input: MatrixInput, *,
                     epsilon: Optional[float] = None,
                     input_model: Optional[ScalingModel] = None,
                     inverse_scaling: Optional[bool] = None,
                     max_value: Optional[int] = None,
                     min_value: Optional[int] = None,
                     scaler_method: Optional[str] = None,
                     seed: Optional[int] = None,
                     verbose: Optional[bool] = None,
                     points_are_rows: Optional[bool] = None,
                     copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Scale a dataset, or undo a previous scaling.

    Args:
        input: Dataset.
        epsilon: PCA/ZCA whitening regularization. Default 1e-6.
        input_model: Scaling model to apply.
        inverse_scaling: Undo the scaling of ``input_model``. Default False.
        max_value: Upper end of the min-max range. Default 1.
        min_value: Lower end of the min-max range. Default 0.
        scaler_method: ``'standard_scaler'``, ``'min_max_scaler'``,
            ``'mean_normalization'``, ``'max_abs_scaler'``,
            ``'pca_whitening'`` or ``'zca_whitening'``.
            Default ``'standard_scaler'``.
        seed: Random seed (0 uses the time). Default 0.

    Returns:
        Tuple ``(output, output_model)``.
    """
    return _PREPROCESS_SCALE.call_with(locals())


_PREPROCESS_SPLIT = Binding('preprocess_split', [
    Param('input', Kind.MATRIX, required=True),
    Param('input_labels', Kind.UMATRIX),
    Param('seed', Kind.INT, 0),
    Param('test_ratio', Kind.DOUBLE, 0.2),
], [
    Output('test', Kind.MATRIX),
    Output('test_labels', Kind.UMATRIX),
    Output('training', Kind.MATRIX),
    Output('training_labels', Kind.UMATRIX),
])


@exposes(_PREPROCESS_SPLIT)
def preprocess_split(input: MatrixInput, *,
                     input_labels: Optional[IndexMatrixInput] = None,
                     seed: Optional[int] = None,
                     test_ratio: Optional[float] = None,
                     verbose: Optional[bool] = None,
                     points_are_rows: Optional[bool] = None,
                     copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Split a dataset (and its labels) into training and test sets.

    Args:
        input: Dataset.
        input_labels: Labels, shaped like a one-dimensional matrix.
        seed: Random seed (0 uses the time). Default 0.
        test_ratio: Fraction of points in the test set. Default 0.2.

    Returns:
        Tuple ``(test, test_labels, training, training_labels)``.
    """
    return _PREPROCESS_SPLIT.call_with(locals())
