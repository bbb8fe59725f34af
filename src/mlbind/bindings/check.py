"""ABI self-test binding.

``check_binding`` drives the native ``test_julia_binding`` program, which
echoes every parameter kind back with a known transformation. Use it to
confirm that an installed native library and this package agree on the
calling convention::

    >>> out = check_binding(4.0, 12, 'hello')
    >>> out[1], out[2], out[9]   # double_out, int_out, string_out
    (5.0, 13, 'hello2')
"""

from __future__ import annotations

from typing import Optional, Sequence

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import (
    IndexMatrixInput,
    IndexVectorInput,
    MatrixInput,
    MatrixWithInfo,
    Outputs,
    RawModel,
    VectorInput,
)

__all__ = ['check_binding']


_CHECK_BINDING = Binding('test_julia_binding', [
    Param('double_in', Kind.DOUBLE, required=True),
    Param('int_in', Kind.INT, required=True),
    Param('string_in', Kind.STRING, required=True),
    Param('build_model', Kind.BOOL, False),
    Param('col_in', Kind.COL),
    Param('flag1', Kind.BOOL, False),
    Param('flag2', Kind.BOOL, False),
    Param('matrix_and_info_in', Kind.MATRIX_WITH_INFO),
    Param('matrix_in', Kind.MATRIX),
    Param('model_in', Kind.RAW_MODEL, model='GaussianKernel'),
    Param('row_in', Kind.ROW),
    Param('str_vector_in', Kind.VECTOR_STR),
    Param('ucol_in', Kind.UCOL),
    Param('umatrix_in', Kind.UMATRIX),
    Param('urow_in', Kind.UROW),
    Param('vector_in', Kind.VECTOR_INT),
], [
    Output('col_out', Kind.COL),
    Output('double_out', Kind.DOUBLE),
    Output('int_out', Kind.INT),
    Output('matrix_and_info_out', Kind.MATRIX),
    Output('matrix_out', Kind.MATRIX),
    Output('model_bw_out', Kind.DOUBLE),
    Output('model_out', Kind.RAW_MODEL, 'GaussianKernel'),
    Output('row_out', Kind.ROW),
    Output('str_vector_out', Kind.VECTOR_STR),
    Output('string_out', Kind.STRING),
    Output('ucol_out', Kind.UCOL),
    Output('umatrix_out', Kind.UMATRIX),
    Output('urow_out', Kind.UROW),
    Output('vector_out', Kind.VECTOR_INT),
])


@exposes(_CHECK_BINDING)
def check_binding(double_in: float, int_in: int, string_in: str, *,
                  build_model: Optional[bool] = None,
                  col_in: Optional[VectorInput] = None,
                  flag1: Optional[bool] = None,
                  flag2: Optional[bool] = None,
                  matrix_and_info_in: Optional[MatrixWithInfo] = None,
                  matrix_in: Optional[MatrixInput] = None,
                  model_in: Optional[RawModel] = None,
                  row_in: Optional[VectorInput] = None,
                  str_vector_in: Optional[Sequence[str]] = None,
                  ucol_in: Optional[IndexVectorInput] = None,
                  umatrix_in: Optional[IndexMatrixInput] = None,
                  urow_in: Optional[IndexVectorInput] = None,
                  vector_in: Optional[Sequence[int]] = None,
                  verbose: Optional[bool] = None,
                  points_are_rows: Optional[bool] = None,
                  copy_all_inputs: Optional[bool] = None) -> Outputs:
    """
    Run the native ABI self-test.

    Args:
        double_in: Must be 4.0.
        int_in: Must be 12.
        string_in: Must be ``'hello'``.
        build_model: Return a Gaussian kernel model. Default False.
        col_in: Column vector, doubled in ``col_out``.
        flag1: Must be passed.
        flag2: Must not be passed.
        matrix_and_info_in: ``(dimension_info, matrix)``; numeric values are
            tripled in ``matrix_and_info_out``.
        matrix_in: Matrix echoed in ``matrix_out``.
        model_in: Gaussian kernel pointer; ``model_out`` doubles its
            bandwidth and ``model_bw_out`` reports the input bandwidth.
        row_in: Row vector, doubled in ``row_out``.
        str_vector_in: Strings echoed in ``str_vector_out``.
        ucol_in: Unsigned column, doubled in ``ucol_out``.
        umatrix_in: Unsigned matrix echoed in ``umatrix_out``.
        urow_in: Unsigned row, doubled in ``urow_out``.
        vector_in: Integers echoed in ``vector_out``.

    Returns:
        Tuple ``(col_out, double_out, int_out, matrix_and_info_out,
        matrix_out, model_bw_out, model_out, row_out, str_vector_out,
        string_out, ucol_out, umatrix_out, urow_out, vector_out)``.
        ``double_out`` is 5.0, ``int_out`` 13 and ``string_out``
        ``'hello2'`` when the inputs are as required.
    """
    return _CHECK_BINDING.call_with(locals())
