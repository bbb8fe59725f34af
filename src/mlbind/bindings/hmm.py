"""Hidden Markov models."""

from __future__ import annotations

from typing import Optional

from .._binding import Binding, Kind, Output, Param, exposes
from .._typing import MatrixInput, Outputs
from ..models import HMMModel

__all__ = ['hmm_generate', 'hmm_loglik', 'hmm_train', 'hmm_viterbi']


_HMM_GENERATE = Binding('hmm_generate', [
    Param('length', Kind.INT, required=True),
    Param('model', Kind.MODEL, model=HMMModel, required=True),
    Param('seed', Kind.INT, 0),
    Param('start_state', Kind.INT, 0),
], [
    Output('output', Kind.MATRIX),
    Output('state', Kind.UMATRIX),
])


@exposes(_HMM_GENERATE)
def hmm_generate(length: int, model: HMMModel, *,
                 seed: Optional[int] = None,
                 start_state: Optional[int] = None,
                 verbose: Optional[bool] = None,
                 points_are_rows: Optional[bool] = None,
                 copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Generate an observation sequence and its hidden states.

    Returns:
        Tuple ``(output, state)``.
    """
    return _HMM_GENERATE.call_with(locals())


_HMM_LOGLIK = Binding('hmm_loglik', [
    Param('input', Kind.MATRIX, required=True),
    Param('input_model', Kind.MODEL, model=HMMModel, required=True),
], [
    Output('log_likelihood', Kind.DOUBLE),
])


@exposes(_HMM_LOGLIK)
def hmm_loglik(input: MatrixInput, input_model: HMMModel, *,
               verbose: Optional[bool] = None,
               points_are_rows: Optional[bool] = None,
               copy_all_inputs: Optional[bool] = None) -> float:
    """Log-likelihood of an observation sequence under a trained HMM."""
    return _HMM_LOGLIK.call_with(locals())


_HMM_TRAIN = Binding('hmm_train', [
    Param('input_file', Kind.STRING, required=True),
    Param('batch', Kind.BOOL, False),
    Param('gaussians', Kind.INT, 0),
    Param('input_model', Kind.MODEL, model=HMMModel),
    Param('labels_file', Kind.STRING, ''),
    Param('seed', Kind.INT, 0),
    Param('states', Kind.INT, 0),
    Param('tolerance', Kind.DOUBLE, 1e-5),
    Param('type', Kind.STRING, 'gaussian', arg='type_'),
], [
    Output('output_model', Kind.MODEL, HMMModel),
])


@exposes(_HMM_TRAIN)
def hmm_train(input_file: str, *,
              batch: Optional[bool] = None,
              gaussians: Optional[int] = None,
              input_model: Optional[HMMModel] = None,
              labels_file: Optional[str] = None,
              seed: Optional[int] = None,
              states: Optional[int] = None,
              tolerance: Optional[float] = None,
              type_: Optional[str] = None,
              verbose: Optional[bool] = None,
              points_are_rows: Optional[bool] = None,
              copy_all_inputs: Optional[bool] = None) -> HMMModel:
    """Train an HMM with Baum-Welch, or with labels when given.

    Args:
        input_file: File of observations (a list of files with ``batch``).
        batch: ``input_file`` and ``labels_file`` list sequence files.
            Default False.
        gaussians: Gaussians per GMM state (``type_='gmm'``). Default 0.
        input_model: Model to start training from.
        labels_file: Hidden states for labeled training.
        seed: Random seed (0 uses the time). Default 0.
        states: Number of hidden states. Default 0.
        tolerance: Baum-Welch tolerance. Default 1e-5.
        type_: ``'discrete'``, ``'gaussian'``, ``'diag_gmm'`` or ``'gmm'``
            (native key ``type``). Default ``'gaussian'``.

    Returns:
        The trained model.
    """
    return _HMM_TRAIN.call_with(locals())


_HMM_VITERBI = Binding('hmm_viterbi', [
    Param('input', Kind.MATRIX, required=True),
    Param('input_model', Kind.MODEL, model=HMMModel, required=True),
], [
    Output('output', Kind.UMATRIX),
])


@exposes(_HMM_VITERBI)
def hmm_viterbi(input: MatrixInput, input_model: HMMModel, *,
                verbose: Optional[bool] = None,
                points_are_rows: Optional[bool] = None,
                copy_all_inputs: Optional[bool] = None) -> Outputs:
    """Most probable hidden state sequence for the observations."""
    return _HMM_VITERBI.call_with(locals())
