"""
Binding declarations and the shared invocation sequence.

Each public binding function is a thin shim over a :class:`Binding` that
lists its parameters and outputs. Invoking it:

1. creates one parameter set and one timer object,
2. binds every argument that was provided (omitted ones stay absent, so the
   native default applies),
3. marks every output as passed and calls ``mlpack_<name>``,
4. raises :class:`BindingError` if the call failed, otherwise reads the
   outputs back in declaration order,
5. destroys the parameter set and timers on every exit path.
"""

from __future__ import annotations

import enum
import logging
from ctypes import c_bool, c_void_p
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from ._kernel import marshal
from ._kernel.params import ParameterSet, Timers, disable_verbose, enable_verbose
from ._kernel.types import check_success
from ._ownership import ModelRegistry, OwnedBuffers
from ._config import config

__all__ = ['Kind', 'Param', 'Output', 'Binding', 'exposes', 'registered']

logger = logging.getLogger("mlbind.binding")

_CALL_OPTIONS = ('verbose', 'points_are_rows', 'copy_all_inputs')

# Public wrapper functions keyed by binding name
_functions: Dict[str, Callable] = {}


def exposes(binding: "Binding") -> Callable[[Callable], Callable]:
    """Mark a function as the public wrapper of ``binding``."""
    def decorator(func: Callable) -> Callable:
        func.binding = binding
        _functions[binding.name] = func
        return func
    return decorator


def registered() -> Dict[str, Callable]:
    """All public binding functions keyed by binding name."""
    return dict(_functions)


class Kind(enum.Enum):
    """Parameter-set value types."""
    BOOL = 'bool'
    INT = 'int'
    DOUBLE = 'double'
    STRING = 'string'
    MATRIX = 'matrix'                      # float64, points x dims on the host
    UMATRIX = 'umatrix'                    # size_t matrix
    MATRIX_WITH_INFO = 'matrix_with_info'  # (dimension_info, matrix)
    ROW = 'Row'
    COL = 'Col'
    UROW = 'URow'
    UCOL = 'UCol'
    VECTOR_INT = 'vector_int'
    VECTOR_STR = 'vector_str'
    MODEL = 'model'                        # typed ModelHandle
    RAW_MODEL = 'raw_model'                # untyped pointer


_VECTOR_KINDS = (Kind.ROW, Kind.COL, Kind.UROW, Kind.UCOL)


@dataclass(frozen=True)
class Param:
    """
    One input parameter of a binding.

    Attributes:
        key: Parameter-set key.
        kind: Value type.
        default: Native default, for documentation only. It is never sent;
            an omitted argument leaves the key absent.
        model: ModelHandle subclass for MODEL, native type stem for RAW_MODEL.
        required: Positional argument of the Python function.
        arg: Python argument name when ``key`` is a reserved word.
    """
    key: str
    kind: Kind
    default: Any = None
    model: Any = None
    required: bool = False
    arg: Optional[str] = None

    @property
    def arg_name(self) -> str:
        return self.arg or self.key


@dataclass(frozen=True)
class Output:
    """One output of a binding, read back after a successful call."""
    key: str
    kind: Kind
    model: Any = None


class Binding:
    """
    Declaration of one native binding.

    Args:
        name: Binding name; the library is ``mlpack_julia_<name>`` and the
            entry point ``mlpack_<name>``.
        params: Inputs, in documentation order.
        outputs: Outputs, in the order they are returned.
    """

    def __init__(self, name: str, params: Sequence[Param], outputs: Sequence[Output]):
        self.name = name
        self.params: Tuple[Param, ...] = tuple(params)
        self.outputs: Tuple[Output, ...] = tuple(outputs)
        self._by_arg: Dict[str, Param] = {p.arg_name: p for p in self.params}

    @property
    def entry_point(self) -> str:
        return f'mlpack_{self.name}'

    def param(self, arg_name: str) -> Param:
        return self._by_arg[arg_name]

    def __repr__(self) -> str:
        return f"Binding({self.name!r}, params={len(self.params)}, outputs={len(self.outputs)})"

    def call_with(self, namespace: Mapping[str, Any]):
        """Invoke with a wrapper function's ``locals()``.

        The per-call options are split off; every other name is an argument.
        """
        arguments = {k: v for k, v in namespace.items() if k not in _CALL_OPTIONS}
        options = {k: namespace.get(k) for k in _CALL_OPTIONS}
        return self(arguments, **options)

    # -------------------------------------------------------------------------
    # Invocation
    # -------------------------------------------------------------------------

    def _check_arguments(self, arguments: Mapping[str, Any]) -> None:
        unknown = sorted(set(arguments) - set(self._by_arg))
        if unknown:
            raise TypeError(f"{self.name}() got unexpected arguments: {', '.join(unknown)}")
        for param in self.params:
            if param.required and arguments.get(param.arg_name) is None:
                raise TypeError(f"{self.name}() missing required argument: '{param.arg_name}'")

    def __call__(self, arguments: Mapping[str, Any], *,
                 verbose: Optional[bool] = None,
                 points_are_rows: Optional[bool] = None,
                 copy_all_inputs: Optional[bool] = None):
        """
        Run the binding.

        Args:
            arguments: Python argument name to value. None means omitted.
            verbose: Native informational output; defaults to the config.
            points_are_rows: Host matrices hold one point per row; defaults
                to the config.
            copy_all_inputs: Lend private copies of input buffers; defaults
                to the config.

        Returns:
            The outputs as a tuple, the single output itself, or None when
            the binding has no outputs.

        Raises:
            TypeError: Unknown or missing arguments, or a value of the wrong type.
            ValueError: Matrices or vectors of the wrong shape.
            BindingError: The native call reported failure.
        """
        self._check_arguments(arguments)
        call = config.call
        if verbose is None:
            verbose = call.verbose
        if points_are_rows is None:
            points_are_rows = call.points_are_rows
        if copy_all_inputs is None:
            copy_all_inputs = call.copy_all_inputs

        with ParameterSet(self.name) as params, Timers() as timers, OwnedBuffers() as owned:
            registry = ModelRegistry()
            bound = []
            for param in self.params:
                value = arguments.get(param.arg_name)
                if value is None:
                    continue
                _bind(params, param, value, owned, registry, points_are_rows, copy_all_inputs)
                bound.append(param.key)

            if verbose:
                enable_verbose()
            else:
                disable_verbose()

            for output in self.outputs:
                params.mark_passed(output.key)

            logger.debug("calling %s with %s", self.entry_point, bound)
            entry = getattr(params.binding_lib, self.entry_point)
            entry.argtypes = [c_void_p, c_void_p]
            entry.restype = c_bool
            check_success(entry(params.handle, timers.handle), self.name)

            results = tuple(
                _read(params, output, owned, registry, points_are_rows)
                for output in self.outputs
            )

        if not results:
            return None
        if len(results) == 1:
            return results[0]
        return results


# =============================================================================
# Dispatch
# =============================================================================

def _bind(params: ParameterSet, param: Param, value: Any, owned: OwnedBuffers,
          registry: ModelRegistry, points_are_rows: bool, copy: bool) -> None:
    kind, key = param.kind, param.key
    if kind is Kind.BOOL:
        marshal.set_bool(params, key, value)
    elif kind is Kind.INT:
        marshal.set_int(params, key, value)
    elif kind is Kind.DOUBLE:
        marshal.set_double(params, key, value)
    elif kind is Kind.STRING:
        marshal.set_string(params, key, value)
    elif kind is Kind.MATRIX:
        marshal.set_matrix(params, key, value, owned, points_are_rows, copy)
    elif kind is Kind.UMATRIX:
        marshal.set_index_matrix(params, key, value, owned, points_are_rows, copy)
    elif kind is Kind.MATRIX_WITH_INFO:
        marshal.set_matrix_with_info(params, key, value, owned, points_are_rows, copy)
    elif kind in _VECTOR_KINDS:
        marshal.set_vector(params, kind.value, key, value, owned, copy)
    elif kind is Kind.VECTOR_INT:
        marshal.set_vector_int(params, key, value, owned)
    elif kind is Kind.VECTOR_STR:
        marshal.set_vector_str(params, key, value)
    elif kind is Kind.MODEL:
        marshal.set_model(params, key, value, param.model, registry)
    elif kind is Kind.RAW_MODEL:
        marshal.set_raw_model(params, param.model, key, value)
    else:
        raise TypeError(f"Unsupported parameter kind: {kind}")


def _read(params: ParameterSet, output: Output, owned: OwnedBuffers,
          registry: ModelRegistry, points_are_rows: bool) -> Any:
    kind, key = output.kind, output.key
    if kind in (Kind.BOOL, Kind.INT, Kind.DOUBLE):
        return params.get_scalar(key, {Kind.BOOL: bool, Kind.INT: int, Kind.DOUBLE: float}[kind])
    elif kind is Kind.STRING:
        return params.get_string(key)
    elif kind is Kind.MATRIX:
        return marshal.get_matrix(params, key, owned, points_are_rows)
    elif kind is Kind.UMATRIX:
        return marshal.get_index_matrix(params, key, owned, points_are_rows)
    elif kind in _VECTOR_KINDS:
        return marshal.get_vector(params, kind.value, key, owned)
    elif kind is Kind.VECTOR_INT:
        return marshal.get_vector_int(params, key, owned)
    elif kind is Kind.VECTOR_STR:
        return marshal.get_vector_str(params, key)
    elif kind is Kind.MODEL:
        return marshal.get_model(params, key, output.model, registry)
    elif kind is Kind.RAW_MODEL:
        return marshal.get_raw_model(params, output.model, key)
    raise TypeError(f"Unsupported output kind: {kind}")
