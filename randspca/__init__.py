# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    randspca entry point for import
from .estimator import RSPCA, rspca
from .result import RSPCAResult
from .preprocess import PreprocessingState
from .sketch import compress_qb
from .solver import SpectralBasis, VariableProjectionSolver, soft_threshold
from .exceptions import InvalidRankError, DegenerateSpectrumError
from ._version import version

__all__ = [
    'RSPCA',
    'rspca',
    'RSPCAResult',
    'PreprocessingState',
    'compress_qb',
    'SpectralBasis',
    'VariableProjectionSolver',
    'soft_threshold',
    'InvalidRankError',
    'DegenerateSpectrumError',
    'version',
    ]
