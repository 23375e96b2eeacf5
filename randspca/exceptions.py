# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Exceptions raised on failed preconditions
__all__ = ['InvalidRankError', 'DegenerateSpectrumError']


class InvalidRankError(ValueError):
    '''The target rank is not a positive integer'''
    pass


class DegenerateSpectrumError(ValueError):
    '''The leading singular value of the sketch is zero

    Regularization strengths are expressed as fractions of the largest
    eigenvalue, so they cannot be derived from an all-zero spectrum.
    '''
    pass
