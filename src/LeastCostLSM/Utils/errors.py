# -*- coding: utf-8 -*-

"""
Error types, failure values and warning categories shared by the
solvers. Invalid inputs are the only failures raised at the boundary of
the model; root-finding and calibration failures travel as values.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "Errors and failure states"
__author__ = "Manon E. B. Sabot"
__version__ = "1.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

class InputValidationError(ValueError):

    """
    Malformed environmental state, cost parameters, or optimiser box.

    """


class RootNotFoundError(ArithmeticError):

    """
    The supply-demand quadratic has no positive real root below ca.

    """


class Unsolved(object):

    """
    Sentinel standing in for a Ci / assimilation result when the
    quadratic could not be solved. It is falsy, so that callers can
    write `if not assim:`.

    """

    __slots__ = ('reason',)

    def __init__(self, reason='no admissible root'):

        self.reason = reason

    def __bool__(self):

        return False

    def __repr__(self):

        return 'Unsolved(%r)' % (self.reason)


class CalibrationFailed(object):

    """
    Returned by the cost scalar calibration when no sign change exists
    in the search interval or when the residual never enters the
    tolerance band.

    """

    __slots__ = ('reason', 'evaluations')

    def __init__(self, reason, evaluations=()):

        self.reason = reason
        self.evaluations = tuple(evaluations)

    def __bool__(self):

        return False

    def __repr__(self):

        return 'CalibrationFailed(%r, %d evaluations)' % (self.reason,
                                                         len(self.evaluations))


def is_unsolved(value):

    """
    True if value is a failed solve.

    """

    return isinstance(value, Unsolved)


class BoundaryWarning(UserWarning):

    """
    The optimum lies on the box set around the starting guess.

    """


class ColimitationWarning(UserWarning):

    """
    Ac and Aj differ substantially at the selected Ci.

    """
