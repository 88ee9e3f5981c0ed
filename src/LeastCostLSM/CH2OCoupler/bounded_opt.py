# -*- coding: utf-8 -*-

"""
Box-constrained local minimisation of the least cost criteria. A
quasi-Newton search (L-BFGS-B, finite difference gradient) is followed,
when it stops short of convergence, by a derivative-free Powell polish
within the same box and sharing the same iteration budget.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

References:
-----------
* Byrd, R. H., Lu, P., Nocedal, J., & Zhu, C. (1995). A limited memory
  algorithm for bound constrained optimization. SIAM Journal on
  Scientific Computing, 16(5), 1190-1208.
* Powell, M. J. D. (1964). An efficient method for finding the minimum
  of a function of several variables without calculating derivatives.
  The Computer Journal, 7(2), 155-162.

"""

__title__ = "Bounded numerical optimiser"
__author__ = "Manon E. B. Sabot"
__version__ = "1.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import collections  # named results
import warnings  # flag solutions on the box, silence overflows
import numpy as np  # array manipulations, math operators
from scipy.optimize import minimize  # bounded local minimisers

# own modules
from LeastCostLSM.Utils.errors import InputValidationError, BoundaryWarning


# ======================================================================

OptimizationResult = collections.namedtuple('OptimizationResult',
                                            ['x', 'assim', 'fun', 'nit',
                                             'converged', 'at_bound',
                                             'message'])


def check_box(x0, lower, upper):

    """
    Validates the start point and box, all of which must be strictly
    positive and of the same dimension, with x0 inside the box.

    Returns:
    --------
    x0, lower, upper as float arrays.

    """

    x0 = np.asarray(x0, dtype=float)
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)

    if (x0.ndim != 1) or not (x0.shape == lower.shape == upper.shape):
        raise InputValidationError('x0, lower and upper must be 1-D arrays '
                                   'of the same length')

    if not all(np.isfinite(np.concatenate([x0, lower, upper]))):
        raise InputValidationError('non-finite start point or bounds')

    if any(lower <= 0.) or any(upper <= lower):
        raise InputValidationError('must have 0 < lower < upper')

    if any(x0 < lower) or any(x0 > upper):
        raise InputValidationError('start point outside of the bounds')

    return x0, lower, upper


def minimize_bounded(fobj, x0, lower, upper, args=(), maxiter=200,
                     polish=True, ftol=1.e-12, gtol=1.e-8):

    """
    Finds a local minimum of fobj within the box [lower, upper]. The
    variables are rescaled by the start point, so that each dimension
    is searched at unit scale regardless of the physical magnitudes.

    Arguments:
    ----------
    fobj: callable
        scalar criterion, called as fobj(x, *args)

    x0: array
        start point

    lower, upper: array
        bounds on each dimension

    args: tuple
        additional arguments passed to fobj

    maxiter: int
        iteration budget, shared between the quasi-Newton search and the
        polish

    polish: bool
        if True, a Powell search restarts from the quasi-Newton point
        when the latter did not converge within its budget

    ftol, gtol: float
        relative criterion and projected gradient tolerances

    Returns:
    --------
    An OptimizationResult, its assim field left to the caller. When the
    budget is exhausted, the best point found is returned with converged
    set to False. The convergence flag is that of the stage whose point
    is returned.

    """

    x0, lower, upper = check_box(x0, lower, upper)
    maxiter = int(maxiter)

    if maxiter < 1:
        raise InputValidationError('the iteration budget must be >= 1')

    def scaled(z):

        return fobj(z * x0, *args)

    bounds = list(zip(lower / x0, upper / x0))

    with warnings.catch_warnings():  # overflows at the box's extremes
        warnings.simplefilter('ignore', category=RuntimeWarning)

        out = minimize(scaled, np.ones(len(x0)), method='L-BFGS-B',
                       bounds=bounds, options={'maxiter': maxiter,
                                               'ftol': ftol, 'gtol': gtol})
        nit = int(out.nit)
        converged = bool(out.success)
        message = str(out.message)

        if polish and (not converged) and (nit < maxiter):
            res = minimize(scaled, np.clip(out.x, lower / x0, upper / x0),
                           method='Powell', bounds=bounds,
                           options={'maxiter': maxiter - nit, 'xtol': 1.e-8,
                                    'ftol': 1.e-10})
            nit += int(res.nit)
            message = 'L-BFGS-B: %s; Powell: %s' % (message, res.message)

            if res.fun <= out.fun:  # the flag follows the point kept
                out = res
                converged = bool(res.success)

    x = np.clip(out.x * x0, lower, upper)
    at_bound = np.logical_or(np.isclose(x, lower, rtol=1.e-6, atol=0.),
                             np.isclose(x, upper, rtol=1.e-6, atol=0.))

    if any(at_bound):
        warnings.warn('optimum on the bounds for dimension(s) %s' %
                      (', '.join([str(e) for e in np.where(at_bound)[0]])),
                      BoundaryWarning)

    return OptimizationResult(x, None, float(out.fun), nit, converged,
                              at_bound, message)
