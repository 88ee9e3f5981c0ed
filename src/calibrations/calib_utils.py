# -*- coding: utf-8 -*-

"""
Support functions needed to calibrate the absolute cost scale of the net
benefit criteria, so that they reproduce a reference chi, and to report
on the calibration outputs.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "Useful ancillary calibration functions"
__author__ = "Manon E. B. Sabot"
__version__ = "3.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import collections  # named results
import os  # check for paths
import warnings  # silence the inner optimisations' flags
import numpy as np  # array manipulations, math operators
from scipy.optimize import brentq  # bracketing root search

# own modules
from LeastCostLSM import environment, costs, CostParameters
from LeastCostLSM import InputValidationError, CalibrationFailed
from LeastCostLSM import BoundaryWarning, ColimitationWarning
from LeastCostLSM.CH2OCoupler import least_cost


# ======================================================================

Evaluation = collections.namedtuple('Evaluation', ['cost_scalar', 'chi',
                                                   'residual', 'net_value',
                                                   'reproduced', 'result',
                                                   'record'])

Calibration = collections.namedtuple('Calibration', ['cost_scalar', 'chi',
                                                     'residual', 'net_value',
                                                     'reproduced', 'result',
                                                     'record', 'evaluations'])


class CostCalib(object):

    """
    Searches for the cost_scalar for which a net benefit criterion
    yields a target chi, using Brent's method over a bracket. Each
    evaluation of the residual is a full optimisation of the criterion,
    started from the analytical chi whatever the target.

    Only the co-limited criteria ('net_ll' and 'net_jmax') can be
    calibrated. The optimum of the Rubisco-limited net benefit runs to
    the bounds of its search for any cost_scalar, so that there is
    never a sign change to bracket.

    An optimum that does not yield a positive net benefit is a closure
    of the stomata, for which chi is taken at its lower limit,
    gammastar / ca. The evaluations are kept, and the last one whose
    residual lies within the tolerance band, whose net benefit is
    positive, and whose chi is reproduced by a second optimisation
    started further down the ridge is returned.

    """

    def __init__(self, objective='net_ll', tol=1.e-3, maxiter=200,
                 rtol=1.e-6, max_evals=60):

        if objective not in ['net_ll', 'net_jmax']:
            raise InputValidationError('cannot calibrate %s, pick net_ll or '
                                       'net_jmax' % (objective))

        self.objective = objective  # which criterion is calibrated
        self.tol = tol  # residual tolerance band on chi
        self.maxiter = maxiter  # budget of each inner optimisation

        # Brent's method settings
        self.rtol = rtol
        self.max_evals = max_evals

        self.evaluations = []

    def optimise(self, p, c, chi0=None):

        with warnings.catch_warnings():  # flags are expected here
            warnings.simplefilter('ignore', category=BoundaryWarning)
            warnings.simplefilter('ignore', category=ColimitationWarning)

            return least_cost(p, c, objective=self.objective, chi0=chi0,
                              maxiter=self.maxiter)

    def residual(self, cost_scalar, target, p, c):

        """
        Signed difference between the target chi and the optimal chi
        given a cost_scalar.

        Arguments:
        ----------
        cost_scalar: float
            absolute multiplier of the maintenance costs [-]

        target: float
            reference chi [-]

        p: EnvironmentalState
            leaf's environmental state

        c: CostParameters
            unit cost ratios

        Returns:
        --------
        The residual target - chi [-].

        """

        c = CostParameters(c.beta, c.gamma_cost, cost_scalar)
        out, record = self.optimise(p, c)
        reproduced = False

        if (not out.assim) or not (record['net_value'] > 0.):  # closure
            chi = p.gammastar / p.ca

        else:
            chi = record['chi']

            if abs(target - chi) <= self.tol:  # restart below the optimum
                __, again = self.optimise(p, c, chi0=0.5 * (p.gammastar /
                                                            p.ca + chi))
                reproduced = abs(again['chi'] - chi) <= self.tol

        self.evaluations += [Evaluation(float(cost_scalar), chi, target - chi,
                                        record['net_value'], reproduced, out,
                                        record)]

        return target - chi

    def run(self, target, p, c=None, interval=(1.e-4, 1.e-2)):

        """
        Calibrates the cost_scalar.

        Arguments:
        ----------
        target: float
            reference chi [-], e.g. the analytical chi

        p: recarray object or pandas series or class containing the data
            leaf's environmental state (and cost parameters if c is
            None)

        c: CostParameters or record
            unit cost ratios, any cost_scalar they carry is ignored

        interval: tuple
            bracket of the cost_scalar search

        Returns:
        --------
        A Calibration, or CalibrationFailed when there is no sign change
        over the bracket or no evaluation within the tolerance band.

        """

        lo, hi = [float(e) for e in interval]

        if not (0. < lo < hi):
            raise InputValidationError('the bracket must be 0 < lo < hi')

        env = environment(p)
        c = costs(p if c is None else c)

        if not (env.gammastar / env.ca < target < 1.):
            raise InputValidationError('the target chi must lie between '
                                       'gammastar / ca and 1')

        self.evaluations = []

        try:
            __, r = brentq(self.residual, lo, hi, args=(target, env, c),
                           rtol=self.rtol, maxiter=self.max_evals,
                           full_output=True, disp=False)

        except ValueError:  # f(lo) and f(hi) have the same sign
            return CalibrationFailed('no sign change over [%s, %s]' %
                                     (lo, hi), self.evaluations)

        accepted = [e for e in self.evaluations if
                    (abs(e.residual) <= self.tol) and (e.net_value > 0.) and
                    e.reproduced]

        if len(accepted) < 1:
            return CalibrationFailed('no reproducible residual within %s '
                                     'after %d evaluations (%s)' %
                                     (self.tol, len(self.evaluations),
                                      r.flag), self.evaluations)

        best = accepted[-1]

        return Calibration(*(best + (tuple(self.evaluations), )))


def write_report(fname, calib, target, label):

    """
    Appends the summary of a calibration to a text file.

    Arguments:
    ----------
    fname: string
        output filename (with path)

    calib: Calibration or CalibrationFailed
        outcome of the calibration

    target: float
        reference chi [-]

    label: string
        name of the calibrated criterion

    Returns:
    --------
    The text file fname.

    """

    odir = os.path.dirname(fname)

    if (odir != '') and (not os.path.isdir(odir)):  # create output dir
        os.makedirs(odir)

    with open(fname, 'a+') as txt:

        txt.write('\n[[%s]]\n' % (label))
        txt.write('    target chi     = %.6f\n' % (target))

        if not calib:
            txt.write('    ##  Failed: %s\n' % (calib.reason))
            txt.write('    # evaluations  = %d\n' % (len(calib.evaluations)))

            return

        txt.write('    cost_scalar    = %.6e\n' % (calib.cost_scalar))
        txt.write('    chi            = %.6f\n' % (calib.chi))
        txt.write('    residual       = %.3e\n' % (calib.residual))
        txt.write('    net benefit    = %.6f\n' % (calib.net_value))
        txt.write('    vcmax          = %.4f\n' % (calib.record['vcmax']))
        txt.write('    gs             = %.4f\n' % (calib.record['gs']))

        if np.isfinite(calib.record['jmax']):
            txt.write('    jmax           = %.4f\n' % (calib.record['jmax']))

        txt.write('    # evaluations  = %d\n' % (len(calib.evaluations)))

    return
