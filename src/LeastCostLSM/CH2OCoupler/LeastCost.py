# -*- coding: utf-8 -*-

"""
The least cost algorithm, adapted from Prentice et al. (2014)'s stomatal
optimization model that balances carbon and water costs. The optimal
Vcmax, gs (and Jmax) are found numerically, either by minimising the
sum of the unit costs per unit assimilation, or by maximising the net
benefit of assimilation once the costs have been given an absolute
scale. The closed form solution for chi (Wang et al., 2017) is also
given.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

References:
-----------
* Prentice, I. C., Dong, N., Gleason, S. M., Maire, V., & Wright, I. J.
  (2014). Balancing the costs of carbon gain and water transport:
  testing a new theoretical framework for plant functional ecology.
  Ecology letters, 17(1), 82-91.
* Smith, N. G., Keenan, T. F., Colin Prentice, I., Wang, H., Wright,
  I. J., Niinemets, U., ... & Zhou, S. X. (2019). Global
  photosynthetic capacity is optimized to the environment. Ecology
  Letters, 22(3), 506-517.
* Wang et al. (2017). Towards a universal model for carbon dioxide
  uptake by plants. Nature Plants, 3(9), 734-741.

"""

__title__ = "Least cost algorithm"
__author__ = "Manon E. B. Sabot"
__version__ = "2.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import collections  # registry of criteria
import warnings  # flag co-limitation mismatches
import numpy as np  # array manipulations, math operators

# own modules
from LeastCostLSM import cst  # general constants
from LeastCostLSM.Utils.default_params import environment, limitation_mode
from LeastCostLSM.Utils.default_params import costs as cost_params
from LeastCostLSM.Utils.errors import InputValidationError, Unsolved
from LeastCostLSM.Utils.errors import BoundaryWarning, ColimitationWarning
from LeastCostLSM.SPAC import rubisco_assimilation, arbitrate
from LeastCostLSM.SPAC import colim_gap, rubisco_limit
from LeastCostLSM.CH2OCoupler.coupler_utils import trans_cost, capacity_cost
from LeastCostLSM.CH2OCoupler.coupler_utils import coord_point, box
from LeastCostLSM.CH2OCoupler.bounded_opt import OptimizationResult
from LeastCostLSM.CH2OCoupler.bounded_opt import minimize_bounded


# ======================================================================

def chi_analytical(gammastar, ca, kmm, vpd, beta, ns_star=1.):

    """
    Closed form of the least cost chi, when Rubisco limits
    assimilation.

    Arguments:
    ----------
    gammastar: float
        CO2 compensation point [Pa]

    ca: float
        ambient CO2 partial pressure [Pa]

    kmm: float
        effective Michaelis-Menten coefficient of Rubisco [Pa]

    vpd: float
        vapour pressure deficit [Pa]

    beta: float
        unit cost ratio of Vcmax to transpiration maintenance [-]

    ns_star: float
        viscosity of water relative to its value at 25 degC [-]

    Returns:
    --------
    The optimal ratio of intercellular to ambient CO2 [-].

    """

    if not (np.isfinite(ca) and ca > 0.):
        raise InputValidationError('ca must be positive')

    if not (np.isfinite(vpd) and vpd >= 0.):
        raise InputValidationError('vpd cannot be negative')

    xi = np.sqrt(beta * (kmm + gammastar) / (cst.Dr * ns_star))

    return gammastar / ca + (1. - gammastar / ca) * xi / (xi + np.sqrt(vpd))


def sense(expr, maximize):

    """
    Sign convention for the minimiser.

    """

    if maximize:
        return -expr

    return expr


def scalar(c):

    """
    Returns the absolute cost scale, which the net benefit criteria
    cannot do without.

    """

    if c.cost_scalar is None:
        raise InputValidationError('the net benefit criteria need a '
                                   'cost_scalar')

    return c.cost_scalar


def cost_ratio(x, p, c, maximize=False):

    """
    Sum of the transpiration and Vcmax maintenance costs per unit
    Rubisco-limited assimilation.

    Arguments:
    ----------
    x: array
        trial point (vcmax, gs)

    p: EnvironmentalState
        leaf's environmental state

    c: CostParameters
        unit cost ratios

    maximize: bool
        if True, the sign of the criterion is flipped

    Returns:
    --------
    The unitless cost ratio, or a large penalty when Ci cannot be
    solved or assimilation is not positive.

    """

    assim = rubisco_assimilation(p, x[0], x[1])

    if (not assim) or (assim.a_rubisco <= 0.):
        return cst.penalty

    return sense((trans_cost(p, x[1]) + capacity_cost(c, x[0])) /
                 assim.a_rubisco, maximize)


def net_benefit(x, p, c, maximize=True):

    """
    Rubisco-limited assimilation minus the absolute costs of the
    transpiration stream and of Vcmax maintenance.

    """

    assim = rubisco_assimilation(p, x[0], x[1])

    if not assim:
        return cst.penalty

    return sense(assim.a_rubisco - scalar(c) * (trans_cost(p, x[1]) +
                                                capacity_cost(c, x[0])),
                 maximize)


def net_benefit_ll(x, p, c, maximize=True):

    """
    Net benefit where assimilation is the lesser of the Rubisco- and
    light-limited rates.

    """

    assim = arbitrate(p, x)

    if not assim:
        return cst.penalty

    return sense(assim.assimilation - scalar(c) * (trans_cost(p, x[1]) +
                                                   capacity_cost(c, x[0])),
                 maximize)


def net_benefit_jmax(x, p, c, maximize=True):

    """
    Net benefit where the light-limited rate is capped by Jmax, the
    maintenance of which is also costed.

    Arguments:
    ----------
    x: array
        trial point (vcmax, gs, jmax)

    p: EnvironmentalState
        leaf's environmental state

    c: CostParameters
        unit cost ratios and absolute cost scale

    maximize: bool
        if True, the sign of the criterion is flipped

    Returns:
    --------
    The net benefit [umol m-2 s-1], or a large penalty when Ci cannot be
    solved.

    """

    assim = arbitrate(p, x, jmax_active=True)

    if not assim:
        return cst.penalty

    return sense(assim.assimilation - scalar(c) *
                 (trans_cost(p, x[1]) + capacity_cost(c, x[0], jmax=x[2])),
                 maximize)


Criterion = collections.namedtuple('Criterion', ['func', 'maximize', 'ndim',
                                                 'needs_scalar', 'colimited'])

OBJECTIVES = {'ratio': Criterion(cost_ratio, False, 2, False, False),
              'net': Criterion(net_benefit, True, 2, True, False),
              'net_ll': Criterion(net_benefit_ll, True, 2, True, True),
              'net_jmax': Criterion(net_benefit_jmax, True, 3, True, True)}


def assimilation(x, p, objective):

    """
    AssimilationResult of a trial point, as seen by a given criterion.

    """

    if objective in ['ratio', 'net']:
        return rubisco_assimilation(p, x[0], x[1])

    return arbitrate(p, x, jmax_active=(objective == 'net_jmax'))


def pick_objective(limitation, c, objective=None):

    """
    Criterion matching a limitation mode: the cost ratio when there is
    no absolute cost scale, the net benefit otherwise.

    """

    if objective is None:
        if limitation == 'light':
            objective = 'net_ll'

        elif limitation == 'jmax':
            objective = 'net_jmax'

        elif c.cost_scalar is None:
            objective = 'ratio'

        else:
            objective = 'net'

    if objective not in OBJECTIVES:
        raise InputValidationError('unknown objective %s, pick one of %s' %
                                   (objective, ', '.join(OBJECTIVES)))

    if OBJECTIVES[objective].needs_scalar:
        scalar(c)

    return objective


def along_ridge(z, p, c, crit):

    """
    Co-limited criterion evaluated on the ridge where the Rubisco- and
    light-limited rates are equal, z being (chi) or (chi, jmax).

    """

    jmax = None

    if len(z) > 1:
        jmax = z[1]

    return crit.func(coord_point(p, z[0], jmax=jmax), p, c, crit.maximize)


def ridge_start(p, c, crit, chi0, jmax0=None, maxiter=200, lower=1.e-4,
                upper=30.):

    """
    The optimum of the co-limited criteria lies where the Rubisco- and
    light-limited rates are equal: off that ridge, either Vcmax can be
    lowered at no loss of assimilation, or the criterion is homogeneous
    in (Vcmax, gs) and keeps rising towards the ridge. The criteria are
    kinked across the ridge but smooth along it, so the optimum is first
    searched over chi (and Jmax) along the ridge.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    c: CostParameters
        unit cost ratios and absolute cost scale

    crit: Criterion
        co-limited criterion

    chi0: float
        start of the search along the ridge [-]

    jmax0: float
        start of the search in Jmax [umol m-2 s-1], for the Jmax-limited
        criterion only

    maxiter: int
        iteration budget of the search

    lower, upper: float
        bounds on Jmax, as multiples of jmax0

    Returns:
    --------
    x: array
        best point on the ridge, (vcmax, gs) or (vcmax, gs, jmax)

    nit: int
        number of iterations used

    """

    floor = p.gammastar / p.ca
    z0 = [chi0]
    zlow = [floor + min(1.e-3, 0.5 * (chi0 - floor))]
    zup = [1. - min(1.e-3, 0.5 * (1. - chi0))]

    if jmax0 is not None:
        z0 += [jmax0]
        zlow += [lower * jmax0]
        zup += [upper * jmax0]

    with warnings.catch_warnings():  # the full search follows
        warnings.simplefilter('ignore', category=BoundaryWarning)
        out = minimize_bounded(along_ridge, z0, zlow, zup,
                               args=(p, c, crit), maxiter=maxiter)

    jmax = None

    if jmax0 is not None:
        jmax = out.x[1]

    return coord_point(p, out.x[0], jmax=jmax), out.nit


def empty_record(objective):

    return {'vcmax': np.nan, 'gs': np.nan, 'jmax': np.nan, 'ci': np.nan,
            'chi': np.nan, 'assimilation': np.nan, 'net_value': np.nan,
            'converged': False, 'iterations': 0, 'hit_bound': False,
            'rublim': None, 'colim_gap': np.nan, 'objective': objective}


def least_cost(p, c=None, limitation=None, objective=None, chi0=None,
               maxiter=200, lower=1.e-4, upper=30., JV=1.67, polish=True,
               colim_tol=0.05):

    """
    Finds the least cost (or maximum net benefit) Vcmax, gs and Jmax of
    a leaf, following the optimization criterion for which the stomata
    and photosynthetic capacities are regulated to minimise two costs:
    (i) the cost of maintaining the transpiration stream required to
    support assimilation, and (ii) the cost of maintaining
    photosynthetic proteins at the level required to support
    assimilation at the same rate.

    Arguments:
    ----------
    p: recarray object or pandas series or class containing the data
        leaf's environmental state (and cost parameters if c is None)

    c: CostParameters or record
        cost parameters, read from p if None

    limitation: string
        'none', 'light', or 'jmax', read from p if None

    objective: string
        one of the OBJECTIVES keys, overrides the choice implied by the
        limitation mode and the presence of a cost scalar

    chi0: float
        chi [-] at which the start point is built from the coordination
        hypothesis, the analytical chi by default. For the co-limited
        criteria, it is where the search along the ridge starts

    maxiter: int
        iteration budget of the optimiser, per stage for the co-limited
        criteria

    lower, upper: float
        bounds of the optimiser, as multiples of the start point

    JV: float
        ratio of Jmax to Vcmax [-] at the start point

    polish: bool
        if True, the optimiser may polish its solution

    colim_tol: float
        relative gap between the Rubisco- and light-limited rates above
        which the optimum is flagged

    Returns:
    --------
    out: OptimizationResult
        optimum, its AssimilationResult (or Unsolved), the minimised
        criterion, the number of iterations, convergence, and the
        dimensions lying on the box

    record: dictionary
        vcmax, gs, jmax, ci, chi, assimilation, net_value (the
        criterion in its natural sign), converged, iterations,
        hit_bound, rublim, colim_gap, objective

    """

    rec = p
    p = environment(rec)
    c = cost_params(rec if c is None else c)

    if limitation is None:
        limitation = limitation_mode(rec)

    else:
        limitation = limitation_mode({'limitation': limitation})

    objective = pick_objective(limitation, c, objective=objective)
    crit = OBJECTIVES[objective]

    if chi0 is None:
        chi0 = chi_analytical(p.gammastar, p.ca, p.kmm, p.vpd, c.beta,
                              ns_star=p.ns_star)

    if not (p.gammastar / p.ca < chi0 < 1.):
        raise InputValidationError('chi0 must lie between gammastar / ca '
                                   'and 1')

    x0 = coord_point(p, chi0, JV=JV if crit.ndim == 3 else None)
    record = empty_record(objective)

    if not all(np.logical_and(np.isfinite(x0), x0 > 0.)):  # e.g. darkness
        return (OptimizationResult(x0, Unsolved('no electron flux'), np.nan,
                                   0, False, np.zeros(len(x0), dtype=bool),
                                   'no start point'), record)

    nit = 0

    if crit.colimited:  # start from the best co-limited point
        jmax0 = None

        if crit.ndim == 3:
            jmax0 = x0[2]

        x0, nit = ridge_start(p, c, crit, chi0, jmax0=jmax0, maxiter=maxiter,
                              lower=lower, upper=upper)

    xlow, xup = box(x0, lower=lower, upper=upper)
    out = minimize_bounded(crit.func, x0, xlow, xup,
                           args=(p, c, crit.maximize), maxiter=maxiter,
                           polish=polish)
    assim = assimilation(out.x, p, objective)
    out = out._replace(assim=assim, nit=out.nit + nit)

    record['vcmax'] = out.x[0]
    record['gs'] = out.x[1]

    if crit.ndim == 3:
        record['jmax'] = out.x[2]

    record['converged'] = out.converged
    record['iterations'] = out.nit
    record['hit_bound'] = bool(any(out.at_bound))

    if not assim:
        return out, record

    record['ci'] = assim.ci
    record['chi'] = assim.chi
    record['assimilation'] = assim.assimilation
    record['net_value'] = crit.func(out.x, p, c, maximize=False)
    record['rublim'] = rubisco_limit(assim.a_light, assim.a_rubisco)
    record['colim_gap'] = colim_gap(assim)

    if record['colim_gap'] > colim_tol:
        warnings.warn('Ac and Aj differ by %.1f%% at the optimum' %
                      (100. * record['colim_gap']), ColimitationWarning)

    return out, record
