# -*- coding: utf-8 -*-

"""
Functions related to leaf processes: used to solve for the leaf
intercellular CO2 concentration at the intersection of the supply and
demand functions, and to calculate the Rubisco- and light-limited
photosynthesis rates.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

References:
-----------
* Collatz et al. (1991). Regulation of stomatal conductance and
  transpiration: a physiological model of canopy processes. Agric. For.
  Meteorol, 54, 107-136.
* Farquhar, G. D., von Caemmerer, S. V., & Berry, J. A. (1980). A
  biochemical model of photosynthetic CO2 assimilation in leaves of C3
  species. Planta, 149(1), 78-90.
* Leuning, R. (1990). Modelling stomatal behaviour and photosynthesis of
  Eucalyptus grandis. Functional Plant Biology, 17(2), 159-175.
* Smith, E. L. (1937). The influence of light and carbon dioxide on
  photosynthesis. The Journal of General Physiology, 20(6), 807-830.
* Wang et al. (2017). Towards a universal model for carbon dioxide
  uptake by plants. Nature Plants, 3(9), 734-741.

"""

__title__ = "Leaf level photosynthetic processes"
__author__ = "Manon E. B. Sabot"
__version__ = "4.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import collections  # named results
import numpy as np  # array manipulations, math operators

# own modules
from LeastCostLSM import cst  # general constants
from LeastCostLSM.Utils.errors import RootNotFoundError, Unsolved


# ======================================================================

AssimilationResult = collections.namedtuple('AssimilationResult',
                                            ['ci', 'a_rubisco', 'a_light',
                                             'assimilation', 'chi'])


def quad_roots(a, b, c):

    """
    Calculates both roots given by the quadratic formula, with a, b,
    and c from ax2 + bx + c = 0. Complex roots are projected onto the
    real axis.

    Arguments:
    ----------
    a, b, c: float
        coefficients of the equation to solve

    Returns:
    --------
    The real parts of the large and small roots.

    """

    if ((not np.all(np.isfinite([a, b, c]))) or
       np.isclose(a, 0., rtol=cst.zero, atol=cst.zero)):
        raise RootNotFoundError('degenerate quadratic')

    sq = np.emath.sqrt(b ** 2. - 4. * a * c)

    return np.real(np.array([0.5 * (-b + sq) / a, 0.5 * (-b - sq) / a]))


def select_root(roots, ca):

    """
    Picks the admissible Ci amongst the roots: only positive roots are
    kept and, when more than one is left, only those below ca. Should
    there still be several, the largest is retained.

    Arguments:
    ----------
    roots: array
        real parts of the roots [Pa]

    ca: float
        ambient CO2 partial pressure [Pa]

    Returns:
    --------
    The intercellular CO2 concentration Ci [Pa].

    """

    roots = np.asarray(roots, dtype=float)
    roots = np.unique(roots[np.logical_and(np.isfinite(roots), roots > 0.)])

    if len(roots) > 1:
        roots = roots[roots < ca]

    if len(roots) == 0:
        raise RootNotFoundError('no positive real root below ca')

    return float(roots[-1])


def jmax_attenuation(p, jmax):

    """
    Smith (1937)'s non-rectangular limitation of the light-limited rate
    by the maximum electron transport capacity.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    jmax: float
        maximum electron transport rate [umol m-2 s-1]

    Returns:
    --------
    The unitless attenuation factor L, between 0 and 1.

    """

    return 1. / np.sqrt(1. + (4. * p.kphio * p.iabs / jmax) ** 2.)


def electron_flux(p, jmax=None):

    """
    Light-limited carboxylation capacity, kphio * iabs, optionally
    capped by Jmax.

    """

    J = p.kphio * p.iabs

    if jmax is not None:
        J *= jmax_attenuation(p, jmax)

    return J


def Ci_coefs(p, gs, vcmax=None, jmax=None, law='rubisco'):

    """
    Coefficients of the quadratic in Ci obtained by equating the supply
    function A = gs (ca - Ci) with either demand function.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    gs: float
        stomatal conductance to CO2 [umol m-2 s-1 Pa-1]

    vcmax: float
        maximum carboxylation rate [umol m-2 s-1], Rubisco law only

    jmax: float
        maximum electron transport rate [umol m-2 s-1], only used to cap
        the light law when given

    law: string
        either 'rubisco' or 'light'

    Returns:
    --------
    a, b, c: float
        coefficients of a Ci2 + b Ci + c = 0

    """

    if law == 'rubisco':
        a = -gs
        b = gs * p.ca - gs * p.kmm - vcmax
        c = gs * p.ca * p.kmm + vcmax * p.gammastar

    elif law == 'light':
        J = electron_flux(p, jmax=jmax)
        a = gs
        b = J - gs * p.ca + 2. * gs * p.gammastar
        c = -J * p.gammastar - 2. * gs * p.ca * p.gammastar

    else:
        raise ValueError('unknown assimilation law: %s' % (law))

    return a, b, c


def solve_Ci(p, gs, vcmax=None, jmax=None, law='rubisco'):

    """
    Solves for Ci at the intersection of the supply and demand
    functions. The failure to find an admissible root is returned rather
    than raised, so that each caller handles it explicitly.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    gs: float
        stomatal conductance to CO2 [umol m-2 s-1 Pa-1]

    vcmax: float
        maximum carboxylation rate [umol m-2 s-1]

    jmax: float
        maximum electron transport rate [umol m-2 s-1]

    law: string
        either 'rubisco' or 'light'

    Returns:
    --------
    The intercellular CO2 concentration Ci [Pa], or Unsolved when there
    is no positive root below ca.

    """

    try:
        Ci = select_root(quad_roots(*Ci_coefs(p, gs, vcmax=vcmax, jmax=jmax,
                                              law=law)), p.ca)

    except RootNotFoundError as e:
        return Unsolved('%s law: %s' % (law, e))

    if Ci >= p.ca:  # the only positive root is not admissible
        return Unsolved('%s law: no positive real root below ca' % (law))

    return Ci


def A_rubisco(p, vcmax, Ci):

    """
    Rubisco-limited photosynthesis rate [umol m-2 s-1].

    """

    return vcmax * (Ci - p.gammastar) / (Ci + p.kmm)


def A_light(p, Ci, jmax=None):

    """
    Light-limited photosynthesis rate [umol m-2 s-1], capped by Jmax
    when jmax is given.

    """

    return electron_flux(p, jmax=jmax) * (Ci - p.gammastar) / (Ci + 2. *
                                                               p.gammastar)


def coord_Vmax(p, Ci, jmax=None):

    """
    Vcmax for which the Rubisco- and light-limited rates are equal at a
    given Ci, i.e. the coordination hypothesis.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    Ci: float
        intercellular CO2 concentration [Pa]

    jmax: float
        maximum electron transport rate [umol m-2 s-1]

    Returns:
    --------
    The coordinated maximum carboxylation rate [umol m-2 s-1].

    """

    return electron_flux(p, jmax=jmax) * (Ci + p.kmm) / (Ci + 2. *
                                                         p.gammastar)


def chi_check(p, Ci, Ac, Aj, A):

    """
    Packs the assimilation result, or returns Unsolved if Ci does not
    lie strictly between 0 and ca.

    """

    chi = Ci / p.ca

    if not (0. < chi < 1.):
        return Unsolved('chi = %s outside of (0, 1)' % (chi))

    return AssimilationResult(Ci, Ac, Aj, A, chi)


def rubisco_assimilation(p, vcmax, gs):

    """
    Assimilation under the Rubisco law only, no light limitation.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    vcmax: float
        maximum carboxylation rate [umol m-2 s-1]

    gs: float
        stomatal conductance to CO2 [umol m-2 s-1 Pa-1]

    Returns:
    --------
    An AssimilationResult where the light-limited rate is undefined
    (nan), or Unsolved.

    """

    Ci = solve_Ci(p, gs, vcmax=vcmax, law='rubisco')

    if not Ci:
        return Ci

    Ac = A_rubisco(p, vcmax, Ci)

    return chi_check(p, Ci, Ac, np.nan, Ac)


def arbitrate(p, x, jmax_active=False):

    """
    Solves Ci under both the Rubisco and light laws, and picks the
    binding rate. The lesser assimilation rate is paired with the larger
    of the two Ci, the less restrictive process allowing higher Ci.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    x: array
        trial point, (vcmax, gs) or (vcmax, gs, jmax)

    jmax_active: bool
        if True, the light law is capped by x[2] = jmax

    Returns:
    --------
    An AssimilationResult, or Unsolved if either law fails.

    """

    vcmax, gs = x[0], x[1]
    jmax = x[2] if jmax_active else None

    Ci_c = solve_Ci(p, gs, vcmax=vcmax, law='rubisco')

    if not Ci_c:
        return Ci_c

    Ci_j = solve_Ci(p, gs, jmax=jmax, law='light')

    if not Ci_j:
        return Ci_j

    Ac = A_rubisco(p, vcmax, Ci_c)
    Aj = A_light(p, Ci_j, jmax=jmax)

    return chi_check(p, max(Ci_c, Ci_j), Ac, Aj, min(Ac, Aj))


def colim_gap(assim):

    """
    Relative difference between the Rubisco- and light-limited rates,
    nan when the light law was not solved.

    """

    if (not assim) or np.isnan(assim.a_light):
        return np.nan

    top = max(assim.a_rubisco, assim.a_light)

    if top <= 0.:
        return np.nan

    return abs(assim.a_rubisco - assim.a_light) / top


def rubisco_limit(Aj, Ac):

    """
    Tests whether the standard model for photosynthesis is rubisco
    limited or not, in which case it is limited by electron transport.

    Arguments:
    ----------
    Aj: float
        electron transport-limited photosynthesis rate [umol m-2 s-1]

    Ac: float
        rubisco-limited photosynthesis rate [umol m-2 s-1]

    Returns:
    --------
    True if the C assimilation is rubisco limited, False if it is
    limited by electron transport, None if neither rate is positive.

    """

    if np.isnan(Aj):  # light limitation not accounted for
        return bool(Ac > 0.) or None

    if (np.minimum(Ac, Aj) > 0.) and np.isclose(np.minimum(Ac, Aj), Ac):
        return True

    elif (np.minimum(Ac, Aj) > 0.) and np.isclose(np.minimum(Ac, Aj), Aj):
        return False

    else:
        return None
