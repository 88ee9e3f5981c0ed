# -*- coding: utf-8 -*-

"""
Support functions for the coupling schemes: the supply function, the
maintenance costs, and the start point / box set up for the optimiser.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "useful ancillary coupling functions"
__author__ = "Manon Sabot"
__version__ = "2.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import numpy as np  # array manipulations, math operators

# own modules
from LeastCostLSM import cst  # general constants
from LeastCostLSM.Utils.errors import InputValidationError
from LeastCostLSM.SPAC import jmax_attenuation, coord_Vmax, A_light


# ======================================================================

def A_supply(p, gs, Ci):

    """
    Calculates the assimilation rate given the supply function, gs.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    gs: float
        stomatal conductance to CO2 [umol m-2 s-1 Pa-1]

    Ci: float
        intercellular CO2 concentration [Pa]

    Returns:
    --------
    The diffusive supply of CO2 A [umol m-2 s-1].

    """

    return gs * (p.ca - Ci)


def trans_cost(p, gs):

    """
    Cost of maintaining the transpiration stream, proportional to the
    transpiration rate 1.6 gs D, corrected for the viscosity of water.

    """

    return cst.Dr * p.ns_star * gs * p.vpd


def capacity_cost(c, vcmax, jmax=None):

    """
    Cost of maintaining the photosynthetic proteins, relative to the
    transpiration cost.

    Arguments:
    ----------
    c: CostParameters
        unit cost ratios

    vcmax: float
        maximum carboxylation rate [umol m-2 s-1]

    jmax: float
        maximum electron transport rate [umol m-2 s-1], only costed when
        given

    Returns:
    --------
    The unitless maintenance cost of the photosynthetic capacities.

    """

    cost = c.beta * vcmax

    if jmax is not None:
        cost += c.gamma_cost * jmax

    return cost


def coord_point(p, chi, JV=None, jmax=None):

    """
    Builds a trial point from the coordination hypothesis at a given
    chi: Vcmax is such that the Rubisco- and light-limited rates are
    equal, and gs closes the supply function.

    Arguments:
    ----------
    p: EnvironmentalState
        leaf's environmental state

    chi: float
        ratio of intercellular to ambient CO2 [-]

    JV: float
        ratio of Jmax to Vcmax [-], if given a third (Jmax) dimension is
        added and both Vcmax and gs are scaled by the light limitation
        that Jmax imposes

    jmax: float
        maximum electron transport rate [umol m-2 s-1], used instead of
        JV when given

    Returns:
    --------
    The trial point (vcmax, gs) or (vcmax, gs, jmax).

    """

    Ci = chi * p.ca
    vcmax = coord_Vmax(p, Ci)
    gs = A_light(p, Ci) / (p.ca - Ci)

    if jmax is None:
        if JV is None:
            return np.array([vcmax, gs])

        jmax = JV * vcmax

    L = jmax_attenuation(p, jmax)

    return np.array([vcmax * L, gs * L, jmax])


def box(x0, lower=1.e-4, upper=30.):

    """
    Bounds of the optimisation, as multiples of the start point.

    """

    x0 = np.asarray(x0, dtype=float)

    if (lower <= 0.) or (upper <= lower):
        raise InputValidationError('must have 0 < lower < upper multipliers')

    return lower * x0, upper * x0
