# -*- coding: utf-8 -*-

"""
Default parameter values, and the immutable environmental state and
cost parameter records consumed by every solver. The biochemical
constants (Michaelis-Menten coefficient, CO2 compensation point and
viscosity correction) are taken as given at the temperature and
elevation of interest, here 25 degC at sea level.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

References:
-----------
* Bernacchi et al. (2001). Improved temperature response functions for
  models of Rubisco-limited photosynthesis. Plant, Cell & Environment,
  24(2), 253-259.
* Medlyn, B. E., Dreyer, E., Ellsworth, D., Forstreuter, M., Harley,
  P. C., Kirschbaum, M. U. F., ... & Wang, K. (2002). Temperature
  response of parameters of a biochemically based model of
  photosynthesis. II. A review of experimental data. Plant, Cell &
  Environment, 25(9), 1167-1179.
* Wang et al. (2017). Towards a universal model for carbon dioxide
  uptake by plants. Nature Plants, 3(9), 734-741.

"""

__title__ = "Default parameters and input records"
__author__ = "Manon E. B. Sabot"
__version__ = "9.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import collections  # immutable records
import numpy as np  # array manipulations, math operators
import pandas as pd  # flat input records

# own modules
from LeastCostLSM import conv, cst  # unit converter & general constants
from LeastCostLSM.Utils.errors import InputValidationError


# ======================================================================

LIMITATIONS = ('none', 'light', 'jmax')  # assimilation limitation modes

_Environment = collections.namedtuple('EnvironmentalState',
                                      ['ca', 'gammastar', 'kmm', 'ns_star',
                                       'vpd', 'iabs', 'kphio'])
_Costs = collections.namedtuple('CostParameters',
                                ['beta', 'gamma_cost', 'cost_scalar'])


class EnvironmentalState(_Environment):

    """
    Snapshot of the conditions a leaf is exposed to.

    Fields:
    -------
    ca: float
        ambient CO2 partial pressure [Pa]

    gammastar: float
        CO2 compensation point [Pa]

    kmm: float
        effective Michaelis-Menten coefficient of Rubisco [Pa]

    ns_star: float
        viscosity of water relative to its value at 25 degC [-]

    vpd: float
        vapour pressure deficit [Pa]

    iabs: float
        absorbed photosynthetically active flux [umol m-2 s-1]

    kphio: float
        intrinsic quantum yield efficiency [-]

    """

    __slots__ = ()

    def __new__(cls, ca, gammastar, kmm, ns_star=1., vpd=1000., iabs=800.,
                kphio=0.05):

        try:
            values = [float(e) for e in (ca, gammastar, kmm, ns_star, vpd,
                                         iabs, kphio)]

        except (TypeError, ValueError):
            raise InputValidationError('non-numeric environmental state')

        self = super(EnvironmentalState, cls).__new__(cls, *values)

        if not all(np.isfinite(values)):
            raise InputValidationError('non-finite environmental state: %s'
                                       % (repr(self)))

        if self.ca <= 0.:
            raise InputValidationError('ca must be positive')

        if self.kmm <= 0.:
            raise InputValidationError('kmm must be positive')

        if (self.gammastar < 0.) or (self.gammastar >= self.ca):
            raise InputValidationError('must have ca > gammastar >= 0')

        if self.vpd < 0.:
            raise InputValidationError('vpd cannot be negative')

        if self.ns_star <= 0.:
            raise InputValidationError('ns_star must be positive')

        if (self.iabs < 0.) or (self.kphio < 0.):
            raise InputValidationError('iabs and kphio cannot be negative')

        return self


class CostParameters(_Costs):

    """
    Unit costs of maintaining the photosynthetic capacities, relative to
    the cost of maintaining transpiration.

    Fields:
    -------
    beta: float
        unit cost ratio of Vcmax to transpiration maintenance [-]

    gamma_cost: float
        unit cost ratio of Jmax maintenance [-]

    cost_scalar: float or None
        absolute multiplier of the maintenance costs, None when only a
        cost ratio is needed

    """

    __slots__ = ()

    def __new__(cls, beta, gamma_cost=0., cost_scalar=None):

        try:
            beta = float(beta)
            gamma_cost = float(gamma_cost)

            if np.isnan(gamma_cost):  # only used by the Jmax objective
                gamma_cost = 0.

            if cost_scalar is not None:
                cost_scalar = float(cost_scalar)

                if np.isnan(cost_scalar):  # missing in a flat record
                    cost_scalar = None

        except (TypeError, ValueError):
            raise InputValidationError('non-numeric cost parameters')

        self = super(CostParameters, cls).__new__(cls, beta, gamma_cost,
                                                  cost_scalar)

        if not (np.isfinite(beta) and beta > 0.):
            raise InputValidationError('beta must be positive')

        if not (np.isfinite(gamma_cost) and gamma_cost >= 0.):
            raise InputValidationError('gamma_cost cannot be negative')

        if ((cost_scalar is not None) and
           not (np.isfinite(cost_scalar) and cost_scalar > 0.)):
            raise InputValidationError('cost_scalar must be positive')

        return self


def default_params():

    """
    Builds a new flat record of default inputs. A fresh Series is
    returned on each call, so that edits never leak between runs.

    Returns:
    --------
    p: pandas series
        environmental state, cost parameters, the start ratio of Jmax to
        Vcmax and the limitation mode

    """

    p = pd.Series(dtype=object)

    # environment, 25 degC at sea level
    p['ca'] = 400. * conv.FROM_MEGA * cst.Patm  # Pa, 400 ppm
    p['gammastar'] = 3.34  # CO2 compensation point (Pa)
    p['kmm'] = 46.1  # Michaelis-Menten coefficient (Pa)
    p['ns_star'] = 1.  # viscosity correction (-)
    p['vpd'] = 1. * conv.kPa_2_Pa  # Pa
    p['iabs'] = 800.  # absorbed PAR (umol m-2 s-1)
    p['kphio'] = 0.05  # quantum yield efficiency (-)

    # costs
    p['beta'] = 146.  # Vcmax to transpiration unit cost ratio (-)
    p['gamma_cost'] = 20.  # Jmax to transpiration unit cost ratio (-)
    p['cost_scalar'] = np.nan  # absolute cost scale, absent by default

    # Jmax25 to Vmax25 ratio (Medlyn et al., 2002), start point only
    p['JV'] = 1.67

    p['limitation'] = 'none'

    return p


def _field(p, name, default=None):

    """
    Reads a field from any record type: pandas series, recarray row,
    namedtuple, class, or dictionary.

    """

    try:
        return getattr(p, name)

    except AttributeError:
        try:
            return p[name]

        except (KeyError, IndexError, TypeError, ValueError):
            return default


def environment(p):

    """
    Extracts the environmental state from a flat record.

    Arguments:
    ----------
    p: recarray object or pandas series or class containing the data
        record's met data & params

    Returns:
    --------
    The validated EnvironmentalState.

    """

    if isinstance(p, EnvironmentalState):
        return p

    fields = {e: _field(p, e) for e in _Environment._fields}

    if any(fields[e] is None for e in ('ca', 'gammastar', 'kmm')):
        raise InputValidationError('ca, gammastar and kmm are required')

    return EnvironmentalState(**{k: v for k, v in fields.items()
                                 if v is not None})


def costs(p):

    """
    Extracts the cost parameters from a flat record, cost_scalar being
    optional.

    """

    if isinstance(p, CostParameters):
        return p

    return CostParameters(_field(p, 'beta'), _field(p, 'gamma_cost', 0.),
                          _field(p, 'cost_scalar'))


def limitation_mode(p):

    """
    Reads the limitation mode of a record, 'none' if unset.

    """

    mode = _field(p, 'limitation', 'none')

    if (mode is None) or (isinstance(mode, float) and np.isnan(mode)):
        mode = 'none'

    mode = str(mode).lower()

    if mode not in LIMITATIONS:
        raise InputValidationError('unknown limitation %s, pick one of %s'
                                   % (mode, ', '.join(LIMITATIONS)))

    return mode
