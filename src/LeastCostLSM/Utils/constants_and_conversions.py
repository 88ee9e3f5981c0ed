# -*- coding: utf-8 -*-

"""
Unit conversions and general constants used throughout the model.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "Unit converter and general constants"
__author__ = "Manon E. B. Sabot"
__version__ = "1.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

class ConvertUnits(object):  # unit conversions

    def __init__(self):

        # magnitudes
        self.MEGA = 1.e6  # 1 to micro (e.g. mol to umol)
        self.FROM_MEGA = 1.e-6  # micro to 1 (e.g. ppm to mol mol-1)

        # pressures
        self.kPa_2_Pa = 1.e3  # kPa to Pa
        self.Pa_2_kPa = 1.e-3  # Pa to kPa

        return


class Constants(object):  # general constants

    def __init__(self):

        self.zero = 1.e-17  # numerical zero
        self.Patm = 101325.  # standard atmospheric pressure (Pa)
        self.Dr = 1.6  # ratio of H2O to CO2 diffusivities in air
        self.penalty = 1.e9  # objective value for non-solvable states

        return
