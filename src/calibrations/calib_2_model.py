#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Calibrates the absolute cost scale of the light-limited and of the
Jmax-limited net benefit criteria, so that each reproduces the chi of
the cost ratio criterion (or its analytical solution). The calibrations
are run in a loop over the absorbed light levels given by the user.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "Calibration of the cost scalar"
__author__ = "Manon E. B. Sabot"
__version__ = "3.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import argparse  # read in the user input
import os  # check for paths
import sys  # check for files, versions
import warnings  # ignore warnings

# change the system path to load modules from LeastCostLSM
script_dir = os.path.dirname(os.path.realpath(sys.argv[0]))
sys.path.append(os.path.abspath(os.path.join(script_dir, '..')))

# own modules
from LeastCostLSM import default_params, environment, costs
from LeastCostLSM.Utils import get_main_dir  # get the project's directory
from LeastCostLSM.CH2OCoupler import chi_analytical, least_cost
from calibrations import CostCalib, write_report  # calibration functions

# ignore these warnings
warnings.filterwarnings("ignore", category=UserWarning)
warnings.filterwarnings("ignore", category=RuntimeWarning)


# ======================================================================

def main(iabs=[800.], interval=(1.e-4, 1.e-2), numerical=False, tol=1.e-3):

    """
    Main function: calibrates the cost_scalar of the 'net_ll' and
                   'net_jmax' criteria at each light level.

    Arguments:
    ----------
    iabs: list
        absorbed photosynthetically active fluxes [umol m-2 s-1]

    interval: tuple
        bracket of the cost_scalar search

    numerical: bool
        if True, the target is the numerically optimised chi of the cost
        ratio criterion rather than its analytical solution

    tol: float
        residual tolerance band on chi

    Returns:
    --------
    'cost_scalar.txt' under 'output/calibrations/', which contains the
    summary of each calibration.

    """

    base_dir = get_main_dir()  # working paths
    opath = os.path.join(os.path.join(base_dir, 'output'), 'calibrations')
    fname = os.path.join(opath, 'cost_scalar.txt')

    for light in iabs:

        p = default_params()
        p['iabs'] = light
        env = environment(p)
        c = costs(p)

        if numerical:
            __, record = least_cost(env, c, objective='ratio')
            target = record['chi']

        else:
            target = chi_analytical(env.gammastar, env.ca, env.kmm, env.vpd,
                                    c.beta, ns_star=env.ns_star)

        for objective in ['net_ll', 'net_jmax']:

            calib = CostCalib(objective=objective, tol=tol)
            out = calib.run(target, env, c, interval=interval)
            write_report(fname, out, target, '%s, iabs = %s' %
                         (objective, light))

            if out:
                print('%s at iabs = %s: cost_scalar = %.4e (chi = %.4f)' %
                      (objective, light, out.cost_scalar, out.chi))

            else:
                print('%s at iabs = %s: %s' % (objective, light, out.reason))

    return


# ======================================================================

if __name__ == "__main__":

    # define the argparse settings to read run set up file
    description = "calibrate the cost scalar of the net benefit criteria"
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument('-i', '--iabs', type=float, nargs='+',
                        default=[800.], help='absorbed light levels')
    parser.add_argument('-l', '--lower', type=float, default=1.e-4,
                        help='lower end of the cost_scalar bracket')
    parser.add_argument('-u', '--upper', type=float, default=1.e-2,
                        help='upper end of the cost_scalar bracket')
    parser.add_argument('-n', '--numerical', action='store_true',
                        help='target the numerical cost ratio chi')
    parser.add_argument('-t', '--tol', type=float, default=1.e-3,
                        help='residual tolerance band on chi')
    args = parser.parse_args()

    main(iabs=args.iabs, interval=(args.lower, args.upper),
         numerical=args.numerical, tol=args.tol)
