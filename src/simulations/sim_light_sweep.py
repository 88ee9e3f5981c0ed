#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Code that sweeps the absorbed light for each of the limitation modes
(no light limitation, light limitation, light and Jmax limitation), and
summarises how far the optimal chi strays from its analytical value.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "Light sweep of the least cost optimisation"
__author__ = "Manon E. B. Sabot"
__version__ = "1.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import argparse  # read in the user input
import os  # check for paths
import sys  # check for files, versions
import numpy as np  # array manipulations, math operators
import pandas as pd  # read/write dataframes, csv files
import warnings  # ignore warnings

# change the system path to load modules from LeastCostLSM
script_dir = os.path.dirname(os.path.realpath(sys.argv[0]))
sys.path.append(os.path.abspath(os.path.join(script_dir, '..')))

# own modules
from LeastCostLSM import default_params  # default forcing & params
from LeastCostLSM import LIMITATIONS  # limitation modes
from LeastCostLSM.Utils import get_main_dir  # get the project's directory
from LeastCostLSM.Utils import write_csv  # write the outputs
from LeastCostLSM.CH2OCoupler import chi_analytical  # reference chi
from LeastCostLSM import hrun  # run the optimisation

# ignore these warnings
warnings.filterwarnings("ignore", category=UserWarning)
warnings.filterwarnings("ignore", category=RuntimeWarning)


# ======================================================================

def main(iabs=np.linspace(50., 2000., 40), cost_scalar=9.e-4, workers=1,
         maxiter=200):

    """
    Main function: runs the light sweep for the three limitation modes,
                   then prints the spread of chi for each of them.

    Arguments:
    ----------
    iabs: array
        absorbed photosynthetically active fluxes [umol m-2 s-1]

    cost_scalar: float
        absolute multiplier of the maintenance costs [-]

    workers: int
        number of processes the records are shared between

    maxiter: int
        iteration budget of the optimiser

    Returns:
    --------
    'light_sweep.csv' under 'output/simulations/', which contains the
    forcing and the outputs.

    """

    base_dir = get_main_dir()  # working paths
    opath = os.path.join(os.path.join(base_dir, 'output'), 'simulations')
    fname = os.path.join(opath, 'light_sweep.csv')

    df = forcing(iabs, cost_scalar)
    df2 = hrun(df, fname=None, maxiter=maxiter, workers=workers)
    df2 = pd.concat([df, df2], axis=1)
    write_csv(fname, df2)  # the sweep's input & output

    p = df.iloc[0]
    ref = chi_analytical(p.gammastar, p.ca, p.kmm, p.vpd, p.beta,
                         ns_star=p.ns_star)
    print('analytical chi: %.4f' % (ref))

    for mode in LIMITATIONS:

        sub = df2[df2['limitation'] == mode]
        print('%s: chi in [%.4f, %.4f], %d unconverged, %d on the bounds' %
              (mode, sub['chi'].min(), sub['chi'].max(),
               (~sub['converged'].astype(bool)).sum(),
               sub['hit_bound'].astype(bool).sum()))

    return


def forcing(iabs, cost_scalar):

    """
    Builds the records of the sweep, one per limitation mode and per
    light level.

    Arguments:
    ----------
    iabs: array
        absorbed photosynthetically active fluxes [umol m-2 s-1]

    cost_scalar: float
        absolute multiplier of the maintenance costs [-]

    Returns:
    --------
    df: pandas dataframe
        dataframe containing all input data & params

    """

    records = []

    for mode in LIMITATIONS:

        for light in iabs:

            p = default_params()
            p['iabs'] = light
            p['limitation'] = mode

            if mode != 'none':  # the cost ratio otherwise
                p['cost_scalar'] = cost_scalar

            records += [p]

    df = pd.DataFrame(records).infer_objects()
    df.reset_index(inplace=True, drop=True)

    return df


# ======================================================================

if __name__ == "__main__":

    # define the argparse settings to read run set up file
    description = "sweep the absorbed light for every limitation mode"
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument('-c', '--cost_scalar', type=float, default=9.e-4,
                        help='absolute cost scale of the net benefit')
    parser.add_argument('-w', '--workers', type=int, default=1,
                        help='number of parallel processes')
    parser.add_argument('-n', '--maxiter', type=int, default=200,
                        help='iteration budget of the optimiser')
    args = parser.parse_args()

    main(cost_scalar=args.cost_scalar, workers=args.workers,
         maxiter=args.maxiter)
