# -*- coding: utf-8 -*-

"""
Runs the least cost optimisation at the leaf-level, over a batch of
independent environmental states.

This file is part of the LeastCostLSM model.

Copyright (c) 2022 Manon E. B. Sabot

Please refer to the terms of the MIT License, which you should have
received along with the LeastCostLSM.

"""

__title__ = "Run the least cost optimisation at the leaf-level"
__author__ = "Manon E. B. Sabot"
__version__ = "9.0 (12.03.2021)"
__email__ = "m.e.b.sabot@gmail.com"


# ======================================================================

# general modules
import collections  # ordered dictionaries
import functools  # fix the solver settings across the records
from multiprocessing import Pool  # independent records in parallel
import numpy as np  # array manipulations, math operators
import pandas as pd  # read/write dataframes, csv files

# own modules
from LeastCostLSM.CH2OCoupler import least_cost  # Least cost (Prentice)
from LeastCostLSM.Utils import write_csv  # write the outputs


# ======================================================================

OUTPUTS = ['vcmax', 'gs', 'jmax', 'ci', 'chi', 'assimilation', 'net_value',
           'converged', 'iterations', 'hit_bound', 'rublim', 'colim_gap',
           'objective']


def at_leaf(p, maxiter=200, JV=1.67):

    """
    Optimisation wrapper for a single record. Invalid records raise an
    InputValidationError, unsolvable ones are returned as nan outputs.

    Arguments:
    ----------
    p: recarray object or pandas series
        record's environmental state, cost parameters & limitation

    maxiter: int
        iteration budget of the optimiser

    JV: float
        ratio of Jmax to Vcmax [-] at the start point, if the record
        does not carry its own

    Returns:
    --------
    An ordered dictionary of the outputs.

    """

    try:  # is JV one of the input fields?
        if np.isfinite(float(p.JV)):
            JV = float(p.JV)

    except (IndexError, AttributeError, ValueError):
        pass

    __, record = least_cost(p, maxiter=maxiter, JV=JV)

    return collections.OrderedDict([(key, record[key]) for key in OUTPUTS])


def run(df, fname=None, maxiter=200, workers=1):

    """
    Runs the least cost optimisation over every record of a dataframe.
    The records are independent of one another, so they can be spread
    over several processes.

    Arguments:
    ----------
    df: pandas dataframe
        dataframe containing all input data & params, one record per
        row

    fname: string
        output filename, the outputs are not saved if None

    maxiter: int
        iteration budget of the optimiser

    workers: int
        number of processes the records are shared between

    Returns:
    --------
    df2: pandas dataframe
        dataframe of the outputs, in the order of the input records:
            vcmax, gs, jmax, ci, chi, assimilation, net_value,
            converged, iterations, hit_bound, rublim, colim_gap,
            objective

    """

    # from pandas to recarray object for execution speed
    force = df.to_records(index=False)
    solve = functools.partial(at_leaf, maxiter=maxiter)

    if (workers > 1) and (len(force) > 1):
        pool = Pool(processes=int(workers))

        try:  # map preserves the order of the records
            out = pool.map(solve, force)

        finally:
            pool.close()
            pool.join()

    else:
        out = [solve(p) for p in force]

    df2 = pd.DataFrame(out, columns=OUTPUTS, index=df.index)

    if fname is not None:  # save the outputs to a csv file
        write_csv(fname, df2)

    return df2
