"""
Tests of the input records and of the batch runner.
"""

import numpy as np
import pandas as pd
import pytest

from LeastCostLSM import (CostParameters, EnvironmentalState,
                          InputValidationError, costs, default_params,
                          environment, hrun, limitation_mode)
from LeastCostLSM.CH2OCoupler import least_cost
from LeastCostLSM.Utils import read_csv


class TestRecords:

    def test_default_params_are_fresh(self):
        p1 = default_params()
        p1['ca'] = 1.
        p2 = default_params()

        assert p2['ca'] == pytest.approx(400.e-6 * 101325.)
        assert np.isnan(p2['cost_scalar'])
        assert p2['limitation'] == 'none'

    def test_environment_from_series(self, params):
        env = environment(params)

        assert isinstance(env, EnvironmentalState)
        assert env.ca == pytest.approx(40.53)
        assert env.vpd == 1000.
        assert environment(env) is env

    def test_optional_fields_default(self):
        env = environment({'ca': 40., 'gammastar': 3., 'kmm': 46.})

        assert env.ns_star == 1.
        assert env.iabs == 800.
        assert env.kphio == 0.05

    def test_missing_required_field(self):
        with pytest.raises(InputValidationError):
            environment({'ca': 40., 'kmm': 46.})

    @pytest.mark.parametrize('field, value', [('ca', 0.), ('ca', -40.),
                                              ('kmm', 0.), ('vpd', -1.),
                                              ('gammastar', -1.),
                                              ('gammastar', 50.),
                                              ('ns_star', 0.),
                                              ('iabs', -10.),
                                              ('ca', np.nan),
                                              ('ca', 'high')])
    def test_invalid_environment(self, params, field, value):
        params[field] = value

        with pytest.raises(InputValidationError):
            environment(params)

    def test_costs(self, params):
        c = costs(params)

        assert c.beta == 146.
        assert c.gamma_cost == 20.
        assert c.cost_scalar is None

        params['cost_scalar'] = 1.e-3
        assert costs(params).cost_scalar == 1.e-3

    @pytest.mark.parametrize('beta, gamma_cost, cost_scalar', [
        (0., 20., None), (-1., 20., None), (146., -1., None),
        (146., 20., 0.), (146., 20., -1.e-3)])
    def test_invalid_costs(self, beta, gamma_cost, cost_scalar):
        with pytest.raises(InputValidationError):
            CostParameters(beta, gamma_cost, cost_scalar)

    def test_limitation_mode(self, params):
        assert limitation_mode(params) == 'none'

        params['limitation'] = 'Light'
        assert limitation_mode(params) == 'light'

        params['limitation'] = np.nan
        assert limitation_mode(params) == 'none'

        params['limitation'] = 'shade'

        with pytest.raises(InputValidationError):
            limitation_mode(params)

    def test_flat_record_drives_the_optimisation(self, params, env, cost):
        __, r1 = least_cost(params)
        __, r2 = least_cost(env, cost)

        assert r1['chi'] == pytest.approx(r2['chi'])


def batch():
    records = []

    for iabs, mode, scalar in [(800., 'none', np.nan),
                               (0., 'light', 9.e-4),
                               (1000., 'light', 9.e-4),
                               (800., 'jmax', 5.e-4)]:

        p = default_params()
        p['iabs'] = iabs
        p['limitation'] = mode
        p['cost_scalar'] = scalar
        records += [p]

    return pd.DataFrame(records).infer_objects()


class TestBatch:

    def test_order_and_unsolved_rows(self):
        df = batch()
        out = hrun(df)

        assert len(out) == len(df)
        assert list(out.index) == list(df.index)
        assert list(out['objective']) == ['ratio', 'net_ll', 'net_ll',
                                          'net_jmax']

        # no light, no solution
        assert np.isnan(out['chi'].iloc[1])
        assert not out['converged'].iloc[1]

        for i in [0, 2, 3]:
            __, record = least_cost(df.iloc[i])
            assert out['chi'].iloc[i] == pytest.approx(record['chi'])

        assert np.isnan(out['jmax'].iloc[0])
        assert np.isfinite(out['jmax'].iloc[3])

    def test_parallel_matches_serial(self):
        df = batch()
        serial = hrun(df)
        parallel = hrun(df, workers=2)

        assert np.allclose(serial['chi'], parallel['chi'], equal_nan=True)
        assert list(serial['objective']) == list(parallel['objective'])

    def test_invalid_record_raises(self):
        df = batch()
        df.loc[2, 'ca'] = -1.

        with pytest.raises(InputValidationError):
            hrun(df)

    def test_outputs_written_with_units(self, tmp_path):
        fname = str(tmp_path / 'out' / 'batch.csv')
        out = hrun(batch().iloc[3:], fname=fname)  # no empty output
        df, columns = read_csv(fname)

        assert list(df.columns) == list(out.columns)
        assert ('gs', '[umol m-2 s-1 Pa-1]') in list(columns)
        assert df['chi'].iloc[0] == pytest.approx(out['chi'].iloc[0])
