"""
Tests of the least cost criteria and of their numerical optimisation,
checked against the closed form solution for chi.
"""

import warnings

import numpy as np
import pytest
from scipy.optimize import OptimizeResult

from LeastCostLSM import (BoundaryWarning, CostParameters,
                          InputValidationError, cst)
from LeastCostLSM.SPAC import rubisco_assimilation
from LeastCostLSM.CH2OCoupler import bounded_opt
from LeastCostLSM.CH2OCoupler import (OBJECTIVES, chi_analytical,
                                      coord_point, cost_ratio, least_cost,
                                      minimize_bounded, net_benefit,
                                      net_benefit_jmax, net_benefit_ll)


def calibrated_scalar(env, cost, chi):
    """Cost scale at which the best net benefit is nil."""
    return 1. / cost_ratio(coord_point(env, chi), env, cost)


def with_light(env, iabs):
    return env._replace(iabs=iabs)


class TestAnalyticalChi:

    def test_example_state(self, env, cost, chi_ref):
        assert chi_ref == pytest.approx(0.706, abs=5.e-3)
        assert 0.65 < chi_ref < 0.75

    def test_increasing_vpd_closes_stomata(self, env, cost):
        dry = chi_analytical(env.gammastar, env.ca, env.kmm, 3000., cost.beta)
        wet = chi_analytical(env.gammastar, env.ca, env.kmm, 300., cost.beta)

        assert dry < wet

    def test_no_vpd(self, env, cost):
        assert chi_analytical(env.gammastar, env.ca, env.kmm, 0.,
                              cost.beta) == pytest.approx(1.)

    @pytest.mark.parametrize('ca, vpd', [(0., 1000.), (-40., 1000.),
                                         (40., -1.)])
    def test_invalid_inputs(self, env, cost, ca, vpd):
        with pytest.raises(InputValidationError):
            chi_analytical(env.gammastar, ca, env.kmm, vpd, cost.beta)


class TestCriteria:

    def test_registry(self):
        assert set(OBJECTIVES) == {'ratio', 'net', 'net_ll', 'net_jmax'}
        assert OBJECTIVES['ratio'].maximize is False
        assert all(OBJECTIVES[e].maximize for e in ['net', 'net_ll',
                                                      'net_jmax'])
        assert OBJECTIVES['net_jmax'].ndim == 3
        assert [e for e in OBJECTIVES if OBJECTIVES[e].colimited] == [
            'net_ll', 'net_jmax']

    def test_net_benefit_identity(self, env, cost):
        c = CostParameters(cost.beta, cost.gamma_cost, 1.e-3)

        for x in [coord_point(env, 0.6), np.array([40., 3.])]:

            a_c = rubisco_assimilation(env, x[0], x[1]).a_rubisco
            ratio = cost_ratio(x, env, c)
            gain = net_benefit(x, env, c, maximize=False)

            assert gain == pytest.approx(a_c * (1. - c.cost_scalar * ratio),
                                         rel=1.e-10)

    def test_sign_convention(self, env, cost):
        c = CostParameters(cost.beta, cost.gamma_cost, 1.e-3)
        x = coord_point(env, 0.6)

        assert cost_ratio(x, env, c, True) == -cost_ratio(x, env, c, False)
        assert net_benefit_ll(x, env, c) == -net_benefit_ll(x, env, c, False)

    def test_unsolved_points_are_penalised(self, env, cost):
        c = CostParameters(cost.beta, cost.gamma_cost, 1.e-3)
        x = np.array([50., 0., 80.])

        assert cost_ratio(x, env, c) == cst.penalty
        assert net_benefit(x, env, c) == cst.penalty
        assert net_benefit_ll(x, env, c) == cst.penalty
        assert net_benefit_jmax(x, env, c) == cst.penalty
        assert net_benefit(x, env, c, maximize=False) == cst.penalty

    def test_net_criteria_need_a_scale(self, env, cost):
        with pytest.raises(InputValidationError):
            net_benefit(coord_point(env, 0.6), env, cost)

        for limitation in ['light', 'jmax']:
            with pytest.raises(InputValidationError):
                least_cost(env, cost, limitation=limitation)

        with pytest.raises(InputValidationError):
            least_cost(env, cost, objective='net')

    def test_bad_settings(self, env, cost):
        with pytest.raises(InputValidationError):
            least_cost(env, cost, objective='profit')

        with pytest.raises(InputValidationError):
            least_cost(env, cost, limitation='shade')

        with pytest.raises(InputValidationError):
            least_cost(env, cost, chi0=1.2)


class TestOptimiser:

    def test_quadratic_bowl(self):
        def bowl(x):
            return (x[0] - 2.) ** 2 + (x[1] - 3.) ** 2

        with warnings.catch_warnings():
            warnings.simplefilter('error', category=BoundaryWarning)
            out = minimize_bounded(bowl, [1., 1.], [0.1, 0.1], [10., 10.])

        assert out.x == pytest.approx([2., 3.], abs=1.e-5)
        assert out.converged
        assert not any(out.at_bound)
        assert out.assim is None

    def test_flags_the_bounds(self):
        def bowl(x):
            return (x[0] - 2.) ** 2 + (x[1] - 3.) ** 2

        with pytest.warns(BoundaryWarning):
            out = minimize_bounded(bowl, [1., 1.], [0.1, 0.1], [10., 1.5])

        assert list(out.at_bound) == [False, True]
        assert out.x[1] == pytest.approx(1.5)

    def test_budget_exhaustion_is_reported(self):
        def rosen(x):
            return (1. - x[0]) ** 2 + 100. * (x[1] - x[0] ** 2) ** 2

        x0 = [0.3, 2.]
        out = minimize_bounded(rosen, x0, [0.01, 0.01], [10., 10.],
                               maxiter=2)

        assert not out.converged
        assert out.nit <= 2
        assert out.fun <= rosen(x0)

    def test_shared_budget(self):
        def rosen(x):
            return (1. - x[0]) ** 2 + 100. * (x[1] - x[0] ** 2) ** 2

        out = minimize_bounded(rosen, [0.3, 2.], [0.01, 0.01], [10., 10.],
                               maxiter=500)

        assert out.nit <= 500
        assert out.x == pytest.approx([1., 1.], abs=1.e-3)

    @pytest.mark.parametrize('polish_fun, converged, x', [
        (2., False, [1.2, 1.]), (0.5, True, [1.5, 1.])])
    def test_flag_follows_the_point_kept(self, monkeypatch, polish_fun,
                                         converged, x):
        def staged(fun, x0, method=None, bounds=None, options=None):
            if method == 'L-BFGS-B':
                return OptimizeResult(x=np.array([1.2, 1.]), fun=1., nit=3,
                                      success=False, message='ABNORMAL')

            return OptimizeResult(x=np.array([1.5, 1.]), fun=polish_fun,
                                  nit=4, success=True, message='done')

        monkeypatch.setattr(bounded_opt, 'minimize', staged)
        out = minimize_bounded(lambda z: 0., [1., 1.], [0.1, 0.1],
                               [10., 10.])

        assert out.converged is converged
        assert list(out.x) == pytest.approx(x)
        assert out.fun == min(1., polish_fun)
        assert out.nit == 7

    @pytest.mark.parametrize('x0, lower, upper', [
        ([1., 1.], [0.1], [10., 10.]),
        ([1., 1.], [0., 0.1], [10., 10.]),
        ([1., 1.], [0.1, 0.1], [0.05, 10.]),
        ([20., 1.], [0.1, 0.1], [10., 10.]),
        ([np.nan, 1.], [0.1, 0.1], [10., 10.])])
    def test_invalid_box(self, x0, lower, upper):
        with pytest.raises(InputValidationError):
            minimize_bounded(lambda x: 0., x0, lower, upper)

    def test_invalid_budget(self):
        with pytest.raises(InputValidationError):
            minimize_bounded(lambda x: 0., [1.], [0.1], [10.], maxiter=0)


class TestCostRatio:

    def test_numerical_matches_analytical(self, env, cost, chi_ref):
        out, record = least_cost(env, cost, maxiter=200)

        assert record['objective'] == 'ratio'
        assert record['chi'] == pytest.approx(chi_ref, abs=1.e-3)
        assert out.assim.chi == record['chi']
        assert record['ci'] == pytest.approx(record['chi'] * env.ca)
        assert record['assimilation'] == pytest.approx(
            record['gs'] * (env.ca - record['ci']), rel=1.e-8)
        assert np.isnan(record['jmax'])
        assert np.isnan(record['colim_gap'])
        assert record['rublim'] is True

    def test_gap_shrinks_with_the_budget(self, env, cost, chi_ref):
        gaps = []

        for maxiter in [1, 2, 3, 5, 10, 200]:

            __, record = least_cost(env, cost, chi0=0.5, maxiter=maxiter)
            gaps += [abs(record['chi'] - chi_ref)]

        assert all([later <= earlier + 1.e-12 for earlier, later in
                    zip(gaps[:-1], gaps[1:])])
        assert gaps[-1] < 1.e-3

    @pytest.mark.parametrize('vpd, beta', [(500., 146.), (2500., 146.),
                                           (1000., 60.), (1000., 300.)])
    def test_across_conditions(self, env, vpd, beta):
        env = env._replace(vpd=vpd)
        c = CostParameters(beta)
        __, record = least_cost(env, c)

        assert record['chi'] == pytest.approx(
            chi_analytical(env.gammastar, env.ca, env.kmm, vpd, beta),
            abs=1.e-3)

    def test_net_benefit_without_light_limitation_runs_away(self, env,
                                                            cost):
        c = CostParameters(cost.beta, cost.gamma_cost, 1.e-4)

        with pytest.warns(BoundaryWarning):
            out, record = least_cost(env, c)

        assert record['objective'] == 'net'
        assert record['hit_bound']
        assert record['net_value'] > 0.


class TestLightLimitation:

    def test_chi_invariant_to_light(self, env, cost):
        c = CostParameters(cost.beta, cost.gamma_cost, 9.e-4)
        chis = []

        for iabs in [10., 50., 500., 1000., 5000.]:

            with warnings.catch_warnings():
                warnings.simplefilter('ignore')
                __, record = least_cost(with_light(env, iabs), c,
                                        limitation='light')

            assert record['objective'] == 'net_ll'
            assert record['net_value'] > 0.
            chis += [record['chi']]

        assert np.all(np.isfinite(chis))
        assert max(chis) - min(chis) < 1.e-3

    @pytest.mark.parametrize('limitation, cost_scalar', [('light', 8.79e-4),
                                                         ('jmax', 9.4e-4)])
    def test_optimum_does_not_depend_on_the_start(self, env, chi_ref,
                                                  limitation, cost_scalar):
        c = CostParameters(146., 20., cost_scalar)
        records = []

        for chi0 in [0.6, chi_ref, 0.8]:

            with warnings.catch_warnings():
                warnings.simplefilter('ignore')
                __, record = least_cost(env, c, limitation=limitation,
                                        chi0=chi0)

            assert record['converged']
            assert record['net_value'] > 0.
            records += [record]

        chis = [e['chi'] for e in records]
        assert max(chis) - min(chis) < 1.e-3
        assert [e['net_value'] for e in records] == pytest.approx(
            [records[0]['net_value']] * 3, rel=1.e-5)

        # better than the co-limited point at the analytical chi
        crit = OBJECTIVES[records[0]['objective']]
        JV = None

        if crit.ndim == 3:
            JV = 1.67

        start = crit.func(coord_point(env, chi_ref, JV=JV), env, c,
                          maximize=False)
        assert records[0]['net_value'] > start
        assert records[0]['colim_gap'] < 1.e-4

    def test_uncalibrated_scale_departs_from_analytical(self, env, cost,
                                                        chi_ref):
        c_star = calibrated_scalar(env, cost, chi_ref)
        c = CostParameters(cost.beta, cost.gamma_cost, c_star / 4.)

        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            __, record = least_cost(env, c, limitation='light')

        assert record['chi'] - chi_ref > 0.03

    def test_darkness_is_unsolved(self, env, cost):
        c = CostParameters(cost.beta, cost.gamma_cost, 9.e-4)
        out, record = least_cost(with_light(env, 0.), c, limitation='light')

        assert not out.assim
        assert not out.converged
        assert np.isnan(record['chi'])
        assert np.isnan(record['net_value'])

    def test_jmax_limitation(self, env):
        c = CostParameters(146., 20., 5.e-4)

        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            out, record = least_cost(env, c, limitation='jmax')

        assert record['objective'] == 'net_jmax'
        assert len(out.x) == 3
        assert not out.at_bound[2]
        assert np.isfinite(record['jmax'])
        assert 0. < record['chi'] < 1.
        assert record['net_value'] > 0.
        assert record['jmax'] > 0.
