from LeastCostLSM.CH2OCoupler.coupler_utils import A_supply, trans_cost
from LeastCostLSM.CH2OCoupler.coupler_utils import capacity_cost
from LeastCostLSM.CH2OCoupler.coupler_utils import coord_point, box
from LeastCostLSM.CH2OCoupler.bounded_opt import OptimizationResult
from LeastCostLSM.CH2OCoupler.bounded_opt import minimize_bounded
from LeastCostLSM.CH2OCoupler.LeastCost import chi_analytical
from LeastCostLSM.CH2OCoupler.LeastCost import cost_ratio, net_benefit
from LeastCostLSM.CH2OCoupler.LeastCost import net_benefit_ll
from LeastCostLSM.CH2OCoupler.LeastCost import net_benefit_jmax
from LeastCostLSM.CH2OCoupler.LeastCost import OBJECTIVES, least_cost
from LeastCostLSM.CH2OCoupler.LeastCost import ridge_start
