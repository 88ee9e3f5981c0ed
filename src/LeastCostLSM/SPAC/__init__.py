from LeastCostLSM.SPAC.leaf import AssimilationResult
from LeastCostLSM.SPAC.leaf import quad_roots, select_root, Ci_coefs, solve_Ci
from LeastCostLSM.SPAC.leaf import jmax_attenuation, electron_flux
from LeastCostLSM.SPAC.leaf import A_rubisco, A_light, coord_Vmax
from LeastCostLSM.SPAC.leaf import rubisco_assimilation, arbitrate
from LeastCostLSM.SPAC.leaf import colim_gap, rubisco_limit
