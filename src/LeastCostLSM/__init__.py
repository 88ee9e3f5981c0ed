from LeastCostLSM.Utils.constants_and_conversions import ConvertUnits
from LeastCostLSM.Utils.constants_and_conversions import Constants

# initialization of the unit and constant "libraries"
conv = ConvertUnits()  # unit converter
cst = Constants()  # general constants

# input records & defaults, a fresh default record is built on request
from LeastCostLSM.Utils.default_params import EnvironmentalState
from LeastCostLSM.Utils.default_params import CostParameters
from LeastCostLSM.Utils.default_params import default_params
from LeastCostLSM.Utils.default_params import environment, costs
from LeastCostLSM.Utils.default_params import limitation_mode, LIMITATIONS

# failure states
from LeastCostLSM.Utils.errors import InputValidationError, RootNotFoundError
from LeastCostLSM.Utils.errors import Unsolved, CalibrationFailed
from LeastCostLSM.Utils.errors import is_unsolved
from LeastCostLSM.Utils.errors import BoundaryWarning, ColimitationWarning

# other modules
from LeastCostLSM.run_leaf_level import run as hrun
