from calibrations.calib_utils import CostCalib, Calibration, Evaluation
from calibrations.calib_utils import write_report
