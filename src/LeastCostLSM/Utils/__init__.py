from LeastCostLSM.Utils.general_utils import get_script_dir, get_main_dir
from LeastCostLSM.Utils.general_utils import read_csv, write_csv
