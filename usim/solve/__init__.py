from .sweep import Sweep
from .results import (
	ResultGrid,
	build_result_grid_from_sweep,
)
from .simulate import simulate
