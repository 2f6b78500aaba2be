from .process_data_set import ProcessDataSet
from .process_scheduler import ProcessScheduler, default_scheduler

__all__ = ["ProcessDataSet", "ProcessScheduler", "default_scheduler"]
