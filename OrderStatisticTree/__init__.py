from .OrderStatisticTreeArray import HealthReport, OrderStatisticTree, build_tree, warmup

__all__ = ["HealthReport", "OrderStatisticTree", "build_tree", "warmup"]
