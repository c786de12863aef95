# cropsight/services/__init__.py
from .dashboard import DashboardStats, compute_dashboard_stats, summarize_field_map

__all__ = ["DashboardStats", "compute_dashboard_stats", "summarize_field_map"]
