"""Tax engine public API."""
from taxregime.engine.optimizer import suggest_savings
from taxregime.engine.tax_engine import compare_regimes, compute_tax, select_slab_table

__all__ = ["compute_tax", "compare_regimes", "select_slab_table", "suggest_savings"]
