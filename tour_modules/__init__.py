"""
Tour Modules.

Thin orchestration layers over the tour engines.  Each module contains:
- Domain models (the nouns returned to callers)
- A service facade that reads ``EngineSettings`` and delegates every
  calculation to ``tour_engines``

Modules:
- Invoice: invoice item type catalog
- Bill: disbursement bill preview (payee batches and bill total)
- Group: group closing profit report (tax, team and employee bonuses)
"""

from tour_modules import bill, group, invoice

__all__ = ["bill", "group", "invoice"]
