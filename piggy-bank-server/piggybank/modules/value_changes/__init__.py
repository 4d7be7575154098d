"""Value-change history exports"""

from .models import ValueChange, ValueChangeDirection

__all__ = ["ValueChange", "ValueChangeDirection"]
