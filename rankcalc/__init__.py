"""
RankCalc - Rank/Rating Engine

This package contains the core modules for:
- Tier ladder mapping and the Glicko-inspired rating engine (rankcalc.rating)
- Snapshot assembly and history analytics (rankcalc.history)
- Shared configuration and utilities
"""

from rankcalc.config import *
