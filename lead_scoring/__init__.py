"""
Lead Scoring Engine
===================
Deterministic lead scoring for CRM person/organization records:
  Factor scoring (tiered thresholds, categorical lookups)
  Person scoring (role, relationship, engagement)
  Company scoring (revenue, growth, industry fit, distance, existing score)
  Combined scoring (weighted blend, tier classification, Swedish explanation)
"""

__version__ = "1.0.0"
__author__ = "Lead Scoring Team"
