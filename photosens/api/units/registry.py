"""
Unit Definitions and Registry
=============================

Defines units and set unit registry.
"""

import pint


ureg = pint.UnitRegistry()
"""
Standard unit registry as defined by pint package.
"""
