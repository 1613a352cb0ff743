"""
Cone Fill Simulation
====================
Conveyor belt cone filling simulation.

A belt carries cones past a single hose head that decides on its own
which cone to fill next and how to intercept it in time.
"""

__version__ = "0.1.0"
__author__ = "Cones Development Team"
