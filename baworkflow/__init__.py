"""
BA Workflow Tools - working-day, sprint, fiscal and timezone calculations
for business analysts and agile teams.
"""

__version__ = "1.0.0"
