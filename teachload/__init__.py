"""
teachload - teaching load analytics and calendar export for multi-week timetables.
"""
