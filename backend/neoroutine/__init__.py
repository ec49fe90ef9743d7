"""
NeoRoutine backend - habit analytics, badges and gentle reminders
"""
__version__ = "0.1.0"
