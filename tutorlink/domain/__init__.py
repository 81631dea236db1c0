"""
Pure scheduling rules: slot generation, conflict detection, the session
status lifecycle and earnings aggregation. Nothing here touches storage.
"""
