"""
Orchestration - phase specification, state machine, executors, engine.
"""
