"""PyMemSim — a main-memory allocation simulator.

Replays a schedule of processes entering and leaving memory and shows,
frame by frame, the layout produced by a chosen placement strategy
(first, best, next, worst fit, or non-contiguous).
"""
