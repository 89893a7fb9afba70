"""campus_waste package initializer.

This package turns the campus waste CSV into the data structures behind the
dashboard views.  Modules cover loading, aggregation and one builder per
view (time series, composition tree, flow graph, material distribution,
stream layout).  See individual module docstrings for details.
"""
