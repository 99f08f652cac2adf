"""Shared pure-numpy functions for distributed backends (Dask, Spark).

Every function here operates on pandas partitions and NumPy arrays and has
**zero** Dask / Spark dependencies.
"""
