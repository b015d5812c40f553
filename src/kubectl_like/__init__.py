"""kubectl-like: print only the container log lines that match a pattern"""

__version__ = '0.1.0'
