"""
Kernel layer.

`cpswap/kernels/python/` holds the integer-only pricing and share kernels the
pool is built on. They are pure functions with typed results and no knowledge
of ledgers or events.
"""
