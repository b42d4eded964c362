"""
Front ends that connect the engine to the outside world.

Modules:
    uci — synchronous UCI command loop over stdin/stdout. Run it with
          `python interface/uci.py` or the `xanadu-uci` console script.
"""
