"""
GenSynth - generative-art plugin host with self-modulating parameters.
"""

__version__ = "0.1.0"
