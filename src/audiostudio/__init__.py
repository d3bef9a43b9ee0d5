"""
AudioStudio - AI audio studio backend
Projects, tracks, clips and effects with simulated AI audio jobs
"""

__version__ = "0.1.0"
