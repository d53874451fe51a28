"""
Batch inference over observation sequences.

Forward and backward scoring, Viterbi decoding and re-estimation for
callers holding one model and many sequences.
"""

from .batch import forward, backward, decode, reestimate

__all__ = ['forward', 'backward', 'decode', 'reestimate']
