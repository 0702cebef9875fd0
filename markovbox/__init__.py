"""
markovbox: portable Markov-chain-in-a-box generator.
"""

__version__ = "1.0.0"
