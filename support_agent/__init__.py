"""
Thoughtful AI Support Agent

A retrieval-augmented customer support agent that answers questions about
Thoughtful AI from a predefined catalog, from content scraped off
thoughtful.ai, or from a general language model fallback.
"""

__version__ = "1.0.0"
__author__ = "Thoughtful AI Support Team"
__description__ = "Retrieval-augmented support agent for Thoughtful AI"
