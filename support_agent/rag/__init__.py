"""Knowledge Base (Retrieval-Augmented Generation) Engine

This package provides the knowledge base used by the support agent.
It includes components for page scraping, text extraction, chunking,
embedding, in-memory storage and retrieval.
"""
