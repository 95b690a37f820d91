"""
Support Agent Routing Package

Catalog matching and tiered response routing for the support agent.
"""
