"""Static content shipped with the support agent."""
