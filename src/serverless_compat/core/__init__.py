"""Core configuration and channel negotiation for serverless-compat."""
