"""
Application package for the Lexical Gap backend.

It exposes subpackages for API routers, core utilities, domain models,
wire schemas, and the service layer that talks to the generative model.
"""
