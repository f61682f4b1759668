"""Application services for vtag.

Services implement the release use cases, coordinating between the domain
layer (core/) and infrastructure (git/, platform/).
"""
