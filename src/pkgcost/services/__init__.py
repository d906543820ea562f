"""Service layer: build, cost, and render dependency graphs.

Every public service method returns a :class:`ServiceResult`.
"""
