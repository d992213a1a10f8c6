"""
deptrace - provenance tracing for dependency resolution.

Records why each artifact ended up resolved, downloaded or missing, as
plain-text trails written next to the artifact in the local repository.
"""
