"""
Shared contracts for ContentLens

Value types and the settings model that flow between the DOM, scoring,
storage and pipeline layers. Leaf package: imports nothing from the others.
"""
