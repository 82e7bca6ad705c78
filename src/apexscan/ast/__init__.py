"""
Apex syntax tree adapter.

Wraps the tree-sitter Apex grammar and folds its concrete syntax tree into
ApexNode trees tagged with a closed set of node kinds, plus structural
query helpers.
"""
