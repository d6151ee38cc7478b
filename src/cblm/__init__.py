# SPDX-License-Identifier: MIT
# src/cblm/__init__.py
"""
Coded Binary Link Matrix (CBLM) builder.

Joins a Binary Link Matrix (tab-separated, node name in the 4th column)
with a sort grouping file (code -> node names) and writes the matrix back
out with a "Code" column spliced in front of the node names.
"""
from cblm.annotate.annotator import AnnotationResult, UnmatchedNode, annotate
from cblm.errors import CBLMError, InvalidGroupingFile, MalformedGroupingData, MalformedTable
from cblm.grouping.adapters import load_grouping, normalize_grouping
from cblm.grouping.index import CodeIndex, build_index

__version__ = "0.1.0"

__all__ = [
    "AnnotationResult",
    "CBLMError",
    "CodeIndex",
    "InvalidGroupingFile",
    "MalformedGroupingData",
    "MalformedTable",
    "UnmatchedNode",
    "annotate",
    "build_index",
    "load_grouping",
    "normalize_grouping",
]
