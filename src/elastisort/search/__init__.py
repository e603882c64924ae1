"""
Search module for elastisort

This module provides the search request pieces concerned with ordering:
- Sort clause builders for fields, scores, geo distance and scripts
- Nested document scoping for sorts
- Assembly of the request's sort array
- Decoding of per-hit sort values in responses
"""
