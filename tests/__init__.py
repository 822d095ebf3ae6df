"""
Navigator Tests Package

TEST AXIOMS:
=============
1. Determinism: mock provider graphs and seeded progress messages
2. Stale completions never reach displayed state
3. Explicit failure: fetch errors surface as data, never exceptions
"""
