"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs. These tests are more comprehensive
than parameterized tests because they explore the full input space.

Modules:
    test_mc_properties: Monte Carlo bounds, reproducibility, CRN monotonicity
    test_greeks_properties: Analytical Greek bounds and CRN delta signs
"""
