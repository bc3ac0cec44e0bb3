"""Test suite for wavefield.

This package contains:
- Unit tests for the stencil, grid, ring and kernels
- Engine lifecycle and error-path tests
- CUDA/Triton parity smoke tests (skipped without a GPU)
"""
