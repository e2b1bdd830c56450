"""
Unit Tests for chess_review

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_parser.py

    # Run with coverage
    pytest tests/ --cov=chess_review --cov-report=html

Most tests drive a scripted in-memory engine (see conftest.py). Tests that
need a real Stockfish binary skip when none is installed.

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
